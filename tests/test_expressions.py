import numpy as np
import pytest

from convoviz.expressions import (
    DEFAULT_ENVIRONMENT,
    EvaluationError,
    compile_expression,
    default_environment,
    make_delta,
    preprocess,
    r,
    u,
)


class TestPrimitives:

    def test_unit_step(self):
        t = np.array([-1.0, -0.01, 0.0, 0.5, 3.0])
        np.testing.assert_array_equal(u(t), [0, 0, 1, 1, 1])

    def test_ramp(self):
        t = np.array([-2.0, 0.0, 1.5, 4.0])
        np.testing.assert_array_equal(r(t), [0, 0, 1.5, 4.0])

    def test_delta_half_width(self):
        delta = make_delta(0.01)
        t = np.array([-0.01, -0.005, 0.0, 0.009, 0.01, 1.0])
        np.testing.assert_array_equal(delta(t), [0, 1, 1, 1, 0, 0])

    def test_delta_rejects_non_positive_width(self):
        with pytest.raises(ValueError):
            make_delta(0.0)


class TestEnvironment:

    def test_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_ENVIRONMENT["u"] = lambda t: t

    def test_with_names_leaves_original_untouched(self):
        extended = DEFAULT_ENVIRONMENT.with_names(k=2.0)
        assert extended["k"] == 2.0
        assert "k" not in DEFAULT_ENVIRONMENT
        assert compile_expression("k*u(t)", extended)(1.0) == 2.0

    def test_default_environment_is_built_once(self):
        assert default_environment() is DEFAULT_ENVIRONMENT
        assert default_environment(0.5) is default_environment(0.5)

    def test_custom_impulse_width(self):
        env = default_environment(0.5)
        assert compile_expression("delta(t)", env)(0.3) == 1.0
        assert compile_expression("delta(t)")(0.3) == 0.0


@pytest.mark.parametrize("raw, expected", [
    ("t^2", "t**2"),
    ("3t", "3*t"),
    ("2.5 t + 1", "2.5*t + 1"),
    ("e^(-t)*u(t)", "exp(-t)*u(t)"),
    ("u(t-2)", "u(t-2)"),
    ("3u(t)", "3*u(t)"),
    ("3r(t - 2)", "3*r(t - 2)"),
    ("2(t-1)", "2*(t-1)"),
    ("(t+1)(t-1)", "(t+1)*(t-1)"),
    ("(t)u(t)", "(t)*u(t)"),
    ("2e", "2*e"),
    ("1e3*t", "1e3*t"),
    ("1e-3t", "1e-3*t"),
    ("1.5e2 u(t)", "1.5e2*u(t)"),
    ("1j*t", "1j*t"),
    ("log10(t)", "log10(t)"),
])
def test_preprocess(raw, expected):
    assert preprocess(raw) == expected


class TestEvaluate:

    def test_scalar(self):
        f = compile_expression("3*u(t) - u(t-2)")
        assert f.evaluate({"t": -1.0}) == 0.0
        assert f.evaluate({"t": 1.0}) == 3.0
        assert f.evaluate({"t": 2.0}) == 2.0
        assert isinstance(f.evaluate({"t": 1.0}), float)

    def test_array(self):
        t = np.linspace(-1, 3, 9)
        f = compile_expression("r(t-1) + delta(t)")
        np.testing.assert_allclose(f(t), np.where(t >= 1, t - 1, 0) + (np.abs(t) < 0.01))

    def test_constant_broadcasts(self):
        t = np.arange(5.0)
        np.testing.assert_array_equal(compile_expression("2")(t), np.full(5, 2.0))

    def test_math_helpers(self):
        f = compile_expression("exp(-t)*u(t) + sin(pi*t)")
        assert f(0.0) == pytest.approx(1.0)

    def test_implicit_products(self):
        t = np.arange(-1.0, 4.0)
        np.testing.assert_array_equal(
            compile_expression("3u(t) - u(t-2)")(t),
            compile_expression("3*u(t) - u(t-2)")(t),
        )
        assert compile_expression("2(t-1)")(3.0) == 4.0

    def test_rendered_terms_read_back(self):
        f = compile_expression("3r(t - 2) + 2u(t - -1)")
        assert f(4.0) == 8.0

    def test_masked_root_is_real(self):
        t = np.array([-4.0, -1.0, 0.0, 4.0])
        np.testing.assert_array_equal(compile_expression("sqrt(t)*u(t)")(t), [0, 0, 0, 2])
        t = np.array([-4.0, -1.0, 2.0, 4.0])
        values = compile_expression("log(t)*u(t)")(t)
        assert values.dtype == float
        np.testing.assert_allclose(values, [0, 0, np.log(2.0), np.log(4.0)])

    def test_unmasked_root_is_complex(self):
        with pytest.raises(EvaluationError, match="complex"):
            compile_expression("sqrt(t)")(np.array([-1.0, 1.0]))

    def test_division_by_zero_is_a_value(self):
        assert np.isinf(compile_expression("1/t")(np.array([0.0]))[0])

    def test_missing_t(self):
        with pytest.raises(EvaluationError):
            compile_expression("u(t)").evaluate({"x": 1.0})


class TestErrors:

    @pytest.mark.parametrize("expr", ["u(t) +", "3*(t", "u(t))", "t +* 2"])
    def test_syntax_error(self, expr):
        with pytest.raises(EvaluationError) as excinfo:
            compile_expression(expr)
        assert expr in str(excinfo.value)

    @pytest.mark.parametrize("expr", ["", "   "])
    def test_empty(self, expr):
        with pytest.raises(EvaluationError):
            compile_expression(expr)

    def test_unknown_name(self):
        f = compile_expression("v(t)")
        with pytest.raises(EvaluationError, match="v"):
            f(np.arange(3.0))

    def test_builtins_are_hidden(self):
        with pytest.raises(EvaluationError):
            compile_expression("open('x')")(0.0)

    def test_dunder_names_rejected(self):
        with pytest.raises(EvaluationError):
            compile_expression("__import__('os')")

    def test_complex_result(self):
        with pytest.raises(EvaluationError, match="complex"):
            compile_expression("1j*t")(np.arange(3.0))

    def test_wrong_shape(self):
        with pytest.raises(EvaluationError, match="shape"):
            compile_expression("np.ones(3)")(np.arange(5.0))

    def test_not_a_number(self):
        with pytest.raises(EvaluationError):
            compile_expression("u")(np.arange(3.0))

    def test_is_a_value_error(self):
        assert issubclass(EvaluationError, ValueError)
