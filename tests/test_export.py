from convoviz.actions import ViewState, convolve, plot
from convoviz.export import convolution_frame, signals_frame, to_csv_bytes


def test_signals_frame():
    state = plot("u(t)", "r(t)")
    df = signals_frame(state)
    assert list(df.columns) == ["t", "x1(t)", "x2(t)"]
    assert len(df) == len(state.x1)


def test_convolution_frame():
    state = convolve("u(t)", "u(t)")
    df = convolution_frame(state)
    assert list(df.columns) == ["t", "y(t)"]
    assert len(df) == len(state.x_conv)


def test_empty_state():
    assert signals_frame(ViewState()).empty
    assert convolution_frame(ViewState()).empty


def test_csv_bytes():
    df = signals_frame(plot("u(t)", "u(t)"))
    data = to_csv_bytes(df)
    assert data.startswith(b"t,x1(t),x2(t)\n")
    assert data.count(b"\n") == len(df) + 1
