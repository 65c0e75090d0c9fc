import matplotlib as mpl
import matplotlib.pyplot as plt
import streamlit as st

from convoviz import config
from convoviz.actions import ViewState, convolve, plot
from convoviz.axes import layout, shared_range
from convoviz.expressions import EvaluationError
from convoviz.export import convolution_frame, signals_frame, to_csv_bytes
from convoviz.logging import get_logger

get_logger("convoviz")

# ==============================
# Chart helpers
# ==============================

# Global-ish tweaks for dark bg
mpl.rcParams.update({
    "xtick.color": "white",
    "ytick.color": "white",
    "axes.labelcolor": "white",
    "text.color": "white",
    "axes.edgecolor": "white",
    "grid.color": "white",
    "grid.alpha": 0.15,
})


def draw_axes(ax, x, y, y_range=None):
    """Axes through the origin with integer ticks, no frame."""
    lay = layout(x, y, y_range)
    ax.set_facecolor("none")
    for sp in ax.spines.values():
        sp.set_visible(False)
    ax.axhline(0, color="white", linewidth=2, zorder=0)
    ax.axvline(0, color="white", linewidth=2, zorder=0)
    ax.set_xlim(lay.x_min, lay.x_max)
    ax.set_ylim(lay.y_min, lay.y_max)
    ax.set_xticks(lay.x_ticks)
    ax.set_yticks(lay.y_ticks)
    ax.tick_params(axis="both", colors="#aaaaaa", labelsize=10, length=0)
    ax.grid(True, linestyle="--")


def signal_figure(x, y, title, color, y_range):
    fig, ax = plt.subplots(figsize=(6, 5))
    fig.patch.set_alpha(0)          # keep fig transparent for Streamlit dark
    draw_axes(ax, x, y, y_range)
    # signals are piecewise constant between samples
    ax.step(x, y, where="post", color=color, linewidth=4)
    ax.set_title(title, color="white", fontsize=14)
    fig.tight_layout()
    return fig


def result_figure(x, y):
    fig, ax = plt.subplots(figsize=(12, 6))
    fig.patch.set_alpha(0)
    draw_axes(ax, x, y)
    ax.plot(x, y, color="#66ccff", linewidth=4)
    ax.set_title("Result of Convolution", color="white", fontsize=14)
    fig.tight_layout()
    return fig


def show(fig):
    st.pyplot(fig)
    plt.close(fig)


# ==============================
# Streamlit UI
# ==============================

st.title("Visualize the Convolution")

if "view" not in st.session_state:
    st.session_state.view = ViewState()

c1, c2 = st.columns(2)
with c1:
    input1 = st.text_input("Signal 1", config.DEFAULT_SIGNAL_1, key="signal_1")
with c2:
    input2 = st.text_input("Signal 2", config.DEFAULT_SIGNAL_2, key="signal_2")

st.caption(
    "Use t as the variable, u(t) for the unit step, r(t) for the ramp and "
    "delta(t) for an impulse. Window: "
    f"[{config.T_MIN:g}, {config.T_MAX:g}], step {config.DT:g}."
)

b1, b2 = st.columns(2)
with b1:
    plot_clicked = st.button("Plot", key="plot")
with b2:
    convolve_clicked = st.button("Convolute", key="convolve")

# Each action builds a complete new state, or fails and leaves the old one
if plot_clicked:
    try:
        st.session_state.view = plot(input1, input2)
    except EvaluationError as e:
        st.error(f"Invalid input:\n{e}")

if convolve_clicked:
    try:
        st.session_state.view = convolve(input1, input2, st.session_state.view)
    except EvaluationError as e:
        st.error(f"Invalid input:\n{e}")

view = st.session_state.view

if view.has_signals:
    y_range = shared_range(view.y1, view.y2)
    left, right = st.columns(2)
    with left:
        show(signal_figure(view.x1, view.y1, "Signal 1", "red", y_range))
    with right:
        show(signal_figure(view.x2, view.y2, "Signal 2", "green", y_range))

if view.has_convolution:
    show(result_figure(view.x_conv, view.y_conv))

    if view.expression:
        st.markdown("**y(t) ≈**")
        st.code(view.expression, language=None)
    else:
        st.info("Every term of the approximation is negligible.")

if view.has_signals or view.has_convolution:
    with st.expander("Download samples", expanded=False):
        d1, d2 = st.columns(2)
        with d1:
            df = signals_frame(view)
            if not df.empty:
                st.download_button("⬇️ Signals CSV", to_csv_bytes(df), file_name="signals.csv", mime="text/csv")
        with d2:
            df = convolution_frame(view)
            if not df.empty:
                st.download_button("⬇️ Convolution CSV", to_csv_bytes(df), file_name="convolution.csv", mime="text/csv")
