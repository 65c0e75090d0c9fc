"""Fixed configuration for the visualizer."""

from __future__ import annotations

from dataclasses import dataclass

# Display window
T_MIN = -5.0
T_MAX = 10.0
DT = 0.09

# Symbolic synthesis
COARSE_DT = 1.0
NEGLIGIBLE_THRESHOLD = 0.05
ROUND_DECIMALS = 2

# Primitives
IMPULSE_HALF_WIDTH = 0.01

# Default inputs
DEFAULT_SIGNAL_1 = "3*u(t) - u(t-2)"
DEFAULT_SIGNAL_2 = "u(t-1) - u(t-2)"


@dataclass(frozen=True)
class Settings:
    """Bundle of the constants above, passed down to the actions."""

    t_min: float = T_MIN
    t_max: float = T_MAX
    dt: float = DT
    coarse_dt: float = COARSE_DT
    threshold: float = NEGLIGIBLE_THRESHOLD
    decimals: int = ROUND_DECIMALS
    impulse_half_width: float = IMPULSE_HALF_WIDTH

    def __post_init__(self) -> None:
        if self.dt <= 0 or self.coarse_dt <= 0:
            raise ValueError("sampling steps must be positive")
        if self.t_max < self.t_min:
            raise ValueError("t_max must not be smaller than t_min")
        if self.decimals < 0:
            raise ValueError("decimals must be non-negative")


DEFAULT_SETTINGS = Settings()
