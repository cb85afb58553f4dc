"""
Simulation Configuration
========================
Tuning constants for the frame-driven simulation and the dataclasses that
carry them into a driver. Defaults reproduce the classic ledge demo:
a 0.2 m body stepped at 0.016 s per frame (one 60 Hz display refresh).

Coordinate system (metres, relative to the launch point):
  x = horizontal displacement (right positive)
  y = height above ground (up positive)
"""

from dataclasses import dataclass, field


# ── Stepping & termination ────────────────────────────────────────────────
SIM_TIME_STEP = 0.016               # s   simulated time per frame
BODY_RADIUS = 0.2                   # m   radius of the launched body
OUT_OF_BOUNDS_MARGIN_RADII = 5.0    # body radii beyond the visible edge

# ── Safety ────────────────────────────────────────────────────────────────
CRITICAL_FALL_HEIGHT = 7.0          # m

# ── Visible horizontal range (800 px canvas, 30 px/m, 50 px ledge) ────────
VIEW_LEFT = -50.0 / 30.0            # m   left canvas edge
VIEW_RIGHT = 750.0 / 30.0           # m   right canvas edge


@dataclass(frozen=True)
class Viewport:
    """Horizontal extent of the visible area, in metres from the launch point."""
    left: float = VIEW_LEFT
    right: float = VIEW_RIGHT

    @property
    def width(self) -> float:
        return self.right - self.left

    def contains(self, x: float, margin: float = 0.0) -> bool:
        """True while ``x`` is no further than ``margin`` beyond either edge."""
        return self.left - margin <= x <= self.right + margin


@dataclass(frozen=True)
class SimulationConfig:
    """
    Everything a driver needs besides the launch parameters themselves.
    """
    step_size: float = SIM_TIME_STEP
    body_radius: float = BODY_RADIUS
    bounds_margin_radii: float = OUT_OF_BOUNDS_MARGIN_RADII
    critical_fall_height: float = CRITICAL_FALL_HEIGHT
    viewport: Viewport = field(default_factory=Viewport)

    def __post_init__(self):
        if not self.step_size > 0:
            raise ValueError(f"step_size must be positive, got {self.step_size!r}")

    @property
    def bounds_margin(self) -> float:
        """Distance past a viewport edge at which a run counts as exited (m)."""
        return self.bounds_margin_radii * self.body_radius
