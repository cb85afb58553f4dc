"""
Trajectory Model
================
Closed-form kinematics of a point mass under constant gravity:

    x(t) = vx0 * t
    y(t) = h0 + vy0 * t - g * t² / 2

Positions are evaluated directly from these equations at each requested
time, so the only discretisation error anywhere in the package comes from
*which* times are sampled, never from accumulating an integration step.

Coordinate system:
  x = horizontal displacement from the launch point (m)
  y = height above the ground (m, up positive)
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Optional


GRAVITY = 9.81  # m/s²


@dataclass(frozen=True)
class LaunchParameters:
    """
    Initial conditions of one run, frozen for its whole duration.
    """
    launch_height: float = 2.0      # m   above the ground
    speed: float = 5.0              # m/s
    angle_deg: float = 30.0         # degrees above horizontal

    def __post_init__(self):
        for name in ('launch_height', 'speed', 'angle_deg'):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")


@dataclass(frozen=True)
class InitialVelocity:
    vx0: float
    vy0: float


@dataclass(frozen=True)
class PositionSample:
    """One point of the trajectory trace."""
    time: float
    horizontal_displacement: float
    height: float


def initial_velocity(params: LaunchParameters) -> InitialVelocity:
    """Split launch speed and angle into [vx0, vy0]."""
    angle = math.radians(params.angle_deg)
    return InitialVelocity(
        vx0=params.speed * math.cos(angle),
        vy0=params.speed * math.sin(angle),
    )


def position_at(params: LaunchParameters, t: float) -> PositionSample:
    """Exact position at time ``t`` after launch."""
    v = initial_velocity(params)
    return PositionSample(
        time=t,
        horizontal_displacement=v.vx0 * t,
        height=params.launch_height + v.vy0 * t - 0.5 * GRAVITY * t * t,
    )


def peak_height(params: LaunchParameters) -> float:
    """
    Vertex of the parabola.

    A body launched level or downwards never rises, so its peak is the
    launch height itself.
    """
    vy0 = initial_velocity(params).vy0
    if vy0 <= 0:
        return params.launch_height
    return params.launch_height + vy0 * vy0 / (2.0 * GRAVITY)


def sample_times(t_end: float, step: float) -> np.ndarray:
    """Every multiple of ``step`` from 0 up to and including ``t_end``."""
    n = int(math.floor(t_end / step + 1e-9))
    return np.arange(n + 1) * step


def sampled_peak_height(params: LaunchParameters, t_end: float,
                        step: float) -> float:
    """
    Peak height found by re-sampling the trajectory on the frame grid.

    Never exceeds :func:`peak_height`; the two agree to within the height
    change of a single step. Clamped at ground level.
    """
    vy0 = initial_velocity(params).vy0
    t = sample_times(t_end, step)
    heights = params.launch_height + vy0 * t - 0.5 * GRAVITY * t ** 2
    return max(float(np.max(heights)), 0.0)


def contact_time(params: LaunchParameters,
                 clearance: float = 0.0) -> Optional[float]:
    """
    Exact time at which the height first falls to ``clearance``.

    Solves h0 + vy0 t - g t² / 2 = clearance for the later root. Returns 0.0
    if the body starts at or below the clearance and is not moving up, and
    None if the parabola never comes down that far (only possible when the
    clearance lies above the vertex).
    """
    vy0 = initial_velocity(params).vy0
    h = params.launch_height - clearance
    if h <= 0 and vy0 <= 0:
        return 0.0
    discriminant = vy0 * vy0 + 2.0 * GRAVITY * h
    if discriminant < 0:
        return None
    return (vy0 + math.sqrt(discriminant)) / GRAVITY
