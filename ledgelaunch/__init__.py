"""
Ledge Launch: Interactive Projectile-Motion Demonstrator
========================================================
Launches a body off a ledge with a chosen height, speed and angle, steps
it frame by frame along its closed-form trajectory until it lands or
leaves the visible area, then reports:
  - Range
  - Peak height (re-sampled on the frame grid)
  - Time of flight
  - A fall-height safety classification

The simulation core (trajectory, simulation, safety) is pure Python and
numpy; rendering, GUI scheduling and widgets live in visualization / app.
"""

from .config import (
    SIM_TIME_STEP, BODY_RADIUS, OUT_OF_BOUNDS_MARGIN_RADII,
    CRITICAL_FALL_HEIGHT, SimulationConfig, Viewport,
)
from .trajectory import (
    GRAVITY, LaunchParameters, InitialVelocity, PositionSample,
    initial_velocity, position_at, peak_height, sampled_peak_height,
    contact_time,
)
from .safety import SafetyAssessment, assess
from .scheduler import TickHandle, ManualScheduler
from .simulation import (
    SimulationStatus, SimulationState, FlightResult, RenderFrame, PathView,
    SimulationDriver, simulate, simulate_batch,
)

__version__ = "1.0.0"
__all__ = [
    'SIM_TIME_STEP', 'BODY_RADIUS', 'OUT_OF_BOUNDS_MARGIN_RADII',
    'CRITICAL_FALL_HEIGHT', 'SimulationConfig', 'Viewport',
    'GRAVITY', 'LaunchParameters', 'InitialVelocity', 'PositionSample',
    'initial_velocity', 'position_at', 'peak_height', 'sampled_peak_height',
    'contact_time',
    'SafetyAssessment', 'assess',
    'TickHandle', 'ManualScheduler',
    'SimulationStatus', 'SimulationState', 'FlightResult', 'RenderFrame', 'PathView',
    'SimulationDriver', 'simulate', 'simulate_batch',
]
