"""
Simulation Driver
=================
Advances a single run frame by frame:

  1. elapsed_time += step
  2. position = closed-form trajectory at elapsed_time
  3. append position to the path
  4. ground contact?   (height - body radius <= 0)   -> LANDED
     out of bounds?    (beyond viewport + margin)    -> EXITED_BOUNDS
  5. on landing, measure range / peak height / time of flight and
     classify the peak height

The driver owns its ``SimulationState`` and nothing else touches it; the
renderer receives read-only ``RenderFrame`` snapshots, the results sink
receives the final ``FlightResult``. Frames come from a ``FrameScheduler``
so the same driver runs under a GUI timer or headless.

Time of flight is the tick time at which contact is detected, so it
overshoots the exact contact time by less than one step.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple

from .config import SimulationConfig
from .safety import SafetyAssessment, assess
from .scheduler import FrameScheduler, ManualScheduler, TickHandle
from .trajectory import (
    LaunchParameters, PositionSample,
    initial_velocity, position_at, sampled_peak_height,
)

logger = logging.getLogger(__name__)


class SimulationStatus(Enum):
    RUNNING = 'running'
    LANDED = 'landed_on_ground'
    EXITED_BOUNDS = 'exited_bounds'


@dataclass(frozen=True)
class FlightResult:
    """Measurements of a run that ended on the ground."""
    range: float              # m
    peak_height: float        # m, re-sampled on the frame grid
    time_of_flight: float     # s
    safety: SafetyAssessment

    def summary(self) -> str:
        """Human-readable summary string."""
        verdict = 'ADVERSE' if self.safety.is_adverse else 'OK'
        lines = [
            f"╔══════════════════════════════════════╗",
            f"║  FLIGHT SUMMARY                      ║",
            f"╠══════════════════════════════════════╣",
            f"║  Range        : {self.range:>10.2f} m{'':<8s} ║",
            f"║  Peak height  : {self.peak_height:>10.2f} m{'':<8s} ║",
            f"║  Flight time  : {self.time_of_flight:>10.2f} s{'':<8s} ║",
            f"║  Fall safety  : {verdict:>10s}{'':<10s} ║",
            f"╚══════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


@dataclass
class SimulationState:
    """Mutable state of one run. Frozen in practice once status leaves RUNNING."""
    elapsed_time: float = 0.0
    path: List[PositionSample] = field(default_factory=list)
    status: SimulationStatus = SimulationStatus.RUNNING
    result: Optional[FlightResult] = None
    step_size: Optional[float] = None   # s, fixed by the first tick

    @property
    def running(self) -> bool:
        return self.status is SimulationStatus.RUNNING


class PathView(Sequence[PositionSample]):
    """Read-only prefix of a run's append-only path, taken without copying."""

    def __init__(self, samples: List[PositionSample], length: Optional[int] = None):
        self.source = samples
        self._length = len(samples) if length is None else length

    def __len__(self):
        return self._length

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self.source[i] for i in range(*index.indices(self._length))]
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError('path index out of range')
        return self.source[index]


@dataclass(frozen=True)
class RenderFrame:
    """Everything a renderer needs to draw one frame."""
    launch_height: float
    body: Tuple[float, float]                  # (x, y) in m
    path: Sequence[PositionSample]
    danger: bool = False


class Renderer(Protocol):
    def draw(self, frame: RenderFrame) -> None:
        ...


class ResultsSink(Protocol):
    def clear(self) -> None:
        ...

    def report(self, result: FlightResult) -> None:
        ...

    def exited_bounds(self) -> None:
        ...


class SimulationDriver:
    """
    Runs one simulation at a time.

    ``start`` cancels whatever run is in flight before touching any state,
    so a stale frame can never advance a new run with old parameters.
    """

    def __init__(self, scheduler: FrameScheduler,
                 renderer: Optional[Renderer] = None,
                 sink: Optional[ResultsSink] = None,
                 config: Optional[SimulationConfig] = None):
        self.scheduler = scheduler
        self.renderer = renderer
        self.sink = sink
        self.config = config if config is not None else SimulationConfig()
        self.params: Optional[LaunchParameters] = None
        self.state: Optional[SimulationState] = None
        self._handle: Optional[TickHandle] = None

    @property
    def is_running(self) -> bool:
        return self.state is not None and self.state.running

    # ── Run control ───────────────────────────────────────────────────────

    def start(self, params: LaunchParameters):
        self._cancel_pending()
        self.params = params
        self.state = SimulationState()
        logger.info(f"Starting run: h0={params.launch_height:.2f} m, "
                    f"v0={params.speed:.2f} m/s, angle={params.angle_deg:.1f}°")
        if self.sink is not None:
            self.sink.clear()
        self._draw_rest_pose()
        self._handle = self.scheduler.request_frame(self._on_frame)

    def reset(self, defaults: Optional[LaunchParameters] = None):
        """Abandon any run and return to the rest pose with default controls."""
        self._cancel_pending()
        self.params = defaults if defaults is not None else LaunchParameters()
        self.state = None
        logger.info("Simulation reset")
        if self.sink is not None:
            self.sink.clear()
        self._draw_rest_pose()

    def preview(self, params: LaunchParameters):
        """Redraw the rest pose for new controls. Ignored while running."""
        if self.is_running:
            return
        self.params = params
        self._draw_rest_pose()

    def tick(self, step_size: Optional[float] = None) -> SimulationStatus:
        """
        Advance the current run by one step and return its status.

        The first tick fixes the run's step (``step_size`` or the configured
        one); the peak height is re-sampled on that grid, so later ticks must
        not change it.
        """
        if self.state is None or self.params is None:
            raise RuntimeError("tick() called before start()")
        state = self.state
        if not state.running:
            return state.status

        cfg = self.config
        if step_size is None:
            step_size = state.step_size if state.step_size is not None else cfg.step_size
        elif step_size <= 0:
            raise ValueError(f"step_size must be positive, got {step_size}")
        if state.step_size is None:
            state.step_size = step_size
        elif step_size != state.step_size:
            raise ValueError(f"run is stepping by {state.step_size} s, got {step_size} s")

        state.elapsed_time += step_size
        sample = position_at(self.params, state.elapsed_time)
        state.path.append(sample)

        if sample.height - cfg.body_radius <= 0:
            state.status = SimulationStatus.LANDED
            state.result = self._measure(state.elapsed_time, step_size)
        elif not cfg.viewport.contains(sample.horizontal_displacement,
                                       cfg.bounds_margin):
            state.status = SimulationStatus.EXITED_BOUNDS

        self._draw(sample)

        if state.status is SimulationStatus.LANDED:
            logger.info(f"Landed after {state.elapsed_time:.3f} s "
                        f"({len(state.path)} frames)")
            if self.sink is not None:
                self.sink.report(state.result)
        elif state.status is SimulationStatus.EXITED_BOUNDS:
            logger.info("Body left the visible area horizontally")
            if self.sink is not None:
                self.sink.exited_bounds()
        return state.status

    # ── Internals ─────────────────────────────────────────────────────────

    def _on_frame(self):
        self._handle = None
        if self.tick() is SimulationStatus.RUNNING:
            self._handle = self.scheduler.request_frame(self._on_frame)

    def _cancel_pending(self):
        if self._handle is not None:
            self._handle.cancel()
            logger.debug("Cancelled pending frame")
            self._handle = None

    def _measure(self, time_of_flight: float, step_size: float) -> FlightResult:
        vx0 = initial_velocity(self.params).vx0
        peak = sampled_peak_height(self.params, time_of_flight, step_size)
        return FlightResult(
            range=vx0 * time_of_flight,
            peak_height=peak,
            time_of_flight=time_of_flight,
            safety=assess(peak, self.config.critical_fall_height),
        )

    def _draw_rest_pose(self):
        if self.renderer is None:
            return
        h0 = self.params.launch_height
        self.renderer.draw(RenderFrame(launch_height=h0, body=(0.0, h0), path=()))

    def _draw(self, sample: PositionSample):
        if self.renderer is None:
            return
        result = self.state.result
        self.renderer.draw(RenderFrame(
            launch_height=self.params.launch_height,
            body=(sample.horizontal_displacement, sample.height),
            path=PathView(self.state.path),
            danger=result is not None and result.safety.is_adverse,
        ))


# ══════════════════════════════════════════════════════════════════════════
#  Headless runs
# ══════════════════════════════════════════════════════════════════════════

def simulate(params: LaunchParameters,
             config: Optional[SimulationConfig] = None,
             renderer: Optional[Renderer] = None,
             sink: Optional[ResultsSink] = None) -> SimulationState:
    """Run one parameter set to completion without a display."""
    scheduler = ManualScheduler()
    driver = SimulationDriver(scheduler, renderer=renderer, sink=sink,
                              config=config)
    driver.start(params)
    scheduler.run_until_idle()
    return driver.state


def simulate_batch(param_sets: Sequence[LaunchParameters],
                   config: Optional[SimulationConfig] = None) -> List[SimulationState]:
    """Run many parameter sets, each with its own independent state."""
    return [simulate(params, config=config) for params in param_sets]
