"""
Visualization Engine
====================
Everything that knows about pixels lives here:
  1. Canvas geometry (metres -> pixels, ground band, ledge, resizing)
  2. MatplotlibRenderer (live scene: ground, ledge, body, trajectory trace)
  3. MatplotlibTimerScheduler (one GUI timer shot per frame)
  4. Results sinks for the console
  5. Static trajectory plot and angle sweep
  6. Animated run (saved as GIF)

The simulation core only ever sees metres; the visible horizontal range
it needs for the out-of-bounds check comes from ``Canvas.viewport()``.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Rectangle
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple
import os

from .config import BODY_RADIUS, CRITICAL_FALL_HEIGHT, SimulationConfig, Viewport
from .scheduler import TickHandle
from .simulation import (
    FlightResult, RenderFrame, SimulationState, SimulationStatus, simulate,
)
from .trajectory import LaunchParameters


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'font_family': 'monospace',
}

SCENE = {
    'sky_color': '#e3f2fd',
    'ground_color': '#4CAF50',
    'ledge_color': '#795548',
    'body_color': '#FF9800',
    'danger_color': '#ff5252',
    'path_color': (0.0, 0.0, 0.0, 0.5),
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Canvas Geometry
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Canvas:
    """
    Pixel layout of the scene. Canvas y grows downwards; the ledge sits at
    the left edge and the launch point is its top-right corner.
    """
    width_px: float = 800.0
    height_px: float = 500.0
    pixels_per_meter: float = 30.0
    ground_height_px: float = 30.0
    ledge_width_px: float = 50.0
    body_radius_m: float = BODY_RADIUS

    @property
    def ground_y(self) -> float:
        """Canvas y of the ground surface."""
        return self.height_px - self.ground_height_px

    @property
    def body_radius_px(self) -> float:
        return self.body_radius_m * self.pixels_per_meter

    def to_canvas(self, x: float, y: float) -> Tuple[float, float]:
        """Physics (x from launch point, height above ground) -> canvas px."""
        return (self.ledge_width_px + x * self.pixels_per_meter,
                self.ground_y - y * self.pixels_per_meter)

    def launch_point(self, launch_height: float) -> Tuple[float, float]:
        return self.to_canvas(0.0, launch_height)

    def viewport(self) -> Viewport:
        """Visible horizontal range in metres relative to the launch point."""
        return Viewport(
            left=-self.ledge_width_px / self.pixels_per_meter,
            right=(self.width_px - self.ledge_width_px) / self.pixels_per_meter,
        )

    def resized(self, width_px: float, height_px: float) -> 'Canvas':
        """Scale the whole scene uniformly to fit a new canvas size."""
        scale = min(width_px / self.width_px, height_px / self.height_px)
        return replace(
            self,
            width_px=width_px,
            height_px=height_px,
            pixels_per_meter=self.pixels_per_meter * scale,
            ground_height_px=self.ground_height_px * scale,
            ledge_width_px=self.ledge_width_px * scale,
        )

    def configure(self, config: SimulationConfig) -> SimulationConfig:
        """Return ``config`` with its viewport and body radius matching this canvas."""
        return replace(config, viewport=self.viewport(),
                       body_radius=self.body_radius_m)


# ══════════════════════════════════════════════════════════════════════════
#  2. Live Scene Renderer
# ══════════════════════════════════════════════════════════════════════════

class MatplotlibRenderer:
    """Draws ``RenderFrame`` snapshots onto a matplotlib Axes in canvas pixels."""

    def __init__(self, ax, canvas: Optional[Canvas] = None):
        self.ax = ax
        self.canvas = canvas if canvas is not None else Canvas()
        self.frames_drawn = 0

        ax.set_facecolor(SCENE['sky_color'])
        ax.set_aspect('equal')
        ax.set_xticks([])
        ax.set_yticks([])

        self.ground = Rectangle((0, 0), 0, 0, color=SCENE['ground_color'])
        self.ledge = Rectangle((0, 0), 0, 0, color=SCENE['ledge_color'])
        self.body = Circle((0, 0), 0, color=SCENE['body_color'], zorder=4)
        self.trace, = ax.plot([], [], color=SCENE['path_color'], linewidth=2,
                              zorder=3)
        for patch in (self.ground, self.ledge, self.body):
            ax.add_patch(patch)
        self._trace_source = None
        self._trace_x: List[float] = []
        self._trace_y: List[float] = []
        self._layout()

    def _layout(self):
        c = self.canvas
        self.ax.set_xlim(0, c.width_px)
        self.ax.set_ylim(c.height_px, 0)
        self.ground.set_xy((0, c.ground_y))
        self.ground.set_width(c.width_px)
        self.ground.set_height(c.ground_height_px)
        self.body.set_radius(c.body_radius_px)

    def set_canvas(self, canvas: Canvas):
        self.canvas = canvas
        self._trace_source = None
        self._trace_x, self._trace_y = [], []
        self._layout()

    def _sync_trace(self, path):
        # Only samples not yet converted are mapped to pixels; a path from
        # another run, or a shorter one, starts the trace over.
        source = getattr(path, 'source', None)
        done = len(self._trace_x)
        if source is None or source is not self._trace_source or len(path) < done:
            self._trace_source = source
            self._trace_x, self._trace_y = [], []
            new = path
        else:
            new = path[done:]
        for s in new:
            x, y = self.canvas.to_canvas(s.horizontal_displacement, s.height)
            self._trace_x.append(x)
            self._trace_y.append(y)

    def draw(self, frame: RenderFrame):
        c = self.canvas
        ledge_top = c.to_canvas(0.0, frame.launch_height)[1]
        self.ledge.set_xy((0, ledge_top))
        self.ledge.set_width(c.ledge_width_px)
        self.ledge.set_height(frame.launch_height * c.pixels_per_meter)

        color = SCENE['danger_color'] if frame.danger else SCENE['body_color']
        self.body.center = c.to_canvas(*frame.body)
        self.body.set_color(color)

        self._sync_trace(frame.path)
        if len(self._trace_x) >= 2:
            self.trace.set_data(self._trace_x, self._trace_y)
        else:
            self.trace.set_data([], [])
        self.trace.set_color(SCENE['danger_color'] if frame.danger
                             else SCENE['path_color'])

        self.frames_drawn += 1
        self.ax.figure.canvas.draw_idle()
        return self.ledge, self.body, self.trace


class FrameRecorder:
    """Renderer that keeps every frame it is given (used for replays)."""

    def __init__(self):
        self.frames: List[RenderFrame] = []

    def draw(self, frame: RenderFrame):
        self.frames.append(frame)


# ══════════════════════════════════════════════════════════════════════════
#  3. GUI Timer Scheduling
# ══════════════════════════════════════════════════════════════════════════

class MatplotlibTimerScheduler:
    """Schedules each frame as a single-shot timer on the figure's canvas."""

    def __init__(self, fig, interval_ms: int = 16):
        self.fig = fig
        self.interval_ms = interval_ms

    def request_frame(self, callback) -> TickHandle:
        timer = self.fig.canvas.new_timer(interval=self.interval_ms)
        timer.single_shot = True
        handle = TickHandle(callback, on_cancel=timer.stop)
        timer.add_callback(handle.fire)
        timer.start()
        return handle


# ══════════════════════════════════════════════════════════════════════════
#  4. Results Sinks
# ══════════════════════════════════════════════════════════════════════════

def format_metrics(result: Optional[FlightResult]) -> Tuple[str, str, str]:
    """(range, peak height, time of flight) as displayed, '--' when cleared."""
    if result is None:
        return '--', '--', '--'
    return (f'{result.range:.2f}', f'{result.peak_height:.2f}',
            f'{result.time_of_flight:.2f}')


class ConsoleResultsSink:
    """Prints results as they arrive."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.last: Optional[FlightResult] = None

    def clear(self):
        self.last = None

    def report(self, result: FlightResult):
        self.last = result
        if self.verbose:
            print(result.summary())
            print(f"  {result.safety.message}")

    def exited_bounds(self):
        self.last = None
        if self.verbose:
            print("  Body flew off-screen horizontally; no measurements.")


# ══════════════════════════════════════════════════════════════════════════
#  5. Static Plots
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(state: SimulationState, params: LaunchParameters,
                    save_path: str = None, show: bool = False,
                    critical_fall_height: float = CRITICAL_FALL_HEIGHT) -> plt.Figure:
    """Height vs horizontal displacement for a finished run."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    x = np.array([0.0] + [s.horizontal_displacement for s in state.path])
    y = np.array([params.launch_height] + [s.height for s in state.path])

    ax.plot(x, y, color=STYLE['accent_colors'][0], linewidth=2.5,
            label='Trajectory')
    ax.plot(x[0], y[0], 'o', color='#00e676', markersize=10,
            label='Launch', zorder=5)

    idx_max = np.argmax(y)
    ax.plot(x[idx_max], y[idx_max], '^', color='#ffeb3b', markersize=10,
            label='Apex', zorder=5)

    if state.status is SimulationStatus.LANDED:
        ax.plot(x[-1], y[-1], 'x', color='#ff5252', markersize=12,
                markeredgewidth=3, label='Landing', zorder=5)
    ax.axhline(y=critical_fall_height, color='#ff5252', linestyle='--',
               alpha=0.5, label='Critical fall height')

    result = state.result
    if result is not None:
        ax.text(0.02, 0.95,
                f'range={result.range:.2f} m | peak={result.peak_height:.2f} m | '
                f't={result.time_of_flight:.2f} s',
                transform=ax.transAxes, color=STYLE['text_color'],
                fontsize=11, fontfamily='monospace', va='top')

    ax.set_xlabel('Horizontal displacement (m)', fontsize=12)
    ax.set_ylabel('Height above ground (m)', fontsize=12)
    ax.set_title(f'Launch — h₀={params.launch_height:.1f} m, '
                 f'v₀={params.speed:.1f} m/s, θ={params.angle_deg:.0f}° '
                 f'({state.status.value})',
                 fontsize=13, fontweight='bold')
    ax.legend(loc='upper right', fontsize=10,
              facecolor='#1a1a1a', edgecolor='#444', labelcolor=STYLE['text_color'])
    ax.set_ylim(bottom=0)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    if show:
        plt.show()
    return fig


def plot_angle_sweep(param_sets: Sequence[LaunchParameters],
                     states: Sequence[SimulationState],
                     save_path: str = None) -> plt.Figure:
    """Trajectories and measurements for a batch of runs, side by side."""
    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    _apply_dark_style(fig, axes)
    colors = STYLE['accent_colors']

    ax = axes[0]
    for i, (params, state) in enumerate(zip(param_sets, states)):
        x = [0.0] + [s.horizontal_displacement for s in state.path]
        y = [params.launch_height] + [s.height for s in state.path]
        style = '-' if state.status is SimulationStatus.LANDED else ':'
        ax.plot(x, y, style, color=colors[i % len(colors)], linewidth=2,
                label=f'θ={params.angle_deg:.0f}°')
    ax.set_xlabel('Horizontal displacement (m)')
    ax.set_ylabel('Height (m)')
    ax.set_title('Trajectory Comparison', fontweight='bold')
    ax.legend(fontsize=9, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])
    ax.set_ylim(bottom=0)

    ax = axes[1]
    landed = [(p, s.result) for p, s in zip(param_sets, states)
              if s.result is not None]
    angles = np.array([p.angle_deg for p, _ in landed])
    ranges = np.array([r.range for _, r in landed])
    peaks = np.array([r.peak_height for _, r in landed])
    ax.plot(angles, ranges, 'o-', color='#00d4ff', linewidth=2, label='Range (m)')
    ax.plot(angles, peaks, 's--', color='#ffeb3b', linewidth=2,
            label='Peak height (m)')
    ax.set_xlabel('Launch angle (°)')
    ax.set_title('Measurements vs Angle', fontweight='bold')
    ax.legend(fontsize=10, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  6. Animated Run (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_run_animation(params: LaunchParameters,
                         save_path: str = 'outputs/run_anim.gif',
                         canvas: Optional[Canvas] = None,
                         config: Optional[SimulationConfig] = None,
                         fps: int = 30) -> str:
    """Replay a headless run frame by frame and save it as a GIF."""
    from matplotlib.animation import FuncAnimation, PillowWriter

    canvas = canvas if canvas is not None else Canvas()
    config = canvas.configure(config if config is not None else SimulationConfig())

    recorder = FrameRecorder()
    state = simulate(params, config=config, renderer=recorder)

    fig, ax = plt.subplots(figsize=(canvas.width_px / 100, canvas.height_px / 100))
    fig.patch.set_facecolor(STYLE['bg_color'])
    renderer = MatplotlibRenderer(ax, canvas)
    status_text = ax.text(0.02, 0.95, '', transform=ax.transAxes,
                          color='#222222', fontsize=10, fontfamily='monospace')

    def animate(frame_idx):
        frame = recorder.frames[frame_idx]
        artists = renderer.draw(frame)
        x, y = frame.body
        status_text.set_text(f'x={x:.2f} m | y={y:.2f} m')
        return artists + (status_text,)

    anim = FuncAnimation(fig, animate, frames=len(recorder.frames),
                         interval=1000 // fps, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=fps))
    plt.close(fig)
    print(f"  Animation saved: {save_path} ({state.status.value}, "
          f"{len(recorder.frames)} frames)")
    return save_path
