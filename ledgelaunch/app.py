"""
Interactive Demonstrator
========================
A matplotlib window with three sliders (ledge height, launch speed, launch
angle), Simulate and Reset buttons, and a results panel. The sliders are
the control source; the driver never reads them itself.
"""

import logging
from typing import Optional

import matplotlib.pyplot as plt
from matplotlib.widgets import Button, Slider

from .config import SimulationConfig
from .simulation import FlightResult, SimulationDriver
from .trajectory import LaunchParameters
from .visualization import (
    Canvas, MatplotlibRenderer, MatplotlibTimerScheduler, format_metrics,
)

logger = logging.getLogger(__name__)

SLIDER_RANGES = {
    'launch_height': (0.0, 10.0, 0.1),    # m
    'speed': (0.0, 20.0, 0.1),            # m/s
    'angle_deg': (-90.0, 90.0, 1.0),      # degrees
}


class SliderControls:
    """Reads ``LaunchParameters`` from three matplotlib sliders."""

    def __init__(self, fig, defaults: LaunchParameters):
        self.defaults = defaults
        self.height = self._slider(fig, [0.15, 0.20, 0.55, 0.03],
                                   'Ledge height (m)', 'launch_height')
        self.speed = self._slider(fig, [0.15, 0.15, 0.55, 0.03],
                                  'Launch speed (m/s)', 'speed')
        self.angle = self._slider(fig, [0.15, 0.10, 0.55, 0.03],
                                  'Launch angle (°)', 'angle_deg')

    def _slider(self, fig, rect, label, name):
        lo, hi, step = SLIDER_RANGES[name]
        ax = fig.add_axes(rect)
        return Slider(ax, label, lo, hi, valinit=getattr(self.defaults, name),
                      valstep=step)

    def read(self) -> LaunchParameters:
        return LaunchParameters(
            launch_height=float(self.height.val),
            speed=float(self.speed.val),
            angle_deg=float(self.angle.val),
        )

    def restore_defaults(self):
        for slider in (self.height, self.speed, self.angle):
            slider.reset()


class TextResultsSink:
    """Shows the latest measurements in a text artist."""

    def __init__(self, text):
        self.text = text
        self.clear()

    def _show(self, result: Optional[FlightResult], notice: str = ''):
        rng, peak, tof = format_metrics(result)
        self.text.set_text(f'Range: {rng} m   Max height: {peak} m   '
                           f'Time of flight: {tof} s\n{notice}')
        if result is not None and result.safety.is_adverse:
            self.text.set_color('#ff5252')
        else:
            self.text.set_color('#222222')
        self.text.figure.canvas.draw_idle()

    def clear(self):
        self._show(None)

    def report(self, result: FlightResult):
        self._show(result, result.safety.message)

    def exited_bounds(self):
        self._show(None, 'The body flew off-screen horizontally.')


class LaunchApp:
    """Wires widgets, renderer and scheduler to one ``SimulationDriver``."""

    def __init__(self, canvas: Optional[Canvas] = None,
                 config: Optional[SimulationConfig] = None,
                 defaults: Optional[LaunchParameters] = None):
        self.canvas = canvas if canvas is not None else Canvas()
        self.defaults = defaults if defaults is not None else LaunchParameters()
        config = self.canvas.configure(
            config if config is not None else SimulationConfig())

        self.fig = plt.figure(figsize=(10, 8))
        self.fig.canvas.manager.set_window_title('Ledge Launch')
        scene_ax = self.fig.add_axes([0.05, 0.30, 0.90, 0.65])
        self.renderer = MatplotlibRenderer(scene_ax, self.canvas)

        text_ax = self.fig.add_axes([0.05, 0.24, 0.90, 0.05])
        text_ax.axis('off')
        self.sink = TextResultsSink(text_ax.text(0.0, 0.5, '', va='center',
                                                 fontfamily='monospace'))

        self.controls = SliderControls(self.fig, self.defaults)
        self.simulate_button = Button(self.fig.add_axes([0.15, 0.03, 0.2, 0.05]),
                                      'Simulate')
        self.reset_button = Button(self.fig.add_axes([0.50, 0.03, 0.2, 0.05]),
                                   'Reset')

        self.driver = SimulationDriver(
            MatplotlibTimerScheduler(self.fig),
            renderer=self._GatedRenderer(self),
            sink=self.sink,
            config=config,
        )

        self.simulate_button.on_clicked(self.on_simulate)
        self.reset_button.on_clicked(self.on_reset)
        self.controls.height.on_changed(self.on_height_changed)

        self.driver.reset(self.defaults)

    class _GatedRenderer:
        """Forwards frames and re-enables Simulate once a run has ended."""

        def __init__(self, app: 'LaunchApp'):
            self.app = app

        def draw(self, frame):
            self.app.renderer.draw(frame)
            self.app.update_buttons()

    def update_buttons(self):
        color = '0.6' if self.driver.is_running else '0.85'
        self.simulate_button.color = color
        self.simulate_button.ax.set_facecolor(color)

    def on_simulate(self, event=None):
        if self.driver.is_running:
            return
        self.driver.start(self.controls.read())
        self.update_buttons()

    def on_reset(self, event=None):
        self.driver.reset(self.defaults)
        # restoring sliders fires on_height_changed, which only previews
        self.controls.restore_defaults()
        self.update_buttons()

    def on_height_changed(self, value=None):
        self.driver.preview(self.controls.read())

    def show(self):
        logger.info("Opening interactive window")
        plt.show()


def run_app(**kwargs):
    app = LaunchApp(**kwargs)
    app.show()
    return app
