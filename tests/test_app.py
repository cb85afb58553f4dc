"""
Tests for the interactive window, driven headless on the Agg backend.
GUI timers never fire under Agg, so runs are advanced with driver.tick().
"""

import sys
import os
import pytest

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ledgelaunch.app import LaunchApp
from ledgelaunch.trajectory import LaunchParameters


@pytest.fixture
def app():
    a = LaunchApp()
    yield a
    plt.close(a.fig)


def finish(app):
    while app.driver.is_running:
        app.driver.tick()


def test_controls_start_at_defaults(app):
    assert app.controls.read() == LaunchParameters()
    assert app.sink.text.get_text().startswith('Range: -- m')


def test_simulate_reports_results(app):
    app.on_simulate()
    assert app.driver.is_running
    finish(app)
    text = app.sink.text.get_text()
    result = app.driver.state.result
    assert f'{result.range:.2f}' in text
    assert result.safety.message in text


def test_simulate_ignored_while_running(app):
    app.on_simulate()
    app.driver.tick()
    state = app.driver.state
    app.on_simulate()
    assert app.driver.state is state


def test_slider_values_reach_driver(app):
    app.controls.height.set_val(10.0)
    app.controls.speed.set_val(1.0)
    app.controls.angle.set_val(90.0)
    app.on_simulate()
    finish(app)
    assert app.driver.params == LaunchParameters(10.0, 1.0, 90.0)
    assert app.driver.state.result.safety.is_adverse


def test_height_slider_previews_when_idle(app):
    app.controls.height.set_val(4.0)
    assert app.driver.params.launch_height == 4.0
    assert app.renderer.ledge.get_height() == pytest.approx(4.0 * 30.0)


def test_reset_restores_sliders_and_clears(app):
    app.controls.speed.set_val(12.0)
    app.on_simulate()
    finish(app)
    app.on_reset()
    assert app.controls.read() == LaunchParameters()
    assert not app.driver.is_running
    assert '--' in app.sink.text.get_text()
