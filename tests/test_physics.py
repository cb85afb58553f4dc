"""
Unit Tests for the Trajectory Model and Safety Classification
=============================================================
Run: python -m pytest tests/ -v
"""

import sys
import os
import math
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ledgelaunch.config import SIM_TIME_STEP
from ledgelaunch.safety import assess
from ledgelaunch.trajectory import (
    GRAVITY, LaunchParameters, initial_velocity, position_at, peak_height,
    sample_times, sampled_peak_height, contact_time,
)


class TestInitialVelocity:

    def test_components(self):
        v = initial_velocity(LaunchParameters(launch_height=0.0, speed=100.0,
                                              angle_deg=45.0))
        assert abs(v.vx0 - 100 * math.cos(math.radians(45))) < 1e-9
        assert abs(v.vy0 - 100 * math.sin(math.radians(45))) < 1e-9

    def test_magnitude_preserved(self):
        for angle in [-90.0, -30.0, 0.0, 30.0, 90.0, 135.0]:
            v = initial_velocity(LaunchParameters(speed=7.5, angle_deg=angle))
            assert abs(math.hypot(v.vx0, v.vy0) - 7.5) < 1e-9

    def test_downward_angle_gives_negative_vy(self):
        v = initial_velocity(LaunchParameters(speed=10.0, angle_deg=-20.0))
        assert v.vy0 < 0
        assert v.vx0 > 0

    def test_non_finite_parameters_rejected(self):
        with pytest.raises(ValueError):
            LaunchParameters(launch_height=float('nan'))
        with pytest.raises(ValueError):
            LaunchParameters(speed=float('inf'))


class TestPosition:

    def test_starts_at_launch_point(self):
        params = LaunchParameters(launch_height=3.0, speed=12.0, angle_deg=40.0)
        p = position_at(params, 0.0)
        assert p.horizontal_displacement == 0.0
        assert p.height == 3.0

    def test_known_position(self):
        params = LaunchParameters(launch_height=2.0, speed=5.0, angle_deg=30.0)
        p = position_at(params, 0.5)
        assert p.time == 0.5
        assert p.horizontal_displacement == pytest.approx(5.0 * math.cos(math.pi / 6) * 0.5)
        assert p.height == pytest.approx(2.0 + 2.5 * 0.5 - 0.5 * GRAVITY * 0.25)

    def test_free_fall(self):
        """Dropped from rest, the body falls g t² / 2."""
        params = LaunchParameters(launch_height=20.0, speed=0.0, angle_deg=0.0)
        for t in [0.1, 0.5, 1.0, 1.5]:
            assert position_at(params, t).height == pytest.approx(20.0 - 0.5 * GRAVITY * t * t)

    def test_no_accumulated_error(self):
        """Position depends only on t, not on how many steps led there."""
        params = LaunchParameters(launch_height=1.0, speed=8.0, angle_deg=60.0)
        t = 0.0
        for _ in range(50):
            t += SIM_TIME_STEP
        stepped = position_at(params, t)
        direct = position_at(params, 50 * SIM_TIME_STEP)
        assert stepped.height == pytest.approx(direct.height, abs=1e-12)


class TestPeakHeight:

    @pytest.mark.parametrize("angle", [-60.0, -10.0, 0.0])
    def test_level_or_downward_peak_is_launch_height(self, angle):
        params = LaunchParameters(launch_height=3.0, speed=10.0, angle_deg=angle)
        assert peak_height(params) == 3.0

    @pytest.mark.parametrize("height,speed,angle", [
        (2.0, 5.0, 30.0), (0.0, 15.0, 45.0), (10.0, 1.0, 90.0), (4.0, 20.0, 75.0),
    ])
    def test_upward_peak_is_parabola_vertex(self, height, speed, angle):
        params = LaunchParameters(launch_height=height, speed=speed, angle_deg=angle)
        vy0 = initial_velocity(params).vy0
        assert peak_height(params) == pytest.approx(height + vy0 ** 2 / (2 * GRAVITY))

    def test_vertex_matches_dense_sampling(self):
        params = LaunchParameters(launch_height=2.0, speed=5.0, angle_deg=30.0)
        t = np.linspace(0.0, 1.0, 100001)
        vy0 = initial_velocity(params).vy0
        dense = np.max(params.launch_height + vy0 * t - 0.5 * GRAVITY * t ** 2)
        assert abs(dense - peak_height(params)) < 1e-6


class TestSampledPeak:

    def test_sample_times_inclusive(self):
        t_end = 0.0
        for _ in range(3):
            t_end += SIM_TIME_STEP
        t = sample_times(t_end, SIM_TIME_STEP)
        assert len(t) == 4
        assert t[0] == 0.0
        assert t[-1] == pytest.approx(t_end)

    def test_sampled_never_exceeds_closed_form(self):
        for angle in np.arange(5.0, 90.0, 5.0):
            params = LaunchParameters(launch_height=1.5, speed=9.0, angle_deg=float(angle))
            sampled = sampled_peak_height(params, 3.0, SIM_TIME_STEP)
            exact = peak_height(params)
            assert sampled <= exact + 1e-12
            assert exact - sampled <= 0.5 * GRAVITY * SIM_TIME_STEP ** 2

    def test_sampled_at_least_launch_height(self):
        params = LaunchParameters(launch_height=4.0, speed=3.0, angle_deg=-45.0)
        assert sampled_peak_height(params, 0.5, SIM_TIME_STEP) == 4.0

    def test_clamped_at_ground(self):
        params = LaunchParameters(launch_height=-1.0, speed=0.0, angle_deg=0.0)
        assert sampled_peak_height(params, SIM_TIME_STEP, SIM_TIME_STEP) == 0.0


class TestContactTime:

    def test_drop_from_rest(self):
        h = 0.5 * GRAVITY  # falls in exactly one second
        params = LaunchParameters(launch_height=h, speed=0.0, angle_deg=0.0)
        assert contact_time(params) == pytest.approx(1.0)

    def test_clearance(self):
        params = LaunchParameters(launch_height=2.0, speed=5.0, angle_deg=30.0)
        t = contact_time(params, clearance=0.2)
        assert position_at(params, t).height == pytest.approx(0.2)

    def test_already_on_ground(self):
        params = LaunchParameters(launch_height=0.0, speed=0.0, angle_deg=0.0)
        assert contact_time(params) == 0.0

    def test_clearance_above_vertex_never_reached(self):
        params = LaunchParameters(launch_height=0.0, speed=1.0, angle_deg=90.0)
        assert contact_time(params, clearance=1.0) is None


class TestSafety:

    def test_threshold_is_strict(self):
        assert not assess(7.0).is_adverse
        assert assess(7.01).is_adverse

    def test_message_reports_height_and_threshold(self):
        a = assess(10.05)
        assert a.is_adverse
        assert '10.05' in a.message
        assert '7.00' in a.message
        assert a.message.startswith('DANGER')

    def test_safe_message(self):
        a = assess(2.3)
        assert not a.is_adverse
        assert '2.30' in a.message
        assert a.message.startswith('Safe')

    def test_custom_threshold(self):
        assert assess(3.0, critical_fall_height=2.5).is_adverse
        assert not assess(3.0, critical_fall_height=5.0).is_adverse

    def test_pure(self):
        assert assess(8.0) == assess(8.0)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
