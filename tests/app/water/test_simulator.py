"""Unit tests for the water-level simulator."""

import random

import pytest

from app.water.simulator import RIVERS, FloodStatus, River, WaterLevelSimulator, classify_level


class FixedRandom(random.Random):
    """Random source that always returns the same value."""

    def __init__(self, value):
        super().__init__()
        self.value = value

    def random(self):
        return self.value


class TestClassifyLevel:
    """Tests for flood status thresholds."""

    @pytest.mark.parametrize(
        "level,expected",
        [
            (4.5, FloodStatus.NORMAL),
            (5.0, FloodStatus.NORMAL),
            (5.01, FloodStatus.MINOR),
            (6.5, FloodStatus.MINOR),
            (6.51, FloodStatus.MAJOR),
        ],
    )
    def test_thresholds_are_strict(self, level, expected):
        """A level equal to a threshold has not crossed it."""
        assert classify_level(level, minor=5.0, major=6.5) is expected

    def test_alert_text(self):
        assert FloodStatus.MAJOR.alert == "Major Flood Alert"
        assert FloodStatus.MINOR.alert == "Minor Flood Alert"
        assert FloodStatus.NORMAL.alert == "Normal"


class TestRivers:
    def test_configured_rivers(self):
        """Three gauges with their thresholds and starting levels."""
        by_id = {r.id: r for r in RIVERS}

        assert (by_id["kalu"].minor, by_id["kalu"].major, by_id["kalu"].initial) == (5.0, 6.5, 4.5)
        assert (by_id["mahaweli"].minor, by_id["mahaweli"].major, by_id["mahaweli"].initial) == (8.5, 10.0, 7.0)
        assert (by_id["kelani"].minor, by_id["kelani"].major, by_id["kelani"].initial) == (6.5, 7.8, 6.0)

    def test_short_name(self):
        assert RIVERS[0].short_name == "Kalu Ganga"


class TestWaterLevelSimulator:
    """Tests for the random walk."""

    def test_initial_readings(self):
        """Readings start at the initial levels, flagged as simulated."""
        readings = WaterLevelSimulator().readings()

        assert [r.current for r in readings] == [4.5, 7.0, 6.0]
        assert all(r.simulated for r in readings)
        assert all(r.status is FloodStatus.NORMAL for r in readings)

    def test_step_size(self):
        """Each tick moves a level by (u - 0.45) * 0.2, rounded to centimetres."""
        simulator = WaterLevelSimulator(rng=FixedRandom(1.0))

        readings = simulator.tick()

        assert readings[0].current == 4.61
        assert simulator.tick_count == 1

    def test_downward_step(self):
        simulator = WaterLevelSimulator(rng=FixedRandom(0.0))

        assert simulator.tick()[0].current == 4.41

    def test_levels_clamped_high(self):
        """Levels never exceed the 11 m ceiling."""
        river = River("r", "Test River (Somewhere)", minor=5.0, major=6.0, initial=10.95, color="#000")
        simulator = WaterLevelSimulator(rivers=(river,), rng=FixedRandom(1.0))

        for _ in range(5):
            simulator.tick()

        reading = simulator.readings()[0]
        assert reading.current == 11.0
        assert reading.status is FloodStatus.MAJOR

    def test_levels_clamped_low(self):
        """Levels never drop below the 3 m floor."""
        river = River("r", "Test River", minor=5.0, major=6.0, initial=3.05, color="#000")
        simulator = WaterLevelSimulator(rivers=(river,), rng=FixedRandom(0.0))

        for _ in range(5):
            simulator.tick()

        assert simulator.readings()[0].current == 3.0

    def test_random_walk_stays_in_bounds(self):
        """Any sequence of ticks stays within [3, 11]."""
        simulator = WaterLevelSimulator(rng=random.Random(1234))

        for _ in range(2000):
            for reading in simulator.tick():
                assert 3.0 <= reading.current <= 11.0
                assert round(reading.current, 2) == reading.current

    def test_status_follows_level(self):
        """Status is recomputed from the current level."""
        river = River("r", "Test River", minor=5.0, major=6.5, initial=6.45, color="#000")
        simulator = WaterLevelSimulator(rivers=(river,), rng=FixedRandom(1.0))

        reading = simulator.tick()[0]

        assert reading.current == 6.56
        assert reading.status is FloodStatus.MAJOR
        assert reading.alert == "Major Flood Alert"
