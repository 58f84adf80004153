"""Tests for multi-source exposure aggregation and ExposureResult."""

import math

import pytest

from shieldcalc.core.build_up_factors import BuildupConfig, BuildupParameterStore
from shieldcalc.core.exposure import aggregate_exposure
from shieldcalc.models.results import ExposureResult
from shieldcalc.models.scene import Barrier, Point2D, Source

SCALE = 100.0  # pixels per metre


@pytest.fixture
def buildup() -> BuildupParameterStore:
    return BuildupParameterStore()


def _source(x: float, y: float, isotope: str = "Tc-99m", activity: float = 10.0,
            source_id: str | None = None) -> Source:
    src = Source(position=Point2D(x, y), isotope=isotope, activity=activity)
    if source_id is not None:
        src.id = source_id
    return src


class TestAggregateExposure:
    def test_single_source_1m(self, buildup):
        result = aggregate_exposure(
            [_source(0, 0, source_id="s1")], Point2D(100, 0), [], SCALE, buildup,
        )
        assert result.total == pytest.approx(59.5)
        assert result.per_source == {"s1": pytest.approx(59.5)}
        assert result.per_isotope == {"Tc-99m": pytest.approx(59.5)}

    def test_superposition(self, buildup):
        sources = [
            _source(0, 0, source_id="a"),
            _source(200, 0, isotope="F-18", activity=1.0, source_id="b"),
        ]
        result = aggregate_exposure(sources, Point2D(100, 0), [], SCALE, buildup)
        expected_b = 1.0 * 5.7e-5 * 1e6
        assert result.total == pytest.approx(59.5 + expected_b)
        assert result.per_source["b"] == pytest.approx(expected_b)
        assert sum(result.per_source.values()) == pytest.approx(result.total)

    def test_per_isotope_sums_sources(self, buildup):
        sources = [_source(0, 0), _source(200, 0, activity=5.0)]
        result = aggregate_exposure(sources, Point2D(100, 0), [], SCALE, buildup)
        assert list(result.per_isotope) == ["Tc-99m"]
        assert result.per_isotope["Tc-99m"] == pytest.approx(59.5 + 29.75)

    def test_totals_agree(self, buildup):
        sources = [
            _source(10, 20, "Tc-99m", 4.0),
            _source(300, 80, "I-131", 1.5),
            _source(150, 250, "Tc-99m", 2.0),
            _source(40, 300, "In-111", 0.7),
        ]
        wall = Barrier(Point2D(120, 0), Point2D(120, 400), "concrete", 20.0)
        result = aggregate_exposure(sources, Point2D(220, 150), [wall], SCALE, buildup)
        assert sum(result.per_source.values()) == pytest.approx(result.total)
        assert sum(result.per_isotope.values()) == pytest.approx(result.total)
        assert len(result.per_isotope) == 3

    def test_unknown_isotope_skipped(self, buildup):
        sources = [_source(0, 0, source_id="a"),
                   _source(0, 0, isotope="Xx-1", source_id="x")]
        result = aggregate_exposure(sources, Point2D(100, 0), [], SCALE, buildup)
        assert result.total == pytest.approx(59.5)
        assert "x" not in result.per_source
        assert "Xx-1" not in result.per_isotope

    def test_no_sources(self, buildup):
        result = aggregate_exposure([], Point2D(1, 1), [], SCALE, buildup)
        assert result.total == 0.0
        assert result.per_source == {}
        assert result.dominant_isotope() is None

    def test_barrier_attenuates(self, buildup):
        wall = Barrier(Point2D(50, -50), Point2D(50, 50), "lead", 2.0)
        config = BuildupConfig(enabled=False)
        result = aggregate_exposure(
            [_source(0, 0)], Point2D(100, 0), [wall], SCALE, config,
        )
        assert result.total == pytest.approx(59.5 * math.exp(-51.34))

    def test_target_on_source(self, buildup):
        result = aggregate_exposure([_source(30, 40)], Point2D(30, 40), [], SCALE, buildup)
        assert result.total == math.inf

    @pytest.mark.parametrize("scale", [0.0, -10.0])
    def test_invalid_scale(self, buildup, scale):
        with pytest.raises(ValueError):
            aggregate_exposure([_source(0, 0)], Point2D(100, 0), [], scale, buildup)

    def test_scale_factor_converts_distance(self, buildup):
        result = aggregate_exposure([_source(0, 0)], Point2D(100, 0), [], 50.0, buildup)
        # 100 px at 50 px/m = 2 m
        assert result.total == pytest.approx(59.5 / 4.0)


class TestExposureResult:
    def test_fractions(self):
        result = ExposureResult(
            total=10.0,
            per_source={"a": 7.5, "b": 2.5},
            per_isotope={"Tc-99m": 7.5, "F-18": 2.5},
        )
        assert result.fraction(2.5) == pytest.approx(0.25)
        assert result.source_percentages() == {
            "a": pytest.approx(75.0), "b": pytest.approx(25.0),
        }
        assert sum(result.isotope_percentages().values()) == pytest.approx(100.0)

    def test_zero_total_fraction(self):
        result = ExposureResult(total=0.0, per_source={"a": 0.0})
        assert result.fraction(0.0) == 0.0
        assert result.source_percentages() == {"a": 0.0}

    def test_dominant_isotope(self):
        result = ExposureResult(total=3.0, per_isotope={"I-131": 1.0, "F-18": 2.0})
        assert result.dominant_isotope() == "F-18"

    def test_dominant_isotope_tie_first_wins(self):
        result = ExposureResult(total=2.0, per_isotope={"I-131": 1.0, "F-18": 1.0})
        assert result.dominant_isotope() == "I-131"
