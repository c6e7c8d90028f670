"""Tests for the single-thumb value model."""

import numpy as np
import pytest

from src.domain.scaling import Scaling
from src.domain.value_transformer import Representation, ValueTransformer
from src.shared.exceptions import PreconditionError

INTERNAL = Representation.INTERNAL
EXTERNAL = Representation.EXTERNAL


class TestConstruction:
    """Test ValueTransformer initialization."""

    def test_external_initial_value(self, piecewise_scaling):
        """Test that the initial value is converted to the internal domain."""
        transformer = ValueTransformer(1000, scaling=piecewise_scaling)
        assert transformer.value(INTERNAL) == pytest.approx(100)
        assert transformer.value(EXTERNAL) == pytest.approx(1000)

    def test_internal_initial_value(self, piecewise_scaling):
        """Test initialization in the internal domain."""
        transformer = ValueTransformer(75, INTERNAL, scaling=piecewise_scaling)
        assert transformer.value(EXTERNAL) == pytest.approx(200)

    def test_initial_value_is_quantized(self, linear_scaling):
        """Test that the constructor sanitizes."""
        transformer = ValueTransformer(21, step=5, scaling=linear_scaling)
        assert transformer.value(EXTERNAL) == 20

    @pytest.mark.parametrize("step", [0, -1, float("nan"), float("inf")])
    def test_invalid_step_rejected(self, linear_scaling, step):
        """Test that the step must be a positive number."""
        with pytest.raises(PreconditionError):
            ValueTransformer(50, step=step, scaling=linear_scaling)

    def test_non_finite_value_rejected(self, linear_scaling):
        """Test that NaN is never stored."""
        with pytest.raises(PreconditionError):
            ValueTransformer(float("nan"), scaling=linear_scaling)


class TestStepQuantization:
    """Test external step snapping."""

    def test_nearest_step(self, linear_scaling):
        """Test values land on the nearest multiple of 0.1."""
        transformer = ValueTransformer(50, step=0.1, scaling=linear_scaling)

        transformer.set(60.1)
        assert transformer.value(EXTERNAL) == pytest.approx(60.1)

        transformer.set(60.09)
        assert transformer.value(EXTERNAL) == pytest.approx(60.1)

        transformer.set(60.04)
        assert transformer.value(EXTERNAL) == pytest.approx(60.0)

    def test_external_values_are_step_multiples(self, piecewise_scaling):
        """Test every read value is a multiple of the step."""
        transformer = ValueTransformer(0, step=5, scaling=piecewise_scaling)
        for internal in np.linspace(0, 100, 37):
            transformer.set(float(internal), INTERNAL)
            quotient = transformer.value(EXTERNAL) / 5
            assert quotient == pytest.approx(round(quotient))

    def test_step_change_requantizes(self, linear_scaling):
        """Test that assigning a step re-sanitizes the value."""
        transformer = ValueTransformer(43, scaling=linear_scaling)
        transformer.step = 10
        assert transformer.value(EXTERNAL) == 40
        transformer.step = None
        assert transformer.step is None
        assert transformer.value(EXTERNAL) == 40

    def test_invalid_step_assignment_rejected(self, linear_scaling):
        """Test that the step setter validates."""
        transformer = ValueTransformer(43, scaling=linear_scaling)
        with pytest.raises(ValueError):
            transformer.step = 0


class TestWindow:
    """Test percent window restriction."""

    def test_narrowing_moves_value(self, linear_scaling):
        """Test that the value follows a tightened window and stays there."""
        transformer = ValueTransformer(50, scaling=linear_scaling)

        transformer.maximum_percent = 40
        assert transformer.value(INTERNAL) == pytest.approx(40)

        transformer.maximum_percent = 100
        assert transformer.value(INTERNAL) == pytest.approx(40)

        transformer.minimum_percent = 60
        assert transformer.value(INTERNAL) == pytest.approx(60)

    def test_piecewise_window(self, piecewise_scaling):
        """Test window edges through a piecewise scaling with a step."""
        transformer = ValueTransformer(1000, step=5, scaling=piecewise_scaling)

        transformer.maximum_percent = 90
        assert transformer.upper_bound(EXTERNAL) == pytest.approx(500)
        assert transformer.value(EXTERNAL) == pytest.approx(500)

        transformer.maximum_percent = 50
        assert transformer.value(EXTERNAL) == pytest.approx(100)

        transformer.maximum_percent = 100
        assert transformer.upper_bound(EXTERNAL) == pytest.approx(1000)
        assert transformer.value(EXTERNAL) == pytest.approx(100)

    def test_clamp_rounds_toward_window_interior(self):
        """Test that a clamped value never snaps outside its window."""
        transformer = ValueTransformer(1.04, step=0.02, scaling=Scaling.linear(0, 2))
        transformer.maximum_percent = 50
        assert transformer.value(EXTERNAL) == pytest.approx(1.0)
        assert transformer.value(INTERNAL) <= transformer.upper_bound(INTERNAL)

    def test_off_grid_bounds_round_inward(self):
        """Test bounds that fall between step multiples."""
        transformer = ValueTransformer(1, step=0.3, scaling=Scaling.linear(0, 1))

        transformer.maximum_percent = 50
        assert transformer.upper_bound(EXTERNAL) == pytest.approx(0.3)
        assert transformer.value(EXTERNAL) == pytest.approx(0.3)

        transformer.set_window(50, 100)
        assert transformer.lower_bound(EXTERNAL) == pytest.approx(0.6)
        transformer.set(0)
        assert transformer.value(EXTERNAL) == pytest.approx(0.6)

    def test_window_narrower_than_step(self):
        """Test that a window holding no step multiple still contains the value."""
        transformer = ValueTransformer(0, step=0.3, scaling=Scaling.linear(0, 1))
        transformer.set_window(40, 50)
        assert transformer.value(INTERNAL) == pytest.approx(0.4)

        external = transformer.value(EXTERNAL)
        assert external == pytest.approx(0.4)
        assert transformer.lower_bound(INTERNAL) <= external <= transformer.upper_bound(INTERNAL)
        assert transformer.is_at_lower_bound()
        assert not transformer.is_at_upper_bound()

    @pytest.mark.parametrize("window", [(-1, 50), (0, 101), (60, 40)])
    def test_invalid_window_rejected(self, linear_scaling, window):
        """Test window precondition checks."""
        transformer = ValueTransformer(50, scaling=linear_scaling)
        with pytest.raises(PreconditionError):
            transformer.set_window(*window)

    def test_set_window_reports_movement(self, linear_scaling):
        """Test the return value of set_window."""
        transformer = ValueTransformer(50, scaling=linear_scaling)
        assert transformer.set_window(0, 80) is False
        assert transformer.set_window(0, 20) is True

    def test_invariant_after_every_set(self, piecewise_scaling):
        """Test lower_bound <= value <= upper_bound after arbitrary writes."""
        transformer = ValueTransformer(0, step=5, scaling=piecewise_scaling)
        transformer.set_window(12.5, 87.5)
        for external in [-50, 0, 3, 24, 99, 101, 260, 499, 777, 1000, 5000]:
            transformer.set(external)
            value = transformer.value(INTERNAL)
            assert transformer.lower_bound(INTERNAL) <= value <= transformer.upper_bound(INTERNAL)


class TestReadsAndWrites:
    """Test conversions, clamping and bound checks."""

    def test_out_of_range_writes_are_clamped(self, piecewise_scaling):
        """Test that external writes beyond the domain are clamped."""
        transformer = ValueTransformer(100, scaling=piecewise_scaling)
        transformer.set(-5)
        assert transformer.value(EXTERNAL) == 0
        transformer.set(1500)
        assert transformer.value(EXTERNAL) == pytest.approx(1000)

    def test_percentage(self, piecewise_scaling):
        """Test the percent position over the full domain."""
        transformer = ValueTransformer(500, scaling=piecewise_scaling)
        assert transformer.percentage == pytest.approx(90)

    def test_value_range(self, linear_scaling):
        """Test the reachable range in both representations."""
        transformer = ValueTransformer(50, step=10, scaling=linear_scaling)
        transformer.set_window(15, 85)
        assert transformer.value_range(INTERNAL) == pytest.approx((15, 85))
        assert transformer.value_range(EXTERNAL) == pytest.approx((20, 80))

    def test_bound_checks(self, linear_scaling):
        """Test is_at_lower_bound and is_at_upper_bound."""
        transformer = ValueTransformer(100, scaling=linear_scaling)
        assert transformer.is_at_upper_bound()
        assert not transformer.is_at_lower_bound()
        transformer.set(0)
        assert transformer.is_at_lower_bound()

    def test_scaling_change_keeps_fraction(self, linear_scaling):
        """Test that swapping the scaling keeps the relative position."""
        transformer = ValueTransformer(50, scaling=linear_scaling)
        transformer.scaling = Scaling.linear(0, 10)
        assert transformer.value(EXTERNAL) == pytest.approx(5)

    def test_snapshot_restore(self, linear_scaling):
        """Test returning to a captured value."""
        transformer = ValueTransformer(30, scaling=linear_scaling)
        snapshot = transformer.snapshot()
        transformer.set(70)
        transformer.restore(snapshot)
        assert transformer.value(EXTERNAL) == pytest.approx(30)

    def test_restore_respects_current_window(self, linear_scaling):
        """Test that a restored value is sanitized again."""
        transformer = ValueTransformer(30, scaling=linear_scaling)
        snapshot = transformer.snapshot()
        transformer.set_window(50, 100)
        transformer.restore(snapshot)
        assert transformer.value(EXTERNAL) == pytest.approx(50)
