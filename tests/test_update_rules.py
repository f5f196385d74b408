"""Tests for the rotation update rules in optimizers/rotation.py.

Covers:
- exp_map_sum aggregation (empty, single, co-axial)
- shortest-arc target selection and fractional shares
- applying gradient fields to the weights
- DecompositionUpdate / AdaptiveUpdate gradients and learning-rate checks
"""

import math
import pytest
from core.linalg import decompose_error
from core.quaternion import Quaternion, ONE, K
from optimizers.rotation import (
    GradientFields,
    DecompositionUpdate,
    AdaptiveUpdate,
    UPDATE_RULES,
    apply_gradient_fields,
    build_update_rule,
    exp_map_sum,
    fractional_coefficients,
    is_identity,
    shortest_arc_target,
)

Z_AXIS = (0.0, 0.0, 1.0)


def _close(q1: Quaternion, q2: Quaternion, tol: float = 1e-9) -> bool:
    return all(abs(a - b) < tol for a, b in zip(q1.components, q2.components))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestExpMapSum:

    def test_empty_is_identity(self):
        assert exp_map_sum([]) == ONE

    def test_single_passes_through(self):
        q = Quaternion.from_axis_angle(0.3, (1, 0, 0))
        assert exp_map_sum([q]) is q

    def test_coaxial_angles_add(self):
        updates = [Quaternion.from_axis_angle(a, Z_AXIS) for a in (0.1, 0.2, 0.3)]
        assert _close(exp_map_sum(updates), Quaternion.from_axis_angle(0.6, Z_AXIS))

    def test_opposite_updates_cancel(self):
        q = Quaternion.from_axis_angle(0.4, (0, 1, 0))
        assert exp_map_sum([q, q.conjugate()]) == ONE


class TestHelpers:

    def test_shortest_arc_flips_far_target(self):
        p = Quaternion.from_axis_angle(0.1, Z_AXIS)
        assert shortest_arc_target(p, -ONE) == ONE
        assert shortest_arc_target(p, ONE) is ONE

    def test_fractional_coefficients(self):
        assert fractional_coefficients((1.0, -2.0, 1.0)) == pytest.approx((0.25, 0.5, 0.25))

    def test_fractional_coefficients_zero(self):
        assert fractional_coefficients((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)

    def test_is_identity(self):
        assert is_identity(ONE)
        assert not is_identity(-ONE)
        assert not is_identity(K)

    def test_apply_skips_identity_gradients(self):
        bias = Quaternion.from_axis_angle(0.2, (1, 0, 0))
        action = Quaternion.from_axis_angle(0.3, (0, 1, 0))
        fields = GradientFields(bias_gradient=ONE, action_gradient=ONE)
        assert apply_gradient_fields(bias, action, fields) == (bias, action)

    def test_apply_moves_against_gradient(self):
        g = Quaternion.from_axis_angle(0.2, Z_AXIS)
        fields = GradientFields(bias_gradient=g, action_gradient=g)
        bias, action = apply_gradient_fields(ONE, ONE, fields)
        assert _close(bias, g.conjugate())
        assert _close(action, g.conjugate())
        assert bias.is_unit() and action.is_unit()


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

class TestRuleConstruction:

    def test_defaults(self):
        assert DecompositionUpdate().learning_rate == 0.1
        assert AdaptiveUpdate().learning_rate == 0.003
        assert AdaptiveUpdate.single_weight and not DecompositionUpdate.single_weight

    @pytest.mark.parametrize("lr", [0.0, -0.5, math.nan])
    def test_invalid_learning_rate(self, lr):
        with pytest.raises(ValueError):
            DecompositionUpdate(learning_rate=lr)
        with pytest.raises(ValueError):
            AdaptiveUpdate(learning_rate=lr)

    def test_build_by_name(self):
        rule = build_update_rule("adaptive", 0.01)
        assert isinstance(rule, AdaptiveUpdate)
        assert rule.learning_rate == 0.01
        assert set(UPDATE_RULES) == {"decomposition", "adaptive"}

    def test_unknown_rule(self):
        with pytest.raises(ValueError):
            build_update_rule("sgd")


class TestDecompositionUpdate:

    def test_identity_input_is_skipped(self):
        rule = DecompositionUpdate()
        bias = Quaternion.from_axis_angle(0.1, (1, 0, 0))
        action = Quaternion.from_axis_angle(0.1, (0, 1, 0))
        p = bias * ONE * action
        fields = rule.compute_gradient_fields(bias, action, [ONE], [p], [K])
        assert fields.num_samples == 1
        assert fields.num_skipped == 1
        assert fields.bias_gradient == ONE and fields.action_gradient == ONE

    def test_update_reduces_error(self):
        rule = DecompositionUpdate(learning_rate=0.5)
        bias = Quaternion.from_axis_angle(0.2, (1, 0, 0))
        action = Quaternion.from_axis_angle(0.3, (0, 1, 0))
        x = Quaternion.from_axis_angle(0.4, (0, 0, 1))
        target = Quaternion.from_axis_angle(1.5, (1, 1, 1))

        before = (bias * x * action).geodesic_distance(target)
        fields = rule.compute_gradient_fields(bias, action, [x], [bias * x * action], [target])
        new_bias, new_action = apply_gradient_fields(bias, action, fields)
        after = (new_bias * x * new_action).geodesic_distance(target)

        assert fields.num_skipped == 0
        assert after < before


class TestAdaptiveUpdate:

    def test_action_gradient_is_identity(self):
        rule = AdaptiveUpdate(learning_rate=0.1)
        bias = Quaternion.from_axis_angle(0.2, (1, 0, 0))
        fields = rule.compute_gradient_fields(bias, ONE, [ONE], [bias], [K])
        assert fields.action_gradient == ONE
        assert not is_identity(fields.bias_gradient)

    def test_samples_at_target_are_skipped(self):
        rule = AdaptiveUpdate()
        fields = rule.compute_gradient_fields(ONE, ONE, [ONE, ONE], [ONE, ONE], [ONE, ONE])
        assert fields.num_skipped == 2
        assert fields.bias_gradient == ONE

    def test_update_reduces_error(self):
        rule = AdaptiveUpdate(learning_rate=0.1)
        bias = Quaternion.from_axis_angle(0.2, (1, 0, 0))
        target = Quaternion.from_axis_angle(1.0, Z_AXIS)
        before = bias.geodesic_distance(target)
        fields = rule.compute_gradient_fields(bias, ONE, [ONE], [bias], [target])
        new_bias, _ = apply_gradient_fields(bias, ONE, fields)
        assert new_bias.geodesic_distance(target) < before


class TestResidualGradient:

    def test_residual_is_reported(self):
        rule = DecompositionUpdate(learning_rate=0.5)
        bias = Quaternion.from_axis_angle(0.2, (1, 0, 0))
        action = Quaternion.from_axis_angle(0.3, (0, 1, 0))
        x = Quaternion.from_axis_angle(0.4, (0, 0, 1))
        target = Quaternion.from_axis_angle(1.5, (1, 1, 1))
        fields = rule.compute_gradient_fields(bias, action, [x], [bias * x * action], [target])
        assert not is_identity(fields.residual_gradient)

    def test_residual_is_never_applied(self):
        bias = Quaternion.from_axis_angle(0.2, (1, 0, 0))
        action = Quaternion.from_axis_angle(0.3, (0, 1, 0))
        fields = GradientFields(
            bias_gradient=ONE,
            action_gradient=ONE,
            residual_gradient=Quaternion.from_axis_angle(1.0, Z_AXIS),
        )
        assert apply_gradient_fields(bias, action, fields) == (bias, action)

    def test_step_moves_prediction_along_error(self):
        # Only the weight shares move the prediction: P' = P . E^(lr (f_bias + f_action))
        rule = DecompositionUpdate(learning_rate=0.5)
        bias = Quaternion.from_axis_angle(0.2, (1, 0, 0))
        action = Quaternion.from_axis_angle(0.3, (0, 1, 0))
        x = Quaternion.from_axis_angle(0.4, (0, 0, 1))
        target = Quaternion.from_axis_angle(1.5, (1, 1, 1))
        p = bias * x * action
        error = p.geodesic_rotation(target)

        fields = rule.compute_gradient_fields(bias, action, [x], [p], [target])
        new_bias, new_action = apply_gradient_fields(bias, action, fields)
        moved = new_bias * x * new_action

        c = decompose_error(bias, x, action, error)
        f_bias, f_input, f_action = fractional_coefficients(c)
        assert f_input > 0.0
        expected = p * error.pow(0.5 * (f_bias + f_action))
        assert _close(moved, expected, tol=1e-8)
