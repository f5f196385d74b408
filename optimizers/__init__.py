"""Rotation update rules for quaternion perceptrons.

Provides update strategies that move unit-quaternion weights along the
group instead of treating them as flat vectors.
"""

from .rotation import (
    GradientFields,
    UpdateRule,
    DecompositionUpdate,
    AdaptiveUpdate,
    UPDATE_RULES,
    build_update_rule,
    exp_map_sum,
    apply_gradient_fields,
    shortest_arc_target,
)

__all__ = [
    'GradientFields',
    'UpdateRule',
    'DecompositionUpdate',
    'AdaptiveUpdate',
    'UPDATE_RULES',
    'build_update_rule',
    'exp_map_sum',
    'apply_gradient_fields',
    'shortest_arc_target',
]
