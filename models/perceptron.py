# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Quaternion perceptron: a binary classifier whose weights are rotations."""

import math
import time
from typing import Optional, Sequence, Union

import torch

from core.quaternion import ONE, Quaternion
from core.validation import check_batch, check_label, check_unit
from log import get_logger
from optimizers.rotation import (
    GradientFields,
    UpdateRule,
    apply_gradient_fields,
    build_update_rule,
)

logger = get_logger(__name__)

# Label 1 is a half turn about this axis; label 0 is the identity
CLASSIFICATION_AXIS = (0.0, 0.0, 1.0)

TARGETS = {
    0: ONE,
    1: Quaternion.from_axis_angle(math.pi, CLASSIFICATION_AXIS),
}


def label_to_target(label: int) -> Quaternion:
    """Target orientation for a binary label.

    Raises:
        ValueError: If *label* is not exactly 0 or 1.
    """
    return TARGETS[check_label(label)]


class QuaternionPerceptron:
    """Binary classifier of orientations with rotation-valued weights.

    The forward pass sandwiches the input between two unit quaternions,

        P = bias . input . action

    and :meth:`classify` picks the label whose target orientation is
    geodesically nearest to ``P``. Training moves the weights along the
    group with a pluggable :class:`~optimizers.rotation.UpdateRule`:

    - ``"decomposition"`` (default): two weights, error attributed by a
      3x3 basis decomposition.
    - ``"adaptive"``: a single ``rotation`` weight (``action`` stays the
      identity) with error-scaled steps.

    Both weights start near the identity, ``normalize(1 + N(0, 0.05^2))``
    per component, drawn from a generator owned by this instance, so equal
    seeds give equal weights.

    Not safe for concurrent :meth:`step` calls on the same instance.

    Args:
        seed (int, optional): Generator seed. Defaults to a clock-based seed.
        update_rule (str | UpdateRule): Rule name or instance.
        learning_rate (float, optional): Passed to the rule when built by
            name; the rule's default otherwise.
    """

    INIT_STD = 0.05

    def __init__(
        self,
        seed: Optional[int] = None,
        update_rule: Union[str, UpdateRule] = "decomposition",
        learning_rate: Optional[float] = None,
    ):
        if seed is None:
            seed = time.time_ns() & 0x7FFFFFFFFFFFFFFF
        self._seed = int(seed)
        self._generator = torch.Generator().manual_seed(self._seed)

        if isinstance(update_rule, UpdateRule):
            if learning_rate is not None:
                raise ValueError("learning_rate must be set on the UpdateRule instance")
            self._rule = update_rule
        else:
            self._rule = build_update_rule(update_rule, learning_rate)

        self._bias = self._random_near_identity()
        self._action = ONE if self._rule.single_weight else self._random_near_identity()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def bias(self) -> Quaternion:
        return self._bias

    @property
    def action(self) -> Quaternion:
        return self._action

    @property
    def rotation(self) -> Quaternion:
        """The single weight of the one-rotation form (alias of ``bias``)."""
        return self._bias

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def update_rule(self) -> UpdateRule:
        return self._rule

    @property
    def learning_rate(self) -> float:
        return self._rule.learning_rate

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def forward(self, input: Quaternion) -> Quaternion:
        """Computes ``bias . input . action``.

        Args:
            input (Quaternion): Unit quaternion.

        Returns:
            Quaternion: Predicted orientation (unit up to rounding).

        Raises:
            ValueError: If *input* is ``None`` or not a unit quaternion.
        """
        check_unit(input, "input")
        return self._bias.multiply(input).multiply(self._action)

    __call__ = forward

    def classify(self, input: Quaternion) -> int:
        """Label of the target nearest to ``forward(input)``; ties go to 0."""
        predicted = self.forward(input)
        distance_0 = predicted.geodesic_distance(TARGETS[0])
        distance_1 = predicted.geodesic_distance(TARGETS[1])
        return 0 if distance_0 <= distance_1 else 1

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def step(self, inputs: Sequence[Quaternion], labels: Sequence[int]) -> GradientFields:
        """One batch update of the weights.

        The whole batch is validated before anything changes, and the
        weights are only reassigned once the update has been computed.

        Args:
            inputs: Unit quaternions.
            labels: Matching 0/1 labels.

        Returns:
            GradientFields: The update that was applied.

        Raises:
            ValueError: On ``None`` arguments, length mismatch, non-unit
                inputs or labels other than 0/1.
        """
        labels = check_batch(inputs, labels)
        inputs = list(inputs)
        if not inputs:
            return GradientFields(bias_gradient=ONE, action_gradient=ONE)

        targets = [TARGETS[label] for label in labels]
        predicted = [self.forward(x) for x in inputs]

        fields = self._rule.compute_gradient_fields(
            self._bias, self._action, inputs, predicted, targets
        )
        bias, action = apply_gradient_fields(self._bias, self._action, fields)

        self._bias = bias
        if not self._rule.single_weight:
            self._action = action

        if fields.num_skipped:
            logger.debug("Skipped %d/%d samples", fields.num_skipped, fields.num_samples)
        return fields

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _random_near_identity(self) -> Quaternion:
        noise = torch.randn(4, generator=self._generator, dtype=torch.float64) * self.INIT_STD
        w, x, y, z = noise.tolist()
        return Quaternion(1.0 + w, x, y, z).normalize()

    def __repr__(self):
        if self._rule.single_weight:
            return f"QuaternionPerceptron(rotation={self._bias!r}, rule={self._rule!r})"
        return (
            f"QuaternionPerceptron(bias={self._bias!r}, action={self._action!r}, "
            f"rule={self._rule!r})"
        )
