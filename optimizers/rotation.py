# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Update rules for rotation-valued perceptron weights.

Weights live on the unit-quaternion sphere, so updates are rotations
rather than additive steps. Each rule turns a batch of (input, prediction,
target) triples into a :class:`GradientFields` record; the record is
applied with :func:`apply_gradient_fields`:

    bias   <- G_bias^-1 . bias        (world frame, left multiplication)
    action <- action . G_action^-1    (local frame, right multiplication)

Gradients point in the direction that *increases* the error, so applying
their inverse is a descent step, in the same way as ``p <- p - lr * grad``.

Per-sample updates are aggregated by exponential-map summation: each
update is taken to the tangent space (rotation vector), the vectors are
summed (not averaged), and the sum is mapped back to the group.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Type

from core.linalg import LinearSolver3x3, SingularBasisError, decompose_error
from core.quaternion import ONE, Quaternion
from log import get_logger

logger = get_logger(__name__)

# Samples closer than this to their target carry no adaptive update
MIN_ERROR_DISTANCE = 1e-6


@dataclass(frozen=True)
class GradientFields:
    """Aggregated per-step updates.

    Attributes:
        bias_gradient (Quaternion): Aggregated bias update (world frame).
        action_gradient (Quaternion): Aggregated action update (local frame).
        residual_gradient (Quaternion): Share of the error attributed to the
            inputs. Inputs are data, so this is reported but never applied.
        num_samples (int): Batch size.
        num_skipped (int): Samples that contributed nothing.
    """

    bias_gradient: Quaternion
    action_gradient: Quaternion
    residual_gradient: Quaternion = ONE
    num_samples: int = 0
    num_skipped: int = 0


def exp_map_sum(updates: Sequence[Quaternion]) -> Quaternion:
    """Combines unit-quaternion updates by summing their rotation vectors.

    Args:
        updates: Unit quaternions.

    Returns:
        Quaternion: ``ONE`` for an empty batch, the update itself for a batch
        of one, otherwise ``from_rotation_vector(sum_i rv_i)``.
    """
    if len(updates) == 0:
        return ONE
    if len(updates) == 1:
        return updates[0]

    total = [0.0, 0.0, 0.0]
    for update in updates:
        rv = update.to_rotation_vector()
        for k in range(3):
            total[k] += rv[k]
    return Quaternion.from_rotation_vector(total)


def shortest_arc_target(predicted: Quaternion, target: Quaternion) -> Quaternion:
    """Returns whichever of ``target`` / ``-target`` is nearer on S^3.

    Both encode the same rotation; picking the nearer one keeps the error
    rotation consistent with the absolute-value geodesic distance.
    """
    return target.negate() if predicted.dot(target) < 0.0 else target


def fractional_coefficients(coefficients: Sequence[float]) -> Tuple[float, float, float]:
    """Normalizes ``|c|`` to shares that sum to one (all zero if ``c == 0``)."""
    magnitudes = [abs(c) for c in coefficients]
    total = sum(magnitudes)
    if total == 0.0 or not math.isfinite(total):
        return (0.0, 0.0, 0.0)
    return tuple(m / total for m in magnitudes)


def is_identity(q: Quaternion) -> bool:
    return q.w == 1.0 and q.is_scalar()


def apply_gradient_fields(
    bias: Quaternion, action: Quaternion, fields: GradientFields
) -> Tuple[Quaternion, Quaternion]:
    """Moves both weights against their aggregated gradients.

    Identity gradients leave the corresponding weight untouched. Updated
    weights are renormalized to stop floating-point drift accumulating.

    Returns:
        Tuple[Quaternion, Quaternion]: New ``(bias, action)``.
    """
    if not is_identity(fields.bias_gradient):
        bias = fields.bias_gradient.inverse().multiply(bias).normalize()
    if not is_identity(fields.action_gradient):
        action = action.multiply(fields.action_gradient.inverse()).normalize()
    return bias, action


class UpdateRule(ABC):
    """Strategy that computes :class:`GradientFields` for a batch.

    Attributes:
        learning_rate (float): Step scale, strictly positive.
    """

    name: str = ""
    default_learning_rate: float = 1.0
    # Single-weight rules keep ``action`` fixed at the identity
    single_weight: bool = False

    def __init__(self, learning_rate: Optional[float] = None):
        if learning_rate is None:
            learning_rate = self.default_learning_rate
        if not learning_rate > 0.0:
            raise ValueError(f"Invalid learning rate: {learning_rate}")
        self.learning_rate = float(learning_rate)

    @abstractmethod
    def compute_gradient_fields(
        self,
        bias: Quaternion,
        action: Quaternion,
        inputs: Sequence[Quaternion],
        predicted: Sequence[Quaternion],
        targets: Sequence[Quaternion],
    ) -> GradientFields:
        """Computes the aggregated gradients for one batch."""

    def __repr__(self):
        return f"{type(self).__name__}(learning_rate={self.learning_rate})"


class DecompositionUpdate(UpdateRule):
    """Attributes each sample's error to the weights by basis decomposition.

    For a sample with prediction ``P = bias . input . action`` and error
    ``E = P^-1 . target``, the error's tangent vector is written as

        v_E = c_bias v_bias + c_input v_input + c_action v_action

    (a 3x3 solve). The shares ``f = |c| / sum|c|`` split the error between
    the two weights and the input:

        bias update     P . conj(E)^(lr f_bias) . P^-1
        residual update conj(E)^(lr f_input)
        action update   conj(E)^(lr f_action)

    The bias update is the error share moved into the world frame, where
    the bias acts by left multiplication; the action acts in the local frame
    of ``P`` directly. Samples with a singular basis are skipped.

    Args:
        learning_rate (float, optional): Fraction of each share applied per
            step. Defaults to 0.1.
        solver (LinearSolver3x3, optional): Solver for the decomposition.
    """

    name = "decomposition"
    default_learning_rate = 0.1
    single_weight = False

    def __init__(self, learning_rate: Optional[float] = None, solver: Optional[LinearSolver3x3] = None):
        super().__init__(learning_rate)
        self.solver = solver or LinearSolver3x3()

    def compute_gradient_fields(self, bias, action, inputs, predicted, targets):
        bias_updates: List[Quaternion] = []
        residual_updates: List[Quaternion] = []
        action_updates: List[Quaternion] = []
        skipped = 0

        for i, (x, p, t) in enumerate(zip(inputs, predicted, targets)):
            t = shortest_arc_target(p, t)
            error = p.geodesic_rotation(t)

            try:
                coefficients = decompose_error(bias, x, action, error, self.solver)
            except SingularBasisError as exc:
                skipped += 1
                logger.debug("Skipping sample %d: %s", i, exc)
                continue

            f_bias, f_input, f_action = fractional_coefficients(coefficients)
            ascent = error.conjugate()
            lr = self.learning_rate

            bias_updates.append(
                p.multiply(ascent.pow(lr * f_bias)).multiply(p.conjugate()).normalize()
            )
            residual_updates.append(ascent.pow(lr * f_input).normalize())
            action_updates.append(ascent.pow(lr * f_action).normalize())

        return GradientFields(
            bias_gradient=exp_map_sum(bias_updates),
            action_gradient=exp_map_sum(action_updates),
            residual_gradient=exp_map_sum(residual_updates),
            num_samples=len(inputs),
            num_skipped=skipped,
        )


class AdaptiveUpdate(UpdateRule):
    """Single-rotation rule with a step scaled by each sample's error.

    For each sample the world-frame error ``E = target . P^-1`` is taken to
    the tangent space and weighted by ``lr * d(P, target)``, so far-off
    samples pull harder. The weighted vectors are summed, negated into a
    gradient and exponentiated. Samples already at their target
    (``d < 1e-6``) are skipped.

    Args:
        learning_rate (float, optional): Base rate. Defaults to 0.003.
    """

    name = "adaptive"
    default_learning_rate = 0.003
    single_weight = True

    def compute_gradient_fields(self, bias, action, inputs, predicted, targets):
        gradient_vector = [0.0, 0.0, 0.0]
        skipped = 0

        for p, t in zip(predicted, targets):
            rate = p.geodesic_distance(t)
            if rate < MIN_ERROR_DISTANCE:
                skipped += 1
                continue

            error = shortest_arc_target(p, t).multiply(p.inverse())
            v_error = error.log().vector
            scale = self.learning_rate * rate
            for k in range(3):
                gradient_vector[k] -= v_error[k] * scale

        return GradientFields(
            bias_gradient=Quaternion.from_rotation_vector(gradient_vector),
            action_gradient=ONE,
            residual_gradient=ONE,
            num_samples=len(inputs),
            num_skipped=skipped,
        )


UPDATE_RULES: Dict[str, Type[UpdateRule]] = {
    DecompositionUpdate.name: DecompositionUpdate,
    AdaptiveUpdate.name: AdaptiveUpdate,
}


def build_update_rule(name: str, learning_rate: Optional[float] = None) -> UpdateRule:
    """Instantiates an update rule by name.

    Raises:
        ValueError: For an unknown rule name or a non-positive learning rate.
    """
    if name not in UPDATE_RULES:
        raise ValueError(f"Unknown update rule: {name}. Available: {list(UPDATE_RULES.keys())}")
    return UPDATE_RULES[name](learning_rate=learning_rate)
