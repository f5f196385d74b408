# QPerceptron: Quaternion Rotation Perceptron (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Argument validation for perceptron inputs.

Unlike tensor shape checks these guard a public contract, so they raise
``ValueError`` unconditionally instead of using ``assert``.
"""

import numbers
from typing import List, Sequence

from core.quaternion import Quaternion


def check_quaternion(q, name: str = "q") -> Quaternion:
    """Raise unless *q* is a :class:`Quaternion`."""
    if q is None:
        raise ValueError(f"{name}: quaternion cannot be None")
    if not isinstance(q, Quaternion):
        raise ValueError(f"{name}: expected Quaternion, got {type(q).__name__}")
    return q


def check_unit(q, name: str = "q") -> Quaternion:
    """Raise unless *q* is a unit quaternion."""
    check_quaternion(q, name)
    if not q.is_unit():
        raise ValueError(f"{name}: expected a unit quaternion, got norm {q.norm():.12f}")
    return q


def check_label(label, name: str = "label") -> int:
    """Raise unless *label* is the integer ``0`` or ``1``.

    Booleans and floats such as ``1.0`` are rejected.
    """
    if isinstance(label, bool) or not isinstance(label, numbers.Integral) or label not in (0, 1):
        raise ValueError(f"{name}: label must be 0 or 1, got {label!r}")
    return int(label)


def check_batch(inputs: Sequence, labels: Sequence) -> List[int]:
    """Validate a whole batch before anything is mutated.

    Returns:
        List[int]: Labels as plain ints.
    """
    if inputs is None or labels is None:
        raise ValueError("Inputs and labels cannot be None")
    if len(inputs) != len(labels):
        raise ValueError(
            f"Input and label sequences must have the same length, got {len(inputs)} and {len(labels)}"
        )
    for i, q in enumerate(inputs):
        check_unit(q, f"inputs[{i}]")
    return [check_label(label, f"labels[{i}]") for i, label in enumerate(labels)]
