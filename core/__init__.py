# QPerceptron: Quaternion Rotation Perceptron (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Core mathematical kernel for quaternion rotations.

Provides the quaternion value type with its exponential/logarithm maps,
the 3x3 basis solver used to decompose rotation errors, and argument
validation.
"""

from .quaternion import (
    Quaternion,
    QuaternionDomainError,
    ZERO,
    ONE,
    I,
    J,
    K,
)
from .linalg import (
    LinearSolver3x3,
    SingularBasisError,
    decompose_error,
    reconstruct_error_vector,
)
from .validation import check_quaternion, check_unit, check_label, check_batch

__all__ = [
    # quaternion
    "Quaternion",
    "QuaternionDomainError",
    "ZERO",
    "ONE",
    "I",
    "J",
    "K",
    # linalg
    "LinearSolver3x3",
    "SingularBasisError",
    "decompose_error",
    "reconstruct_error_vector",
    # validation
    "check_quaternion",
    "check_unit",
    "check_label",
    "check_batch",
]
