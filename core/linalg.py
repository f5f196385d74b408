# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Dense 3x3 linear solves for rotation-vector bases.

The perceptron expresses an error rotation vector as a combination of three
basis rotation vectors (bias, input, action). When those three vectors are
coplanar, or one of them vanishes, no such combination exists; that case is
reported as :class:`SingularBasisError` so the caller can drop the sample.
"""

import torch
from typing import Sequence, Tuple

from core.quaternion import Quaternion


class SingularBasisError(ArithmeticError):
    """Raised when a 3x3 basis is (numerically) rank deficient."""


class LinearSolver3x3:
    """LU solver for ``A x = b`` with a scale-free singularity test.

    The basis is rejected when ``|det A| <= tol * prod_i ||A_i||``. By
    Hadamard's inequality the ratio lies in ``[0, 1]`` and measures how far
    the rows are from being linearly dependent, independent of their length.

    Attributes:
        tol (float): Relative determinant threshold.
        dtype (torch.dtype): Working precision.
    """

    def __init__(self, tol: float = 1e-10, dtype: torch.dtype = torch.float64):
        if tol < 0.0:
            raise ValueError(f"Invalid tolerance: {tol}")
        self.tol = tol
        self.dtype = dtype

    def _as_tensor(self, values, shape: Tuple[int, ...], name: str) -> torch.Tensor:
        t = torch.as_tensor(values, dtype=self.dtype)
        if tuple(t.shape) != shape:
            raise ValueError(f"{name}: expected shape {shape}, got {tuple(t.shape)}")
        if not torch.isfinite(t).all():
            raise ValueError(f"{name}: entries must be finite")
        return t

    def solve(self, matrix, rhs) -> Tuple[float, float, float]:
        """Solves ``matrix @ x = rhs``.

        Args:
            matrix: 3x3 nested sequence or tensor.
            rhs: Length-3 sequence or tensor.

        Returns:
            Tuple[float, float, float]: The solution ``x``.

        Raises:
            ValueError: On wrong shapes or non-finite entries.
            SingularBasisError: If ``matrix`` is (near-)singular.
        """
        A = self._as_tensor(matrix, (3, 3), "matrix")
        b = self._as_tensor(rhs, (3,), "rhs")

        row_norms = A.norm(dim=-1)
        scale = row_norms.prod()
        if scale.item() == 0.0:
            raise SingularBasisError("Basis contains a zero vector")

        det = torch.linalg.det(A)
        if det.abs().item() <= self.tol * scale.item():
            raise SingularBasisError(
                f"Basis is singular (|det| = {det.abs().item():.3e}, scale = {scale.item():.3e})"
            )

        LU, pivots = torch.linalg.lu_factor(A)
        x = torch.linalg.lu_solve(LU, pivots, b.unsqueeze(-1)).squeeze(-1)
        if not torch.isfinite(x).all():
            raise SingularBasisError("Solution is not finite")
        return tuple(x.tolist())


def decompose_error(
    bias: Quaternion,
    input: Quaternion,
    action: Quaternion,
    error: Quaternion,
    solver: LinearSolver3x3 = None,
) -> Tuple[float, float, float]:
    """Coefficients ``c`` with ``c_b v_b + c_i v_i + c_a v_a = v_e``.

    Each ``v`` is the tangent-space vector ``q.log().vector``. The three basis
    vectors are stacked as columns so that ``A c = v_e``.

    Args:
        bias (Quaternion): Bias weight.
        input (Quaternion): Sample input.
        action (Quaternion): Action weight.
        error (Quaternion): Error rotation for the sample.
        solver (LinearSolver3x3, optional): Solver to use.

    Returns:
        Tuple[float, float, float]: ``(c_bias, c_input, c_action)``.

    Raises:
        SingularBasisError: If the three basis vectors are linearly dependent.
    """
    solver = solver or LinearSolver3x3()
    basis = torch.tensor(
        [bias.log().vector, input.log().vector, action.log().vector],
        dtype=solver.dtype,
    )
    return solver.solve(basis.T, error.log().vector)


def reconstruct_error_vector(
    coefficients: Sequence[float], basis_vectors: Sequence[Sequence[float]]
) -> Tuple[float, float, float]:
    """Linear combination ``sum_k c_k v_k`` of three 3-vectors."""
    c = torch.as_tensor(coefficients, dtype=torch.float64)
    V = torch.as_tensor(basis_vectors, dtype=torch.float64)
    return tuple((c.unsqueeze(-1) * V).sum(dim=0).tolist())
