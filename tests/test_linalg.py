"""Tests for the 3x3 basis solver and error decomposition in core/linalg.py."""

import math
import pytest
import torch
from core.quaternion import Quaternion, ONE
from core.linalg import (
    LinearSolver3x3,
    SingularBasisError,
    decompose_error,
    reconstruct_error_vector,
)


@pytest.fixture
def solver():
    return LinearSolver3x3()


@pytest.fixture
def weights():
    """Bias, input and action with linearly independent log vectors."""
    bias = Quaternion.from_axis_angle(0.4, (1.0, 0.2, 0.0))
    input = Quaternion.from_axis_angle(1.1, (0.0, 1.0, 0.3))
    action = Quaternion.from_axis_angle(0.7, (0.1, 0.0, 1.0))
    return bias, input, action


class TestLinearSolver:

    def test_identity(self, solver):
        x = solver.solve(torch.eye(3), [1.0, 2.0, 3.0])
        assert x == pytest.approx((1.0, 2.0, 3.0))

    def test_general_system(self, solver):
        A = [[2.0, 1.0, 0.0], [1.0, 3.0, 1.0], [0.0, 1.0, 4.0]]
        b = [1.0, -2.0, 5.0]
        x = solver.solve(A, b)
        residual = torch.tensor(A, dtype=torch.float64) @ torch.tensor(x, dtype=torch.float64)
        assert torch.allclose(residual, torch.tensor(b, dtype=torch.float64), atol=1e-12)

    def test_returns_tuple_of_floats(self, solver):
        x = solver.solve(torch.eye(3), [0.0, 0.0, 1.0])
        assert isinstance(x, tuple) and len(x) == 3

    def test_scale_invariant_singularity(self, solver):
        # Tiny but well-conditioned rows are accepted
        x = solver.solve(torch.eye(3) * 1e-6, [1e-6, 0.0, 0.0])
        assert x == pytest.approx((1.0, 0.0, 0.0))

    def test_dependent_rows_rejected(self, solver):
        A = [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [1.0, 1.0, 0.0]]
        with pytest.raises(SingularBasisError):
            solver.solve(A, [1.0, 1.0, 1.0])

    def test_zero_row_rejected(self, solver):
        A = [[0.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]
        with pytest.raises(SingularBasisError):
            solver.solve(A, [1.0, 1.0, 1.0])

    def test_bad_shapes(self, solver):
        with pytest.raises(ValueError):
            solver.solve(torch.eye(2), [1.0, 2.0])
        with pytest.raises(ValueError):
            solver.solve(torch.eye(3), [1.0, 2.0])

    def test_non_finite_rejected(self, solver):
        with pytest.raises(ValueError):
            solver.solve(torch.eye(3), [math.nan, 0.0, 0.0])

    def test_negative_tolerance(self):
        with pytest.raises(ValueError):
            LinearSolver3x3(tol=-1.0)

    def test_singular_is_arithmetic_error(self):
        assert issubclass(SingularBasisError, ArithmeticError)


class TestDecomposeError:

    def test_reconstruction_matches_error(self, weights):
        bias, input, action = weights
        error = Quaternion.from_axis_angle(0.9, (1.0, -1.0, 2.0))
        c = decompose_error(bias, input, action, error)
        basis = [bias.log().vector, input.log().vector, action.log().vector]
        rebuilt = reconstruct_error_vector(c, basis)
        assert rebuilt == pytest.approx(error.log().vector, abs=1e-6)

    def test_single_basis_direction(self, weights):
        bias, input, action = weights
        # Error along the bias axis is attributed to the bias only
        error = bias.pow(2.0)
        c = decompose_error(bias, input, action, error)
        assert c == pytest.approx((2.0, 0.0, 0.0), abs=1e-9)

    def test_identity_input_is_singular(self, weights):
        bias, _, action = weights
        with pytest.raises(SingularBasisError):
            decompose_error(bias, ONE, action, Quaternion.from_axis_angle(0.5, (0, 0, 1)))

    def test_coplanar_basis_is_singular(self):
        bias = Quaternion.from_axis_angle(0.5, (1, 0, 0))
        input = Quaternion.from_axis_angle(0.5, (0, 1, 0))
        action = Quaternion.from_axis_angle(0.5, (1, 1, 0))
        with pytest.raises(SingularBasisError):
            decompose_error(bias, input, action, Quaternion.from_axis_angle(0.2, (0, 0, 1)))

    def test_custom_solver_used(self, weights):
        bias, input, action = weights
        strict = LinearSolver3x3(tol=0.999)
        with pytest.raises(SingularBasisError):
            decompose_error(bias, input, action, ONE, solver=strict)
