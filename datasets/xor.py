# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""XOR (parity) datasets on the hypercube and their quaternion encodings.

Two generators:

- exact: the ``2^N`` vertices of the unit hypercube, labelled by the parity
  of their ones.
- fuzzy: a Gaussian cloud of points around every vertex, carrying the
  vertex label.

Points are stored as plain coordinates; an encoder turns them into unit
quaternions for the perceptron.
"""

import math
import os
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from torch.utils.data import Dataset

from core.quaternion import ONE, Quaternion
from core.validation import check_label
from log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DataPoint:
    """A labelled point.

    Attributes:
        coordinates (Tuple[float, ...]): Non-empty coordinates.
        label (int): 0 or 1.
    """

    coordinates: Tuple[float, ...]
    label: int

    def __post_init__(self):
        if self.coordinates is None or len(self.coordinates) == 0:
            raise ValueError("Coordinates cannot be None or empty")
        object.__setattr__(self, "coordinates", tuple(float(c) for c in self.coordinates))
        object.__setattr__(self, "label", check_label(self.label))

    @property
    def num_dimensions(self) -> int:
        return len(self.coordinates)


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def exact_xor(num_dimensions: int) -> List[DataPoint]:
    """All hypercube vertices; bit ``d`` of vertex ``i`` is coordinate ``d``."""
    if num_dimensions < 0:
        raise ValueError(f"Number of dimensions must be non-negative, got: {num_dimensions}")
    points = []
    for i in range(1 << num_dimensions):
        coords = [float((i >> d) & 1) for d in range(num_dimensions)]
        points.append(DataPoint(tuple(coords), int(sum(coords)) % 2))
    return points


def fuzzy_xor(
    num_dimensions: int,
    cardinality: int,
    variance: Union[float, Sequence[float]],
    seed: Optional[int] = None,
) -> List[DataPoint]:
    """Gaussian blobs ``N(vertex, variance)`` around each hypercube vertex.

    Args:
        num_dimensions (int): Hypercube dimension.
        cardinality (int): Points per vertex, positive.
        variance (float | Sequence[float]): Per-coordinate variance; a scalar
            applies to every coordinate.
        seed (int, optional): Seed for ``numpy.random.default_rng``.

    Returns:
        List[DataPoint]: ``2^N * cardinality`` points, vertex by vertex.
    """
    if cardinality <= 0:
        raise ValueError(f"Blob cardinality must be a positive integer; got {cardinality}")
    if variance is None:
        raise ValueError("Blob variance must not be None")
    if np.isscalar(variance):
        variance = [variance] * num_dimensions
    variance = np.asarray(variance, dtype=np.float64)
    if variance.size == 0:
        raise ValueError("Blob variance must not be empty")
    if (variance < 0).any():
        raise ValueError(f"Blob variance must be non-negative; got {variance.tolist()}")
    if variance.shape != (num_dimensions,):
        raise ValueError(
            f"Dimensionality of mean and variance must be equal; "
            f"got dim(mean) = {num_dimensions} and dim(variance) = {variance.size}"
        )

    rng = np.random.default_rng(seed)
    std = np.sqrt(variance)
    points = []
    for vertex in exact_xor(num_dimensions):
        cloud = rng.normal(loc=vertex.coordinates, scale=std, size=(cardinality, num_dimensions))
        points.extend(DataPoint(tuple(row), vertex.label) for row in cloud.tolist())
    return points


# ---------------------------------------------------------------------------
# Encoders
# ---------------------------------------------------------------------------

def encode_phase(coordinates: Sequence[float], axis: Sequence[float] = (1.0, 0.0, 0.0)) -> Quaternion:
    """Composes a rotation of ``pi * c`` about *axis* per coordinate.

    Two half turns make a full turn (``-1``, the identity rotation), so
    parity is carried by the composed rotation: even vertices map to
    ``+-1`` and odd ones to a half turn about *axis*.
    """
    q = ONE
    for c in coordinates:
        q = q.multiply(Quaternion.from_axis_angle(math.pi * c, axis))
    return q.normalize()


def encode_pure(coordinates: Sequence[float], offset: float = 0.5) -> Quaternion:
    """Vector quaternion ``(0, x, y, offset)`` from the first two coordinates.

    Zero coordinates become ``-1`` so every vertex gets a distinct direction.
    """
    if len(coordinates) < 2:
        raise ValueError(f"Pure encoding needs at least 2 coordinates, got {len(coordinates)}")
    x, y = coordinates[0], coordinates[1]
    x = -1.0 if abs(x) < 1e-10 else x
    y = -1.0 if abs(y) < 1e-10 else y
    return Quaternion(0.0, x, y, offset).normalize()


ENCODERS: Dict[str, Callable[..., Quaternion]] = {
    'phase': encode_phase,
    'pure': encode_pure,
}


# ---------------------------------------------------------------------------
# Dataset
# ---------------------------------------------------------------------------

class XorDataset(Dataset):
    """Container of :class:`DataPoint` with CSV import/export.

    CSV rows hold the coordinates followed by the integer label, without a
    header.

    Args:
        points (Sequence[DataPoint], optional): Initial points.
        num_dimensions (int): Coordinate dimension, positive.
    """

    def __init__(self, points: Optional[Sequence[DataPoint]] = None, num_dimensions: int = 2):
        if num_dimensions <= 0:
            raise ValueError("Number of dimensions must be a positive integer")
        self.num_dimensions = num_dimensions
        self.points: List[DataPoint] = list(points) if points is not None else []

    @classmethod
    def exact(cls, num_dimensions: int) -> "XorDataset":
        return cls(exact_xor(num_dimensions), num_dimensions)

    @classmethod
    def fuzzy(cls, num_dimensions: int, cardinality: int, variance, seed: Optional[int] = None) -> "XorDataset":
        return cls(fuzzy_xor(num_dimensions, cardinality, variance, seed), num_dimensions)

    def __len__(self):
        return len(self.points)

    def __getitem__(self, idx):
        return self.points[idx]

    def __iter__(self):
        return iter(self.points)

    def is_empty(self) -> bool:
        return not self.points

    def shuffle(self, seed: Optional[int] = None) -> None:
        """Shuffles the points in place."""
        order = np.random.default_rng(seed).permutation(len(self.points))
        self.points = [self.points[i] for i in order]

    def encode(self, encoding: str = 'phase', **kwargs) -> Tuple[List[Quaternion], List[int]]:
        """Encodes every point as a unit quaternion.

        Args:
            encoding (str): ``'phase'`` or ``'pure'``.
            **kwargs: Passed to the encoder (``axis`` / ``offset``).

        Returns:
            Tuple[List[Quaternion], List[int]]: Inputs and labels.
        """
        if encoding not in ENCODERS:
            raise ValueError(f"Unknown encoding: {encoding}. Available: {list(ENCODERS.keys())}")
        encoder = ENCODERS[encoding]
        inputs = [encoder(p.coordinates, **kwargs) for p in self.points]
        labels = [p.label for p in self.points]
        return inputs, labels

    # ------------------------------------------------------------------
    # CSV
    # ------------------------------------------------------------------

    def to_csv(self, path: str, precision: Optional[int] = None) -> None:
        """Writes the dataset as CSV, creating parent directories.

        Args:
            path (str): Output path.
            precision (int, optional): Fixed decimals for coordinates; full
                precision when ``None``.
        """
        if self.is_empty():
            raise ValueError("Cannot export empty dataset")
        coord_fmt = "%.17g" if precision is None else f"%.{int(precision)}f"
        rows = np.array(
            [list(p.coordinates) + [p.label] for p in self.points], dtype=np.float64
        )
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
        np.savetxt(path, rows, delimiter=",", fmt=[coord_fmt] * self.num_dimensions + ["%d"])
        logger.info("Wrote %d points to %s", len(self), path)

    @classmethod
    def from_csv(cls, path: str) -> "XorDataset":
        """Reads a dataset written by :meth:`to_csv`.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file is empty or a label is not 0/1.
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"File does not exist {path}")
        if os.path.getsize(path) == 0:
            raise ValueError("CSV file is empty")

        table = np.loadtxt(path, delimiter=",", ndmin=2, dtype=np.float64)
        if table.shape[1] < 2:
            raise ValueError(f"CSV rows need at least one coordinate and a label, got {table.shape[1]} columns")

        points = []
        for row in table:
            label = float(row[-1])
            if not label.is_integer():
                raise ValueError(f"Label must be an integer, got {label}")
            points.append(DataPoint(tuple(row[:-1].tolist()), int(label)))
        return cls(points, table.shape[1] - 1)
