# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Batch metrics for quaternion classifiers."""

from typing import Dict, Sequence

from core.quaternion import Quaternion
from core.validation import check_batch
from models.perceptron import label_to_target


def geodesic_errors(model, inputs: Sequence[Quaternion], labels: Sequence[int]) -> list:
    """Per-sample geodesic distance between prediction and target."""
    labels = check_batch(inputs, labels)
    return [
        model.forward(x).geodesic_distance(label_to_target(label))
        for x, label in zip(inputs, labels)
    ]


def mean_geodesic_error(model, inputs: Sequence[Quaternion], labels: Sequence[int]) -> float:
    """Mean geodesic error in radians; 0.0 for an empty batch."""
    errors = geodesic_errors(model, inputs, labels)
    if not errors:
        return 0.0
    return sum(errors) / len(errors)


def accuracy(model, inputs: Sequence[Quaternion], labels: Sequence[int]) -> float:
    """Fraction of samples classified correctly; 0.0 for an empty batch."""
    labels = check_batch(inputs, labels)
    if not labels:
        return 0.0
    correct = sum(1 for x, label in zip(inputs, labels) if model.classify(x) == label)
    return correct / len(labels)


def evaluate_batch(model, inputs: Sequence[Quaternion], labels: Sequence[int]) -> Dict[str, float]:
    """Accuracy and mean geodesic error in one dict (for progress logs)."""
    return {
        'Acc': accuracy(model, inputs, labels),
        'GeoErr': mean_geodesic_error(model, inputs, labels),
    }
