# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

import numpy as np
from omegaconf import OmegaConf

from datasets.xor import XorDataset
from functional.loss import evaluate_batch
from log import get_logger
from models.perceptron import QuaternionPerceptron
from tasks.base import BaseTask

logger = get_logger(__name__)


def build_dataset(dataset_cfg) -> XorDataset:
    """Loads ``dataset.path`` when set, otherwise generates XOR data."""
    path = dataset_cfg.get('path', None)
    if path:
        dataset = XorDataset.from_csv(path)
        logger.info("Loaded %d points (%dD) from %s", len(dataset), dataset.num_dimensions, path)
        return dataset
    return generate_dataset(dataset_cfg)


def generate_dataset(dataset_cfg) -> XorDataset:
    """Generates ``exact`` or ``fuzzy`` XOR data from the ``dataset`` keys."""
    kind = dataset_cfg.get('kind', 'exact')
    num_dimensions = dataset_cfg.get('num_dimensions', 2)
    if kind == 'exact':
        dataset = XorDataset.exact(num_dimensions)
    elif kind == 'fuzzy':
        variance = dataset_cfg.get('variance', 0.01)
        if OmegaConf.is_list(variance):
            variance = list(variance)
        dataset = XorDataset.fuzzy(
            num_dimensions,
            cardinality=dataset_cfg.get('cardinality', 50),
            variance=variance,
            seed=dataset_cfg.get('seed', None),
        )
    else:
        raise ValueError(f"Unknown dataset kind: {kind}. Available: ['exact', 'fuzzy']")
    logger.info("Generated %d %s XOR points (%dD)", len(dataset), kind, num_dimensions)
    return dataset


class XorTask(BaseTask):
    """Trains a quaternion perceptron on XOR (parity) data.

    Every epoch optionally shuffles the points, encodes them as unit
    quaternions and applies one :meth:`QuaternionPerceptron.step` per
    batch (the whole dataset when ``training.batch_size`` is unset).
    """

    def __init__(self, cfg):
        self.encoding = cfg.dataset.get('encoding', 'phase')
        self.batch_size = cfg.training.get('batch_size', None)
        if self.batch_size is not None and self.batch_size <= 0:
            raise ValueError(f"training.batch_size must be positive, got {self.batch_size}")
        self.shuffle = cfg.training.get('shuffle', False)
        super().__init__(cfg)
        self._rng = np.random.default_rng(self.model.seed)

    def setup_model(self):
        model = QuaternionPerceptron(
            seed=self.cfg.model.get('seed', None),
            update_rule=self.cfg.model.get('update_rule', 'decomposition'),
            learning_rate=self.cfg.model.get('learning_rate', None),
        )
        logger.info("Model: %r (seed=%d)", model, model.seed)
        return model

    def get_data(self):
        return build_dataset(self.cfg.dataset)

    def _encode(self, dataset):
        kwargs = {}
        if self.encoding == 'phase' and self.cfg.dataset.get('axis', None) is not None:
            kwargs['axis'] = tuple(self.cfg.dataset.axis)
        elif self.encoding == 'pure' and self.cfg.dataset.get('offset', None) is not None:
            kwargs['offset'] = float(self.cfg.dataset.offset)
        return dataset.encode(self.encoding, **kwargs)

    def train_step(self, dataset):
        if self.shuffle:
            dataset.shuffle(int(self._rng.integers(2 ** 31)))
        inputs, labels = self._encode(dataset)

        batch_size = self.batch_size or max(len(inputs), 1)
        skipped = 0
        for start in range(0, len(inputs), batch_size):
            fields = self.model.step(inputs[start:start + batch_size], labels[start:start + batch_size])
            skipped += fields.num_skipped

        logs = evaluate_batch(self.model, inputs, labels)
        logs['Skip'] = skipped
        return logs['GeoErr'], logs

    def evaluate(self, dataset):
        inputs, labels = self._encode(dataset)
        metrics = evaluate_batch(self.model, inputs, labels)
        logger.info("Accuracy: %.4f | Mean geodesic error: %.4f rad", metrics['Acc'], metrics['GeoErr'])
        return metrics

    def visualize(self, dataset):
        if self.model.update_rule.single_weight:
            logger.info("Rotation: %r", self.model.rotation)
        else:
            logger.info("Bias:   %r", self.model.bias)
            logger.info("Action: %r", self.model.action)

        inputs, labels = self._encode(dataset)
        for label in (0, 1):
            members = [x for x, y in zip(inputs, labels) if y == label]
            if not members:
                continue
            correct = sum(1 for x in members if self.model.classify(x) == label)
            logger.info("Label %d: %d/%d correct", label, correct, len(members))
