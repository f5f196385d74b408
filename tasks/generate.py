# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

from omegaconf import DictConfig

from log import get_logger
from tasks.xor import generate_dataset

logger = get_logger(__name__)


class GenerateTask:
    """Generates an XOR dataset and writes it to ``dataset.output_path``.

    No model is involved, so this task skips the training lifecycle.
    """

    def __init__(self, cfg: DictConfig):
        self.cfg = cfg
        self.output_path = cfg.dataset.get('output_path', None)
        if not self.output_path:
            raise ValueError("dataset.output_path must be set for the generate task")
        self.precision = cfg.dataset.get('precision', None)

    def run(self):
        logger.info("Starting Task: %s", self.cfg.name)
        dataset = generate_dataset(self.cfg.dataset)
        dataset.to_csv(self.output_path, precision=self.precision)
        return dataset
