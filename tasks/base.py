# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

from abc import ABC, abstractmethod
from tqdm import tqdm
from omegaconf import DictConfig
from log import format_metrics, get_logger

logger = get_logger(__name__)

class BaseTask(ABC):
    """Abstract base class for training tasks.

    Lifecycle: setup_model → get_data → train → evaluate → visualize.

    Attributes:
        cfg (DictConfig): Hydra configuration.
        model: The model being trained.
        epochs (int): Number of training epochs.
        log_every (int): Epoch interval for progress log lines (0 disables).
    """

    def __init__(self, cfg: DictConfig):
        """Sets up the task.

        Args:
            cfg (DictConfig): Hydra config.
        """
        self.cfg = cfg
        self.model = self.setup_model()
        self.epochs = cfg.training.epochs
        self.log_every = cfg.training.get('log_every', 0) or 0
        if self.epochs < 0:
            raise ValueError(f"training.epochs must be non-negative, got {self.epochs}")

    @abstractmethod
    def setup_model(self):
        """Construct the model."""
        pass

    @abstractmethod
    def get_data(self):
        """Load and return the dataset."""
        pass

    @abstractmethod
    def train_step(self, data):
        """One epoch of optimization. Returns ``(loss, logs)``."""
        pass

    @abstractmethod
    def evaluate(self, data):
        """Evaluate the model and return metrics."""
        pass

    @abstractmethod
    def visualize(self, data):
        """Report the trained model."""
        pass

    def run(self):
        """Execute the full training loop.

        Returns:
            The metrics returned by :meth:`evaluate`.
        """
        logger.info("Starting Task: %s", self.cfg.name)
        data = self.get_data()

        pbar = tqdm(range(self.epochs))
        for epoch in pbar:
            _, logs = self.train_step(data)

            desc = format_metrics(logs)
            pbar.set_description(desc)
            if self.log_every and (epoch + 1) % self.log_every == 0:
                logger.info("Epoch %d/%d | %s", epoch + 1, self.epochs, desc)

        logger.info("Training Complete.")

        metrics = self.evaluate(data)
        self.visualize(data)
        return metrics
