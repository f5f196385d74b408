"""Tasks for the QPerceptron CLI.

Each task inherits from :class:`BaseTask` and implements the lifecycle:
setup_model, get_data, train_step, evaluate, visualize.
"""

from .base import BaseTask
from .xor import XorTask
from .generate import GenerateTask

__all__ = [
    "BaseTask",
    "XorTask",
    "GenerateTask",
]
