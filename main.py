# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""QPerceptron CLI Entry Point.

Dispatches the training and dataset generation tasks.

    python main.py name=train model.update_rule=adaptive
    python main.py name=generate dataset.kind=fuzzy dataset.output_path=data/fuzzy.csv
"""

import hydra
from omegaconf import DictConfig
from log import set_level
from tasks.xor import XorTask
from tasks.generate import GenerateTask

TASK_MAP = {
    'train': XorTask,
    'generate': GenerateTask,
}

@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig):
    """Delegates to the task named by ``cfg.name``.

    Args:
        cfg (DictConfig): The plan.
    """
    set_level(cfg.get('log_level', None))
    task_name = cfg.name

    if task_name not in TASK_MAP:
        raise ValueError(f"Unknown task: {task_name}. Available: {list(TASK_MAP.keys())}")

    TaskClass = TASK_MAP[task_name]
    task = TaskClass(cfg)
    task.run()

if __name__ == "__main__":
    main()
