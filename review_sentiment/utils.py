"""
Utility functions for the review sentiment demo.

Includes logging setup, configuration loading, reproducibility helpers
and device selection for the local pipeline.
"""

import copy
import logging
import os
import random
import sys
from pathlib import Path
from typing import Any

import numpy as np
import torch
import yaml


LOGGER_NAME = "review_sentiment"

DEFAULT_MODEL = "distilbert-base-uncased-finetuned-sst-2-english"

DEFAULT_CONFIG: dict[str, Any] = {
    "data": {
        "path": "reviews_test.tsv",
        "text_column": "text",
        "min_length": 0,
        "timeout": None,
    },
    "classifier": {
        "type": "local",
        "model": DEFAULT_MODEL,
        "api_url": "https://router.huggingface.co/hf-inference/models",
        "timeout": None,
        "device": "auto",
    },
    "usage_log": {
        "enabled": True,
        "url": None,
        "body_format": "json",
        "timeout": 10,
    },
    "storage": {
        "path": None,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
    "random_seed": None,
}


def setup_logging(
    log_level: str = "INFO",
    log_file: str | None = None,
    log_format: str | None = None,
) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        log_format: Optional custom log format

    Returns:
        Configured logger instance
    """
    if log_format is None:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper()))

    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    console_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, log_level.upper()))
        file_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_handler)

    return logger


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge ``override`` on top of ``base``.

    Neither input is modified.
    """
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: str | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file on top of the built-in defaults.

    Args:
        config_path: Path to YAML configuration file, or None for defaults only

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return merge_config(DEFAULT_CONFIG, config)


def set_seed(seed: int) -> random.Random:
    """
    Set random seed for reproducibility.

    Args:
        seed: Random seed value

    Returns:
        A ``random.Random`` instance seeded with ``seed`` for review picking
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)

    os.environ["PYTHONHASHSEED"] = str(seed)

    return random.Random(seed)


def get_device(device: str = "auto") -> int:
    """
    Resolve a device setting to a ``transformers`` pipeline device index.

    Args:
        device: 'auto', 'cpu', 'cuda' or 'cuda:N'

    Returns:
        -1 for CPU, otherwise the CUDA device index
    """
    device = (device or "auto").lower()

    if device == "cpu":
        return -1

    if not torch.cuda.is_available():
        return -1

    if device.startswith("cuda:"):
        return int(device.split(":", 1)[1])

    return 0


def ensure_dir(dir_path: str | Path) -> Path:
    """
    Ensure directory exists, create if necessary.

    Args:
        dir_path: Directory path

    Returns:
        Path object
    """
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return path
