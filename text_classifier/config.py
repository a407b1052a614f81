"""
Configuration for the text classification app.

This file defines default asset paths and settings for the classifier.
Tensor shapes depend on the model, so they can be overridden per model with a
JSON file loaded through ``load_config``.
"""

import json
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from .errors import LoadError

# Project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Asset paths
ASSET_PATHS = {
    'model': os.path.join(PROJECT_ROOT, 'assets', 'text_classification.tflite'),
    'vocab': os.path.join(PROJECT_ROOT, 'assets', 'vocab.txt'),
}

# Model input/output shapes
MAX_LENGTH = 256
NUM_CLASSES = 2

# Device for TorchScript models: 'cuda', 'cpu', or None for automatic detection
DEVICE = None

MODEL_CONFIG = {
    'task_name': 'Binary Sentiment Classification',
    'labels': ['Negative', 'Positive'],
}

# Output formatting
OUTPUT_FORMAT = {
    'decimal_places': 2,  # for percentages
    'show_probabilities': False,
}


@dataclass
class ClassifierConfig:
    """Paths and shapes for one classifier."""

    model_path: str = ASSET_PATHS['model']
    vocab_path: str = ASSET_PATHS['vocab']
    model_type: Optional[str] = None  # 'tflite' or 'torchscript'; None infers from suffix
    max_length: int = MAX_LENGTH
    num_classes: int = NUM_CLASSES
    labels: List[str] = field(default_factory=lambda: list(MODEL_CONFIG['labels']))
    device: Optional[str] = DEVICE

    def __post_init__(self):
        if self.max_length <= 0:
            raise ValueError(f"max_length must be positive, got {self.max_length}")
        if self.num_classes <= 0:
            raise ValueError(f"num_classes must be positive, got {self.num_classes}")
        if self.labels and len(self.labels) != self.num_classes:
            raise ValueError(f"Expected {self.num_classes} labels, got {len(self.labels)}")

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config(path: str) -> ClassifierConfig:
    """
    Load a classifier configuration from a JSON file.

    Relative model and vocabulary paths are resolved against the directory
    containing the configuration file.

    Raises:
        LoadError: If the file cannot be read or is not valid JSON
        ValueError: If the file contains unknown keys or invalid values
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise LoadError(f"Cannot read configuration {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise LoadError(f"Configuration {path} must contain a JSON object")

    known = {f.name for f in fields(ClassifierConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}. "
                         f"Available keys: {sorted(known)}")

    base_dir = os.path.dirname(os.path.abspath(path))
    for key in ('model_path', 'vocab_path'):
        if key in data and not os.path.isabs(data[key]):
            data[key] = os.path.join(base_dir, data[key])

    return ClassifierConfig(**data)


def get_asset_path(asset_key: str) -> str:
    """
    Get the path to a bundled asset.

    Args:
        asset_key: One of 'model', 'vocab'

    Returns:
        Path to the asset

    Raises:
        KeyError: If asset_key is not recognized
        FileNotFoundError: If the asset file doesn't exist
    """
    if asset_key not in ASSET_PATHS:
        raise KeyError(f"Unknown asset key: {asset_key}. "
                       f"Available keys: {list(ASSET_PATHS.keys())}")

    path = ASSET_PATHS[asset_key]

    if not os.path.exists(path):
        raise FileNotFoundError(f"Asset not found: {path}")

    return path


def check_assets_available() -> dict:
    """
    Check which bundled assets are available.

    Returns:
        Dictionary mapping asset keys to availability status
    """
    return {
        key: os.path.exists(path)
        for key, path in ASSET_PATHS.items()
    }


def print_config():
    """Print the current configuration."""
    print("="*70)
    print("TEXT CLASSIFICATION APP - CONFIGURATION")
    print("="*70)

    print("\n📁 Project Root:")
    print(f"   {PROJECT_ROOT}")

    print("\n📦 Assets:")
    for key, path in ASSET_PATHS.items():
        exists = "✓" if os.path.exists(path) else "✗"
        print(f"   {exists} {key:10} {path}")

    print(f"\n🏷️  Task: {MODEL_CONFIG['task_name']}")
    print(f"📏 Max Length: {MAX_LENGTH}")
    print(f"🔢 Classes: {NUM_CLASSES} ({', '.join(MODEL_CONFIG['labels'])})")
    print(f"💻 Device: {DEVICE if DEVICE else 'Auto-detect'}")

    print("="*70)


if __name__ == '__main__':
    print_config()

    print("\n🔍 Checking asset availability...")
    availability = check_assets_available()

    missing = [key for key, available in availability.items() if not available]
    if not missing:
        print(f"✅ All {len(availability)} assets are available!")
    else:
        print(f"⚠️  {len(availability) - len(missing)}/{len(availability)} assets are available")
        print("\nMissing assets:")
        for key in missing:
            print(f"   ✗ {key}: {ASSET_PATHS[key]}")
