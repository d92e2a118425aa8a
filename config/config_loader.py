import json
import os
from datetime import datetime

from tapestack.tape import MAX_LENGTH
from tapestack.simulator_batch import MAX_BATCH_LENGTH

DEFAULT_CONFIG = {
    "max_length": MAX_LENGTH,
    "max_steps": 1_000_000,
    "batch_size": 4096,
    "log_frequency": 100,
    "use_numba": True,
    "output_directory": "logs/",
    "log_file_prefix": "tapestack_",
    "trace_window": 0,
}

# Expected types for validation
CONFIG_SCHEMA = {
    "max_length": int,
    "max_steps": int,
    "batch_size": int,
    "log_frequency": int,
    "use_numba": bool,
    "output_directory": str,
    "log_file_prefix": str,
    "trace_window": int,
}


def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        # bool is an int subclass; don't let True pass as a step count
        if not isinstance(config[key], expected_type) or (expected_type is int and isinstance(config[key], bool)):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    if config["max_length"] < 2:
        raise ValueError("max_length must be at least 2 bits per side.")
    if config["use_numba"] and config["max_length"] > MAX_BATCH_LENGTH:
        raise ValueError(f"max_length above {MAX_BATCH_LENGTH} requires use_numba to be false.")
    for key in ("max_steps", "batch_size", "log_frequency"):
        if config[key] < 1:
            raise ValueError(f"Config key '{key}' must be positive.")
    if config["trace_window"] < 0:
        raise ValueError("trace_window cannot be negative.")


def load_config(path="config/runtime_config.json", verbose=True):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    # Validate schema
    validate_config(config)

    # Validate output directory
    os.makedirs(config["output_directory"], exist_ok=True)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config


def save_config(config, path="config/runtime_config.json"):
    validate_config(config)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
