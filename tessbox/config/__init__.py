"""Handles loading and validation of the generator configuration.

This module provides the `load_config` function, which reads a YAML file,
validates it with the Pydantic schemas defined in `schemas.py` and layers
environment variables on top.
"""

from pathlib import Path
from typing import Optional

import yaml

from tessbox.config.schemas import GeneratorConfig, TighteningConfig

CONFIG_PATH = Path(__file__).parent / "config.yaml"

__all__ = ["CONFIG_PATH", "GeneratorConfig", "TighteningConfig", "load_config"]


def load_config(config_path: Optional[Path] = None) -> GeneratorConfig:
    """Loads a YAML configuration file and merges it with environment variables.

    The layering is as follows, with later sources overriding earlier ones:

    1.  Default values defined in the Pydantic schemas.
    2.  Values from the YAML configuration file.
    3.  Values from environment variables prefixed with `TESSBOX_`.

    Args:
        config_path (Path, optional): The path to the YAML configuration
            file. Defaults to the `config.yaml` shipped with the package.

    Returns:
        A validated `GeneratorConfig`.
    """
    if config_path is None:
        config_path = CONFIG_PATH
    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    # Only the fields set through the environment should win over the file.
    env_config = GeneratorConfig()
    env_values = env_config.model_dump(exclude_unset=True)

    tightening = {**config_dict.pop("tightening", {}), **env_values.pop("tightening", {})}
    merged = {**config_dict, **env_values, "tightening": tightening}
    return GeneratorConfig(**merged)
