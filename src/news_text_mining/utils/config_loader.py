"""
Configuration loading for the text mining run.

The YAML file may reference environment variables as ``${NAME}``; a ``.env``
file at the project root (one level above the config directory) is read first.
"""

import os
import re
import logging
import yaml
from typing import Dict, Any, Optional
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PLACEHOLDER = re.compile(r'\$\{([^}]+)\}')
RELATIVE_PREFIXES = ('./', '../')


def _expand_env(match: re.Match) -> str:
    value = os.environ.get(match.group(1))
    if value is None:
        # Unset variables stay visible in the config
        logger.warning(f"Environment variable '{match.group(1)}' is not set")
        return match.group(0)
    return value


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Read the YAML configuration, expanding ``${NAME}`` placeholders.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Configuration dictionary, empty for an empty file
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    env_file = path.resolve().parent.parent / '.env'
    if env_file.exists():
        load_dotenv(env_file)

    text = ENV_PLACEHOLDER.sub(_expand_env, path.read_text(encoding='utf-8'))
    return yaml.safe_load(text) or {}


def resolve_paths(config: Dict[str, Any], base_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Return a copy of the configuration with ``./`` and ``../`` values made absolute.

    Args:
        config: Configuration dictionary
        base_dir: Directory the paths are relative to, the working directory by default
    """
    base_dir = base_dir or os.getcwd()

    def resolve(value):
        if isinstance(value, dict):
            return {key: resolve(item) for key, item in value.items()}
        if isinstance(value, str) and value.startswith(RELATIVE_PREFIXES):
            return os.path.normpath(os.path.join(base_dir, value))
        return value

    return resolve(config)
