"""
Configuration loading for chatparse.

Settings come from an optional YAML file plus environment overrides (a
local .env file is loaded first, without clobbering variables that are
already set).

Expected format:
    format_hint: thread          # dm | thread | channel | standard | mixed | auto
    deduplicate: true
    debug: false
    user_map:
      U024BE7LH: Alex Mittell
    emoji_map:
      thumbsup: "👍"
    user_map_file: users.yaml    # YAML or JSON, relative to this file
    emoji_map_file: emoji.json

Environment:
    CHATPARSE_CONFIG   path of the YAML file (when none is passed in)
    CHATPARSE_FORMAT   overrides format_hint
    CHATPARSE_DEBUG    overrides debug (1/true/yes/on)
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .models import FORMAT_HINTS, ParserOptions

ENV_CONFIG = 'CHATPARSE_CONFIG'
ENV_FORMAT = 'CHATPARSE_FORMAT'
ENV_DEBUG = 'CHATPARSE_DEBUG'

FORMAT_AUTO = 'auto'
TRUTHY = ('1', 'true', 'yes', 'on')


class ConfigError(ValueError):
    """Raised for unreadable or malformed configuration."""


@dataclass
class ParserConfig:
    """Resolved configuration."""
    format_hint: Optional[str] = None  # one of FORMAT_HINTS, 'auto', or None
    deduplicate: bool = True
    debug: bool = False
    user_map: Dict[str, str] = field(default_factory=dict)
    emoji_map: Dict[str, str] = field(default_factory=dict)
    source: Optional[Path] = None  # file the config was read from

    def to_options(self, format_hint: Optional[str] = None,
                   now: Optional[datetime] = None) -> ParserOptions:
        """Build ParserOptions, optionally with a per-document format hint."""
        hint = format_hint if format_hint is not None else self.format_hint
        if hint == FORMAT_AUTO:
            hint = None
        return ParserOptions(
            debug=self.debug,
            format_hint=hint,
            user_map=dict(self.user_map),
            emoji_map=dict(self.emoji_map),
            deduplicate=self.deduplicate,
            now=now,
        )


def validate_format_hint(value: Any) -> Optional[str]:
    """Normalize a format hint, raising ConfigError for unknown values."""
    if value is None or value == '':
        return None
    hint = str(value).strip().lower()
    if hint != FORMAT_AUTO and hint not in FORMAT_HINTS:
        allowed = ', '.join(FORMAT_HINTS + (FORMAT_AUTO,))
        raise ConfigError(f"Unknown format hint {value!r} (expected one of: {allowed})")
    return hint


def _as_string_map(value: Any, key: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping, got {type(value).__name__}")
    return {str(k): str(v) for k, v in value.items()}


def load_mapping_file(path: Path, key: str) -> Dict[str, str]:
    """Load a user or emoji map from a YAML or JSON file.

    Args:
        path: File to read
        key: Config key the file was named under (for error messages)

    Returns:
        Mapping of str -> str
    """
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigError(f"Cannot read {key} {path}: {e}") from e

    try:
        if path.suffix.lower() == '.json':
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Malformed {key} {path}: {e}") from e

    return _as_string_map(data, key)


def _env_overrides(config: ParserConfig):
    if os.environ.get(ENV_FORMAT):
        config.format_hint = validate_format_hint(os.environ[ENV_FORMAT])
    if os.environ.get(ENV_DEBUG):
        config.debug = os.environ[ENV_DEBUG].strip().lower() in TRUTHY


def load_config(
    path: Optional[Path] = None,
    env_file: Optional[Path] = None,
    logger: Optional[logging.Logger] = None
) -> ParserConfig:
    """
    Load configuration from YAML and the environment.

    Args:
        path: Config file; falls back to $CHATPARSE_CONFIG, then defaults
        env_file: .env file to load (defaults to ./.env)
        logger: Optional logger for reporting

    Returns:
        ParserConfig

    Raises:
        ConfigError: If the file cannot be read or has the wrong shape
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    load_dotenv(env_file or Path.cwd() / '.env')

    explicit = path is not None
    if path is None and os.environ.get(ENV_CONFIG):
        path = Path(os.environ[ENV_CONFIG])
        explicit = True

    config = ParserConfig()

    if path is not None and not path.exists():
        if explicit:
            logger.warning(f"Config file not found: {path}, using defaults")
        path = None

    if path is not None:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed config {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping at the top level")

        config.source = path
        config.format_hint = validate_format_hint(data.get('format_hint'))
        config.deduplicate = bool(data.get('deduplicate', True))
        config.debug = bool(data.get('debug', False))

        base = path.parent
        for key, file_key in (('user_map', 'user_map_file'), ('emoji_map', 'emoji_map_file')):
            merged: Dict[str, str] = {}
            if data.get(file_key):
                map_path = Path(data[file_key])
                if not map_path.is_absolute():
                    map_path = base / map_path
                merged.update(load_mapping_file(map_path, file_key))
            merged.update(_as_string_map(data.get(key), key))
            setattr(config, key, merged)

        logger.debug(
            f"Loaded config {path}: {len(config.user_map)} users, "
            f"{len(config.emoji_map)} emoji"
        )

    _env_overrides(config)
    return config
