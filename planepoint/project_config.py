"""
JSON-based configuration for planepoint.

Configuration hierarchy (later overrides earlier):
1. Built-in defaults (dataclasses below)
2. .planepoint.json found by find_config_file()
3. CLI arguments

Example .planepoint.json:
{
    "interpolation": {
        "on_degenerate": "raise",
        "property_names": ["elev_a", "elev_b", "elev_c"]
    },
    "logging": {
        "level": "DEBUG",
        "json_file": "planepoint.log.json"
    },
    "output": {
        "format": "json",
        "precision": 3
    }
}
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from planepoint.geometry.triangle import DEGENERATE_POLICIES, PROPAGATE

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".planepoint.json"

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class InterpolationConfig:
    """Interpolation behaviour."""
    on_degenerate: str = PROPAGATE  # "propagate" or "raise"
    property_names: List[str] = field(default_factory=lambda: ["a", "b", "c"])


@dataclass
class LoggingConfig:
    """Logging output."""
    level: str = "INFO"
    json_file: Optional[str] = None
    use_colors: bool = True


@dataclass
class OutputConfig:
    """Result output."""
    format: str = "text"  # "text" or "json"
    precision: Optional[int] = None  # None = repr() of the float


_SECTIONS = {
    'interpolation': InterpolationConfig,
    'logging': LoggingConfig,
    'output': OutputConfig,
}


@dataclass
class ProjectConfig:
    """Complete configuration."""
    interpolation: InterpolationConfig = field(default_factory=InterpolationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    def validate(self) -> 'ProjectConfig':
        """Check value ranges.

        Returns:
            self, for chaining

        Raises:
            ValueError: On any invalid value
        """
        if self.interpolation.on_degenerate not in DEGENERATE_POLICIES:
            raise ValueError(
                f"interpolation.on_degenerate must be one of {DEGENERATE_POLICIES}, "
                f"got {self.interpolation.on_degenerate!r}"
            )
        names = self.interpolation.property_names
        if len(names) != 3 or not all(isinstance(n, str) and n for n in names):
            raise ValueError(
                f"interpolation.property_names must be 3 non-empty strings, got {names!r}"
            )
        if str(self.logging.level).upper() not in LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {LOG_LEVELS}, got {self.logging.level!r}")
        if self.output.format not in OUTPUT_FORMATS:
            raise ValueError(f"output.format must be one of {OUTPUT_FORMATS}, got {self.output.format!r}")
        precision = self.output.precision
        if precision is not None and (isinstance(precision, bool)
                                      or not isinstance(precision, int) or precision < 0):
            raise ValueError(f"output.precision must be a non-negative integer, got {precision!r}")
        return self

    @property
    def log_level(self) -> int:
        """Logging level as a logging module constant."""
        return getattr(logging, str(self.logging.level).upper())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Create configuration from dictionary.

        Unknown sections and keys (including "_comment") are ignored.

        Raises:
            ValueError: If a section is not an object or a value is invalid
        """
        config = cls()

        for section in _SECTIONS:
            if section not in data:
                continue
            values = data[section]
            if not isinstance(values, dict):
                raise ValueError(f"Config section {section!r} must be an object")
            target = getattr(config, section)
            known = {f.name for f in fields(target)}
            for key, value in values.items():
                if key in known:
                    setattr(target, key, value)
                elif not key.startswith('_'):
                    logger.warning("Unknown config key %s.%s ignored", section, key)

        return config.validate()

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
            ValueError: If a value is invalid
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain an object")
        config = cls.from_dict(data)
        logger.info("Configuration loaded from %s", path)
        return config


def find_config_file(
    input_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find configuration file.

    Search order:
    1. Explicit config path (if provided and existing)
    2. .planepoint.json next to the input file
    3. .planepoint.json in the current working directory
    4. ~/.planepoint.json

    Returns:
        Path to config file if found, None otherwise
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if input_path:
        candidates.append(Path(input_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    input_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration, falling back to defaults when no usable file exists.

    Invalid values in a readable file are not silently dropped: the
    ValueError from validation propagates.
    """
    config_path = find_config_file(input_path, explicit_config)

    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return ProjectConfig()
