"""
Configuration management for the vector engine.

Handles loading, saving and validating the engine parameters, the query
settings and the presentation labels.
"""

import codecs
import logging
import os
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ON_ERROR_CHOICES = ("abort", "skip")


@dataclass
class VectorConfig:
    """Configuration for corpus construction and ranking."""

    # Engine parameters
    dimension: int = 1024  # Vector dimensionality (D)
    window_size: int = 17  # Context window capacity (W), odd
    top_k: int = 20  # Words reported by the word match

    # Corpus and queries
    data_dir: str = "data/"
    query_document: str = "data/pg1661.txt"
    query_word: str = "sea"
    encoding: str = "utf-8"

    # Failure policy for unreadable documents
    on_error: str = "abort"

    # Execution
    max_workers: Optional[int] = None  # None = CPU count
    use_processes: bool = True

    # Identifier -> display label, presentation only
    labels: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.dimension <= 0:
            raise ConfigurationError(
                f"dimension must be positive, got {self.dimension}", parameter="dimension")

        if self.window_size < 3 or self.window_size % 2 == 0:
            raise ConfigurationError(
                f"window_size must be an odd number >= 3, got {self.window_size}",
                parameter="window_size")

        if self.top_k <= 0:
            raise ConfigurationError(
                f"top_k must be positive, got {self.top_k}", parameter="top_k")

        try:
            codecs.lookup(self.encoding)
        except (LookupError, TypeError):
            raise ConfigurationError(
                f"unknown encoding {self.encoding!r}", parameter="encoding")

        if self.on_error not in ON_ERROR_CHOICES:
            raise ConfigurationError(
                f"on_error must be one of {', '.join(ON_ERROR_CHOICES)}, got {self.on_error!r}",
                parameter="on_error")

        if self.max_workers is not None and self.max_workers <= 0:
            raise ConfigurationError(
                f"max_workers must be positive, got {self.max_workers}", parameter="max_workers")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VectorConfig':
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def label(self, identifier: str) -> str:
        """Display label for a document identifier."""
        return self.labels.get(identifier, "")


class ConfigManager:
    """Manages the vector engine configuration file."""

    DEFAULT_CONFIG_FILE = ".bigvector.yml"
    ENV_PREFIX = "BIGVECTOR_"

    # env suffix -> (field, parser)
    ENV_OVERRIDES = {
        "DIMENSION": ("dimension", int),
        "WINDOW_SIZE": ("window_size", int),
        "TOP_K": ("top_k", int),
        "DATA_DIR": ("data_dir", str),
        "QUERY_DOCUMENT": ("query_document", str),
        "QUERY_WORD": ("query_word", str),
        "ON_ERROR": ("on_error", str),
        "MAX_WORKERS": ("max_workers", int),
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Path to configuration file
        """
        self.console = Console()
        self.config_path = Path(config_path) if config_path else self.get_default_config_path()
        self._config: Optional[VectorConfig] = None

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Look in the current directory, then the home directory."""
        current_dir_config = Path(cls.DEFAULT_CONFIG_FILE)
        if current_dir_config.exists():
            return current_dir_config
        return Path.home() / cls.DEFAULT_CONFIG_FILE

    def load(self) -> VectorConfig:
        """
        Load configuration from file or create default.

        Returns:
            Loaded or default configuration

        Raises:
            ConfigurationError: If the file holds invalid values
        """
        if self._config is not None:
            return self._config

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigurationError(f"{self.config_path} does not contain a mapping")
            data.update(self._env_overrides())
            self._config = VectorConfig.from_dict(data)
            logger.info(f"Loaded config from {self.config_path}")
        else:
            self._config = VectorConfig.from_dict(self._env_overrides())
            logger.debug("Using default configuration")

        return self._config

    def save(self, config: Optional[VectorConfig] = None) -> bool:
        """
        Save configuration to file.

        Args:
            config: Configuration to save (uses current if None)

        Returns:
            True if successful
        """
        config = config or self._config or VectorConfig()

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
            logger.info(f"Saved config to {self.config_path}")
            return True
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            return False

    def update(self, **kwargs) -> VectorConfig:
        """
        Update configuration parameters, validating the result.

        Returns:
            Updated configuration
        """
        data = self.load().to_dict()
        for key, value in kwargs.items():
            if value is None:
                continue
            if key not in data:
                logger.warning(f"Unknown parameter '{key}'")
                continue
            data[key] = value
        self._config = VectorConfig.from_dict(data)
        return self._config

    def display(self, config: Optional[VectorConfig] = None):
        """
        Display configuration in a formatted panel.

        Args:
            config: Configuration to display (uses current if None)
        """
        config = config or self.load()

        yaml_str = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
        syntax = Syntax(yaml_str, "yaml", theme="monokai", line_numbers=True)
        panel = Panel(
            syntax,
            title=f"[bold cyan]Configuration ({self.config_path})[/bold cyan]",
            border_style="cyan"
        )
        self.console.print(panel)

    def _env_overrides(self) -> Dict[str, Any]:
        """Collect environment variable overrides."""
        overrides: Dict[str, Any] = {}
        for suffix, (name, parser) in self.ENV_OVERRIDES.items():
            raw = os.getenv(f"{self.ENV_PREFIX}{suffix}")
            if raw is None:
                continue
            try:
                overrides[name] = parser(raw)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid env value for {name}: {raw}", parameter=name)
            logger.debug(f"Applied env override: {name}={overrides[name]}")
        return overrides


def get_config(config_path: Optional[Union[str, Path]] = None) -> VectorConfig:
    """
    Load the effective configuration.

    Args:
        config_path: Optional path to config file

    Returns:
        Current configuration
    """
    return ConfigManager(Path(config_path) if config_path else None).load()


def create_default_config_file(path: Optional[Union[str, Path]] = None) -> bool:
    """
    Create a default configuration file.

    Args:
        path: Path for config file

    Returns:
        True if successful
    """
    path = Path(path or ConfigManager.DEFAULT_CONFIG_FILE)
    return ConfigManager(path).save(VectorConfig())
