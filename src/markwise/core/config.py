"""
Configuration Management

Centralized configuration management with YAML file support
and environment variable overrides.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field
import yaml

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load .env file if it exists
load_dotenv()


@dataclass
class ScorerConfig:
    """Remote semantic scorer connection settings."""
    base_url: str = "http://localhost:8000"
    timeout: float = 30.0
    max_retries: int = 0
    retry_base_delay: float = 1.0
    headers: Dict[str, str] = field(default_factory=lambda: {
        "Content-Type": "application/json",
        "Accept": "application/json",
    })


@dataclass
class EvaluationConfig:
    """Evaluation engine behaviour."""
    legacy_question_matching: bool = False
    isolate_student_failures: bool = True
    good_threshold: float = 70.0
    average_threshold: float = 40.0


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    console_level: str = "WARNING"  # Separate level for console output
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "logs/markwise.log"
    max_size: str = "10MB"
    backup_count: int = 5


@dataclass
class ReportingConfig:
    """Reporting configuration."""
    default_format: str = "terminal"
    export_path: str = "./reports"


@dataclass
class AppConfig:
    """Main application configuration."""
    name: str = "markwise"
    version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    scorer: ScorerConfig = field(default_factory=ScorerConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse configuration file {config_path}: {str(e)}",
                {"path": str(config_path)}
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read configuration file {config_path}: {str(e)}",
                {"path": str(config_path)}
            ) from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a mapping",
                {"path": str(config_path)}
            )

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "AppConfig":
        """Build configuration from a plain dictionary."""
        config_data = dict(config_data)

        # Flatten the app section before environment overrides are applied
        if 'app' in config_data:
            app_config = config_data.pop('app') or {}
            config_data.update(app_config)

        config_data = cls._apply_env_overrides(config_data)

        sections = {
            'scorer': ScorerConfig,
            'evaluation': EvaluationConfig,
            'logging': LoggingConfig,
            'reporting': ReportingConfig,
        }

        try:
            for key, section_cls in sections.items():
                if key in config_data and isinstance(config_data[key], dict):
                    config_data[key] = section_cls(**config_data[key])
            config = cls(**config_data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {str(e)}") from e

        config._coerce_types()
        config.validate()
        return config

    @staticmethod
    def _apply_env_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        env_mappings = {
            'MARKWISE_SCORER_URL': ['scorer', 'base_url'],
            'MARKWISE_SCORER_TIMEOUT': ['scorer', 'timeout'],
            'MARKWISE_SCORER_MAX_RETRIES': ['scorer', 'max_retries'],
            'LOG_LEVEL': ['logging', 'level'],
            'DEBUG': ['debug'],
            'ENVIRONMENT': ['environment'],
        }

        for env_var, config_path in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                current = config_data
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = env_value

        return config_data

    def _coerce_types(self) -> None:
        """Convert string values coming from the environment."""
        try:
            self.scorer.timeout = float(self.scorer.timeout)
            self.scorer.max_retries = int(self.scorer.max_retries)
            self.scorer.retry_base_delay = float(self.scorer.retry_base_delay)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid scorer setting: {str(e)}") from e

        if isinstance(self.debug, str):
            self.debug = self.debug.strip().lower() in ('1', 'true', 'yes', 'on')

    def validate(self) -> None:
        """Check value ranges, raising ConfigurationError on the first problem."""
        if not self.scorer.base_url:
            raise ConfigurationError("scorer.base_url must not be empty")
        if self.scorer.timeout <= 0:
            raise ConfigurationError(
                "scorer.timeout must be positive",
                {"timeout": self.scorer.timeout}
            )
        if self.scorer.max_retries < 0:
            raise ConfigurationError(
                "scorer.max_retries must not be negative",
                {"max_retries": self.scorer.max_retries}
            )
        if not 0 <= self.evaluation.average_threshold <= self.evaluation.good_threshold <= 100:
            raise ConfigurationError(
                "Grade thresholds must satisfy 0 <= average <= good <= 100",
                {
                    "average_threshold": self.evaluation.average_threshold,
                    "good_threshold": self.evaluation.good_threshold,
                }
            )


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config(config_path: Optional[Path] = None) -> AppConfig:
    """Get the application configuration instance."""
    global _config

    if _config is None:
        if config_path is None:
            # Default configuration path
            config_path = Path("config/default.yaml")

        if config_path.exists():
            _config = AppConfig.from_yaml(config_path)
        else:
            # Use default configuration if file doesn't exist
            _config = AppConfig.from_dict({})

    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config


def reload_config(config_path: Optional[Path] = None) -> AppConfig:
    """Reload configuration from file."""
    global _config
    _config = None
    return get_config(config_path)
