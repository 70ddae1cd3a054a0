"""Configuration loader for automaton definitions.

Definitions can be loaded from:
- Files (JSON, YAML)
- Dictionaries

String values of the form ``${VAR}``, ``${VAR:-default}``,
``${VAR:?message}`` and ``$VAR`` are resolved from the environment.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Union

import pydantic
import yaml

from nfakit.config.schema import AutomatonConfig, validate_config
from nfakit.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load and validate automaton definitions from various sources."""

    def __init__(self, env_prefix: str = "NFAKIT_"):
        """Initialize the ConfigLoader.

        Args:
            env_prefix: Prefix tried when a referenced variable is not set
                under its plain name.
        """
        self._env_prefix = env_prefix

    def load_from_file(
        self,
        file_path: Union[str, Path],
        resolve_env: bool = True,
    ) -> AutomatonConfig:
        """Load a definition from a file.

        Args:
            file_path: Path to the definition (JSON or YAML).
            resolve_env: Whether to resolve environment variables.

        Returns:
            Validated AutomatonConfig instance.

        Raises:
            ConfigurationError: If the file is missing, unreadable, has an
                unsupported format or fails validation.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {file_path}",
                context={"path": str(file_path)},
            )

        raw_config = self._load_file(file_path)
        if not isinstance(raw_config, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {file_path}",
                context={"path": str(file_path), "type": type(raw_config).__name__},
            )
        logger.debug("Loaded raw configuration from %s", file_path)
        return self.load_from_dict(raw_config, resolve_env=resolve_env)

    def load_from_dict(
        self,
        config_dict: Dict[str, Any],
        resolve_env: bool = True,
    ) -> AutomatonConfig:
        """Load a definition from a dictionary.

        Args:
            config_dict: Definition dictionary.
            resolve_env: Whether to resolve environment variables.

        Returns:
            Validated AutomatonConfig instance.

        Raises:
            ConfigurationError: If the dictionary fails validation.
        """
        processed_config = config_dict
        if resolve_env:
            processed_config = self._resolve_environment_vars(processed_config)

        try:
            return validate_config(processed_config)
        except pydantic.ValidationError as e:
            raise ConfigurationError(
                f"Invalid automaton definition: {e}",
                context={"errors": e.errors(include_url=False)},
            ) from e

    def _load_file(self, file_path: Path) -> Any:
        suffix = file_path.suffix.lower()

        try:
            with open(file_path) as f:
                if suffix == ".json":
                    return json.load(f)
                elif suffix in [".yaml", ".yml"]:
                    return yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Cannot parse {file_path}: {e}",
                context={"path": str(file_path)},
            ) from e
        raise ConfigurationError(
            f"Unsupported file format: {suffix}",
            context={"path": str(file_path), "supported": [".json", ".yaml", ".yml"]},
        )

    def _resolve_environment_vars(self, config: Any) -> Any:
        """Resolve environment variables in a configuration value.

        Supports:
        - ${VAR_NAME} - Required variable
        - ${VAR_NAME:-default} - Variable with default value
        - ${VAR_NAME:?error message} - Required with custom error
        - $VAR_NAME - Replaced only when set
        """
        if isinstance(config, str):
            if config.startswith("${") and config.endswith("}"):
                var_expr = config[2:-1]

                if ":-" in var_expr:
                    var_name, default_value = var_expr.split(":-", 1)
                    return self._lookup_env(var_name, default_value)

                elif ":?" in var_expr:
                    var_name, error_msg = var_expr.split(":?", 1)
                    value = self._lookup_env(var_name)
                    if value is None:
                        raise ConfigurationError(
                            f"Required environment variable: {error_msg}",
                            context={"variable": var_name},
                        )
                    return value

                else:
                    value = self._lookup_env(var_expr)
                    if value is None:
                        raise ConfigurationError(
                            f"Environment variable not found: {var_expr}",
                            context={"variable": var_expr, "prefix": self._env_prefix},
                        )
                    return value

            elif config.startswith("$") and len(config) > 1:
                value = self._lookup_env(config[1:])
                return config if value is None else value

            return config

        elif isinstance(config, dict):
            return {key: self._resolve_environment_vars(value) for key, value in config.items()}

        elif isinstance(config, list):
            return [self._resolve_environment_vars(item) for item in config]

        else:
            return config

    def _lookup_env(self, var_name: str, default: str | None = None) -> str | None:
        if var_name in os.environ:
            return os.environ[var_name]
        prefixed_var = f"{self._env_prefix}{var_name}"
        if prefixed_var in os.environ:
            return os.environ[prefixed_var]
        return default
