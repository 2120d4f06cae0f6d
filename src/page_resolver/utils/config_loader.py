"""Configuration loading and validation for the page resolver.

This module loads resolver configuration from built-in defaults, an optional
YAML file, and environment variables (a ``.env`` file is honored), and checks
the merged result for values the pipeline cannot work with.

Typical usage example:
    config = Config.load("config/resolver.yaml")
    errors = Config.validate(config)
    if errors:
        raise ConfigurationError(f"Configuration invalid: {errors}")
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .error_handlers import ConfigurationError


ENV_DSN = "PAGE_RESOLVER_DSN"
ENV_LOG_LEVEL = "PAGE_RESOLVER_LOG_LEVEL"

DEFAULT_PAGES_QUERY = "SELECT uid,pid,is_siteroot FROM pages"
DEFAULT_DOMAINS_QUERY = (
    "SELECT pid,domainName,forced FROM sys_domain ORDER BY sorting ASC"
)
DEFAULT_URL_TEMPLATE = "https://{domain}/index.php?id={uid}"
UNPARSEABLE_DSN = "<unparseable dsn>"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "database": {
        "dsn": "",
    },
    "queries": {
        "pages": DEFAULT_PAGES_QUERY,
        "domains": DEFAULT_DOMAINS_QUERY,
    },
    "output": {
        "url_template": DEFAULT_URL_TEMPLATE,
        "id_separator": ", ",
    },
    "logging": {
        "level": "WARNING",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}


class ResolverConfig:
    """Container for resolver configuration parameters.

    Attributes:
        database: Data source settings (dsn).
        queries: SQL text for the pages and domains relations.
        output: Output rendering settings (url_template, id_separator).
        logging: Logging settings (level, format).
    """

    def __init__(self, **config_dict: Dict[str, Any]) -> None:
        """Initialize ResolverConfig from configuration dictionary.

        Args:
            **config_dict: Configuration dictionary with required keys:
                database, queries, output, logging.

        Raises:
            KeyError: If any required configuration section is missing.
        """
        required_keys = ["database", "queries", "output", "logging"]

        missing_keys = [key for key in required_keys if key not in config_dict]
        if missing_keys:
            raise KeyError(f"Missing required configuration sections: {missing_keys}")

        self.database: Dict[str, Any] = config_dict["database"]
        self.queries: Dict[str, str] = config_dict["queries"]
        self.output: Dict[str, Any] = config_dict["output"]
        self.logging: Dict[str, Any] = config_dict["logging"]

    @property
    def dsn(self) -> str:
        return (self.database.get("dsn") or "").strip()


class Config:
    """Static utility class for loading and validating configuration."""

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge ``override`` into a copy of ``base``.

        Args:
            base: Default values.
            override: Values read from the user's file.

        Returns:
            New dictionary; nested dictionaries are merged key by key.
        """
        merged = copy.deepcopy(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = Config._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    @staticmethod
    def load(
        config_path: Optional[str] = None, use_env: bool = True
    ) -> ResolverConfig:
        """Load resolver configuration.

        Starts from DEFAULT_CONFIG, merges the YAML file at ``config_path``
        when given, then applies PAGE_RESOLVER_DSN and PAGE_RESOLVER_LOG_LEVEL
        from the environment (after loading a ``.env`` file, if present).

        Args:
            config_path: Optional path to a YAML configuration file.
            use_env: Whether environment variables override file values.

        Returns:
            ResolverConfig containing the merged configuration.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML, or
                does not contain a mapping.
        """
        config_dict = copy.deepcopy(DEFAULT_CONFIG)

        if config_path:
            config_file_path = Path(config_path)
            if not config_file_path.exists():
                raise ConfigurationError(
                    f"Configuration file not found: {config_file_path}",
                    config_key="config",
                )

            try:
                with open(config_file_path, "r", encoding="utf-8") as f:
                    file_dict = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Failed to parse configuration file: {config_file_path}",
                    config_key="config",
                    original_error=e,
                ) from e

            if file_dict is None:
                file_dict = {}
            if not isinstance(file_dict, dict):
                raise ConfigurationError(
                    "Configuration file must contain a YAML dictionary",
                    config_key="config",
                )

            for section, value in file_dict.items():
                if section in DEFAULT_CONFIG and not isinstance(value, dict):
                    raise ConfigurationError(
                        f"Configuration section '{section}' must be a dictionary",
                        config_key=section,
                    )

            config_dict = Config._merge(config_dict, file_dict)

        if use_env:
            load_dotenv()
            env_dsn = os.getenv(ENV_DSN)
            if env_dsn:
                config_dict["database"]["dsn"] = env_dsn
            env_level = os.getenv(ENV_LOG_LEVEL)
            if env_level:
                config_dict["logging"]["level"] = env_level

        return ResolverConfig(**config_dict)

    @staticmethod
    def validate(config: ResolverConfig) -> List[str]:
        """Validate the merged configuration.

        The DSN is not checked here: it may still be supplied on the command
        line.

        Args:
            config: ResolverConfig object to validate.

        Returns:
            List of error messages. Empty list if the configuration is usable.
        """
        errors: List[str] = []

        for key in ("pages", "domains"):
            query = config.queries.get(key)
            if not isinstance(query, str) or not query.strip():
                errors.append(f"queries.{key} must be a non-empty SQL string")

        template = config.output.get("url_template")
        if not isinstance(template, str):
            errors.append("output.url_template must be a string")
        else:
            for placeholder in ("{domain}", "{uid}"):
                if placeholder not in template:
                    errors.append(
                        f"output.url_template is missing the {placeholder} placeholder"
                    )

        separator = config.output.get("id_separator")
        if not isinstance(separator, str) or not separator:
            errors.append("output.id_separator must be a non-empty string")

        level = str(config.logging.get("level", "")).upper()
        if level not in VALID_LOG_LEVELS:
            errors.append(
                f"logging.level must be one of {', '.join(VALID_LOG_LEVELS)}, "
                f"got: {config.logging.get('level')!r}"
            )

        return errors


def mask_dsn(dsn: str) -> str:
    """Hide the password part of a connection string for log output.

    Strings SQLAlchemy cannot parse as a URL come back as UNPARSEABLE_DSN.
    """
    try:
        return make_url(dsn).render_as_string(hide_password=True)
    except ArgumentError:
        return UNPARSEABLE_DSN
