"""Environment variable loading and validation."""

import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        resources_dir: Optional[Path] = None,
        max_workers: Optional[int] = None,
    ):
        """Initialize environment configuration."""
        self.log_level = log_level
        self.resources_dir = resources_dir
        self.max_workers = max_workers


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Optional environment variables:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LICENSE_SCANNER_RESOURCES: Directory of license templates
    - LICENSE_SCANNER_WORKERS: Worker threads for multi-file scans (1-64)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    resources = os.getenv("LICENSE_SCANNER_RESOURCES")
    workers_str = os.getenv("LICENSE_SCANNER_WORKERS")

    if log_level:
        log_level = log_level.upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    max_workers = None
    if workers_str:
        try:
            max_workers = int(workers_str)
            if max_workers < 1 or max_workers > 64:
                errors.append(
                    f"Invalid LICENSE_SCANNER_WORKERS: {max_workers}. Must be between 1 and 64."
                )
        except ValueError:
            errors.append(
                f"Invalid LICENSE_SCANNER_WORKERS: '{workers_str}'. Must be a valid integer."
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the values in your .env file",
                "Unset variables you do not need to override",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level or None,
        resources_dir=Path(resources) if resources else None,
        max_workers=max_workers,
    )
