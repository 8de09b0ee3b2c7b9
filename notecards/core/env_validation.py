"""
Environment variable validation and security checks.

This module validates that the required environment variables are properly
configured before the application starts.
"""

import sys
from typing import List, Optional, Tuple

from notecards.core.config import Settings, settings as default_settings
from notecards.core.logging import get_logger

logger = get_logger(__name__)

ASYNC_DATABASE_DRIVERS = ("postgresql+asyncpg://", "sqlite+aiosqlite://")


def validate_database_url(config: Settings) -> List[str]:
    """
    Validate database URL configuration.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not config.DATABASE_URL:
        errors.append("DATABASE_URL is not set")
        return errors

    # The store only talks to the database through async sessions
    if not config.DATABASE_URL.startswith(ASYNC_DATABASE_DRIVERS):
        errors.append(
            "DATABASE_URL must use an async driver "
            "(postgresql+asyncpg://... or sqlite+aiosqlite://...)"
        )

    if config.is_production and config.uses_sqlite:
        errors.append("DATABASE_URL must point to PostgreSQL in production")

    return errors


def validate_production_settings(config: Settings) -> List[str]:
    """
    Validate production-specific settings.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not config.is_production:
        return errors

    if config.DEBUG:
        errors.append("DEBUG must be false in production")

    if "localhost" in ",".join(config.ALLOWED_ORIGINS):
        logger.warning(
            "localhost_in_allowed_origins",
            message="ALLOWED_ORIGINS includes localhost in production - may be insecure"
        )

    if config.LOG_FORMAT != "json":
        logger.warning(
            "log_format_not_json",
            message="LOG_FORMAT should be 'json' in production for better log aggregation"
        )

    if not config.PUBLIC_MODE:
        logger.warning(
            "public_mode_disabled",
            message="PUBLIC_MODE is off in production - content can be created, edited and deleted"
        )

    return errors


def validate_environment(config: Optional[Settings] = None) -> Tuple[bool, List[str]]:
    """
    Validate all environment variables.

    Returns:
        (is_valid, list_of_errors)
    """
    config = config or default_settings
    all_errors: List[str] = []

    logger.info(
        "validating_environment",
        app_env=config.APP_ENV,
        app_name=config.APP_NAME
    )

    all_errors.extend(validate_database_url(config))
    all_errors.extend(validate_production_settings(config))

    if all_errors:
        logger.error(
            "environment_validation_failed",
            errors=all_errors,
            error_count=len(all_errors)
        )
        return False, all_errors

    logger.info(
        "environment_validation_successful",
        app_env=config.APP_ENV,
        public_mode=config.PUBLIC_MODE,
    )
    return True, []


def validate_or_exit(config: Optional[Settings] = None) -> None:
    """
    Validate environment and exit if validation fails.

    This should be called during application startup.
    """
    is_valid, errors = validate_environment(config)

    if not is_valid:
        logger.critical(
            "startup_aborted_invalid_environment",
            errors=errors
        )
        print("\nENVIRONMENT VALIDATION FAILED\n")
        print("The following configuration errors were found:\n")
        for i, error in enumerate(errors, 1):
            print(f"  {i}. {error}")
        print("\nPlease fix these errors and restart the application.\n")
        sys.exit(1)

    logger.info("environment_validation_passed")
