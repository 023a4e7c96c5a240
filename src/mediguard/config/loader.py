"""Configuration loader for MediGuard"""

import logging
import os
from typing import Any, Dict, Final

from pydantic import ValidationError

from mediguard.domain import MediguardConfig

log = logging.getLogger(__name__)

# Environment variable -> MediguardConfig field
ENV_FIELDS: Final[Dict[str, str]] = {
    "MEDIGUARD_CODE_SCHEME": "code_scheme",
    "MEDIGUARD_PUBLIC_URL": "public_url",
    "MEDIGUARD_DEFAULT_ISSUER_ID": "default_issuer_id",
    "MEDIGUARD_CORRELATION_WINDOW_SECONDS": "correlation_window_seconds",
    "MEDIGUARD_POLL_INTERVAL_SECONDS": "poll_interval_seconds",
    "MEDIGUARD_SCAN_COOLDOWN_SECONDS": "scan_cooldown_seconds",
    "MEDIGUARD_AUDIT_LIST_LIMIT": "audit_list_limit",
    "MEDIGUARD_AUDIT_EXPOSES_REQUEST_ID": "audit_exposes_request_id",
    "MEDIGUARD_INACTIVITY_TIMEOUT_SECONDS": "inactivity_timeout_seconds",
    "MEDIGUARD_WALLET_STORE_PATH": "wallet_store_path",
}


def load_config_from_env() -> MediguardConfig | None:
    """
    Load configuration from MEDIGUARD_* environment variables.

    Unset variables keep their defaults. Values are validated by the model,
    so numeric and boolean variables are given as plain text ("2.5", "false").

    Returns:
        MediguardConfig if at least one variable is set, None otherwise

    Raises:
        ValueError: If a variable holds an invalid value
    """
    values: Dict[str, Any] = {
        field: os.environ[name] for name, field in ENV_FIELDS.items() if os.environ.get(name, "").strip()
    }
    if not values:
        return None

    try:
        return MediguardConfig.model_validate(values)
    except ValidationError as e:
        raise ValueError(f"Invalid MediGuard configuration in environment: {e}") from e


def create_test_config(**overrides: Any) -> MediguardConfig:
    """
    Create a configuration for tests and local development.

    Args:
        **overrides: Field values replacing the defaults

    Returns:
        MediguardConfig with test settings
    """
    values: Dict[str, Any] = {
        "public_url": "http://testserver",
        "default_issuer_id": "demo_issuer",
    }
    values.update(overrides)
    return MediguardConfig(**values)


def load_or_create_config() -> MediguardConfig:
    """
    Load configuration from environment or fall back to defaults.
    """
    config = load_config_from_env()
    if config is None:
        log.warning("No environment configuration found, using defaults")
        config = MediguardConfig()
    else:
        log.info("Loaded configuration from environment")

    return config
