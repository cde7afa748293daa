import logging
import os
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Startup configuration is unusable."""


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Raises ConfigurationError when required env vars are missing or the data
    directory cannot be created or written.
    """
    ops = rules.ops

    # 1. Check Data Dir (sqlite backend only)
    if ops.data_dir_required and ops.store_backend == "sqlite":
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Data directory {data_dir} is not usable: {e}") from e
        if not os.access(data_dir, os.W_OK):
            raise ConfigurationError(f"Data directory {data_dir} is not writable")

    # 2. Check Required Env
    missing = [env_var for env_var in ops.required_env if env_var not in os.environ]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    logger.info("Configuration validated")
