import logging
import os
from pathlib import Path

import yaml
from django.conf import settings

logger = logging.getLogger("sendgrid_rt")

ENV_PREFIX = "SGRT_"

DEFAULTS = {
    "ADDRESS": "localhost",
    "PORT": 9090,
    "RT_URL": "http://127.0.0.1",
    "RT_GATEWAY_PATH": "REST/1.0/NoAuth/mail-gateway",
    "KEY": "",
    "DEFAULT": {"queue": "General", "action": "correspond"},
    "RULES": [],
    "VERBOSE": 0,
    # Outbound HTTP timeouts, in seconds
    "CONNECT_TIMEOUT": 5,
    "TIMEOUT": 20,
}


def get_setting(name):
    """
    Retrieve a relay setting.

    Lookup order: the SGRT_<NAME> environment variable (scalar settings
    only), the SENDGRID_RT dict in Django settings, then DEFAULTS.
    """
    default = DEFAULTS.get(name)

    env_value = os.environ.get(f"{ENV_PREFIX}{name}")
    if env_value is not None and not isinstance(default, (dict, list)):
        return _coerce(name, env_value, default)

    user_settings = getattr(settings, "SENDGRID_RT", {})
    return user_settings.get(name, default)


def _coerce(name, value, default):
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            logger.warning(
                f"Ignoring non-integer value for {ENV_PREFIX}{name}: {value!r}"
            )
            return default
    return value


def get_verbosity(config):
    """
    Return the VERBOSE level for building LOGGING inside a settings module.

    Reads SGRT_VERBOSE, then ``config`` (a dict from load_config_file),
    without touching Django settings. Non-integer values fall back to the
    default with a warning, as in get_setting.
    """
    default = DEFAULTS["VERBOSE"]
    value = os.environ.get(f"{ENV_PREFIX}VERBOSE")
    if value is None:
        value = config.get("VERBOSE", default)
    if isinstance(value, int):
        return int(value)
    return _coerce("VERBOSE", str(value), default)


def get_rt_endpoint():
    """Return the full URL of the RT mail gateway."""
    from sendgrid_rt.drivers.rt_client import build_rt_endpoint

    return build_rt_endpoint(
        get_setting("RT_URL"), get_setting("RT_GATEWAY_PATH")
    )


def load_config_file(name="sendgrid-rt", paths=("/", "/etc", ".")):
    """
    Load the first ``<name>.yaml`` (or ``.yml``) found in ``paths``.

    Top-level keys are upper-cased so the result can be used directly as
    the SENDGRID_RT settings dict. A missing or broken file is logged and
    yields an empty dict; the relay then runs on defaults and environment.
    """
    for directory in paths:
        for suffix in (".yaml", ".yml"):
            candidate = Path(directory) / f"{name}{suffix}"
            if not candidate.is_file():
                continue
            try:
                with open(candidate, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as exc:
                logger.warning(f"Error reading config {candidate}: {exc}")
                return {}
            if not isinstance(data, dict):
                logger.warning(
                    f"Error loading config {candidate}: top level must be a mapping"
                )
                return {}
            return {str(key).upper(): value for key, value in data.items()}

    logger.warning(
        f"No {name}.yaml found in {', '.join(str(p) for p in paths)}; "
        f"using defaults"
    )
    return {}


def build_logging_config(verbose=0):
    """Return a Django LOGGING dict for the relay logger."""
    level = "INFO" if not verbose else "DEBUG"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s %(levelname)-5s %(name)s: %(message)s",
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "text",
            },
        },
        "loggers": {
            "sendgrid_rt": {
                "handlers": ["stdout"],
                "level": level,
                "propagate": False,
            },
        },
    }
