"""
Runtime switches for the optional parts of the service.

Each switch is a boolean environment variable, read once and cached until
``refresh_feature_flag_cache`` is called. A switched-off feature answers with
the status code and message recorded on its switch.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional

_ON = frozenset({"1", "true", "yes", "on"})
_OFF = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True)
class FeatureSwitch:
    env_var: str
    disabled_status: int
    disabled_detail: str
    default: bool = True


# Keys double as the /api/features payload
FEATURE_SWITCHES: Dict[str, FeatureSwitch] = {
    "registration_enabled": FeatureSwitch("REGISTRATION_ENABLED", 403, "Registration is disabled"),
    "exports_enabled": FeatureSwitch("EXPORTS_ENABLED", 503, "Report exports are disabled"),
    "chart_rendering_enabled": FeatureSwitch("CHART_RENDERING_ENABLED", 503, "Chart rendering is disabled"),
}


def env_flag(raw: Optional[str], default: bool) -> bool:
    """Parse an on/off environment value; unknown spellings keep ``default``."""
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _ON:
        return True
    if value in _OFF:
        return False
    return default


@lru_cache(maxsize=None)
def get_feature_flags() -> Dict[str, bool]:
    return {
        name: env_flag(os.getenv(switch.env_var), switch.default)
        for name, switch in FEATURE_SWITCHES.items()
    }


def is_feature_enabled(name: str) -> bool:
    if name not in FEATURE_SWITCHES:
        raise KeyError(f"Unknown feature: {name}")
    return get_feature_flags()[name]


def refresh_feature_flag_cache() -> None:
    get_feature_flags.cache_clear()
