"""
Configuration for the planogram comparator.
Defines comparator settings in a type-safe way, with environment overrides.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

INVALID_ITEM_POLICIES = ("missing", "reject")
ENV_PREFIX = "SHELFSNAP_"


@dataclass(frozen=True)
class ComparatorConfig:
    misplacement_policy: str = "label"      # see comparison.policies.POLICIES
    invalid_item_policy: str = "missing"    # "missing" or "reject"
    log_level: str = "INFO"

    def __post_init__(self):
        if self.invalid_item_policy not in INVALID_ITEM_POLICIES:
            raise ValueError(
                f"invalid_item_policy must be one of {INVALID_ITEM_POLICIES}, "
                f"got {self.invalid_item_policy!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ComparatorConfig":
        """
        Build a config from ``SHELFSNAP_MISPLACEMENT_POLICY``,
        ``SHELFSNAP_INVALID_ITEM_POLICY`` and ``SHELFSNAP_LOG_LEVEL``.
        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        config = cls()
        overrides = {}
        for name in ("misplacement_policy", "invalid_item_policy", "log_level"):
            value = env.get(ENV_PREFIX + name.upper())
            if value:
                overrides[name] = value.strip()
        if "log_level" in overrides:
            overrides["log_level"] = overrides["log_level"].upper()
        return replace(config, **overrides) if overrides else config
