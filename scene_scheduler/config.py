"""Scheduler and service configuration.

This module provides:
- SchedulerConfig, the knobs of a single scheduling run
- Settings, service-wide values read from the environment (.env is loaded
  automatically)

Usage:
    from scene_scheduler.config import SchedulerConfig, load_settings

    settings = load_settings()
    config = SchedulerConfig(day_budget_hours=7.0, strategy="cast_overlap")
"""

import math
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .sorting import get_strategy

PROJECT_ROOT = Path(__file__).parent.parent.resolve()

_env_path = PROJECT_ROOT / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

DEFAULT_DAY_BUDGET_HOURS = 12.0
DEFAULT_PACKUP_THRESHOLD_HOURS = 4.0
DEFAULT_PAGES_PER_CHUNK = 30
DEFAULT_OPENAI_MODEL = "gpt-4.1-mini"


class InclusionPolicy(str, Enum):
    """What the packer does with a scene that no longer fits the day"""
    # The last pending scene of a location is packed even past the budget
    FORCE_LAST = "force_last"
    # Never pack past the budget
    STRICT = "strict"


@dataclass
class SchedulerConfig:
    """Configuration for one scheduling run"""
    day_budget_hours: float = DEFAULT_DAY_BUDGET_HOURS
    packup_threshold_hours: float = DEFAULT_PACKUP_THRESHOLD_HOURS
    strategy: str = "location_type"
    inclusion_policy: InclusionPolicy = InclusionPolicy.FORCE_LAST

    def validate(self) -> "SchedulerConfig":
        """Raise ConfigurationError for values the packer cannot work with"""
        budget = self.day_budget_hours
        if isinstance(budget, bool) or not isinstance(budget, (int, float)) or not math.isfinite(budget):
            raise ConfigurationError(f"day_budget_hours must be a finite number, got {budget!r}")
        if budget <= 0:
            raise ConfigurationError(f"day_budget_hours must be positive, got {budget}")

        threshold = self.packup_threshold_hours
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not math.isfinite(threshold):
            raise ConfigurationError(f"packup_threshold_hours must be a finite number, got {threshold!r}")
        if threshold < 0:
            raise ConfigurationError(f"packup_threshold_hours cannot be negative, got {threshold}")

        get_strategy(self.strategy)

        try:
            self.inclusion_policy = InclusionPolicy(self.inclusion_policy)
        except ValueError:
            allowed = ", ".join(policy.value for policy in InclusionPolicy)
            raise ConfigurationError(
                f"Unknown inclusion policy {self.inclusion_policy!r} (expected one of: {allowed})"
            ) from None
        return self


@dataclass
class Settings:
    """Service-wide settings"""
    openai_api_key: Optional[str]
    openai_model: str = DEFAULT_OPENAI_MODEL
    day_budget_hours: float = DEFAULT_DAY_BUDGET_HOURS
    packup_threshold_hours: float = DEFAULT_PACKUP_THRESHOLD_HOURS
    strategy: str = "location_type"
    inclusion_policy: str = InclusionPolicy.FORCE_LAST.value
    pages_per_chunk: int = DEFAULT_PAGES_PER_CHUNK
    port: int = 8000

    def scheduler_config(self, day_budget_hours: Optional[float] = None,
                         strategy: Optional[str] = None,
                         inclusion_policy: Optional[str] = None) -> SchedulerConfig:
        """Build a validated SchedulerConfig, letting per-request values override the defaults"""
        config = SchedulerConfig(
            day_budget_hours=self.day_budget_hours if day_budget_hours is None else day_budget_hours,
            packup_threshold_hours=self.packup_threshold_hours,
            strategy=strategy or self.strategy,
            inclusion_policy=inclusion_policy or self.inclusion_policy,
        )
        return config.validate()


def _env_number(key: str, default, cast):
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"Environment variable {key} must be a number, got {raw!r}") from None


def load_settings() -> Settings:
    """Read Settings from environment variables"""
    settings = Settings(
        openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
        openai_model=os.environ.get("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
        day_budget_hours=_env_number("DAY_BUDGET_HOURS", DEFAULT_DAY_BUDGET_HOURS, float),
        packup_threshold_hours=_env_number("PACKUP_THRESHOLD_HOURS", DEFAULT_PACKUP_THRESHOLD_HOURS, float),
        strategy=os.environ.get("PACKING_STRATEGY", "location_type"),
        inclusion_policy=os.environ.get("INCLUSION_POLICY", InclusionPolicy.FORCE_LAST.value),
        pages_per_chunk=_env_number("PAGES_PER_CHUNK", DEFAULT_PAGES_PER_CHUNK, int),
        port=_env_number("PORT", 8000, int),
    )
    if settings.pages_per_chunk < 1:
        raise ConfigurationError(f"PAGES_PER_CHUNK must be at least 1, got {settings.pages_per_chunk}")
    return settings
