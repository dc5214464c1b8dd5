"""Shared helpers for CLI commands."""

import logging
from pathlib import Path
from typing import Any

from cardwise.application.config import AppConfig, resolve_config
from cardwise.application.factory import get_study_repository
from cardwise.application.stats.service import StudyStatsService

# Effective verbosity at which cardwise logs at DEBUG
DEBUG_VERBOSITY = 2


def _resolve_with_overrides(verbose_bonus: int = 0, **overrides: Any) -> AppConfig:
    """
    Resolve config, dropping options the user did not pass.

    `verbose_bonus` is the number of -v flags; it adds to the configured
    verbosity instead of replacing it.
    """
    config = resolve_config(overrides)
    debug = config.verbose + verbose_bonus >= DEBUG_VERBOSITY
    logging.getLogger("cardwise").setLevel(logging.DEBUG if debug else logging.NOTSET)
    return config


def _build_service(config: AppConfig) -> StudyStatsService:
    return StudyStatsService(
        get_study_repository(config),
        weekly_window_days=config.weekly_window_days,
        initial_difficulty=config.initial_difficulty,
    )


def _path_str(value: Any) -> Any:
    return str(value) if isinstance(value, Path) else value
