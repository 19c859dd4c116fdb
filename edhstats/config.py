"""Stats engine configuration management."""

import logging
from functools import lru_cache
from pathlib import Path

from .schemas import StatsConfig
from .utils import load_json

logger = logging.getLogger('edhstats.config')

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'stats_config.json'


@lru_cache(maxsize=1)
def get_config() -> StatsConfig:
    """
    Load stats configuration from data/stats_config.json.

    Configuration is cached after first load. A missing file yields the
    built-in defaults.

    Returns:
        StatsConfig object with validated settings

    Raises:
        ValueError: If the config file has invalid structure

    Example:
        from edhstats.config import get_config
        config = get_config()
        print(f"Recent window starts in: {config.recent_cutoff_year}")
    """
    if not CONFIG_PATH.exists():
        logger.debug(f'No config file at {CONFIG_PATH}, using defaults')
        return StatsConfig()
    return load_json(CONFIG_PATH, schema=StatsConfig)


def get_recent_cutoff_year() -> int:
    """Get the first year counted in the recent window."""
    return get_config().recent_cutoff_year


def get_min_games() -> dict[str, int]:
    """Get the ranking eligibility floors per window kind."""
    config = get_config()
    return {
        'total': config.min_games_total,
        'recent': config.min_games_recent,
        'year': config.min_games_year,
    }


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
