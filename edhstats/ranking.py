"""Medal assignment: top-three ranks per metric under minimum-games floors."""

import logging
from typing import Any, Iterable, Optional

from .config import get_config
from .constants import WINDOW_RECENT, WINDOW_TOTAL
from .models import StatRecord
from .schemas import StatsConfig

logger = logging.getLogger('edhstats.ranking')

# Metrics ranked by default
RANKED_METRICS = ('games', 'winrate')

Medals = dict[Any, dict[str, int]]


def min_games_for(window: str, config: StatsConfig) -> int:
    """Games a record needs in ``window`` to be ranked there."""
    if window == WINDOW_TOTAL:
        return config.min_games_total
    if window == WINDOW_RECENT:
        return config.min_games_recent
    return config.min_games_year


def collect_years(records: Iterable[StatRecord]) -> list[str]:
    """Every year present in the records' counters, ascending."""
    years: set[str] = set()
    for record in records:
        years.update(record.years())
    return sorted(years)


def metric_keys(
    years: Iterable[str],
    metrics: Iterable[str] = RANKED_METRICS,
) -> list[tuple[str, str]]:
    """
    (metric key, window) pairs to rank.

    Example:
        metric_keys(['2024']) ->
            [('games_total', 'total'), ('games_recent', 'recent'), ('games_2024', '2024'),
             ('winrate_total', 'total'), ...]
    """
    windows = [WINDOW_TOTAL, WINDOW_RECENT, *years]
    return [(f'{metric}_{window}', window) for metric in metrics for window in windows]


def rank(
    records: list[StatRecord],
    medals: Medals,
    config: Optional[StatsConfig] = None,
    years: Optional[Iterable[str]] = None,
    metrics: Iterable[str] = RANKED_METRICS,
) -> Medals:
    """
    Assign ranks 1..3 per metric key into ``medals``.

    The caller chooses the subset to rank (for instance only active players,
    or whatever a search currently shows). For every metric key the records
    with a positive value and at least the window's minimum number of games
    are sorted descending; ties keep input order. Records outside the top
    three get no entry for that key.

    Args:
        records: Finalized StatRecord objects
        medals: Mapping updated in place as medals[identity][metric_key] = rank
        config: Optional StatsConfig (default: get_config())
        years: Year windows to rank (default: every year in the records)
        metrics: Metric names to rank (default: games and winrate)

    Returns:
        The same ``medals`` mapping
    """
    config = config or get_config()
    year_list = list(years) if years is not None else collect_years(records)

    for key, window in metric_keys(year_list, metrics):
        floor = min_games_for(window, config)
        eligible = [
            record for record in records
            if record.metric(key) > 0 and record.games_in(window) >= floor
        ]
        ranked = sorted(eligible, key=lambda record: record.metric(key), reverse=True)

        for position, record in enumerate(ranked[:config.medal_positions], start=1):
            medals.setdefault(record.identity, {})[key] = position

    logger.debug(f'Ranked {len(records)} records over {len(year_list)} years')
    return medals


def medal_for(medals: Medals, identity: Any, key: str) -> Optional[int]:
    """Rank held by ``identity`` for ``key``, or None when unranked."""
    return medals.get(identity, {}).get(key)
