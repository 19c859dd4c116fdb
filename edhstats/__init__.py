from .models import Aggregates, DeckKey, ProcessedStats, StatRecord, YearSummary
from .aggregation import ingest, match_windows
from .finalize import derive, finalize, process, attach_deck_counts
from .ranking import rank, metric_keys, min_games_for, medal_for
from .colors import normalize_color_identity, display_name, aggregate_color_groups
from .views import SortState, SortMode, filter_records, sort_records, winrate_tier
from .retrospective import year_summary
from .validators import validate_match, validate_stat_record, validate_all
from .config import get_config, clear_config_cache
from .schemas import StatsConfig, MatchesFile
from .utils import load_matches, load_json, save_json
from .excel_export import export_to_excel

__all__ = [
    # Models
    'Aggregates',
    'DeckKey',
    'ProcessedStats',
    'StatRecord',
    'YearSummary',
    # Aggregation pipeline
    'ingest',
    'match_windows',
    'derive',
    'finalize',
    'process',
    'attach_deck_counts',
    # Medals
    'rank',
    'metric_keys',
    'min_games_for',
    'medal_for',
    # Colour identity
    'normalize_color_identity',
    'display_name',
    'aggregate_color_groups',
    # Tables
    'SortState',
    'SortMode',
    'filter_records',
    'sort_records',
    'winrate_tier',
    'year_summary',
    # Validation
    'validate_match',
    'validate_stat_record',
    'validate_all',
    # Config and I/O
    'get_config',
    'clear_config_cache',
    'StatsConfig',
    'MatchesFile',
    'load_matches',
    'load_json',
    'save_json',
    'export_to_excel',
]
