#!/usr/bin/env python3
"""
Commander Stats Export CLI

Aggregates a matches file into player, deck and colour-group statistics
with medals, and writes them as JSON (optionally also as an Excel workbook).

Usage:
    python scripts/export_stats.py --matches data/matches.json --output web/data/stats.json
    python scripts/export_stats.py --matches data/matches.json --output stats.json --excel stats.xlsx
    python scripts/export_stats.py --matches raw.json --output stats.json --lenient
"""

import argparse
import sys
from datetime import datetime, timezone

from edhstats import (
    aggregate_color_groups,
    export_to_excel,
    get_config,
    load_matches,
    process,
    rank,
    save_json,
    validate_all,
)
from edhstats.logging_config import setup_logging


def medals_to_json(medals: dict) -> dict:
    """Medal maps keyed by display label instead of identity objects."""
    out = {}
    for identity, ranks in medals.items():
        label = identity.label if hasattr(identity, 'label') else str(identity)
        out[label] = ranks
    return out


def main():
    parser = argparse.ArgumentParser(description="Commander match statistics export")
    parser.add_argument('--matches', required=True, help='Path to matches JSON file')
    parser.add_argument('--output', required=True, help='Path to write stats JSON')
    parser.add_argument('--excel', help='Optional path to write an Excel workbook')
    parser.add_argument(
        '--lenient',
        action='store_true',
        help='Skip malformed matches instead of failing schema validation',
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', help='Also write log records to this file')
    args = parser.parse_args()

    logger = setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        matches = load_matches(args.matches, strict=not args.lenient)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    config = get_config()
    stats = process(matches, config)

    errors, warnings = validate_all(matches, stats.players + stats.decks)
    for message in errors:
        logger.warning(message)
    for message in warnings:
        logger.warning(message)

    player_medals: dict = {}
    deck_medals: dict = {}
    rank([p for p in stats.players if p.is_active], player_medals, config)
    rank([d for d in stats.decks if d.is_active], deck_medals, config)

    colors = aggregate_color_groups(stats.decks)

    payload = {
        'generated_at': datetime.now(timezone.utc).isoformat(),
        'recent_cutoff_year': config.recent_cutoff_year,
        'match_counts': stats.match_counts,
        'players': [p.to_dict() for p in stats.players],
        'decks': [d.to_dict() for d in stats.decks],
        'colors': [c.to_dict() for c in colors],
        'medals': {
            'players': medals_to_json(player_medals),
            'decks': medals_to_json(deck_medals),
        },
    }
    save_json(args.output, payload)
    logger.info(f'Wrote {args.output}')

    if args.excel:
        export_to_excel(
            args.excel,
            stats.players,
            stats.decks,
            colors,
            medals={'players': player_medals, 'decks': deck_medals},
        )


if __name__ == '__main__':
    main()
