"""Utility functions for file I/O and common operations."""

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('edhstats.utils')


def parse_turn(value: Any) -> int:
    """
    Parse a turn number permissively.

    Anything that is not a positive integer (None, blanks, junk text,
    negatives) becomes 0, meaning "not recorded".

    Examples:
        parse_turn('7') -> 7
        parse_turn('7.9') -> 7
        parse_turn('abc') -> 0
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        turn = int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            turn = int(float(str(value).strip()))
        except (TypeError, ValueError, OverflowError):
            return 0
    return turn if turn > 0 else 0


def format_one_decimal(value: float) -> str:
    """Format a ratio or average with one decimal place."""
    return f'{value:.1f}'


def average(values: list[int]) -> float | None:
    """Mean of a sample list, or None when it is empty."""
    if not values:
        return None
    return sum(values) / len(values)


def load_json(path: Path | str, schema: type[T] | None = None) -> Any | T:
    """
    Read a JSON file, optionally validating it against a pydantic model.

    A top-level object is passed to the schema as keyword arguments.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the JSON is malformed
        ValueError: If schema validation fails

    Example:
        config = load_json('data/stats_config.json', schema=StatsConfig)
    """
    path = Path(path)
    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    logger.debug(f'Loading JSON from: {path}')
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
        raise

    if schema is None:
        return data
    return _validate(path, schema, data)


def _validate(path: Path | str, schema: type[T], data: Any) -> T:
    try:
        return schema(**data) if isinstance(data, dict) else schema(data)  # type: ignore[call-arg]
    except ValidationError as e:
        logger.error(f'Schema validation failed for {path}: {e}')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def _jsonable(data: Any) -> Any:
    """Pydantic models and stat records to plain JSON structures."""
    if isinstance(data, BaseModel):
        return data.model_dump()
    if hasattr(data, 'to_dict'):
        return data.to_dict()
    if isinstance(data, dict):
        return {key: _jsonable(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [_jsonable(value) for value in data]
    return data


def save_json(path: Path | str, data: Any, indent: int = 2) -> None:
    """
    Write data as UTF-8 JSON, creating parent directories.

    Pydantic models and StatRecord objects (anything with ``to_dict``) are
    converted on the way out, also when nested in lists or dicts.

    Raises:
        TypeError: If data is not JSON-serializable
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(_jsonable(data), f, indent=indent, ensure_ascii=False)
    except TypeError as e:
        logger.error(f'Data is not JSON-serializable: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e
    logger.debug(f'Saved JSON to: {path}')


def load_matches(path: Path | str, strict: bool = True) -> list[dict[str, Any]]:
    """
    Load a matches file for aggregation.

    With strict=True the file is validated against MatchesFile (dates,
    2-4 participants, exactly one winner) and any violation raises
    ValueError. With strict=False the raw rows are returned and the
    engine skips what it cannot use.

    Accepts either {"matches": [...]} or a bare list.
    """
    from .schemas import MatchesFile

    data = load_json(path)
    if strict:
        if isinstance(data, list):
            data = {'matches': data}
        validated = _validate(path, MatchesFile, data)
        return [m.model_dump() for m in validated.matches]

    if isinstance(data, dict):
        data = data.get('matches', [])
    return list(data)
