"""Pydantic schemas for JSON data validation."""

from pydantic import BaseModel, Field, field_validator

from .constants import ELIMINATION_TYPES, WINNER_SENTINEL
from .utils import parse_turn


class PlayerInfo(BaseModel):
    """Resolved player attached to a participant."""

    name: str = Field(..., min_length=1)
    is_active: bool = True

    class Config:
        extra = 'ignore'


class DeckInfo(BaseModel):
    """Resolved deck attached to a participant."""

    deck_name: str = Field(..., min_length=1)
    is_active: bool = True
    color_identity: str = ''

    class Config:
        extra = 'ignore'


class Participant(BaseModel):
    """One player's seat in a match."""

    id: int | str | None = None
    is_winner: bool = False
    turn_eliminated: int = 0
    elimination_type: str | None = None
    eliminated_by: str | None = None
    players: PlayerInfo
    decks: DeckInfo

    @field_validator('turn_eliminated', mode='before')
    @classmethod
    def coerce_turn(cls, v):
        """Accept numeric strings and blanks."""
        return parse_turn(v)

    @field_validator('elimination_type')
    @classmethod
    def validate_elimination_type(cls, v):
        """Ensure the cause is a known category."""
        if v is None or v == '':
            return None
        if v != WINNER_SENTINEL and v not in ELIMINATION_TYPES:
            raise ValueError(f'Invalid elimination type: {v}')
        return v

    class Config:
        extra = 'ignore'


class Match(BaseModel):
    """A played game with its participants."""

    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}')
    notes: str | None = None
    match_participants: list[Participant] = Field(..., min_length=2, max_length=4)

    @field_validator('match_participants')
    @classmethod
    def validate_single_winner(cls, v):
        """Ensure exactly one participant won."""
        winners = [p for p in v if p.is_winner]
        if len(winners) != 1:
            raise ValueError(f'Expected exactly one winner, got {len(winners)}')
        return v

    class Config:
        extra = 'ignore'


class MatchesFile(BaseModel):
    """Complete matches.json file structure."""

    matches: list[Match]

    class Config:
        extra = 'forbid'


class StatsConfig(BaseModel):
    """Aggregation and ranking settings."""

    recent_cutoff_year: int = Field(2023, ge=2000, le=2100)
    min_games_total: int = Field(20, ge=0)
    min_games_recent: int = Field(10, ge=0)
    min_games_year: int = Field(10, ge=0)
    medal_positions: int = Field(3, ge=1, le=10)

    class Config:
        extra = 'forbid'
