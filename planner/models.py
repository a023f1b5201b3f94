from __future__ import annotations

import dataclasses
import uuid
from datetime import date, datetime

from planner.config import DEFAULT_PLAYERS_PER_ROUND


def new_player_id() -> str:
    return str(uuid.uuid4())


@dataclasses.dataclass(frozen=True)
class Player:
    id: str
    name: str


@dataclasses.dataclass(frozen=True)
class Round:
    round_no: int
    round_date: date
    selected_players: tuple[Player, ...]

    @property
    def size(self) -> int:
        return len(self.selected_players)


@dataclasses.dataclass
class ScheduleConfig:
    player_names: list[str]
    number_of_rounds: int
    players_per_round: int = DEFAULT_PLAYERS_PER_ROUND


@dataclasses.dataclass
class Plan:
    id: str
    players: list[Player]
    rounds: list[Round]
    number_of_rounds: int
    created_at: datetime

    @classmethod
    def create(cls, players: list[Player], number_of_rounds: int) -> Plan:
        return cls(
            id=str(uuid.uuid4()),
            players=list(players),
            rounds=[],
            number_of_rounds=number_of_rounds,
            created_at=datetime.now(),
        )


@dataclasses.dataclass(frozen=True)
class GroupFrequency:
    """A recorded group (canonical id tuple) and how often it occurred."""

    player_ids: tuple[str, ...]
    frequency: int
