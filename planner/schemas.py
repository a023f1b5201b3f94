from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from planner.config import DEFAULT_PLAYERS_PER_ROUND


class ScheduleConfigSchema(BaseModel):
    playerNames: list[str] = Field(default_factory=list, description="Player names in input order")
    numberOfRounds: int
    playersPerRound: int = Field(default=DEFAULT_PLAYERS_PER_ROUND, description="Players per round (group arity)")


class PairRoundsRequestSchema(BaseModel):
    playerNames: list[str] = Field(default_factory=list)
    numberOfRounds: int


class PlayerSchema(BaseModel):
    id: str
    name: str


class RoundSchema(BaseModel):
    roundNo: int
    roundDate: date
    selectedPlayers: list[PlayerSchema]


class PlanSchema(BaseModel):
    id: str
    players: list[PlayerSchema]
    rounds: list[RoundSchema]
    numberOfRounds: int
    createdAt: datetime


class ScheduleStatsSchema(BaseModel):
    totalUniquePairings: int = 0
    totalPairingRecords: int = 0
    maxFrequency: int = 0
    minFrequency: int = 0
    avgFrequency: float = 0.0


class PairingSchema(BaseModel):
    playerNames: list[str]
    frequency: int


class PairRoundsSchema(BaseModel):
    rounds: list[list[tuple[str, str]]]


class ErrorSchema(BaseModel):
    error: str
    type: Optional[str] = None
    timestamp: int
