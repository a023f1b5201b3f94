from typing import Any

from planner.models import Plan, Player, Round, ScheduleConfig
from planner.schemas import (
    PairingSchema,
    PlanSchema,
    PlayerSchema,
    RoundSchema,
    ScheduleConfigSchema,
    ScheduleStatsSchema,
)


def player_to_schema(player: Player) -> PlayerSchema:
    return PlayerSchema(id=player.id, name=player.name)


def round_to_schema(round_: Round) -> RoundSchema:
    return RoundSchema(
        roundNo=round_.round_no,
        roundDate=round_.round_date,
        selectedPlayers=[player_to_schema(p) for p in round_.selected_players],
    )


def plan_to_schema(plan: Plan) -> PlanSchema:
    return PlanSchema(
        id=plan.id,
        players=[player_to_schema(p) for p in plan.players],
        rounds=[round_to_schema(r) for r in plan.rounds],
        numberOfRounds=plan.number_of_rounds,
        createdAt=plan.created_at,
    )


def schema_to_config(schema: ScheduleConfigSchema) -> ScheduleConfig:
    return ScheduleConfig(
        player_names=list(schema.playerNames),
        number_of_rounds=schema.numberOfRounds,
        players_per_round=schema.playersPerRound,
    )


def stats_to_schema(stats: dict[str, Any]) -> ScheduleStatsSchema:
    # An empty ledger has no max/min/avg; render those as zero
    return ScheduleStatsSchema(
        totalUniquePairings=int(stats.get("unique_groups", 0)),
        totalPairingRecords=int(stats.get("total_records", 0)),
        maxFrequency=int(stats.get("max_frequency", 0)),
        minFrequency=int(stats.get("min_frequency", 0)),
        avgFrequency=float(stats.get("avg_frequency", 0.0)),
    )


def pairing_to_schema(entry: dict[str, Any]) -> PairingSchema:
    return PairingSchema(playerNames=list(entry["player_names"]), frequency=int(entry["frequency"]))
