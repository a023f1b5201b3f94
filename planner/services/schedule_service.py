from __future__ import annotations

import dataclasses
import logging
from datetime import date, timedelta
from enum import Enum
from typing import Any, Callable

from planner.config import ROUND_INTERVAL_DAYS
from planner.errors import InvalidConfiguration
from planner.models import Plan, Player, Round, ScheduleConfig, new_player_id
from planner.services.frequency_ledger import FrequencyLedger
from planner.services.group_selector import ExhaustiveGroupSelector
from planner.services.pairing_generator import GeneratorSettings, PairingGenerator, Strategy

logger = logging.getLogger(__name__)


class SelectionAlgorithm(str, Enum):
    EXHAUSTIVE = "exhaustive"
    GREEDY_SHUFFLE = "greedy_shuffle"
    BACKTRACK_RANDOM = "backtrack_random"


def validate_config(config: ScheduleConfig) -> None:
    names = config.player_names
    if not names:
        raise InvalidConfiguration("Player names list cannot be empty")
    if config.players_per_round <= 0:
        raise InvalidConfiguration("Players per round must be greater than 0")
    if len(names) < config.players_per_round:
        raise InvalidConfiguration(f"At least {config.players_per_round} players are required")
    if config.number_of_rounds <= 0:
        raise InvalidConfiguration("Number of rounds must be greater than 0")
    if len(set(names)) != len(names):
        raise InvalidConfiguration("Duplicate player names are not allowed")


def create_players(player_names: list[str]) -> list[Player]:
    return [Player(id=new_player_id(), name=name) for name in player_names]


class ScheduleService:
    """
    Generates plans round by round and keeps the last one for follow-up
    queries. Not thread-safe: one instance per session, or serialize calls.
    """

    def __init__(
        self,
        algorithm: SelectionAlgorithm = SelectionAlgorithm.EXHAUSTIVE,
        generator_settings: GeneratorSettings | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.algorithm = SelectionAlgorithm(algorithm)
        self.ledger = FrequencyLedger()
        self.selector = ExhaustiveGroupSelector(self.ledger)
        settings = generator_settings or GeneratorSettings()
        if self.algorithm != SelectionAlgorithm.EXHAUSTIVE:
            settings = dataclasses.replace(settings, strategy=Strategy(self.algorithm.value))
        self.generator = PairingGenerator(settings)
        self.today = today
        self.last_plan: Plan | None = None

    def generate_schedule(self, config: ScheduleConfig) -> Plan:
        logger.info(
            "Generating schedule with %d players and %d rounds",
            len(config.player_names or []),
            config.number_of_rounds,
        )
        validate_config(config)

        self.ledger.reset(arity=config.players_per_round)
        self.selector.reset()

        players = create_players(config.player_names)
        plan = Plan.create(players, config.number_of_rounds)
        plan.rounds = self._generate_rounds(players, config.number_of_rounds, config.players_per_round)
        self.last_plan = plan

        logger.info(
            "Schedule generation completed: %d rounds with %d players each",
            len(plan.rounds),
            config.players_per_round,
        )
        return plan

    def _generate_rounds(self, players: list[Player], number_of_rounds: int, k: int) -> list[Round]:
        base_date = self.today()
        rounds = []
        for i in range(1, number_of_rounds + 1):
            selected = self._select(players, k)
            rounds.append(
                Round(
                    round_no=i,
                    round_date=base_date + timedelta(days=(i - 1) * ROUND_INTERVAL_DAYS),
                    selected_players=tuple(selected),
                )
            )
            logger.debug("Generated round %d: %s", i, ", ".join(p.name for p in selected))
        return rounds

    def _select(self, players: list[Player], k: int) -> list[Player]:
        if self.algorithm == SelectionAlgorithm.EXHAUSTIVE:
            return self.selector.select_group(players, k)

        by_id = {p.id: p for p in players}
        ids = self.generator.select_group(list(by_id), k, self.ledger.frequency_of)
        self.ledger.record(ids)
        return [by_id[pid] for pid in ids]

    def statistics(self) -> dict[str, Any]:
        return self.ledger.statistics()

    def all_pairings_sorted_by_frequency(self) -> list[dict[str, Any]]:
        names = {p.id: p.name for p in (self.last_plan.players if self.last_plan else [])}
        return [
            {
                "player_names": [names.get(pid, pid) for pid in g.player_ids],
                "frequency": g.frequency,
            }
            for g in self.ledger.all_sorted_by_frequency()
        ]

    def per_player_usage_counts(self) -> dict[str, int]:
        if self.last_plan is None:
            return {}
        counts = {p.name: 0 for p in self.last_plan.players}
        for r in self.last_plan.rounds:
            for p in r.selected_players:
                counts[p.name] = counts.get(p.name, 0) + 1
        return counts

    def generate_pair_rounds(self, player_names: list[str], number_of_rounds: int) -> list[list[tuple[str, str]]]:
        """Perfect pairings of all players per round. Uses its own pair history, not the ledger."""
        if not player_names:
            raise InvalidConfiguration("Player names list cannot be empty")
        if number_of_rounds <= 0:
            raise InvalidConfiguration("Number of rounds must be greater than 0")
        if len(set(player_names)) != len(player_names):
            raise InvalidConfiguration("Duplicate player names are not allowed")
        return self.generator.generate_schedule(player_names, number_of_rounds)
