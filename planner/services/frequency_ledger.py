import logging
from typing import Any, Iterable

from planner.config import DEFAULT_PLAYERS_PER_ROUND
from planner.errors import InvalidArity
from planner.models import GroupFrequency

logger = logging.getLogger(__name__)


def group_key(player_ids: Iterable[str]) -> tuple[str, ...]:
    """Order-independent key for a group: its distinct ids, sorted."""
    return tuple(sorted(set(player_ids)))


def pairs_in_group(player_ids: Iterable[str]) -> list[tuple[str, str]]:
    g = group_key(player_ids)
    return [(g[i], g[j]) for i in range(len(g)) for j in range(i + 1, len(g))]


class FrequencyLedger:
    """
    How often each exact group of players has occurred during one
    generation session. Keys are canonical id tuples, so member order
    never matters.
    """

    def __init__(self, arity: int = DEFAULT_PLAYERS_PER_ROUND):
        self.arity = int(arity)
        self._counts: dict[tuple[str, ...], int] = {}

    def record(self, player_ids: Iterable[str]) -> int:
        key = group_key(player_ids)
        if len(key) != self.arity:
            raise InvalidArity(f"Group must contain exactly {self.arity} players, got {len(key)}")
        self._counts[key] = self._counts.get(key, 0) + 1
        logger.debug("Recorded group %s (now %d)", key, self._counts[key])
        return self._counts[key]

    def frequency_of(self, player_ids: Iterable[str]) -> int:
        return self._counts.get(group_key(player_ids), 0)

    def all_sorted_by_frequency(self) -> list[GroupFrequency]:
        # sorted() is stable, so equal counts keep insertion order
        items = [GroupFrequency(player_ids=k, frequency=v) for k, v in self._counts.items()]
        return sorted(items, key=lambda g: g.frequency)

    def statistics(self) -> dict[str, Any]:
        """
        unique_groups and total_records are always present.
        max/min/avg_frequency are left out entirely for an empty ledger.
        """
        values = list(self._counts.values())
        stats: dict[str, Any] = {
            "unique_groups": len(values),
            "total_records": sum(values),
        }
        if values:
            stats["max_frequency"] = max(values)
            stats["min_frequency"] = min(values)
            stats["avg_frequency"] = sum(values) / len(values)
        return stats

    def reset(self, arity: int | None = None) -> None:
        self._counts.clear()
        if arity is not None:
            self.arity = int(arity)
        logger.debug("Frequency ledger reset (arity=%d)", self.arity)

    def __len__(self) -> int:
        return len(self._counts)
