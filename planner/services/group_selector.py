import logging
from itertools import combinations

from planner.config import DEFAULT_PLAYERS_PER_ROUND
from planner.errors import InsufficientPlayers
from planner.models import Player
from planner.services.frequency_ledger import FrequencyLedger, pairs_in_group

logger = logging.getLogger(__name__)


class ExhaustiveGroupSelector:
    """
    Scores every k-subset of the available players and picks the cheapest.

    Cost, compared lexicographically (lower wins):
      1. sum of the members' usage counters
      2. highest usage counter among the members
      3. ledger frequency of the exact group
      4. summed ledger frequency of every pair inside the group

    Ties go to the earlier combination in enumeration order. This is
    O(C(n, k)) per call and meant for small pools.
    """

    def __init__(self, ledger: FrequencyLedger):
        self.ledger = ledger
        self.usage: dict[str, int] = {}

    def reset(self) -> None:
        self.usage.clear()

    def group_cost(self, group: tuple[Player, ...]) -> tuple[int, int, int, int]:
        ids = [p.id for p in group]
        usages = [self.usage.get(pid, 0) for pid in ids]
        pair_freq = sum(self.ledger.frequency_of(pair) for pair in pairs_in_group(ids))
        return (sum(usages), max(usages), self.ledger.frequency_of(ids), pair_freq)

    def select_group(self, available_players: list[Player], k: int = DEFAULT_PLAYERS_PER_ROUND) -> list[Player]:
        if k <= 0 or len(available_players) < k:
            raise InsufficientPlayers(f"Need at least {k} players, got {len(available_players)}")

        for p in available_players:
            self.usage.setdefault(p.id, 0)

        best = None
        best_cost = None
        n_candidates = 0
        for group in combinations(available_players, k):
            n_candidates += 1
            cost = self.group_cost(group)
            if best_cost is None or cost < best_cost:
                best, best_cost = group, cost

        selected = list(best)
        self.ledger.record(p.id for p in selected)
        for p in selected:
            self.usage[p.id] += 1

        logger.debug(
            "Selected %s out of %d combinations (cost=%s)",
            ", ".join(p.name for p in selected),
            n_candidates,
            best_cost,
        )
        return selected
