"""
Randomized round generation.

Two strategies share one small interface:

- ShuffleGreedy shuffles the whole pool repeatedly, slices it into
  pairs (or takes the first k players) and keeps the attempt with the
  lowest summed history. It stops at the first attempt without repeats.
- BacktrackRandom assigns players one at a time, trying the least
  frequent partners first, and backtracks on dead ends. The search is
  bounded by a wall-clock deadline. When it gives up the generator
  falls back to ShuffleGreedy, so callers never see the timeout.
"""

from __future__ import annotations

import dataclasses
import logging
import random
import time
from enum import Enum
from typing import Callable, Iterable, Protocol, Sequence

from planner.config import (
    DEFAULT_BACKTRACK_DEADLINE_MILLIS,
    DEFAULT_RESHUFFLE_ATTEMPTS,
    PRUNE_FREQUENCY_THRESHOLD,
)
from planner.errors import InvalidGroupSize, OddPlayerCount

logger = logging.getLogger(__name__)

Pair = tuple[str, str]
FrequencyLookup = Callable[[frozenset[str]], int]
Clock = Callable[[], float]


class Strategy(str, Enum):
    GREEDY_SHUFFLE = "greedy_shuffle"
    BACKTRACK_RANDOM = "backtrack_random"


@dataclasses.dataclass
class GeneratorSettings:
    strategy: Strategy = Strategy.GREEDY_SHUFFLE
    seed: int | None = None
    reshuffle_attempts: int = DEFAULT_RESHUFFLE_ATTEMPTS
    backtrack_deadline_millis: int = DEFAULT_BACKTRACK_DEADLINE_MILLIS
    prune_frequency_threshold: int = PRUNE_FREQUENCY_THRESHOLD


def make_pair(a: str, b: str) -> Pair:
    return (a, b) if a <= b else (b, a)


def pairs_repeats(pairs: Iterable[Pair], history: dict[Pair, int]) -> int:
    return sum(history.get(p, 0) for p in pairs)


class PairingStrategy(Protocol):
    def pair_round(self, players: Sequence[str], history: dict[Pair, int]) -> list[Pair] | None:
        ...

    def pick_group(self, players: Sequence[str], k: int, lookup: FrequencyLookup) -> list[str] | None:
        ...


class ShuffleGreedy:
    def __init__(self, rnd: random.Random, attempts: int = DEFAULT_RESHUFFLE_ATTEMPTS):
        self.rnd = rnd
        self.attempts = max(1, int(attempts))

    def _slice_pairs(self, order: list[str]) -> list[Pair]:
        return [make_pair(order[i], order[i + 1]) for i in range(0, len(order), 2)]

    def pair_round(self, players: Sequence[str], history: dict[Pair, int]) -> list[Pair]:
        best: list[Pair] | None = None
        best_repeats = None
        working = list(players)
        for _ in range(self.attempts):
            self.rnd.shuffle(working)
            pairs = self._slice_pairs(working)
            repeats = pairs_repeats(pairs, history)
            if best_repeats is None or repeats < best_repeats:
                best, best_repeats = pairs, repeats
                if repeats == 0:
                    break

        if best is None:
            self.rnd.shuffle(working)
            best = self._slice_pairs(working)
        return best

    def pick_group(self, players: Sequence[str], k: int, lookup: FrequencyLookup) -> list[str]:
        best: list[str] | None = None
        best_repeats = None
        working = list(players)
        for _ in range(self.attempts):
            self.rnd.shuffle(working)
            candidate = working[:k]
            repeats = lookup(frozenset(candidate))
            if best_repeats is None or repeats < best_repeats:
                best, best_repeats = candidate, repeats
                if repeats == 0:
                    break

        if best is None:
            self.rnd.shuffle(working)
            best = working[:k]
        return best


class BacktrackRandom:
    def __init__(
        self,
        rnd: random.Random,
        deadline_millis: int = DEFAULT_BACKTRACK_DEADLINE_MILLIS,
        clock: Clock = time.monotonic,
        prune_threshold: int = PRUNE_FREQUENCY_THRESHOLD,
    ):
        self.rnd = rnd
        self.deadline_millis = max(1, int(deadline_millis))
        self.clock = clock
        self.prune_threshold = prune_threshold

    def _deadline(self) -> float:
        return self.clock() + self.deadline_millis / 1000.0

    def _expired(self, deadline: float) -> bool:
        return self.clock() > deadline

    def pair_round(self, players: Sequence[str], history: dict[Pair, int]) -> list[Pair] | None:
        deadline = self._deadline()
        pool = list(players)
        self.rnd.shuffle(pool)
        current: list[Pair] = []
        if self._extend_pairs(pool, set(), current, history, deadline):
            return current
        return None

    def _extend_pairs(
        self,
        pool: list[str],
        used: set[str],
        current: list[Pair],
        history: dict[Pair, int],
        deadline: float,
    ) -> bool:
        if self._expired(deadline):
            return False
        if len(used) == len(pool):
            return True

        first = next(p for p in pool if p not in used)
        candidates = [p for p in pool if p not in used and p != first]
        self.rnd.shuffle(candidates)
        candidates.sort(key=lambda p: history.get(make_pair(first, p), 0))

        for mate in candidates:
            current.append(make_pair(first, mate))
            used.update((first, mate))
            if self._extend_pairs(pool, used, current, history, deadline):
                return True
            current.pop()
            used.difference_update((first, mate))
            if self._expired(deadline):
                return False
        return False

    def pick_group(self, players: Sequence[str], k: int, lookup: FrequencyLookup) -> list[str] | None:
        deadline = self._deadline()
        pool = list(players)
        self.rnd.shuffle(pool)
        current: list[str] = []
        if self._extend_group(pool, k, current, lookup, deadline):
            return current
        return None

    def _frequency(self, lookup: FrequencyLookup, group: list[str]) -> int:
        try:
            return int(lookup(frozenset(group)))
        except Exception as exc:
            logger.debug("Frequency lookup failed for %s, using 0: %s", group, exc)
            return 0

    def _extend_group(
        self,
        pool: list[str],
        k: int,
        current: list[str],
        lookup: FrequencyLookup,
        deadline: float,
    ) -> bool:
        if self._expired(deadline):
            return False
        if len(current) == k:
            return True

        taken = set(current)
        candidates = [p for p in pool if p not in taken]
        self.rnd.shuffle(candidates)
        scored = [(self._frequency(lookup, current + [p]), p) for p in candidates]
        scored.sort(key=lambda x: x[0])

        for freq, player in scored:
            if freq > self.prune_threshold:
                continue
            current.append(player)
            if self._extend_group(pool, k, current, lookup, deadline):
                return True
            current.pop()
            if self._expired(deadline):
                return False
        return False


class PairingGenerator:
    """
    Builds rounds with the configured strategy. A failed backtracking
    search is retried with ShuffleGreedy; `fallback_count` is the only
    trace of it.
    """

    def __init__(self, settings: GeneratorSettings | None = None, clock: Clock = time.monotonic):
        self.settings = settings or GeneratorSettings()
        seed = self.settings.seed
        self.rnd = random.Random(seed) if seed is not None else random.Random()
        self.shuffle = ShuffleGreedy(self.rnd, self.settings.reshuffle_attempts)
        self.backtrack = BacktrackRandom(
            self.rnd,
            self.settings.backtrack_deadline_millis,
            clock=clock,
            prune_threshold=self.settings.prune_frequency_threshold,
        )
        self.strategy = Strategy(self.settings.strategy)
        self.fallback_count = 0

    @classmethod
    def default_greedy(cls) -> PairingGenerator:
        return cls(GeneratorSettings(strategy=Strategy.GREEDY_SHUFFLE))

    @property
    def active(self) -> PairingStrategy:
        if self.strategy == Strategy.BACKTRACK_RANDOM:
            return self.backtrack
        return self.shuffle

    def generate_schedule(self, players: Sequence[str], rounds: int) -> list[list[Pair]]:
        if len(players) % 2 != 0:
            raise OddPlayerCount(f"Number of players must be even, got {len(players)}")

        history: dict[Pair, int] = {}
        schedule: list[list[Pair]] = []
        for r in range(int(rounds)):
            round_pairs = self.active.pair_round(players, history)
            if round_pairs is None:
                self.fallback_count += 1
                logger.debug("Backtracking gave up on round %d, using shuffle", r + 1)
                round_pairs = self.shuffle.pair_round(players, history)
            for p in round_pairs:
                history[p] = history.get(p, 0) + 1
            schedule.append(round_pairs)
        return schedule

    def select_group(self, players: Sequence[str], k: int, frequency_lookup: FrequencyLookup) -> list[str]:
        if k <= 0 or k > len(players):
            raise InvalidGroupSize(f"Group size must be between 1 and {len(players)}, got {k}")

        group = self.active.pick_group(players, k, frequency_lookup)
        if group is None:
            self.fallback_count += 1
            logger.debug("Backtracking gave up on group of %d, using shuffle", k)
            group = self.shuffle.pick_group(players, k, frequency_lookup)
        return group
