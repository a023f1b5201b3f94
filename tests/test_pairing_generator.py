import random
import time
import unittest
from collections import Counter

from planner.errors import InvalidGroupSize, OddPlayerCount
from planner.services.pairing_generator import (
    BacktrackRandom,
    GeneratorSettings,
    PairingGenerator,
    ShuffleGreedy,
    Strategy,
    make_pair,
)


class FakeClock:
    """Advances by `step` seconds on every read."""

    def __init__(self, step: float = 0.0):
        self.now = 1000.0
        self.step = step
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        self.now += self.step
        return self.now


PLAYERS = [f"P{i}" for i in range(1, 11)]


def assert_perfect_pairing(tc: unittest.TestCase, round_pairs, players):
    flat = [p for pair in round_pairs for p in pair]
    tc.assertEqual(sorted(flat), sorted(players))
    tc.assertEqual(len(round_pairs), len(players) // 2)


class ShuffleGreedyTests(unittest.TestCase):
    def test_generates_rounds_of_pairs(self):
        gen = PairingGenerator(GeneratorSettings(seed=1))
        schedule = gen.generate_schedule(PLAYERS, 5)

        self.assertEqual(len(schedule), 5)
        for round_pairs in schedule:
            assert_perfect_pairing(self, round_pairs, PLAYERS)

    def test_odd_player_count_is_rejected(self):
        gen = PairingGenerator.default_greedy()
        with self.assertRaises(OddPlayerCount):
            gen.generate_schedule(PLAYERS[:9], 3)

    def test_finds_repeat_free_rounds_when_available(self):
        players = ["A", "B", "C", "D"]
        gen = PairingGenerator(GeneratorSettings(seed=7, reshuffle_attempts=200))

        schedule = gen.generate_schedule(players, 3)

        counts = Counter(p for r in schedule for p in r)
        self.assertEqual(len(counts), 6)
        self.assertTrue(all(v == 1 for v in counts.values()))

    def test_no_single_pair_dominates(self):
        gen = PairingGenerator(GeneratorSettings(seed=3, reshuffle_attempts=500))
        schedule = gen.generate_schedule(PLAYERS, 30)

        counts = Counter(p for r in schedule for p in r)
        self.assertLess(max(counts.values()), 10)

    def test_same_seed_same_schedule(self):
        a = PairingGenerator(GeneratorSettings(seed=42)).generate_schedule(PLAYERS, 4)
        b = PairingGenerator(GeneratorSettings(seed=42)).generate_schedule(PLAYERS, 4)
        self.assertEqual(a, b)

    def test_select_group_avoids_frequent_group(self):
        fixed = frozenset(PLAYERS[:4])
        gen = PairingGenerator(GeneratorSettings(seed=5))

        for _ in range(3):
            group = gen.select_group(PLAYERS, 4, lambda g: 5 if g == fixed else 0)
            self.assertEqual(len(group), 4)
            self.assertNotEqual(frozenset(group), fixed)

    def test_select_group_size_bounds(self):
        gen = PairingGenerator.default_greedy()
        with self.assertRaises(InvalidGroupSize):
            gen.select_group(PLAYERS, 0, lambda g: 0)
        with self.assertRaises(InvalidGroupSize):
            gen.select_group(PLAYERS, 11, lambda g: 0)

    def test_single_attempt_still_returns_a_round(self):
        shuffle = ShuffleGreedy(random.Random(0), attempts=0)
        history = {make_pair("A", "B"): 4}

        round_pairs = shuffle.pair_round(["A", "B", "C", "D"], history)

        assert_perfect_pairing(self, round_pairs, ["A", "B", "C", "D"])


class BacktrackRandomTests(unittest.TestCase):
    def backtracking(self, clock, **kwargs):
        settings = GeneratorSettings(strategy=Strategy.BACKTRACK_RANDOM, seed=11, **kwargs)
        return PairingGenerator(settings, clock=clock)

    def test_prefers_unplayed_partners(self):
        players = ["A", "B", "C", "D"]
        gen = self.backtracking(FakeClock())

        schedule = gen.generate_schedule(players, 3)

        counts = Counter(p for r in schedule for p in r)
        self.assertEqual(len(counts), 6)
        self.assertEqual(gen.fallback_count, 0)

    def test_complete_rounds_without_fallback(self):
        gen = self.backtracking(FakeClock())
        schedule = gen.generate_schedule(PLAYERS, 6)

        for round_pairs in schedule:
            assert_perfect_pairing(self, round_pairs, PLAYERS)
        self.assertEqual(gen.fallback_count, 0)

    def test_timeout_falls_back_to_shuffle(self):
        # every clock read jumps a full second past the 200ms deadline
        gen = self.backtracking(FakeClock(step=1.0))

        schedule = gen.generate_schedule(PLAYERS, 3)

        self.assertEqual(gen.fallback_count, 3)
        for round_pairs in schedule:
            assert_perfect_pairing(self, round_pairs, PLAYERS)

    def test_group_timeout_falls_back_to_shuffle(self):
        gen = self.backtracking(FakeClock(step=1.0))

        group = gen.select_group(PLAYERS, 4, lambda g: 0)

        self.assertEqual(len(set(group)), 4)
        self.assertEqual(gen.fallback_count, 1)

    def test_search_stops_once_deadline_passes(self):
        clock = FakeClock(step=0.01)
        search = BacktrackRandom(random.Random(1), deadline_millis=200, clock=clock, prune_threshold=10)

        # every complete group is pruned, so the search can only end by timing out
        result = search.pick_group(PLAYERS, 4, lambda g: 50 if len(g) == 4 else 0)

        self.assertIsNone(result)
        self.assertLess(clock.calls, 40)

    def test_deadline_overhead_is_small_with_real_clock(self):
        search = BacktrackRandom(random.Random(2), deadline_millis=50, clock=time.monotonic, prune_threshold=10)
        pool = [f"P{i}" for i in range(24)]

        started = time.monotonic()
        result = search.pick_group(pool, 4, lambda g: 50 if len(g) == 4 else 0)
        elapsed = time.monotonic() - started

        self.assertIsNone(result)
        self.assertLess(elapsed, 1.0)

    def test_lookup_failure_counts_as_zero(self):
        gen = self.backtracking(FakeClock())

        def broken(group):
            raise RuntimeError("lookup down")

        group = gen.select_group(PLAYERS, 4, broken)

        self.assertEqual(len(set(group)), 4)
        self.assertEqual(gen.fallback_count, 0)

    def test_group_search_backtracks_past_pruned_groups(self):
        gen = self.backtracking(FakeClock())
        allowed = frozenset(["P1", "P2", "P3", "P4"])

        def lookup(group):
            if len(group) < 4 or group == allowed:
                return 0
            return 5000

        for _ in range(3):
            group = gen.select_group(["P1", "P2", "P3", "P4", "P5"], 4, lookup)
            self.assertEqual(frozenset(group), allowed)
        self.assertEqual(gen.fallback_count, 0)


if __name__ == "__main__":
    unittest.main()
