from __future__ import annotations

from unittest import TestCase

from .rng import Mulberry32, hash_seed, pick, shuffle, unique_sample


class Mulberry32Tests(TestCase):
    def test_same_seed_same_stream(self):
        a = Mulberry32(42)
        b = Mulberry32(42)
        self.assertEqual([a.random() for _ in range(100)], [b.random() for _ in range(100)])

    def test_different_seeds_diverge(self):
        a = Mulberry32(1)
        b = Mulberry32(2)
        self.assertNotEqual([a.random() for _ in range(10)], [b.random() for _ in range(10)])

    def test_values_in_unit_interval(self):
        rng = Mulberry32(123456789)
        for _ in range(5000):
            value = rng.random()
            self.assertGreaterEqual(value, 0.0)
            self.assertLess(value, 1.0)

    def test_reset_restarts_stream(self):
        rng = Mulberry32(7)
        first = [rng() for _ in range(5)]
        rng.reset()
        self.assertEqual([rng() for _ in range(5)], first)

    def test_seed_is_truncated_to_32_bits(self):
        self.assertEqual(Mulberry32(2**32 + 5).random(), Mulberry32(5).random())
        self.assertEqual(Mulberry32(-1).random(), Mulberry32(0xFFFFFFFF).random())


class HashSeedTests(TestCase):
    def test_known_fnv1a_vectors(self):
        self.assertEqual(hash_seed(""), 2166136261)
        self.assertEqual(hash_seed("a"), 0xE40C292C)
        self.assertEqual(hash_seed("foobar"), 0xBF9CF968)

    def test_stable_for_room_inputs(self):
        self.assertEqual(hash_seed("ABC234:1700000000000"), hash_seed("ABC234:1700000000000"))
        self.assertNotEqual(hash_seed("ABC234:1700000000000"), hash_seed("ABC234:1700000000001"))
        self.assertLessEqual(hash_seed("ABC234:1700000000000"), 0xFFFFFFFF)


class HelperTests(TestCase):
    def test_shuffle_is_a_permutation(self):
        items = list(range(20))
        shuffle(items, Mulberry32(9))
        self.assertEqual(sorted(items), list(range(20)))

    def test_shuffle_is_reproducible(self):
        a = shuffle(list("abcdefgh"), Mulberry32(3))
        b = shuffle(list("abcdefgh"), Mulberry32(3))
        self.assertEqual(a, b)

    def test_unique_sample_has_no_repeats_and_keeps_source(self):
        source = list(range(10))
        sample = unique_sample(source, 4, Mulberry32(11))
        self.assertEqual(len(sample), 4)
        self.assertEqual(len(set(sample)), 4)
        self.assertEqual(source, list(range(10)))

    def test_pick_returns_member(self):
        rng = Mulberry32(5)
        for _ in range(50):
            self.assertIn(pick("xyz", rng), "xyz")
