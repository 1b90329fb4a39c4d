"""Tests for weighted CH3 selection."""

import unittest
from unittest import mock

from weighted_ch3.hashing.furc import furc_hash
from weighted_ch3.hashing.salt import salt, salted_key
from weighted_ch3.hashing.selector import (
    UINT32_MAX,
    weight_threshold,
    weighted_ch3_hash,
    weighted_ch3_trace,
)
from weighted_ch3.hashing.weights import WeightVector


def _keys(count):
    return [f"key-{i}" for i in range(count)]


class RecordingHash:
    """Base hash stub that remembers its inputs."""

    def __init__(self, func):
        self.func = func
        self.calls = []

    def __call__(self, key, n):
        self.calls.append(key)
        return self.func(key, n)


class TestThreshold(unittest.TestCase):
    """Tests for the weight to threshold scaling."""

    def test_bounds(self):
        self.assertEqual(weight_threshold(0.0), 0)
        self.assertEqual(weight_threshold(1.0), UINT32_MAX)

    def test_monotonic(self):
        thresholds = [weight_threshold(w / 100) for w in range(101)]
        self.assertEqual(thresholds, sorted(thresholds))
        self.assertEqual(len(set(thresholds)), 101)


class TestWeightedCh3Hash(unittest.TestCase):
    """Tests for the retry loop with stubbed hash primitives."""

    def test_salted_probes(self):
        """Each attempt probes the key with the next salt."""
        base_hash = RecordingHash(lambda key, n: 0)
        weighted_ch3_hash(b"key", [0.0, 1.0], 5, base_hash=base_hash, score=lambda k: 0)
        self.assertEqual(base_hash.calls, [b"key" + salt(i) for i in range(5)])

    def test_probes_use_salted_key(self):
        with mock.patch(
            "weighted_ch3.hashing.selector.salted_key", wraps=salted_key
        ) as salted:
            weighted_ch3_hash(b"key", [0.0, 1.0], 4, base_hash=lambda k, n: 0, score=lambda k: 0)
            weighted_ch3_trace(b"key", [0.0, 1.0], 3, base_hash=lambda k, n: 0, score=lambda k: 0)

        self.assertEqual(
            salted.call_args_list,
            [mock.call(b"key", i) for i in range(4)] + [mock.call(b"key", i) for i in range(3)]
        )

    def test_score_uses_unsalted_key(self):
        scored = []

        def score(key):
            scored.append(key)
            return UINT32_MAX

        weighted_ch3_hash(b"key", [0.5, 0.5], 8, base_hash=lambda k, n: 1, score=score)
        self.assertTrue(scored)
        self.assertTrue(all(k == b"key" for k in scored))

    def test_bounded_retries(self):
        """At most retry_count probes, whatever the weights."""
        for retry_count in (1, 2, 7, 32, 100):
            base_hash = RecordingHash(lambda key, n: 0)
            scores = []

            def score(key):
                scores.append(key)
                return 0

            weighted_ch3_hash(
                b"key", [0.0, 0.0], retry_count, base_hash=base_hash, score=score
            )
            self.assertEqual(len(base_hash.calls), retry_count)
            self.assertLessEqual(len(scores), retry_count)

    def test_zero_weight_never_accepted(self):
        """A zero weight rejects even the lowest score."""
        base_hash = RecordingHash(lambda key, n: 0)
        index = weighted_ch3_hash(b"key", [0.0, 1.0], base_hash=base_hash, score=lambda k: 0)
        self.assertEqual(index, 0)
        self.assertEqual(len(base_hash.calls), 32)

    def test_full_weight_accepted_first(self):
        base_hash = RecordingHash(lambda key, n: 1)
        index = weighted_ch3_hash(
            b"key", [0.0, 1.0], base_hash=base_hash, score=lambda k: UINT32_MAX - 1
        )
        self.assertEqual(index, 1)
        self.assertEqual(len(base_hash.calls), 1)

    def test_fallback_returns_last_candidate(self):
        """When every probe is rejected the last candidate wins."""
        base_hash = RecordingHash(lambda key, n: len(key) % n)
        index = weighted_ch3_hash(
            b"k", [0.5] * 4, 32, base_hash=base_hash, score=lambda k: UINT32_MAX
        )
        # Attempt 31 probes b"k13"
        self.assertEqual(base_hash.calls[-1], b"k13")
        self.assertEqual(index, 3)

    def test_monotonic_acceptance(self):
        """Raising a weight past the score flips the probe to accepted."""
        p = UINT32_MAX // 2
        for weight, accepted in ((0.0, False), (0.4, False), (0.6, True), (1.0, True)):
            attempts = weighted_ch3_trace(
                b"key", [weight], 1, base_hash=lambda k, n: 0, score=lambda k: p
            )
            self.assertEqual(attempts[0].accepted, accepted, f"weight={weight}")

    def test_text_and_bytes_keys_agree(self):
        weights = [1.0, 0.3, 0.7]
        for key in _keys(50):
            self.assertEqual(
                weighted_ch3_hash(key, weights),
                weighted_ch3_hash(key.encode("utf-8"), weights)
            )

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            weighted_ch3_hash(b"key", [1.0], retry_count=0)
        with self.assertRaises(ValueError):
            weighted_ch3_hash(b"key", [])
        with self.assertRaises(TypeError):
            weighted_ch3_hash(42, [1.0])


class TestWeightedCh3HashProperties(unittest.TestCase):
    """Property tests with the default furc hash and scorer."""

    def test_deterministic(self):
        weights = WeightVector([0.2, 0.9, 0.5, 1.0, 0.0])
        for key in _keys(200):
            self.assertEqual(
                weighted_ch3_hash(key, weights), weighted_ch3_hash(key, weights)
            )

    def test_in_range(self):
        for weights in ([0.0], [0.0, 0.0, 0.0], [0.1] * 7, [1.0, 0.0, 0.5]):
            for key in _keys(200):
                idx = weighted_ch3_hash(key, weights)
                self.assertTrue(0 <= idx < len(weights))

    def test_all_ones_matches_base_hash(self):
        """With every weight at 1.0 the first probe is always accepted."""
        for n in (1, 2, 5, 11):
            weights = WeightVector([1.0] * n)
            for key in _keys(300):
                self.assertEqual(
                    weighted_ch3_hash(key, weights), furc_hash(key.encode(), n)
                )

    def test_zero_and_one(self):
        """Keys avoid a zero-weight server unless every probe lands there."""
        keys = _keys(5000)
        hits = sum(weighted_ch3_hash(k, [0.0, 1.0]) == 1 for k in keys)
        self.assertGreaterEqual(hits / len(keys), 0.999)

    def test_equal_halves(self):
        keys = _keys(20000)
        hits = sum(weighted_ch3_hash(k, [0.5, 0.5]) == 0 for k in keys)
        self.assertAlmostEqual(hits / len(keys), 0.5, delta=0.03)

    def test_lower_weight_gets_less_load(self):
        weights = [1.0, 0.25, 1.0, 0.5]
        counts = [0] * 4
        for key in _keys(10000):
            counts[weighted_ch3_hash(key, weights)] += 1
        self.assertLess(counts[1], counts[3])
        self.assertLess(counts[3], counts[0])
        self.assertLess(counts[3], counts[2])

    def test_lowering_weight_only_moves_its_keys(self):
        """Keys on other servers stay put when one weight drops."""
        before = [1.0, 0.8, 0.5, 1.0]
        after = [1.0, 0.6, 0.5, 1.0]
        moved = 0
        for key in _keys(3000):
            old = weighted_ch3_hash(key, before)
            new = weighted_ch3_hash(key, after)
            if old != new:
                moved += 1
                self.assertEqual(old, 1)
        self.assertGreater(moved, 0)

    def test_all_ones_growth_only_moves_to_new_server(self):
        for key in _keys(1000):
            old = weighted_ch3_hash(key, [1.0] * 5)
            new = weighted_ch3_hash(key, [1.0] * 6)
            self.assertIn(new, (old, 5))


class TestWeightedCh3Trace(unittest.TestCase):
    """Tests for probe tracing."""

    def test_trace_ends_at_result(self):
        weights = [0.3, 0.9, 0.1, 0.6]
        for key in _keys(300):
            attempts = weighted_ch3_trace(key, weights)
            self.assertEqual(attempts[-1].candidate, weighted_ch3_hash(key, weights))
            self.assertTrue(all(not a.accepted for a in attempts[:-1]))
            self.assertEqual([a.attempt for a in attempts], list(range(len(attempts))))

    def test_trace_fallback(self):
        attempts = weighted_ch3_trace(
            b"key", [0.0, 0.0], 6, base_hash=lambda k, n: 1, score=lambda k: 0
        )
        self.assertEqual(len(attempts), 6)
        self.assertFalse(any(a.accepted for a in attempts))
        self.assertTrue(all(a.threshold == 0 for a in attempts))


if __name__ == "__main__":
    unittest.main()
