"""
Routing example using weighted CH3 hashing.

This example demonstrates:
1. Loading pool weights from a config document
2. Routing a batch of keys
3. Comparing the observed load with the weights
4. Lowering one weight and counting moved keys

Run this example:
    python -m weighted_ch3.examples.route_keys --weights 1.0,0.5,0.25,1.0
"""

import argparse
from typing import List, Optional

import numpy as np

from weighted_ch3 import WeightedCh3Config


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Route keys with weighted CH3")
    parser.add_argument(
        "--weights",
        default="1.0,0.5,0.25,1.0",
        help="comma separated server weights in [0, 1]",
    )
    parser.add_argument("--keys", type=int, default=20000, help="number of keys")
    parser.add_argument("--tries", type=int, default=32, help="probes per key")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    weights = [float(w) for w in args.weights.split(",")]
    n = len(weights)
    keys = [f"key:{i}" for i in range(args.keys)]

    print("=" * 60)
    print("Weighted CH3 Routing Example")
    print("=" * 60)

    print("\n[1] Loading pool config...")
    document = {"weights": weights}
    config = WeightedCh3Config(num_tries=args.tries)
    hash_func = config.build_hash_func(document, n)
    print(f"    Strategy: {hash_func.type()}")
    print(f"    Servers: {n}, tries: {hash_func.retry_count}")
    print(f"    Fallback probability: {hash_func.weights.failure_probability(args.tries):.3g}")

    print(f"\n[2] Routing {args.keys} keys...")
    load = hash_func.load_distribution(keys)
    expected = np.asarray(weights) / sum(weights)
    for i in range(n):
        print(f"    server {i}: weight={weights[i]:.2f} "
              f"expected={expected[i]:.3f} observed={load[i]:.3f}")

    print("\n[3] Halving the weight of server 0...")
    before = [hash_func(k) for k in keys]
    lowered = config.build_hash_func({"weights": [weights[0] / 2] + weights[1:]}, n)
    after = [lowered(k) for k in keys]
    moved = sum(1 for b, a in zip(before, after) if b != a)
    from_zero = sum(1 for b, a in zip(before, after) if b != a and b == 0)
    print(f"    Moved keys: {moved} ({moved / len(keys):.2%}), "
          f"all from server 0: {moved == from_zero}")

    print("\n    Done!")


if __name__ == "__main__":
    main()
