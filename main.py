import argparse
import logging
import random
import sys

from Crypto.Random import random as strong_random

from curves import ECDHSetup
from ecdh import exchange
from utils import count_points, derive_key, generate_private_key, ECCError

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Toy elliptic-curve arithmetic and ECDH demo")
    parser.add_argument("-c", "--curve", default="F1021-A", choices=ECDHSetup.supported_curves(), help="Example curve to use (default: F1021-A)")
    parser.add_argument("-k", "--scalar", type=int, default=3, help="Multiplier for k * G (default: 3)")
    parser.add_argument("-t", "--target", type=int, nargs=2, metavar=("X", "Y"), help="Recover k such that k * G equals this point")
    parser.add_argument("--count-points", action="store_true", help="Enumerate the curve's points and check the Hasse bound")
    parser.add_argument("--alternate-generator", action="store_true", help="Give the second party the curve's alternate generator")
    parser.add_argument("--seed", type=int, help="Seed for reproducible private scalars")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Set the logging level (default: WARNING)")
    args = parser.parse_args(argv)

    if args.scalar < 0:
        parser.error("Scalar must be non-negative.")
    return args


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    setup = ECDHSetup(args.curve).generate_setup()
    curve = setup.weierstrass_curve()
    G = setup.G
    rng = random.Random(args.seed) if args.seed is not None else strong_random

    print(f"=== {curve} ===")
    print(f"Generator (G): {G}")

    try:
        print(f"{args.scalar} * G = {G.scalar_mul(args.scalar)}")

        if args.target:
            target = curve.point(*args.target)
            k = G.naive_factor(target)
            if k is None:
                print(f"{target} is not a multiple of G")
            else:
                print(f"{target} = {k} * G")

        if args.count_points:
            print(f"Number of points: {count_points(curve)}")

        # === ECDH ===
        H = G
        if args.alternate_generator:
            if setup.H is None:
                print(f"{args.curve} has no alternate generator", file=sys.stderr)
                return 1
            H = setup.H
        n = G.order()
        r_alice = generate_private_key(rng, 1, n - 1)
        r_bob = generate_private_key(rng, 1, n - 1)
        shared_alice, shared_bob = exchange(G, H, r_alice, r_bob)
        print(f"[Alice] shared point: {shared_alice}")
        print(f"[Bob] shared point: {shared_bob}")
        if shared_alice == shared_bob and not shared_alice.is_infinity():
            print(f"Shared key: {derive_key(shared_alice).hex()}")
        else:
            print("Shared secrets differ" if shared_alice != shared_bob else "Shared point is at infinity")
    except ECCError as err:
        logger.error(err.message)
        print(f"Error: {err.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
