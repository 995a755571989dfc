"""
Tests for the threaded Diffie-Hellman handshake
"""

import random

import pytest

from ecc import Curve, Point
from ecdh import Channel, HandshakeAbortedError, HandshakeState, KeyExchangeActor, exchange
from utils import NotInvertibleError

# Scalar pairs whose product is coprime to 39, the number of points on y^2 = x^3 + 6 over F_43
COPRIME_PAIRS = [(1, 1), (5, 7), (2, 11), (4, 5), (20, 23)]


class TestChannel:
    def test_fifo(self, curve_43: Curve) -> None:
        channel = Channel()
        points = [curve_43.point(13, 15), curve_43.point(9, 2), curve_43.infinity()]
        for P in points:
            channel.send(P)
        assert [channel.recv() for _ in points] == points


class TestKeyExchangeActor:
    def test_single_actor_against_prepared_inbox(self, curve_43: Curve) -> None:
        G = curve_43.point(13, 15)
        outbox, inbox = Channel(), Channel()
        peer_public = G.scalar_mul(4)
        inbox.send(peer_public)

        actor = KeyExchangeActor("Alice", G, 3, outbox=outbox, inbox=inbox)
        assert actor.state == HandshakeState.COMPUTING_PUBLIC_POINT
        shared = actor.run()

        assert actor.state == HandshakeState.DONE
        assert actor.public_key == G.scalar_mul(3)
        assert outbox.recv() == G.scalar_mul(3)
        assert shared == peer_public.scalar_mul(3)
        assert actor.shared_key == shared

    def test_negative_secret(self, curve_43: Curve) -> None:
        with pytest.raises(ValueError):
            KeyExchangeActor("Alice", curve_43.point(13, 15), -1, Channel(), Channel())


class TestExchange:
    @pytest.mark.parametrize("r_a,r_b", COPRIME_PAIRS)
    def test_same_generator_converges(self, curve_43: Curve, r_a: int, r_b: int) -> None:
        G = curve_43.point(13, 15)
        shared_a, shared_b = exchange(G, G, r_a, r_b)
        assert shared_a == shared_b
        assert shared_a == G.scalar_mul(r_a * r_b)

    @pytest.mark.parametrize("r_a,r_b", COPRIME_PAIRS)
    def test_different_generators_diverge(self, curve_43: Curve, r_a: int, r_b: int) -> None:
        G = curve_43.point(13, 15)
        H = curve_43.point(9, 2)
        shared_a, shared_b = exchange(G, H, r_a, r_b)
        assert shared_a != shared_b
        assert shared_a == H.scalar_mul(r_a * r_b)
        assert shared_b == G.scalar_mul(r_a * r_b)

    def test_commutativity(self, curve_1021: Curve) -> None:
        G = curve_1021.point(379, 1011)
        rng = random.Random(7)
        r_a, r_b = rng.randint(1, 60), rng.randint(1, 60)
        assert G.scalar_mul(r_a).scalar_mul(r_b) == G.scalar_mul(r_b).scalar_mul(r_a)

    def test_seeded_handshake(self, curve_1021: Curve) -> None:
        G = curve_1021.point(379, 1011)
        rng = random.Random(2024)
        r_a, r_b = rng.randint(1, 60), rng.randint(1, 60)
        shared_a, shared_b = exchange(G, G, r_a, r_b)
        assert shared_a == shared_b

    def test_zero_secret_gives_infinity(self, curve_43: Curve) -> None:
        G = curve_43.point(13, 15)
        shared_a, shared_b = exchange(G, G, 0, 5)
        assert shared_a == shared_b == curve_43.infinity()


class TestExchangeFailure:
    """y^2 = x^3 + x + 1 over Z/15: 4 * (0, 1) needs the inverse of 3 mod 15"""

    @pytest.fixture
    def composite_point(self) -> Point:
        return Curve(1, 1, 15).point(0, 1)

    def test_failing_party_error_reaches_caller(self, composite_point: Point) -> None:
        with pytest.raises(NotInvertibleError):
            exchange(composite_point, composite_point, 4, 1)

    def test_failing_second_party(self, composite_point: Point) -> None:
        with pytest.raises(NotInvertibleError):
            exchange(composite_point, composite_point, 1, 4)

    def test_both_parties_fail(self, composite_point: Point) -> None:
        with pytest.raises(NotInvertibleError):
            exchange(composite_point, composite_point, 4, 4)

    def test_peer_is_woken_by_abort(self, composite_point: Point) -> None:
        outbox, inbox = Channel(), Channel()
        inbox.abort()
        actor = KeyExchangeActor("Bob", composite_point, 1, outbox=outbox, inbox=inbox)
        with pytest.raises(HandshakeAbortedError):
            actor.run()
        assert actor.state == HandshakeState.FAILED
        assert outbox.recv() == composite_point

    def test_failed_actor_aborts_outbox(self, composite_point: Point) -> None:
        outbox, inbox = Channel(), Channel()
        actor = KeyExchangeActor("Alice", composite_point, 4, outbox=outbox, inbox=inbox)
        with pytest.raises(NotInvertibleError):
            actor.run()
        assert actor.state == HandshakeState.FAILED
        with pytest.raises(HandshakeAbortedError):
            outbox.recv()
