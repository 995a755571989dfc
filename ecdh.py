import logging
from concurrent.futures import ThreadPoolExecutor, wait
from enum import Enum
from queue import Queue
from threading import Lock
from typing import Optional, Tuple

from ecc import Point

logger = logging.getLogger(__name__)


class HandshakeState(Enum):
    COMPUTING_PUBLIC_POINT = "computing_public_point"
    AWAITING_PEER_POINT = "awaiting_peer_point"
    DONE = "done"
    FAILED = "failed"


# Placed on a channel by a party that failed before sending its point
_ABORTED = object()


class Channel:
    """Unbounded FIFO carrying points from one producer to one consumer."""

    def __init__(self):
        self._queue = Queue()
        self._recv_lock = Lock()

    def send(self, point: Point) -> None:
        self._queue.put(point)

    def abort(self) -> None:
        self._queue.put(_ABORTED)

    def recv(self) -> Point:
        # Blocks until a point arrives; there is no timeout
        with self._recv_lock:
            item = self._queue.get()
        if item is _ABORTED:
            raise HandshakeAbortedError("Peer failed before sending its public point.")
        return item


class KeyExchangeActor:
    """One party of an elliptic-curve Diffie-Hellman handshake."""

    def __init__(self, name: str, generator: Point, secret: int, outbox: Channel, inbox: Channel):
        if secret < 0:
            raise ValueError(f"Private scalar must be non-negative, got {secret}")
        self.name = name
        self.generator = generator
        self._secret = secret
        self.outbox = outbox
        self.inbox = inbox
        self.state = HandshakeState.COMPUTING_PUBLIC_POINT
        self.public_key: Optional[Point] = None
        self.shared_key: Optional[Point] = None

    def run(self) -> Point:
        # B = b * G
        try:
            self.public_key = self.generator.scalar_mul(self._secret)
        except Exception:
            # wake the peer, which would otherwise wait forever
            self.state = HandshakeState.FAILED
            self.outbox.abort()
            raise
        logger.info(f"[{self.name}] public point {self.public_key}")

        self.outbox.send(self.public_key)
        self.state = HandshakeState.AWAITING_PEER_POINT

        try:
            peer_public_key = self.inbox.recv()
        except HandshakeAbortedError:
            self.state = HandshakeState.FAILED
            raise
        logger.info(f"[{self.name}] received peer point {peer_public_key}")

        # K = b * A
        self.shared_key = peer_public_key.scalar_mul(self._secret)
        self.state = HandshakeState.DONE
        logger.info(f"[{self.name}] shared point {self.shared_key}")
        return self.shared_key


def exchange(generator_a: Point, generator_b: Point, secret_a: int, secret_b: int) -> Tuple[Point, Point]:
    """Run both halves of the handshake concurrently and return each party's shared point.

    Both parties must agree on the generator; handing them different ones
    shows how the derived secrets drift apart. If a party fails, its error is
    re-raised here in preference to the peer's abort.
    """
    a_to_b = Channel()
    b_to_a = Channel()
    alice = KeyExchangeActor("Alice", generator_a, secret_a, outbox=a_to_b, inbox=b_to_a)
    bob = KeyExchangeActor("Bob", generator_b, secret_b, outbox=b_to_a, inbox=a_to_b)

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [pool.submit(alice.run), pool.submit(bob.run)]
        wait(futures)

    errors = [f.exception() for f in futures if f.exception() is not None]
    if errors:
        errors.sort(key=lambda err: isinstance(err, HandshakeAbortedError))
        raise errors[0]
    return futures[0].result(), futures[1].result()


class HandshakeAbortedError(Exception):
    def __init__(self, message):
        self.message = f"Handshake aborted. {message}"
        super().__init__(self.message)
