"""Producer and consumer sharing a ring buffer guarded by a lock and conditions."""

from __future__ import annotations

import argparse
import random
import sys
import threading
from typing import Optional, Sequence, TextIO

DATA_SIZE = 100000
BUFFER_SIZE = 8192
ALPHABET = "ACGT"


class ConditionBuffer:
    """Fixed-size ring buffer whose fill count is protected by one lock.

    Writers wait on "not full", readers on "not empty".
    """

    def __init__(self, size: int = BUFFER_SIZE) -> None:
        if size <= 0:
            raise ValueError(f"buffer size must be positive, got {size}")
        self.size = size
        self._slots = [""] * size
        self._used = 0
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

    @property
    def used(self) -> int:
        """Number of slots currently holding unread values."""
        with self._lock:
            return self._used

    def put(self, index: int, value: str) -> None:
        """Store ``value`` at position ``index``, waiting while the buffer is full."""
        with self._lock:
            while self._used == self.size:
                self._not_full.wait()
        self._slots[index % self.size] = value
        with self._lock:
            self._used += 1
            self._not_empty.notify_all()

    def take(self, index: int) -> str:
        """Return the value at position ``index``, waiting while the buffer is empty."""
        with self._lock:
            while self._used == 0:
                self._not_empty.wait()
        value = self._slots[index % self.size]
        with self._lock:
            self._used -= 1
            self._not_full.notify_all()
        return value


class Producer(threading.Thread):
    """Fills the buffer with random nucleotide letters."""

    def __init__(
        self,
        buffer: ConditionBuffer,
        data_size: int = DATA_SIZE,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(name="producer", daemon=True)
        self.buffer = buffer
        self.data_size = data_size
        self.rng = rng if rng is not None else random.Random()

    def run(self) -> None:
        for index in range(self.data_size):
            self.buffer.put(index, self.rng.choice(ALPHABET))


class Consumer(threading.Thread):
    """Drains the buffer and writes each letter to ``output``."""

    def __init__(
        self,
        buffer: ConditionBuffer,
        data_size: int = DATA_SIZE,
        output: Optional[TextIO] = None,
    ) -> None:
        super().__init__(name="consumer", daemon=True)
        self.buffer = buffer
        self.data_size = data_size
        self.output = output if output is not None else sys.stderr

    def run(self) -> None:
        for index in range(self.data_size):
            self.output.write(self.buffer.take(index))
        self.output.write("\n")


def run(
    data_size: int = DATA_SIZE,
    buffer_size: int = BUFFER_SIZE,
    output: Optional[TextIO] = None,
    rng: Optional[random.Random] = None,
) -> None:
    """Run one producer and one consumer to completion."""
    if data_size < 0:
        raise ValueError(f"data size must not be negative, got {data_size}")
    buffer = ConditionBuffer(buffer_size)
    producer = Producer(buffer, data_size, rng)
    consumer = Consumer(buffer, data_size, output)
    producer.start()
    consumer.start()
    producer.join()
    consumer.join()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="waitconditions",
        description="Producer/consumer over a buffer guarded by wait conditions.",
    )
    parser.add_argument("--data-size", type=int, default=DATA_SIZE)
    parser.add_argument("--buffer-size", type=int, default=BUFFER_SIZE)
    args = parser.parse_args(argv)
    try:
        run(args.data_size, args.buffer_size)
    except ValueError as error:
        parser.error(str(error))
    return 0


if __name__ == "__main__":
    sys.exit(main())