"""Producer and consumer sharing a ring buffer guarded by two semaphores."""

from __future__ import annotations

import argparse
import random
import sys
import threading
from typing import Optional, Sequence, TextIO

DATA_SIZE = 100000
BUFFER_SIZE = 8192
ALPHABET = "ACGT"


class SemaphoreBuffer:
    """Fixed-size ring buffer; one semaphore counts free slots, one used slots."""

    def __init__(self, size: int = BUFFER_SIZE) -> None:
        if size <= 0:
            raise ValueError(f"buffer size must be positive, got {size}")
        self.size = size
        self._slots = [""] * size
        self._free = threading.Semaphore(size)
        self._used = threading.Semaphore(0)

    def put(self, index: int, value: str) -> None:
        """Store ``value`` at position ``index``, waiting for a free slot."""
        self._free.acquire()
        self._slots[index % self.size] = value
        self._used.release()

    def take(self, index: int) -> str:
        """Return the value at position ``index``, waiting until one is there."""
        self._used.acquire()
        value = self._slots[index % self.size]
        self._free.release()
        return value


class Producer(threading.Thread):
    """Fills the buffer with random nucleotide letters."""

    def __init__(
        self,
        buffer: SemaphoreBuffer,
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
        buffer: SemaphoreBuffer,
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
    buffer = SemaphoreBuffer(buffer_size)
    producer = Producer(buffer, data_size, rng)
    consumer = Consumer(buffer, data_size, output)
    producer.start()
    consumer.start()
    producer.join()
    consumer.join()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="semaphores",
        description="Producer/consumer over a buffer guarded by semaphores.",
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