import io
import random
import threading

import pytest

from qthreadlab.semaphores import (
    ALPHABET,
    BUFFER_SIZE,
    DATA_SIZE,
    Consumer,
    Producer,
    SemaphoreBuffer,
    main,
    run,
)


def test_default_sized_buffer_fills_then_blocks():
    assert DATA_SIZE == 100000
    assert ALPHABET == "ACGT"
    buffer = SemaphoreBuffer(BUFFER_SIZE)
    for index in range(BUFFER_SIZE):
        buffer.put(index, ALPHABET[index % len(ALPHABET)])
    writer = threading.Thread(
        target=buffer.put, args=(BUFFER_SIZE, "T"), daemon=True
    )
    writer.start()
    writer.join(0.1)
    assert writer.is_alive()
    assert buffer.take(0) == "A"
    writer.join(2)
    assert not writer.is_alive()
    assert buffer.take(1) == "C"
    assert BUFFER_SIZE == 8192


def test_buffer_keeps_order():
    buffer = SemaphoreBuffer(4)
    for index, letter in enumerate("ACG"):
        buffer.put(index, letter)
    assert [buffer.take(i) for i in range(3)] == ["A", "C", "G"]


def test_buffer_rejects_nonpositive_size():
    with pytest.raises(ValueError):
        SemaphoreBuffer(0)


def test_put_blocks_when_full():
    buffer = SemaphoreBuffer(2)
    buffer.put(0, "A")
    buffer.put(1, "C")
    writer = threading.Thread(target=buffer.put, args=(2, "G"), daemon=True)
    writer.start()
    writer.join(0.1)
    assert writer.is_alive()
    assert buffer.take(0) == "A"
    writer.join(2)
    assert not writer.is_alive()
    assert buffer.take(1) == "C"
    assert buffer.take(2) == "G"


def test_take_blocks_when_empty():
    buffer = SemaphoreBuffer(2)
    result = []
    reader = threading.Thread(target=lambda: result.append(buffer.take(0)), daemon=True)
    reader.start()
    reader.join(0.1)
    assert reader.is_alive()
    buffer.put(0, "T")
    reader.join(2)
    assert result == ["T"]


def test_run_writes_letters_and_newline():
    output = io.StringIO()
    run(500, 16, output, random.Random(1))
    text = output.getvalue()
    assert len(text) == 501
    assert text.endswith("\n")
    assert set(text[:-1]) <= set(ALPHABET)


def test_run_is_deterministic_for_seed():
    first = io.StringIO()
    second = io.StringIO()
    run(300, 7, first, random.Random(42))
    run(300, 7, second, random.Random(42))
    assert first.getvalue() == second.getvalue()


def test_consumer_sees_producer_order():
    buffer = SemaphoreBuffer(3)
    source = io.StringIO()
    producer = Producer(buffer, 50, random.Random(5))
    consumer = Consumer(buffer, 50, source)
    producer.start()
    consumer.start()
    producer.join(5)
    consumer.join(5)
    other = io.StringIO()
    run(50, 50, other, random.Random(5))
    assert source.getvalue() == other.getvalue()


def test_run_zero_items_writes_only_newline():
    output = io.StringIO()
    run(0, 4, output)
    assert output.getvalue() == "\n"


def test_run_rejects_negative_size():
    with pytest.raises(ValueError):
        run(-1, 4, io.StringIO())


def test_main_prints_to_stderr(capsys):
    assert main(["--data-size", "40", "--buffer-size", "8"]) == 0
    err = capsys.readouterr().err
    assert len(err) == 41
    assert set(err.strip()) <= set(ALPHABET)


def test_main_rejects_bad_buffer_size():
    with pytest.raises(SystemExit):
        main(["--data-size", "5", "--buffer-size", "0"])