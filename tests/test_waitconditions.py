import io
import random
import threading

import pytest

from qthreadlab.waitconditions import (
    ALPHABET,
    BUFFER_SIZE,
    DATA_SIZE,
    ConditionBuffer,
    Consumer,
    Producer,
    main,
    run,
)


def test_default_sized_buffer_fills_then_waits():
    assert DATA_SIZE == 100000
    buffer = ConditionBuffer(BUFFER_SIZE)
    for index in range(BUFFER_SIZE):
        buffer.put(index, ALPHABET[index % len(ALPHABET)])
    assert buffer.used == 8192
    writer = threading.Thread(
        target=buffer.put, args=(BUFFER_SIZE, "G"), daemon=True
    )
    writer.start()
    writer.join(0.1)
    assert writer.is_alive()
    assert buffer.take(0) == ALPHABET[0]
    writer.join(2)
    assert not writer.is_alive()
    assert buffer.used == 8192


def test_buffer_counts_used_slots():
    buffer = ConditionBuffer(4)
    buffer.put(0, "A")
    buffer.put(1, "G")
    assert buffer.used == 2
    assert buffer.take(0) == "A"
    assert buffer.used == 1
    assert buffer.take(1) == "G"
    assert buffer.used == 0


def test_buffer_rejects_nonpositive_size():
    with pytest.raises(ValueError):
        ConditionBuffer(-3)


def test_put_waits_until_not_full():
    buffer = ConditionBuffer(1)
    buffer.put(0, "C")
    writer = threading.Thread(target=buffer.put, args=(1, "T"), daemon=True)
    writer.start()
    writer.join(0.1)
    assert writer.is_alive()
    assert buffer.take(0) == "C"
    writer.join(2)
    assert not writer.is_alive()
    assert buffer.take(1) == "T"


def test_take_waits_until_not_empty():
    buffer = ConditionBuffer(3)
    result = []
    reader = threading.Thread(target=lambda: result.append(buffer.take(0)), daemon=True)
    reader.start()
    reader.join(0.1)
    assert reader.is_alive()
    buffer.put(0, "A")
    reader.join(2)
    assert result == ["A"]
    assert buffer.used == 0


def test_run_writes_letters_and_newline():
    output = io.StringIO()
    run(600, 5, output, random.Random(3))
    text = output.getvalue()
    assert len(text) == 601
    assert text.endswith("\n")
    assert set(text[:-1]) <= set(ALPHABET)


def test_output_independent_of_buffer_size():
    small = io.StringIO()
    large = io.StringIO()
    run(200, 2, small, random.Random(9))
    run(200, 500, large, random.Random(9))
    assert small.getvalue() == large.getvalue()


def test_threads_leave_buffer_empty():
    buffer = ConditionBuffer(4)
    output = io.StringIO()
    producer = Producer(buffer, 100, random.Random(11))
    consumer = Consumer(buffer, 100, output)
    producer.start()
    consumer.start()
    producer.join(5)
    consumer.join(5)
    assert buffer.used == 0
    assert len(output.getvalue()) == 101


def test_run_rejects_negative_size():
    with pytest.raises(ValueError):
        run(-5, 4, io.StringIO())


def test_main_prints_to_stderr(capsys):
    assert main(["--data-size", "30", "--buffer-size", "4"]) == 0
    err = capsys.readouterr().err
    assert len(err) == 31
    assert err.endswith("\n")


def test_main_rejects_bad_buffer_size():
    with pytest.raises(SystemExit):
        main(["--data-size", "3", "--buffer-size", "0"])