from __future__ import annotations

import pytest

from traction_ai.telemetry.buffer import DEFAULT_BUFFER_CAPACITY, TelemetryBuffer

from tests.helpers import build_sample, slip_series


def test_buffer_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValueError):
        TelemetryBuffer(0)


def test_empty_buffer_has_no_latest_sample() -> None:
    buffer = TelemetryBuffer()

    assert buffer.latest() is None
    assert buffer.window(5) == ()
    assert len(buffer) == 0
    assert not buffer


def test_append_keeps_arrival_order() -> None:
    buffer = TelemetryBuffer()
    samples = slip_series([1.0, 2.0, 3.0])
    for sample in samples:
        buffer.append(sample)

    assert list(buffer) == samples
    assert buffer.latest() is samples[-1]


def test_twenty_first_sample_evicts_the_oldest() -> None:
    buffer = TelemetryBuffer()
    samples = slip_series(range(21))
    evicted = [buffer.append(sample) for sample in samples]

    assert DEFAULT_BUFFER_CAPACITY == 20
    assert len(buffer) == 20
    assert evicted[:20] == [None] * 20
    assert evicted[20] is samples[0]
    assert list(buffer)[0] is samples[1]


def test_window_after_twenty_five_appends_returns_samples_six_to_twenty_five() -> None:
    buffer = TelemetryBuffer()
    samples = slip_series(range(1, 26))
    for sample in samples:
        buffer.append(sample)

    window = buffer.window(20)

    assert window == tuple(samples[5:])
    assert window[0].timestamp == "t006"
    assert window[-1].timestamp == "t025"


def test_window_is_clamped_to_available_samples() -> None:
    buffer = TelemetryBuffer(capacity=4)
    samples = slip_series([1.0, 2.0, 3.0])
    for sample in samples:
        buffer.append(sample)

    assert buffer.window(2) == tuple(samples[1:])
    assert buffer.window(10) == tuple(samples)
    assert buffer.window(0) == ()
    assert buffer.window(-3) == ()


def test_length_never_exceeds_capacity() -> None:
    buffer = TelemetryBuffer(capacity=3)
    for index in range(10):
        buffer.append(build_sample(timestamp=f"s{index}"))
        assert len(buffer) <= 3

    assert [sample.timestamp for sample in buffer] == ["s7", "s8", "s9"]


def test_clear_empties_buffer() -> None:
    buffer = TelemetryBuffer()
    buffer.append(build_sample())
    buffer.clear()

    assert buffer.latest() is None
    assert buffer.capacity == DEFAULT_BUFFER_CAPACITY
