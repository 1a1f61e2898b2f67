from dataclasses import dataclass
from typing import ClassVar

import pytest

from rheinsim.common import FieldChanged, Observable, round_half_up


@dataclass(eq=False)
class Gauge(Observable):
    __observed__: ClassVar[tuple[str, ...]] = ("level",)

    level: int = 0
    label: str = "gauge"


class Recorder:
    def __init__(self):
        self.events: list[FieldChanged] = []

    def __call__(self, event: FieldChanged) -> None:
        self.events.append(event)


class TestObservable:
    def test_construction_emits_nothing(self):
        recorder = Recorder()
        gauge = Gauge(level=5)
        gauge.subscribe(recorder)
        assert recorder.events == []

    def test_change_emits_old_and_new(self):
        recorder = Recorder()
        gauge = Gauge(level=5)
        gauge.subscribe(recorder)

        gauge.level = 7

        assert len(recorder.events) == 1
        event = recorder.events[0]
        assert event.source is gauge
        assert event.field == "level"
        assert (event.old, event.new) == (5, 7)

    def test_unchanged_value_emits_nothing(self):
        recorder = Recorder()
        gauge = Gauge(level=5)
        gauge.subscribe(recorder)
        gauge.level = 5
        assert recorder.events == []

    def test_unobserved_field_emits_nothing(self):
        recorder = Recorder()
        gauge = Gauge()
        gauge.subscribe(recorder)
        gauge.label = "renamed"
        assert recorder.events == []

    def test_listeners_called_in_subscription_order(self):
        calls: list[str] = []
        gauge = Gauge()
        gauge.subscribe(lambda e: calls.append("first"))
        gauge.subscribe(lambda e: calls.append("second"))
        gauge.level = 1
        assert calls == ["first", "second"]

    def test_unsubscribe_stops_delivery(self):
        recorder = Recorder()
        gauge = Gauge()
        gauge.subscribe(recorder)
        gauge.unsubscribe(recorder)
        gauge.level = 3
        assert recorder.events == []

    def test_unsubscribe_unknown_listener_is_ignored(self):
        Gauge().unsubscribe(Recorder())

    def test_listener_sees_new_value_already_set(self):
        seen: list[int] = []
        gauge = Gauge()
        gauge.subscribe(lambda e: seen.append(e.source.level))
        gauge.level = 9
        assert seen == [9]

    def test_listener_error_propagates_and_restores_value(self):
        def fail(event: FieldChanged) -> None:
            raise RuntimeError("listener failed")

        gauge = Gauge()
        gauge.subscribe(fail)
        with pytest.raises(RuntimeError, match="listener failed"):
            gauge.level = 2
        assert gauge.level == 0

    def test_later_changes_still_delivered_after_rejection(self):
        seen: list[int] = []

        def reject_negative(event: FieldChanged) -> None:
            if event.new < 0:
                raise ValueError("negative")
            seen.append(event.new)

        gauge = Gauge(level=1)
        gauge.subscribe(reject_negative)
        with pytest.raises(ValueError):
            gauge.level = -1
        gauge.level = 4
        assert gauge.level == 4
        assert seen == [4]


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(34560.0, 34560), (2.5, 3), (2.49, 2), (-2.5, -2), (0.0, 0)],
    )
    def test_rounds_halves_up(self, value: float, expected: int):
        assert round_half_up(value) == expected
