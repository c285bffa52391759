"""Tests for bookwhen_watch.models — identifiers, events and load results."""

from __future__ import annotations

from bookwhen_watch.models import (
    ChangeSet,
    Event,
    EventStatus,
    IdKind,
    Identifier,
    SnapshotLoad,
    SnapshotLoadStatus,
)

from conftest import make_event


class TestIdentifier:
    """Identifier — source-provided and synthesized identity."""

    def test_source_provided_is_verbatim(self) -> None:
        identifier = Identifier.source_provided("ev-42")
        assert identifier.kind == IdKind.SOURCE
        assert str(identifier) == "ev-42"

    def test_synthesized_is_deterministic(self) -> None:
        a = Identifier.synthesized("Salsa", "Wed", "5", "5pm")
        b = Identifier.synthesized("Salsa", "Wed", "5", "5pm")
        assert a == b
        assert a.kind == IdKind.SYNTHESIZED
        assert a.value.startswith("syn-")
        assert len(a.value) == len("syn-") + 16

    def test_synthesized_changes_with_display_fields(self) -> None:
        before = Identifier.synthesized("Salsa", "Wed", "5", "5pm")
        after = Identifier.synthesized("Salsa", "Wed", "5", "6pm")
        assert before != after

    def test_separator_keeps_fields_apart(self) -> None:
        a = Identifier.synthesized("ab", "c", "", "")
        b = Identifier.synthesized("a", "bc", "", "")
        assert a != b


class TestEvent:
    """Event — model defaults and serialization."""

    def test_defaults(self) -> None:
        event = Event(id="a")
        assert event.status == EventStatus.UNKNOWN
        assert event.id_kind == IdKind.SOURCE
        assert event.title == ""

    def test_accepts_legacy_keys(self) -> None:
        event = Event.model_validate(
            {"id": "a", "title": "Salsa", "dow": "Wed", "day": "5", "time": "5pm", "status": "Full"}
        )
        assert event.day_of_week == "Wed"
        assert event.day_of_month == "5"
        assert event.status == EventStatus.FULL

    def test_dump_uses_field_names(self) -> None:
        data = make_event("a", EventStatus.AVAILABLE).model_dump(mode="json")
        assert data["day_of_week"] == "Wed"
        assert data["status"] == "Available"
        assert data["id_kind"] == "source"

    def test_round_trip(self) -> None:
        event = make_event("a", EventStatus.FULL)
        assert Event.model_validate(event.model_dump(mode="json")) == event

    def test_summary_line(self) -> None:
        assert make_event("a", title="Salsa", time="5pm GMT").summary_line == "Salsa — 5pm GMT"

    def test_identifier(self) -> None:
        event = Event(id="syn-0123456789abcdef", id_kind=IdKind.SYNTHESIZED)
        assert event.identifier == Identifier(kind=IdKind.SYNTHESIZED, value="syn-0123456789abcdef")


class TestChangeSet:
    def test_empty(self) -> None:
        changes = ChangeSet()
        assert not changes.has_changes
        assert changes.total == 0

    def test_reopened_only(self) -> None:
        assert ChangeSet(reopened=[make_event("a")]).has_changes


class TestSnapshotLoad:
    """SnapshotLoad — tagged read results."""

    def test_failures_have_no_events(self) -> None:
        for result in (
            SnapshotLoad.not_found(),
            SnapshotLoad.parse_error("bad json"),
            SnapshotLoad.read_error("permission denied"),
        ):
            assert result.events == []

    def test_is_corrupt(self) -> None:
        assert SnapshotLoad.parse_error("x").is_corrupt
        assert SnapshotLoad.read_error("x").is_corrupt
        assert not SnapshotLoad.not_found().is_corrupt
        assert not SnapshotLoad.loaded([]).is_corrupt

    def test_loaded(self) -> None:
        result = SnapshotLoad.loaded([make_event("a")])
        assert result.status == SnapshotLoadStatus.LOADED
        assert [e.id for e in result.events] == ["a"]
