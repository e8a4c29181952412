"""Tests for the saved/recent snippet registry."""

from typing import List

import pytest

from openplot.processing.custom_functions import (
    AddOutcome,
    EncodeError,
    InvalidNameError,
    ParseError,
    RenameResult,
    SnippetDescriptor,
    SnippetRegistry,
    SnippetSignals,
    encode,
)


def _snippet(name: str, equation: str = "return value", global_vars: str = "") -> SnippetDescriptor:
    return SnippetDescriptor(name=name, global_vars=global_vars, equation=equation)


@pytest.fixture
def signals():
    return SnippetSignals()


@pytest.fixture
def events(signals) -> List[str]:
    received: List[str] = []
    signals.saved_changed.connect(lambda: received.append("saved"))
    signals.recent_changed.connect(lambda: received.append("recent"))
    return received


@pytest.fixture
def registry(signals) -> SnippetRegistry:
    return SnippetRegistry(signals=signals)


def _state(registry: SnippetRegistry):
    return dict(registry.saved), dict(registry.recent)


class TestAddOrOverwriteSaved:
    def test_add_new_name(self, registry, events):
        outcome = registry.add_or_overwrite_saved("f", _snippet("f"))

        assert outcome is AddOutcome.ADDED
        assert registry.get_saved("f") == _snippet("f")
        assert events == ["saved"]

    def test_existing_name_declined_by_default(self, registry, events):
        registry.add_or_overwrite_saved("f", _snippet("f", "old"))
        events.clear()

        outcome = registry.add_or_overwrite_saved("f", _snippet("f", "new"))

        assert outcome is AddOutcome.CANCELLED
        assert registry.get_saved("f").equation == "old"
        assert events == []

    def test_existing_name_overwritten_when_confirmed(self, registry):
        registry.add_or_overwrite_saved("f", _snippet("f", "old"))
        registry.add_or_overwrite_saved("g", _snippet("g"))

        outcome = registry.add_or_overwrite_saved("f", _snippet("f", "new"), confirm=True)

        assert outcome is AddOutcome.OVERWRITTEN
        assert registry.get_saved("f").equation == "new"
        assert registry.saved_names() == ["f", "g"]

    def test_confirm_callable_receives_both_versions(self, registry):
        seen = []

        def confirm(name, existing, incoming):
            seen.append((name, existing.equation, incoming.equation))
            return True

        registry.add_or_overwrite_saved("f", _snippet("f", "old"))
        registry.add_or_overwrite_saved("f", _snippet("f", "new"), confirm=confirm)

        assert seen == [("f", "old", "new")]

    def test_injected_default_policy(self, signals):
        registry = SnippetRegistry(confirm_overwrite=lambda *_: True, signals=signals)
        registry.add_or_overwrite_saved("f", _snippet("f", "old"))

        assert registry.add_or_overwrite_saved("f", _snippet("f", "new")) is AddOutcome.OVERWRITTEN

    def test_explicit_decision_beats_default_policy(self, signals):
        registry = SnippetRegistry(confirm_overwrite=True, signals=signals)
        registry.add_or_overwrite_saved("f", _snippet("f", "old"))

        assert registry.add_or_overwrite_saved("f", _snippet("f", "new"), confirm=False) is AddOutcome.CANCELLED
        assert registry.get_saved("f").equation == "old"

    def test_descriptor_name_follows_key(self, registry):
        registry.add_or_overwrite_saved("key", _snippet("other"))
        assert registry.get_saved("key").name == "key"

    def test_empty_name_rejected(self, registry):
        with pytest.raises(InvalidNameError):
            registry.add_or_overwrite_saved("", _snippet(""))


class TestRemoveSaved:
    def test_remove_existing(self, registry, events):
        registry.add_or_overwrite_saved("f", _snippet("f"))
        events.clear()

        assert registry.remove_saved("f") is True
        assert not registry.has_saved("f")
        assert events == ["saved"]

    def test_remove_missing_is_silent(self, registry, events):
        assert registry.remove_saved("missing") is False
        assert events == []


class TestRenameSaved:
    def test_rename(self, registry):
        registry.add_or_overwrite_saved("a", _snippet("a", "x + 1", "var k = 2"))

        assert registry.rename_saved("a", "c") is RenameResult.RENAMED
        assert registry.saved_names() == ["c"]
        assert registry.get_saved("c") == _snippet("c", "x + 1", "var k = 2")

    @pytest.mark.parametrize("new_name", ["", "a"])
    def test_noop_for_empty_or_same_name(self, registry, new_name):
        registry.add_or_overwrite_saved("a", _snippet("a"))
        before = _state(registry)

        assert registry.rename_saved("a", new_name) is RenameResult.NO_OP
        assert _state(registry) == before

    def test_noop_for_unknown_name(self, registry):
        assert registry.rename_saved("ghost", "b") is RenameResult.NO_OP
        assert registry.saved_names() == []

    def test_never_overwrites(self, registry, events):
        registry.add_or_overwrite_saved("a", _snippet("a", "from a"))
        registry.add_or_overwrite_saved("b", _snippet("b", "from b"))
        events.clear()
        before = _state(registry)

        assert registry.rename_saved("a", "b") is RenameResult.CONFLICT
        assert _state(registry) == before
        assert registry.get_saved("a").equation == "from a"
        assert registry.get_saved("b").equation == "from b"
        assert events == []


class TestMoveRecentToSaved:
    def test_missing_recent_is_noop(self, registry):
        assert registry.move_recent_to_saved("nothing") is False

    def test_move_to_free_name(self, registry, events):
        registry.add_recent(_snippet("f", "x * 2"))
        events.clear()

        assert registry.move_recent_to_saved("f") is True
        assert registry.recent_names() == []
        assert registry.get_saved("f") == _snippet("f", "x * 2")
        assert events == ["saved", "recent"]

    def test_declined_overwrite_leaves_both_namespaces(self, registry):
        registry.add_or_overwrite_saved("f", _snippet("f", "saved version"))
        registry.add_recent(_snippet("f", "recent version"))
        before = _state(registry)

        assert registry.move_recent_to_saved("f", confirm=False) is False
        assert _state(registry) == before

    def test_confirmed_overwrite_moves(self, registry):
        registry.add_or_overwrite_saved("f", _snippet("f", "saved version"))
        registry.add_recent(_snippet("f", "recent version"))

        assert registry.move_recent_to_saved("f", confirm=True) is True
        assert registry.get_saved("f").equation == "recent version"
        assert registry.get_recent("f") is None

    def test_listeners_only_see_the_completed_move(self, registry, signals):
        """Both signals fire after saved holds the snippet and recent no longer does."""
        observed = []

        def record():
            observed.append((registry.has_saved("f"), registry.get_recent("f") is not None))

        signals.saved_changed.connect(record)
        signals.recent_changed.connect(record)
        registry.add_recent(_snippet("f"))
        observed.clear()

        assert registry.move_recent_to_saved("f") is True
        assert observed == [(True, False), (True, False)]

    def test_listeners_only_see_the_completed_overwriting_move(self, registry, signals):
        registry.add_or_overwrite_saved("f", _snippet("f", "saved version"))
        registry.add_recent(_snippet("f", "recent version"))
        observed = []
        signals.saved_changed.connect(
            lambda: observed.append((registry.get_saved("f").equation, registry.get_recent("f")))
        )

        assert registry.move_recent_to_saved("f", confirm=True) is True
        assert observed == [("recent version", None)]


class TestUnencodableText:
    """Text a library file cannot hold is rejected when it enters the registry."""

    def test_add_saved_rejects_control_character(self, registry, events):
        registry.add_or_overwrite_saved("good", _snippet("good"))
        events.clear()
        before = _state(registry)

        with pytest.raises(EncodeError):
            registry.add_or_overwrite_saved("pasted", _snippet("pasted", "return 1\x0c"))

        assert _state(registry) == before
        assert events == []
        assert b'"good"' in registry.export_saved()

    def test_overwrite_with_control_character_keeps_old_version(self, registry):
        registry.add_or_overwrite_saved("f", _snippet("f", "old"))

        with pytest.raises(EncodeError):
            registry.add_or_overwrite_saved("f", _snippet("f", "", "var a\x01"), confirm=True)

        assert registry.get_saved("f").equation == "old"

    def test_rename_rejects_control_character(self, registry):
        registry.add_or_overwrite_saved("a", _snippet("a"))

        with pytest.raises(EncodeError):
            registry.rename_saved("a", "b\x0c")

        assert registry.saved_names() == ["a"]
        registry.export_saved()

    def test_add_recent_rejects_control_character(self, registry):
        with pytest.raises(EncodeError):
            registry.add_recent(_snippet("r", "return\x00"))
        assert registry.recent_names() == []

    def test_move_of_unencodable_recent_leaves_both_namespaces(self, registry):
        registry.replace_recent({"live": _snippet("live", "return 1\x0c")})
        before = _state(registry)

        with pytest.raises(EncodeError):
            registry.move_recent_to_saved("live")

        assert _state(registry) == before


class TestRecentNamespace:
    def test_add_recent_replaces(self, registry):
        registry.add_recent(_snippet("f", "one"))
        registry.add_recent(_snippet("f", "two"))

        assert registry.recent_names() == ["f"]
        assert registry.get_recent("f").equation == "two"

    def test_same_name_may_exist_in_both_namespaces(self, registry):
        registry.add_or_overwrite_saved("f", _snippet("f", "saved"))
        registry.add_recent(_snippet("f", "recent"))

        assert registry.get_saved("f").equation == "saved"
        assert registry.get_recent("f").equation == "recent"

    def test_remove_recent(self, registry):
        registry.add_recent(_snippet("f"))
        assert registry.remove_recent("f") is True
        assert registry.remove_recent("f") is False

    def test_add_recent_rejects_empty_name(self, registry):
        with pytest.raises(InvalidNameError):
            registry.add_recent(_snippet(""))


class TestImportExport:
    def test_import_replaces_saved(self, registry, events):
        registry.add_or_overwrite_saved("old", _snippet("old"))
        events.clear()

        count = registry.import_saved(encode({"new": _snippet("new")}))

        assert count == 1
        assert registry.saved_names() == ["new"]
        assert events == ["saved"]

    def test_failed_import_keeps_saved(self, registry):
        registry.add_or_overwrite_saved("keep", _snippet("keep"))

        with pytest.raises(ParseError):
            registry.import_saved(b"<broken")

        assert registry.saved_names() == ["keep"]

    def test_import_does_not_touch_recent(self, registry):
        registry.add_recent(_snippet("r"))
        registry.import_saved(b"<snippets/>")
        assert registry.recent_names() == ["r"]

    def test_export_is_sorted(self, registry):
        for name in ["zeta", "alpha", "mid"]:
            registry.add_or_overwrite_saved(name, _snippet(name))

        exported = registry.export_saved()

        assert exported.index(b'"alpha"') < exported.index(b'"mid"') < exported.index(b'"zeta"')

    def test_import_rename_export_scenario(self, registry):
        a = _snippet("A", "return value + 1", "var a = 1")
        b = _snippet("B", "return value * 2", "")
        registry.import_saved(encode({"A": a, "B": b}))

        assert registry.rename_saved("A", "C") is RenameResult.RENAMED
        assert set(registry.saved_names()) == {"C", "B"}

        other = SnippetRegistry(signals=SnippetSignals())
        other.import_saved(registry.export_saved())

        assert set(other.saved_names()) == {"C", "B"}
        assert other.get_saved("C") == SnippetDescriptor("C", a.global_vars, a.equation)
        assert other.get_saved("B") == b


def test_keys_stay_unique_across_operations(registry):
    registry.add_or_overwrite_saved("a", _snippet("a"))
    registry.add_or_overwrite_saved("b", _snippet("b"))
    registry.add_or_overwrite_saved("a", _snippet("a", "again"), confirm=True)
    registry.rename_saved("a", "b")
    registry.rename_saved("b", "c")
    registry.add_or_overwrite_saved("c", _snippet("c"), confirm=False)
    registry.remove_saved("a")
    registry.add_or_overwrite_saved("a", _snippet("a"))

    names = registry.saved_names()
    assert len(names) == len(set(names))
    assert names == ["a", "c"]
    assert all(registry.get_saved(name).name == name for name in names)
