"""Tests for spaced.models dataclasses."""

from spaced.models import (CANCELLED, Context, Note, ReviewOption, SpacingMethod,
                           note_contexts)


def test_spacing_method_defaults():
    m = SpacingMethod(name="m")
    assert m.algorithm == "SuperMemo2.0"
    assert m.review_options == []
    assert m.default_interval == 1
    assert m.default_ease == 2.5
    assert m.custom_script == ""


def test_spacing_method_option_lookup():
    m = SpacingMethod(name="m", review_options=[ReviewOption("Good", 4), ReviewOption("Bad", 1)])
    assert m.option("Bad").score == 1
    assert m.option("Missing") is None


def test_context_defaults():
    c = Context(name="writing")
    assert c.active is False
    assert c.method is None


def test_note_title_and_onboarded():
    n = Note("/vault/ideas/essay.md", {"interval": 1})
    assert n.title == "essay"
    assert n.onboarded
    assert not Note("draft.txt").onboarded
    assert Note("draft.txt").title == "draft.txt"


def test_note_contexts_normalised():
    assert note_contexts({}) == []
    assert note_contexts({"contexts": ""}) == []
    assert note_contexts({"contexts": "writing"}) == ["writing"]
    assert Note("a.md", {"contexts": ["a", "b"]}).contexts == ["a", "b"]


def test_cancelled_sentinel():
    assert not CANCELLED
    assert repr(CANCELLED) == "CANCELLED"
    assert CANCELLED is not None
