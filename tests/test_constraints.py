"""Tests for the constraint engine and snippet rendering."""

import random

import pytest

from colour_tuner.constraints import ConstraintEngine, render_snippet, to_camel_case
from colour_tuner.params import ParameterState


@pytest.fixture
def state():
    return ParameterState()


@pytest.fixture
def engine(state):
    return ConstraintEngine(state)


def test_lower_edit_pushes_upper(state, engine):
    state.update(hueMin=100, hueMax=101)
    changes = []
    engine.subscribe(readout=lambda key, value: changes.append((key, value)))

    writes = engine.handle_input("hueMin", 150)

    assert writes == [("hueMin", 150), ("hueMax", 151)]
    assert state["hueMin"] == 150
    assert state["hueMax"] == 151
    assert engine.readout("hueMin") == "150"
    assert engine.readout("hueMax") == "151"
    assert ("hueMin", 150) in changes
    assert ("hueMax", 151) in changes


def test_upper_edit_pushes_lower(state, engine):
    state.update(satMin=80, satMax=120)
    writes = engine.handle_input("satMax", 50)
    assert writes == [("satMax", 50), ("satMin", 49)]


def test_edit_within_range_moves_only_edited_bound(state, engine):
    writes = engine.handle_input("hueMin", 40)
    assert writes == [("hueMin", 40)]
    assert state["hueMax"] == 179


def test_equal_values_are_separated(state, engine):
    state.update(valMin=10, valMax=200)
    assert engine.handle_input("valMin", 200) == [("valMin", 200), ("valMax", 201)]


def test_lower_at_limit_stays_in_domain(state, engine):
    writes = engine.handle_input("hueMin", 179)
    assert state["hueMax"] == 179
    assert state["hueMin"] == 178
    assert writes == [("hueMin", 178)]


def test_upper_at_zero_stays_in_domain(state, engine):
    state.update(satMin=0, satMax=255)
    writes = engine.handle_input("satMax", 0)
    assert state["satMin"] == 0
    assert state["satMax"] == 1
    assert writes == [("satMax", 1)]


def test_out_of_range_edits_are_clamped(state, engine):
    engine.handle_input("hueMax", 500)
    assert state["hueMax"] == 179
    engine.handle_input("hueMin", -20)
    assert state["hueMin"] == 0


def test_invariant_holds_after_random_edits(state, engine):
    rng = random.Random(1234)
    for _ in range(2000):
        pair = rng.choice(state.pairs)
        key = rng.choice(pair.keys())
        engine.handle_input(key, rng.randint(-10, pair.limit + 10))
        for p in state.pairs:
            assert 0 <= state[p.lower_key] < state[p.upper_key] <= p.limit


def test_unknown_key_raises(engine):
    with pytest.raises(KeyError):
        engine.handle_input("bogus", 1)


def test_snippet_follows_edits_and_name(engine):
    snippets = []
    engine.subscribe(snippet=snippets.append)

    engine.handle_input("hueMin", 5)
    engine.set_name("darkRed")

    assert snippets[-1] == (
        'ColourObj darkRed = new ColourObj("darkRed", '
        "new Scalar(5, 0, 0, 0), new Scalar(179, 255, 255, 0));"
    )
    assert engine.snippet == snippets[-1]


def test_blank_name_uses_default(state):
    assert render_snippet("   ", state).startswith('ColourObj myColour = new ColourObj("MyColour"')


@pytest.mark.parametrize("name, expected", [
    ("MyColour", "myColour"),
    ("dark red", "darkRed"),
    ("green", "green"),
    ("Sky Blue Two", "skyBlueTwo"),
])
def test_to_camel_case(name, expected):
    assert to_camel_case(name) == expected


def test_refresh_notifies_every_readout(state, engine):
    state.update(hueMin=3, hueMax=9)
    seen = {}
    engine.subscribe(readout=lambda key, value: seen.__setitem__(key, value))

    engine.refresh()

    assert seen["hueMin"] == 3
    assert seen["hueMax"] == 9
    assert len(seen) == 6
    assert "new Scalar(3, 0, 0, 0)" in engine.snippet
