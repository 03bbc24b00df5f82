import pytest

from src.llms.personas import (
    PERSONAS,
    REVEAL_AFTER_TURN,
    PersonaBand,
    render_system_prompt,
    select_persona,
)
from tests.conftest import FIXED_FACTS


@pytest.mark.parametrize(
    "turn, band",
    [
        (1, PersonaBand.BASELINE),
        (2, PersonaBand.BASELINE),
        (3, PersonaBand.REPEAT),
        (4, PersonaBand.REPEAT),
        (5, PersonaBand.STALL),
        (6, PersonaBand.STALL),
        (7, PersonaBand.MAX_FRUSTRATION),
        (10, PersonaBand.MAX_FRUSTRATION),
        (11, PersonaBand.MAX_FRUSTRATION),
        (40, PersonaBand.MAX_FRUSTRATION),
    ],
)
def test_standard_mode_bands(turn, band):
    assert select_persona(turn).band is band


@pytest.mark.parametrize(
    "turn, band",
    [
        (1, PersonaBand.BASELINE),
        (10, PersonaBand.MAX_FRUSTRATION),
        (11, PersonaBand.REVEAL),
        (25, PersonaBand.REVEAL),
    ],
)
def test_hidden_facts_mode_reveals_after_threshold(turn, band):
    assert select_persona(turn, reveal_enabled=True).band is band


def test_turn_must_be_positive():
    with pytest.raises(ValueError):
        select_persona(0)


def test_uncovered_turn_raises_lookup_error(monkeypatch):
    baseline_only = tuple(p for p in PERSONAS if p.band is PersonaBand.BASELINE)
    monkeypatch.setattr("src.llms.personas.PERSONAS", baseline_only)

    assert select_persona(2).band is PersonaBand.BASELINE
    with pytest.raises(LookupError):
        select_persona(3)


def test_reveal_row_is_the_only_one_needing_facts():
    assert [p.band for p in PERSONAS if p.requires_hidden_facts] == [PersonaBand.REVEAL]
    assert REVEAL_AFTER_TURN == 10


def test_prompt_is_identical_within_a_band():
    assert render_system_prompt(select_persona(1)) == render_system_prompt(select_persona(2))
    assert render_system_prompt(select_persona(7)) == render_system_prompt(select_persona(9))


def test_turn_one_and_turn_seven_differ_materially():
    first = render_system_prompt(select_persona(1))
    seventh = render_system_prompt(select_persona(7))

    assert first != seventh
    assert "polite but vague" in first.lower()
    assert "maximally frustrating" in seventh.lower()
    assert "maximally frustrating" not in first.lower()


def test_location_is_withheld_until_reveal_band():
    sentence = "Your package is currently in Springfield, IL."
    for turn in range(1, REVEAL_AFTER_TURN + 1):
        prompt = render_system_prompt(select_persona(turn, reveal_enabled=True), FIXED_FACTS)
        assert sentence not in prompt
        assert "Do NOT reveal the package location" in prompt

    reveal = render_system_prompt(select_persona(REVEAL_AFTER_TURN + 1, reveal_enabled=True), FIXED_FACTS)
    assert sentence in reveal


def test_facts_block_only_present_with_facts():
    without = render_system_prompt(select_persona(3))
    with_facts = render_system_prompt(select_persona(3), FIXED_FACTS)

    assert "739182645" not in without
    assert "739182645" in with_facts
    assert "Alex Johnson" in with_facts
