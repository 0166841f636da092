"""Headless tests for the Textual front end."""

from __future__ import annotations

from dataclasses import replace

import pytest

from typee.app import TypeeApp, final_wpm, render_help, render_prompt, render_stats
from typee.challenge import ChallengeState, Phase
from typee.config import Settings
from typee.keys import Key


def quiet_app(word_count: int = 1) -> TypeeApp:
    # poll rarely so samples only appear when a test asks for them
    return TypeeApp(Settings(word_count=word_count, poll_interval_sec=600.0))


# ---------------------------------------------------------------------------
# render helpers
# ---------------------------------------------------------------------------

def test_render_prompt_marks_space_under_cursor():
    state = ChallengeState.from_text("a b").apply_key(Key.char_key("a"), now=0.0)
    assert render_prompt(state).plain == "a_b"


def test_render_prompt_keeps_text_once_finished():
    state = ChallengeState.from_text("ab")
    state = state.apply_key(Key.char_key("a"), now=0.0).apply_key(Key.char_key("b"), now=1.0)
    assert render_prompt(state).plain == "ab"


def test_render_help_follows_phase():
    state = ChallengeState.from_text("d")
    assert "Start typing" in render_help(state).plain
    state = state.apply_key(Key.char_key("x"), now=0.0)
    assert state.phase is Phase.TRAILING_MISTAKE
    assert "Press space" in render_help(state).plain
    state = state.apply_key(Key.char_key(" "), now=1.0)
    assert "Done" in render_help(state).plain


def test_render_stats_shows_final_numbers():
    state = replace(
        ChallengeState.from_text("one two three"),
        cursor=13,
        finished=True,
        started_at=0.0,
        finished_at=180.0,
    )
    plain = render_stats(state, now=500.0).plain
    assert "03:00" in plain
    assert "1.0" in plain
    assert "100.0%" in plain


def test_final_wpm_is_none_for_instant_finish():
    state = ChallengeState.from_text("").apply_key(Key.char_key(" "), now=4.0)
    assert state.finished
    assert final_wpm(state) is None
    assert "WPM" in render_stats(state, now=4.0).plain


# ---------------------------------------------------------------------------
# app
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_typing_the_whole_text_finishes():
    app = quiet_app()
    async with app.run_test() as pilot:
        await pilot.press("b", "o", "n", "g", "l", "e", "space")
        assert app.state.finished
        assert app.state.accuracy_percent() == 100.0
        assert app.state.started_at is not None


@pytest.mark.asyncio
async def test_trailing_mistake_needs_space():
    app = quiet_app()
    async with app.run_test() as pilot:
        await pilot.press("b", "o", "n", "g", "l", "e", "x")
        assert app.state.phase is Phase.TRAILING_MISTAKE
        await pilot.press("z")
        assert not app.state.finished
        await pilot.press("space")
        assert app.state.finished
        assert app.state.mistyped_positions == frozenset({6})


@pytest.mark.asyncio
async def test_backspace_moves_cursor_but_keeps_mistake():
    app = quiet_app()
    async with app.run_test() as pilot:
        await pilot.press("x", "backspace")
        assert app.state.cursor == 0
        assert app.state.mistyped_positions == frozenset({0})


@pytest.mark.asyncio
async def test_input_after_finish_is_not_forwarded():
    app = quiet_app(word_count=0)
    async with app.run_test() as pilot:
        await pilot.press("space")
        finished = app.state
        assert finished.finished
        await pilot.press("a", "backspace")
        assert app.state is finished


@pytest.mark.asyncio
async def test_restart_builds_a_fresh_challenge():
    app = quiet_app(word_count=2)
    async with app.run_test() as pilot:
        await pilot.press("b", "x")
        await pilot.press("ctrl+r")
        assert app.state.cursor == 0
        assert app.state.started_at is None
        assert app.state.mistyped_positions == frozenset()
        assert app.state.word_count == 2


@pytest.mark.asyncio
async def test_timer_polls_wpm_while_in_progress():
    app = TypeeApp(Settings(word_count=1, poll_interval_sec=0.05))
    async with app.run_test() as pilot:
        await pilot.pause(0.3)
        assert app.state.wpm_samples
        assert set(app.state.wpm_samples) == {0.0}
