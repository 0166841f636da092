from __future__ import annotations

import logging
import time
from typing import Dict, Mapping, Optional

try:
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Container
    from textual.widgets import Footer, Header, Sparkline, Static
except ModuleNotFoundError as exc:
    missing = getattr(exc, "name", "")
    hint = "python3 -m pip install -U rich textual"
    print(f"Missing dependency '{missing}'. Install with: {hint}")
    raise SystemExit(1) from exc

from .challenge import ChallengeState, CharStatus, Phase, generate
from .config import Settings
from .keys import classify

logger = logging.getLogger(__name__)

PALETTE: Dict[str, str] = {
    "title": "#e5e7eb",
    "muted": "#64748b",
    "hint": "#93c5fd",
    "ok": "#a7f3d0",
    "bad": "#fca5a5",
    "active_fg": "#e5e7eb",
    "upcoming": "#cbd5e1",
    "prompt_bg": "#0b1220",
    "flash": "#3f1d2a",
    "bar_fg": "#60a5fa",
}

GLOBAL_KEYS = {"ctrl+q", "ctrl+r"}


# ---------------------------
# UI widgets
# ---------------------------

class StatsBar(Static):
    """Live stats line."""


class PromptView(Static):
    """Target text, coloured per character."""


class SpeedGraph(Sparkline):
    """Running WPM samples."""


class HelpBar(Static):
    """Help / controls."""


def render_prompt(state: ChallengeState, theme: Mapping[str, str] = PALETTE) -> Text:
    text = Text()
    for i, ch in enumerate(state.text):
        status = state.char_status(i)
        if status is CharStatus.CORRECT:
            text.append(ch, style=f"bold {theme['ok']}")
        elif status is CharStatus.INCORRECT:
            text.append(ch, style=f"bold {theme['bad']}")
        elif i == state.cursor:
            text.append("_" if ch == " " else ch, style=f"bold {theme['active_fg']} underline")
        else:
            text.append(ch, style=theme["upcoming"])
    return text


def final_wpm(state: ChallengeState) -> Optional[float]:
    """Final WPM, or None when the whole run fit inside a single keystroke."""
    if state.started_at is None or state.finished_at is None:
        return None
    if state.finished_at <= state.started_at:
        return None
    return state.wpm()


def render_stats(state: ChallengeState, now: float, theme: Mapping[str, str] = PALETTE) -> Text:
    if state.finished:
        speed = final_wpm(state) or 0.0
        label = "WPM "
    else:
        speed = state.live_wpm
        label = "Live WPM "
    elapsed = 0.0
    if state.started_at is not None:
        end = state.finished_at if state.finished_at is not None else now
        elapsed = max(0.0, end - state.started_at)
    minutes = int(elapsed) // 60
    seconds = int(elapsed) % 60

    text = Text()
    text.append("Time ", style=theme["muted"])
    text.append(f"{minutes:02d}:{seconds:02d}", style=f"bold {theme['title']}")
    text.append("   ", style=theme["muted"])
    text.append(label, style=theme["muted"])
    text.append(f"{speed:>5.1f}", style=f"bold {theme['title']}")
    text.append("   ", style=theme["muted"])
    text.append("Acc ", style=theme["muted"])
    text.append(f"{state.accuracy_percent():>5.1f}%", style=f"bold {theme['title']}")
    text.append("   ", style=theme["muted"])
    text.append("Progress ", style=theme["muted"])
    text.append(f"{state.cursor}/{state.text_length}", style=theme["bar_fg"])
    return text


def render_help(state: ChallengeState, theme: Mapping[str, str] = PALETTE) -> Text:
    text = Text()
    if state.started_at is None:
        text.append("Start typing to begin. ", style=theme["hint"])
    elif state.phase is Phase.TRAILING_MISTAKE:
        text.append("Press space to finish. ", style=theme["hint"])
    elif state.phase is Phase.FINISHED:
        text.append("Done. ", style=theme["hint"])
    text.append("Ctrl+R new challenge", style=theme["hint"])
    text.append("  ", style=theme["muted"])
    text.append("Ctrl+Q quit", style=theme["hint"])
    return text


# ---------------------------
# App
# ---------------------------

class TypeeApp(App):
    CSS = """
    Screen {
        background: transparent;
    }

    #root {
        height: 100%;
        padding: 1 2;
    }

    StatsBar {
        background: #0f172a;
        border: round #1f2937;
        padding: 0 2;
        height: 3;
    }

    SpeedGraph {
        border: round #1f2937;
        height: 5;
    }

    HelpBar {
        background: #0f172a;
        border: round #1f2937;
        padding: 0 2;
        height: 3;
    }

    PromptView {
        background: #0b1220;
        border: round #1f2937;
        padding: 1 2;
        height: 1fr;
    }
    """

    TITLE = "typee"
    SUB_TITLE = "typing practice"

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+r", "restart", "New challenge"),
    ]

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self.settings = settings or Settings()
        self.state = generate(self.settings.word_count)
        self.flash_error = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="root"):
            self.stats_bar = StatsBar()
            self.speed_graph = SpeedGraph([0.0], summary_function=max)
            self.help_bar = HelpBar()
            self.prompt_view = PromptView()
            yield self.stats_bar
            yield self.speed_graph
            yield self.help_bar
            yield self.prompt_view
        yield Footer()

    def on_mount(self) -> None:
        self.set_interval(self.settings.poll_interval_sec, self._tick)
        self._render_all()

    def _tick(self) -> None:
        if self.state.finished:
            return
        self.state = self.state.poll_wpm()
        self.speed_graph.data = list(self.state.wpm_samples)
        self._render_stats()

    def action_restart(self) -> None:
        logger.info("starting a new %d-word challenge", self.settings.word_count)
        self.state = generate(self.settings.word_count)
        self.speed_graph.data = [0.0]
        self._render_all()

    def on_key(self, event: events.Key) -> None:
        if event.key in GLOBAL_KEYS:
            return
        if self.state.finished:
            # the model rejects input after finishing; stop forwarding here
            return
        key = classify(event.key, event.character)
        before = self.state
        self.state = self.state.apply_key(key)
        if len(self.state.mistyped_positions) > len(before.mistyped_positions):
            self._trigger_flash()
        if self.state.finished and not before.finished:
            logger.info(
                "challenge complete: %s wpm, %.1f%% accuracy",
                final_wpm(self.state),
                self.state.accuracy_percent(),
            )
        self._render_all()

    def _trigger_flash(self) -> None:
        if self.flash_error:
            return
        self.flash_error = True
        self.prompt_view.styles.background = PALETTE["flash"]
        self.set_timer(0.12, self._clear_flash)

    def _clear_flash(self) -> None:
        self.flash_error = False
        self.prompt_view.styles.background = PALETTE["prompt_bg"]

    def _render_all(self) -> None:
        self._render_stats()
        self.help_bar.update(render_help(self.state))
        self.prompt_view.update(render_prompt(self.state))

    def _render_stats(self) -> None:
        self.stats_bar.update(render_stats(self.state, time.monotonic()))
