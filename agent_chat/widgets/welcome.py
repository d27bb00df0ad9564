"""Greeting shown while the conversation is empty."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Static

AGENT_AREAS: tuple[tuple[str, str], ...] = (
    ("Web Development", "Build websites, APIs, and applications"),
    ("Content Writing", "Create engaging content and copy"),
    ("Digital Marketing", "Strategy, campaigns, and analytics"),
)


class WelcomePanel(Vertical):
    """Empty-state greeting listing the specialised agents."""

    DEFAULT_CSS = """
    WelcomePanel {
        height: auto;
        align-horizontal: center;
        padding: 2 4;
    }
    WelcomePanel > #welcome-title {
        text-style: bold;
        content-align: center middle;
        width: 100%;
    }
    WelcomePanel > #welcome-intro {
        color: $text-muted;
        content-align: center middle;
        width: 100%;
        margin-bottom: 1;
    }
    WelcomePanel .agent-card {
        width: 1fr;
        height: auto;
        border: round $panel;
        padding: 0 1;
        margin: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("How can I help you today?", id="welcome-title")
        yield Static(
            "I'm your AI assistant with specialized agents for content writing, "
            "digital marketing, and web development.",
            id="welcome-intro",
        )
        with Horizontal(id="agent-cards"):
            for title, blurb in AGENT_AREAS:
                yield Static(f"[b]{title}[/b]\n{blurb}", classes="agent-card")
