"""CLI entrypoint for agent-chat."""

from __future__ import annotations

import argparse
from importlib import metadata
from pathlib import Path
from typing import Sequence

from .app import AgentChatApp
from .config import ensure_config_dir


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-chat", description="AI Multi Agents chat TUI"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an alternative config.toml",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Ensure configuration exists, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("agent-chat-tui")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"agent-chat {version}")
        return

    if args.config is None:
        ensure_config_dir()
    app = AgentChatApp(config_path=args.config)
    app.run()


if __name__ == "__main__":
    main()
