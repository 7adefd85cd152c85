"""CLI entrypoint: python -m ledger_entry"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from prompt_toolkit import PromptSession

from ledger_entry.commands import LogEntry, LogLevel
from ledger_entry.config import AppConfig, GitHubConfig
from ledger_entry.core.protocols import FileStore
from ledger_entry.session import Session
from ledger_entry.store import GitHubFileStore, LocalFileStore

PROMPT = "ledger> "
CONTINUATION_PROMPT = "...... "

_LEVEL_PREFIX = {
    LogLevel.INFO: "",
    LogLevel.SUCCESS: "[ok] ",
    LogLevel.WARNING: "[warn] ",
    LogLevel.ERROR: "[error] ",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ledger-entry",
        description="Ledger Entry: natural-language transactions into plain-text ledger journals",
    )
    p.add_argument("--store", choices=["local", "github"], default="local",
                    help="Where the ledger repository lives (default: local)")
    p.add_argument("--root", type=Path, default=Path("."),
                    help="Ledger directory for the local store (default: .)")

    # GitHub
    p.add_argument("--owner", default="", help="GitHub repository owner")
    p.add_argument("--repo", default="", help="GitHub repository name")
    p.add_argument("--branch", default="main", help="Branch to commit to (default: main)")
    p.add_argument("--token", default=os.environ.get("GITHUB_TOKEN"),
                    help="GitHub token (default: $GITHUB_TOKEN)")
    p.add_argument("--api-url", default="https://api.github.com", help="GitHub API base URL")
    p.add_argument("--timeout", type=float, default=30.0,
                    help="HTTP timeout in seconds (default: 30)")

    p.add_argument("--no-learning", action="store_true",
                    help="Do not learn rules from edited entries")

    # Logging
    p.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    github = GitHubConfig(
        owner=args.owner,
        repo=args.repo,
        branch=args.branch,
        token=args.token,
        api_url=args.api_url,
        timeout=args.timeout,
    )
    return AppConfig(
        store=args.store,
        root=args.root,
        github=github,
        learning_enabled=not args.no_learning,
        log_level=args.log_level,
    )


def create_store(config: AppConfig) -> FileStore:
    if config.store == "github":
        if not config.github.owner or not config.github.repo:
            raise SystemExit("--owner and --repo are required for the github store")
        return GitHubFileStore(config.github)
    return LocalFileStore(config.root)


def render(entry: LogEntry) -> str:
    return f"{_LEVEL_PREFIX[entry.level]}{entry.message}"


async def read_input(prompt_session: PromptSession) -> str | None:
    """Read one unit of input. A line starting with a digit opens a
    multi-line entry that ends at the first blank line.

    Awaiting the prompt keeps the event loop free, so background learning
    from the previous entry runs while the user types.
    """
    try:
        line = await prompt_session.prompt_async(PROMPT)
    except EOFError:
        return None
    if not line[:1].isdigit():
        return line

    lines = [line]
    while True:
        try:
            more = await prompt_session.prompt_async(CONTINUATION_PROMPT)
        except EOFError:
            break
        if not more.strip():
            break
        lines.append(more)
    return "\n".join(lines)


async def run(config: AppConfig, prompt_session: PromptSession | None = None) -> None:
    store = create_store(config)
    prompt_session = prompt_session or PromptSession()
    session = Session(store, learning_enabled=config.learning_enabled)
    shown = 0
    try:
        while True:
            text = await read_input(prompt_session)
            if text is None or text.strip() in ("exit", "quit"):
                break
            await session.handle(text)
            if shown > len(session.log.entries):
                shown = 0
            for entry in session.log.entries[shown:]:
                print(render(entry))
            shown = len(session.log.entries)
    finally:
        await session.drain()
        for entry in session.log.entries[shown:]:
            print(render(entry))
        if isinstance(store, GitHubFileStore):
            await store.close()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = build_config(args)
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        print(file=sys.stderr)


if __name__ == "__main__":
    main()
