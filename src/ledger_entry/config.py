"""Application configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class GitHubConfig:
    """Where and how to reach a ledger repository on GitHub."""

    owner: str = ""
    repo: str = ""
    branch: str = "main"
    token: str | None = field(default_factory=lambda: os.environ.get("GITHUB_TOKEN"))
    api_url: str = "https://api.github.com"
    timeout: float = 30.0


@dataclass
class AppConfig:
    """Configuration for the ledger entry shell."""

    # Store: "local" (a directory) or "github"
    store: str = "local"
    root: Path = field(default_factory=lambda: Path("."))
    github: GitHubConfig = field(default_factory=GitHubConfig)

    # Learning from edited "add" entries
    learning_enabled: bool = True

    log_level: str = "WARNING"
