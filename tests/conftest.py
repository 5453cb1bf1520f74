"""Shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mdoutline.config import Settings
from mdoutline.models import MarkdownDocument

TASKS_URI = "/project/.cospec/tasks.md"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def tasks_doc() -> MarkdownDocument:
    text = "\n".join(
        [
            "# Tasks",
            "",
            "- [ ] 1. Set up project",
            "  - [x] 1.1 Create repo",
            "    details for 1.1",
            "  - [-] 1.2 Configure CI",
            "  note under 1",
            "- [x] 2. Ship it",
            "  - [ ] 2.1 Announce",
        ]
    )
    return MarkdownDocument(uri=TASKS_URI, text=text)
