"""Parsing of slash commands typed into the development CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import shlex


@dataclass
class CLICommand:
    """Result of parsing a command string."""
    name: str
    args: List[str]


def parse_command(text: str) -> Optional[CLICommand]:
    """Return a :class:`CLICommand` from ``text`` if it starts with ``/``.

    Arguments are split shell-style, so quoted values stay together.
    Unbalanced quotes make the line unparseable.
    """
    text = text.strip()
    if not text.startswith("/"):
        return None
    try:
        parts = shlex.split(text[1:])
    except ValueError:
        return None
    if not parts:
        return None

    return CLICommand(name=parts[0].lower(), args=parts[1:])


__all__ = ["CLICommand", "parse_command"]
