"""Provenance marker carried in mirrored card descriptions.

A mirrored card's description starts with ``Original board: <name>``, a blank line,
and then the source card's own description. The marker is parsed into a
:class:`Provenance` once, at the point a description enters the engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

MARKER_PREFIX = "Original board: "

_MARKER_RE = re.compile(r"^Original board: (.*)$")


@dataclass(frozen=True)
class Provenance:
    source_board_name: str


def format_mirror_description(source_board_name: str, description: str | None) -> str:
    return f"{MARKER_PREFIX}{source_board_name}\n\n{description or ''}"


def parse_provenance(description: str | None) -> Provenance | None:
    """Parse the marker from the first line of *description*."""
    if not description:
        return None
    first_line = description.split("\n", 1)[0].rstrip("\r")
    match = _MARKER_RE.match(first_line)
    if match is None:
        return None
    name = match.group(1).strip()
    if not name:
        return None
    return Provenance(source_board_name=name)
