"""Shared CLI formatting helpers."""

from __future__ import annotations


def format_comma_or_none(values: list[str]) -> str:
    if not values:
        return "none"
    return ", ".join(values)


def mode_label(dry_run: bool) -> str:
    return "dry-run" if dry_run else "apply"
