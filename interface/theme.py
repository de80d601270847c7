"""Styles for the sync status line."""

from typing import Dict

from prompt_toolkit.styles import Style

STATUS_PALETTE: Dict[str, str] = {
    "": "#d7dfe6",
    "status.fail": "#e06c75 bold",
    "text.dim": "#97a0a9",
    "icon.check": "#9ad974 bold",
    "icon.warn": "#f9ac60 bold",
}


def build_style() -> Style:
    return Style.from_dict(dict(STATUS_PALETTE))
