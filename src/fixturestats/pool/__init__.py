"""Match pool utilities (venue windows, head-to-head)."""

from .window import head_to_head, parse_match_date, select_window

__all__ = [
    "head_to_head",
    "parse_match_date",
    "select_window",
]
