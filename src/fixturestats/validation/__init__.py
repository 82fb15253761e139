"""Consistency validation over statistic panels."""

from .validator import ConsistencyValidator, validate

__all__ = [
    "ConsistencyValidator",
    "validate",
]
