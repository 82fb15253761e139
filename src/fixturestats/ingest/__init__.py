"""Input adapters that normalize raw match records."""

from .normalizer import (
    DEFAULT_EXCLUSION_RULES,
    FIELD_CATEGORIES,
    MATCH_FIELDS,
    FieldSpec,
    FixtureExclusionRules,
    classify_field,
    classify_keys,
    exclusion_reasons,
    is_finished,
    is_representative_fixture,
    normalize,
    normalize_many,
    resolve_field,
)

__all__ = [
    "DEFAULT_EXCLUSION_RULES",
    "FIELD_CATEGORIES",
    "MATCH_FIELDS",
    "FieldSpec",
    "FixtureExclusionRules",
    "classify_field",
    "classify_keys",
    "exclusion_reasons",
    "is_finished",
    "is_representative_fixture",
    "normalize",
    "normalize_many",
    "resolve_field",
]
