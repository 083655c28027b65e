#!/usr/bin/env python3
"""
Concept constraint engine.

Lexically analyses submitted source and reports:
- warnings: concepts used before the challenge that introduces them
- violations: breaches of the challenge/topic constraint profile
"""

from .concepts import Concept, CONCEPT_NAMES, LEGACY_MINIMUMS
from .tokenizer import (
    Token,
    TokenKind,
    tokenize,
    strip_comments,
    strip_comments_and_strings,
    contains_string_interpolation,
)
from .profiles import ChallengeTopic, ConstraintProfile, TOPIC_PROFILES, merge_profiles, topic_profile
from .rules import (
    ALL_CONCEPTS,
    ConstraintIndex,
    build_constraint_index,
    introduction_number,
    missing_prerequisites,
    prerequisite_line,
    topic_disallowed_concepts,
    uses_concept,
)
from .diagnostics import (
    ConceptWarning,
    Violation,
    ViolationKind,
    constraint_warnings,
    constraint_violations,
    effective_profile,
)

__all__ = [
    'Concept',
    'CONCEPT_NAMES',
    'LEGACY_MINIMUMS',
    'Token',
    'TokenKind',
    'tokenize',
    'strip_comments',
    'strip_comments_and_strings',
    'contains_string_interpolation',
    'ChallengeTopic',
    'ConstraintProfile',
    'TOPIC_PROFILES',
    'merge_profiles',
    'topic_profile',
    'ALL_CONCEPTS',
    'ConstraintIndex',
    'build_constraint_index',
    'introduction_number',
    'missing_prerequisites',
    'prerequisite_line',
    'topic_disallowed_concepts',
    'uses_concept',
    'ConceptWarning',
    'Violation',
    'ViolationKind',
    'constraint_warnings',
    'constraint_violations',
    'effective_profile',
]
