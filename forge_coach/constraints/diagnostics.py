#!/usr/bin/env python3
"""
Evaluator: turns submitted source into early-concept warnings (advisory)
and profile violations (blocking).

Both entry points are pure. They return structured values; glyphs and
colours are added by whoever displays them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Union

from . import detectors as d
from .concepts import Concept, HEURISTIC_CONCEPTS
from .profiles import ConstraintProfile, merge_profiles, topic_profile
from .rules import (
    ALL_CONCEPTS,
    NEVER_INTRODUCED,
    ConstraintIndex,
    extract_imports,
    introduction_number,
    topic_disallowed_concepts,
    uses_concept,
)
from .tokenizer import strip_comments, strip_comments_and_strings, token_texts, tokenize

if TYPE_CHECKING:
    from ..curriculum import Challenge


def _challenge_label(number: Union[int, float]) -> str:
    if number == NEVER_INTRODUCED:
        return 'a later challenge'
    return f"Challenge {number}"


@dataclass(frozen=True)
class ConceptWarning:
    """Concept used before the challenge that teaches it"""
    concept: Concept
    introduced_in: Union[int, float]

    @property
    def message(self) -> str:
        return (f"Possible early use of {self.concept.display_name} "
                f"(introduced in {_challenge_label(self.introduced_in)}).")

    def __str__(self) -> str:
        return self.message


class ViolationKind(Enum):
    IMPORT_NOT_ALLOWED = 'import_not_allowed'
    TOKEN_NOT_ALLOWED = 'token_not_allowed'
    REQUIRED_TOKEN_MISSING = 'required_token_missing'
    FILE_IO = 'file_io'
    NETWORK = 'network'
    CONCURRENCY = 'concurrency'
    TOPIC_CONCEPT = 'topic_concept'
    OPTIONAL_USAGE_REQUIRED = 'optional_usage_required'
    COLLECTION_USAGE_REQUIRED = 'collection_usage_required'
    CLOSURE_USAGE_REQUIRED = 'closure_usage_required'


@dataclass(frozen=True)
class Violation:
    """Blocking rule failure"""
    kind: ViolationKind
    subject: Optional[str] = None          # import name or token
    concept: Optional[Concept] = None      # TOPIC_CONCEPT only
    introduced_in: Optional[Union[int, float]] = None

    @property
    def message(self) -> str:
        kind = self.kind
        if kind == ViolationKind.IMPORT_NOT_ALLOWED:
            return f"Import not allowed: {self.subject}"
        if kind == ViolationKind.TOKEN_NOT_ALLOWED:
            return f"Token not allowed: {self.subject}"
        if kind == ViolationKind.REQUIRED_TOKEN_MISSING:
            return f"Required token missing: {self.subject}"
        if kind == ViolationKind.FILE_IO:
            return "File IO not allowed."
        if kind == ViolationKind.NETWORK:
            return "Network usage not allowed."
        if kind == ViolationKind.CONCURRENCY:
            return "Concurrency not allowed."
        if kind == ViolationKind.TOPIC_CONCEPT:
            return (f"Uses {self.concept.display_name} before "
                    f"{_challenge_label(self.introduced_in)}.")
        if kind == ViolationKind.OPTIONAL_USAGE_REQUIRED:
            return "Optional usage required."
        if kind == ViolationKind.COLLECTION_USAGE_REQUIRED:
            return "Collection usage required."
        return "Closure usage required."

    def __str__(self) -> str:
        return self.message


def _prepare(source: str):
    cleaned = strip_comments_and_strings(source)
    return cleaned, token_texts(tokenize(cleaned))


def constraint_warnings(
    source: str,
    challenge: 'Challenge',
    index: ConstraintIndex,
    enable_di_mock_heuristics: bool = True,
) -> List[ConceptWarning]:
    """Concepts detected in source that are introduced after this challenge"""
    cleaned, tokens = _prepare(source)
    warnings = []
    for concept in ALL_CONCEPTS:
        if not enable_di_mock_heuristics and concept in HEURISTIC_CONCEPTS:
            continue
        intro = introduction_number(concept, index)
        if challenge.number >= intro:
            continue
        if uses_concept(concept, tokens, cleaned, source):
            warnings.append(ConceptWarning(concept=concept, introduced_in=intro))
    return warnings


def effective_profile(challenge: 'Challenge') -> Optional[ConstraintProfile]:
    return merge_profiles(challenge.constraint_profile, topic_profile(challenge.topic))


def _topic_concept_violations(tokens, cleaned: str, source: str,
                              challenge: 'Challenge', index: ConstraintIndex) -> List[Violation]:
    violations = []
    for concept in topic_disallowed_concepts(challenge.topic):
        intro = introduction_number(concept, index)
        if challenge.number < intro and uses_concept(concept, tokens, cleaned, source):
            violations.append(Violation(
                kind=ViolationKind.TOPIC_CONCEPT,
                concept=concept,
                introduced_in=intro,
            ))
    return violations


def constraint_violations(
    source: str,
    challenge: 'Challenge',
    enabled: bool = True,
    index: Optional[ConstraintIndex] = None,
) -> List[Violation]:
    """
    Profile checks in a fixed order: imports, disallowed tokens, required
    tokens, file IO, network, concurrency, topic concepts (only when an
    index is given), then the require-usage flags.
    """
    if not enabled:
        return []
    profile = effective_profile(challenge)
    if profile is None:
        return []

    cleaned, tokens = _prepare(source)
    violations: List[Violation] = []

    if profile.allowed_imports:
        for name in extract_imports(cleaned):
            if name not in profile.allowed_imports:
                violations.append(Violation(ViolationKind.IMPORT_NOT_ALLOWED, subject=name))

    for token in profile.disallowed_tokens:
        if d.has_token(tokens, token):
            violations.append(Violation(ViolationKind.TOKEN_NOT_ALLOWED, subject=token))

    for token in profile.required_tokens:
        if not d.has_token(tokens, token):
            violations.append(Violation(ViolationKind.REQUIRED_TOKEN_MISSING, subject=token))

    if not profile.allow_file_io and d.has_file_io(tokens):
        violations.append(Violation(ViolationKind.FILE_IO))

    if not profile.allow_network and d.has_network_usage(tokens, strip_comments(source)):
        violations.append(Violation(ViolationKind.NETWORK))

    if not profile.allow_concurrency and d.has_concurrency_usage(tokens):
        violations.append(Violation(ViolationKind.CONCURRENCY))

    if index is not None:
        violations.extend(_topic_concept_violations(tokens, cleaned, source, challenge, index))

    if profile.require_optional_usage and not d.has_optional_usage(tokens):
        violations.append(Violation(ViolationKind.OPTIONAL_USAGE_REQUIRED))

    if profile.require_collection_usage and not d.has_collection_usage(tokens, cleaned):
        violations.append(Violation(ViolationKind.COLLECTION_USAGE_REQUIRED))

    if profile.require_closure_usage and not d.has_closure_usage(tokens):
        violations.append(Violation(ViolationKind.CLOSURE_USAGE_REQUIRED))

    return violations
