#!/usr/bin/env python3
"""
Concept rules: the concept -> detector table, the introduction index built
from the curriculum, and the per-topic lists of concepts that are too
advanced for a lesson.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from . import detectors as d
from .concepts import Concept, ERROR_HANDLING_CONCEPTS, LEGACY_MINIMUMS
from .profiles import ChallengeTopic
from .tokenizer import contains_string_interpolation

if TYPE_CHECKING:
    from ..curriculum import Challenge


# (tokens, cleaned_source, raw_source) -> bool
Detector = Callable[[Sequence[str], str, str], bool]

NEVER_INTRODUCED = math.inf


def _tokens_only(check: Callable[[Sequence[str]], bool]) -> Detector:
    return lambda tokens, source, raw_source: check(tokens)


def _keyword(*words: str) -> Detector:
    return lambda tokens, source, raw_source: any(w in tokens for w in words)


def _dot_member(member: str) -> Detector:
    return lambda tokens, source, raw_source: d.has_dot_member(tokens, member)


def _sequence(*sequence: str) -> Detector:
    return lambda tokens, source, raw_source: d.has_sequence(tokens, sequence)


# Declaration order here is the order warnings are reported in
CONCEPT_DETECTORS: Tuple[Tuple[Concept, Detector], ...] = (
    (Concept.IF_ELSE, _keyword('if')),
    (Concept.SWITCH_STATEMENT, _keyword('switch')),
    (Concept.FOR_IN_LOOP, _keyword('for')),
    (Concept.WHILE_LOOP, _keyword('while')),
    (Concept.REPEAT_WHILE_LOOP, _keyword('repeat')),
    (Concept.BREAK_CONTINUE, _keyword('break', 'continue')),
    (Concept.RANGES, _keyword('...', '..<')),
    (Concept.FUNCTIONS_BASICS, _keyword('func')),
    (Concept.OPTIONALS, _tokens_only(d.has_optional_usage)),
    (Concept.NIL_LITERAL, _keyword('nil')),
    (Concept.OPTIONAL_BINDING, _sequence('if', 'let')),
    (Concept.GUARD_STATEMENT, _keyword('guard')),
    (Concept.NIL_COALESCING, _keyword('??')),
    (Concept.COLLECTIONS, lambda tokens, source, raw: d.has_collection_usage(tokens, source)),
    (Concept.CLOSURES, lambda tokens, source, raw: (
        d.has_closure_token(tokens) or d.has_closure_assignment(tokens))),
    (Concept.SHORTHAND_CLOSURE_ARGS, _tokens_only(d.has_shorthand_closure_arg)),
    (Concept.MAP, _dot_member('map')),
    (Concept.FILTER, _dot_member('filter')),
    (Concept.REDUCE, _dot_member('reduce')),
    (Concept.COMPACT_MAP, _dot_member('compactMap')),
    (Concept.FLAT_MAP, _dot_member('flatMap')),
    (Concept.TYPE_ALIAS, _keyword('typealias')),
    (Concept.ENUMS, _keyword('enum')),
    (Concept.DO_CATCH, _keyword('do', 'catch')),
    (Concept.THROW_KEYWORD, _keyword('throw')),
    (Concept.TRY_KEYWORD, _keyword('try')),
    (Concept.TRY_OPTIONAL, _tokens_only(d.has_try_optional)),
    (Concept.READ_LINE, _keyword('readLine')),
    (Concept.COMMAND_LINE_ARGUMENTS, _tokens_only(d.has_command_line_arguments)),
    (Concept.FILE_IO, _tokens_only(d.has_file_io)),
    (Concept.TUPLES, _tokens_only(d.has_tuple_usage)),
    (Concept.ASYNC_AWAIT, _keyword('async', 'await')),
    (Concept.ACTORS, _keyword('actor')),
    (Concept.PROPERTY_WRAPPERS, _tokens_only(d.has_property_wrapper_usage)),
    (Concept.PROTOCOLS, _keyword('protocol')),
    (Concept.STRUCTS, _keyword('struct')),
    (Concept.CLASSES, _keyword('class')),
    (Concept.PROPERTIES, _tokens_only(d.has_property_declaration)),
    (Concept.INITIALIZERS, _keyword('init')),
    (Concept.MUTATING_METHODS, _keyword('mutating')),
    (Concept.SELF_KEYWORD, _keyword('self')),
    (Concept.EXTENSIONS, _keyword('extension')),
    (Concept.WHERE_CLAUSES, _keyword('where')),
    (Concept.ASSOCIATED_TYPES, _keyword('associatedtype')),
    (Concept.GENERICS, _tokens_only(d.has_generic_definition)),
    (Concept.TASK, _tokens_only(d.has_task_usage)),
    (Concept.MAIN_ACTOR, _tokens_only(d.has_main_actor_usage)),
    (Concept.SENDABLE, _tokens_only(d.has_sendable_usage)),
    (Concept.PROTOCOL_CONFORMANCE, _tokens_only(d.has_protocol_conformance)),
    (Concept.PROTOCOL_EXTENSIONS, _tokens_only(d.has_protocol_extension)),
    (Concept.DEFAULT_IMPLEMENTATIONS, lambda tokens, source, raw: (
        d.has_protocol_extension(tokens) and 'func' in tokens)),
    (Concept.TASK_SLEEP, _tokens_only(d.has_task_sleep_usage)),
    (Concept.TASK_GROUP, _tokens_only(d.has_task_group_usage)),
    (Concept.ACCESS_CONTROL, _tokens_only(d.has_access_control_keyword)),
    (Concept.ACCESS_CONTROL_OPEN, _tokens_only(d.has_access_control_open)),
    (Concept.ACCESS_CONTROL_FILEPRIVATE, _keyword('fileprivate')),
    (Concept.ACCESS_CONTROL_INTERNAL, _keyword('internal')),
    (Concept.ACCESS_CONTROL_SETTER, _tokens_only(d.has_access_control_setter)),
    (Concept.ERROR_TYPES, _tokens_only(d.has_error_type)),
    (Concept.THROWING_FUNCTIONS, _tokens_only(d.has_throwing_function)),
    (Concept.DO_TRY_CATCH, _tokens_only(d.has_do_try_catch)),
    (Concept.TRY_FORCE, _tokens_only(d.has_try_force)),
    (Concept.RESULT_BUILDERS, _keyword('resultBuilder')),
    (Concept.MACROS, _tokens_only(d.has_macro_usage)),
    (Concept.PROJECTED_VALUES, _tokens_only(d.has_projected_values)),
    (Concept.SWIFTPM_BASICS, _tokens_only(d.has_swiftpm_basics)),
    (Concept.SWIFTPM_DEPENDENCIES, _tokens_only(d.has_swiftpm_dependencies)),
    (Concept.BUILD_CONFIGS, _tokens_only(d.has_build_configs)),
    (Concept.DEPENDENCY_INJECTION, _tokens_only(d.has_dependency_injection)),
    (Concept.PROTOCOL_MOCKING, _tokens_only(d.has_protocol_mocking)),
    (Concept.COMPARISONS, _tokens_only(d.has_comparison_operator)),
    (Concept.BOOLEAN_LOGIC, _tokens_only(d.has_logical_operator)),
    (Concept.COMPOUND_ASSIGNMENT, _tokens_only(d.has_compound_assignment)),
    (Concept.STRING_INTERPOLATION, lambda tokens, source, raw_source: (
        contains_string_interpolation(raw_source))),
)

DETECTORS: Mapping[Concept, Detector] = MappingProxyType(dict(CONCEPT_DETECTORS))

ALL_CONCEPTS: Tuple[Concept, ...] = tuple(concept for concept, _ in CONCEPT_DETECTORS)


def uses_concept(concept: Concept, tokens: Sequence[str], source: str, raw_source: str) -> bool:
    """Run the detector for one concept"""
    detector = DETECTORS.get(concept)
    if detector is None:
        return False
    return detector(tokens, source, raw_source)


@dataclass(frozen=True, eq=False)
class ConstraintIndex:
    """
    Where each concept is first taught. Built once from the curriculum and
    shared read-only between evaluations.
    """
    intro_by_concept: Mapping[Concept, int] = field(default_factory=dict)
    legacy_min_by_concept: Mapping[Concept, int] = field(default_factory=lambda: LEGACY_MINIMUMS)

    def __post_init__(self):
        object.__setattr__(self, 'intro_by_concept', MappingProxyType(dict(self.intro_by_concept)))
        object.__setattr__(self, 'legacy_min_by_concept', MappingProxyType(dict(self.legacy_min_by_concept)))

    def introduction_number(self, concept: Concept) -> Union[int, float]:
        return introduction_number(concept, self)


def build_constraint_index(challenges: Iterable['Challenge']) -> ConstraintIndex:
    """Minimum challenge number across every challenge that introduces a concept"""
    intro: Dict[Concept, int] = {}
    for challenge in challenges:
        for concept in challenge.introduces:
            existing = intro.get(concept)
            if existing is None or challenge.number < existing:
                intro[concept] = challenge.number
    return ConstraintIndex(intro_by_concept=intro, legacy_min_by_concept=LEGACY_MINIMUMS)


def introduction_number(concept: Concept, index: ConstraintIndex) -> Union[int, float]:
    """Derived value, else legacy table, else never introduced (infinity)"""
    if concept in index.intro_by_concept:
        return index.intro_by_concept[concept]
    if concept in index.legacy_min_by_concept:
        return index.legacy_min_by_concept[concept]
    return NEVER_INTRODUCED


def topic_disallowed_concepts(topic: ChallengeTopic) -> Tuple[Concept, ...]:
    """Concepts considered too advanced for a topic's lessons, in a fixed order"""
    if topic == ChallengeTopic.COLLECTIONS:
        extra = (Concept.MAP, Concept.FILTER, Concept.REDUCE,
                 Concept.COMPACT_MAP, Concept.FLAT_MAP, Concept.CLOSURES)
    elif topic == ChallengeTopic.OPTIONALS:
        extra = (Concept.OPTIONAL_BINDING, Concept.GUARD_STATEMENT, Concept.NIL_COALESCING)
    elif topic == ChallengeTopic.FUNCTIONS:
        extra = (Concept.CLOSURES, Concept.SHORTHAND_CLOSURE_ARGS)
    elif topic == ChallengeTopic.STRINGS:
        extra = (Concept.STRING_INTERPOLATION, Concept.MAP, Concept.FILTER,
                 Concept.REDUCE, Concept.COMPACT_MAP, Concept.FLAT_MAP)
    elif topic == ChallengeTopic.CONDITIONALS:
        extra = (Concept.SWITCH_STATEMENT, Concept.BREAK_CONTINUE, Concept.RANGES)
    elif topic == ChallengeTopic.LOOPS:
        extra = (Concept.FOR_IN_LOOP, Concept.WHILE_LOOP, Concept.REPEAT_WHILE_LOOP,
                 Concept.BREAK_CONTINUE, Concept.RANGES)
    else:
        extra = ()
    return extra + ERROR_HANDLING_CONCEPTS


def extract_imports(source: str) -> List[str]:
    """Module names from `import X` lines"""
    imports = []
    for line in source.split('\n'):
        trimmed = line.strip()
        if not trimmed.startswith('import '):
            continue
        parts = trimmed.split()
        if len(parts) >= 2:
            imports.append(parts[1])
    return imports


def missing_prerequisites(challenge: 'Challenge', index: ConstraintIndex) -> List[Concept]:
    """Required concepts that are not taught until after this challenge"""
    return [
        concept for concept in challenge.requires
        if introduction_number(concept, index) > challenge.number
    ]


def prerequisite_line(challenge: 'Challenge') -> str:
    """'Prereqs: a, b' or '' when the challenge has no requirements"""
    if not challenge.requires:
        return ''
    return 'Prereqs: ' + ', '.join(c.display_name for c in challenge.requires)
