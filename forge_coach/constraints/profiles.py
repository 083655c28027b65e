#!/usr/bin/env python3
"""
Constraint profiles: declarative allow/deny/require rules for a challenge
or a topic, and the merge that combines the two.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple


class ChallengeTopic(Enum):
    """Subject-matter category of a challenge (values match curriculum JSON)"""
    CONDITIONALS = 'conditionals'
    LOOPS = 'loops'
    OPTIONALS = 'optionals'
    COLLECTIONS = 'collections'
    FUNCTIONS = 'functions'
    STRINGS = 'strings'
    STRUCTS = 'structs'
    CLASSES = 'classes'
    PROPERTIES = 'properties'
    PROTOCOLS = 'protocols'
    EXTENSIONS = 'extensions'
    ACCESS_CONTROL = 'accessControl'
    ERRORS = 'errors'
    GENERICS = 'generics'
    MEMORY = 'memory'
    CONCURRENCY = 'concurrency'
    ACTORS = 'actors'
    KEY_PATHS = 'keyPaths'
    SEQUENCES = 'sequences'
    PROPERTY_WRAPPERS = 'propertyWrappers'
    MACROS = 'macros'
    SWIFTPM = 'swiftpm'
    TESTING = 'testing'
    INTEROP = 'interop'
    PERFORMANCE = 'performance'
    ADVANCED_FEATURES = 'advancedFeatures'
    GENERAL = 'general'


@dataclass(frozen=True)
class ConstraintProfile:
    """Immutable rule set. Token lists are tuples so profiles stay hashable."""
    allowed_imports: Tuple[str, ...] = ()
    disallowed_tokens: Tuple[str, ...] = ()
    required_tokens: Tuple[str, ...] = ()
    allow_file_io: bool = True
    allow_network: bool = False
    allow_concurrency: bool = True
    max_runtime_ms: Optional[int] = None
    require_optional_usage: Optional[bool] = None
    require_collection_usage: Optional[bool] = None
    require_closure_usage: Optional[bool] = None

    def __post_init__(self):
        # Accept lists from callers and JSON; store tuples
        for name in ('allowed_imports', 'disallowed_tokens', 'required_tokens'):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))


TOPIC_PROFILES: Dict[ChallengeTopic, ConstraintProfile] = {
    ChallengeTopic.STRINGS: ConstraintProfile(
        disallowed_tokens=('readLine', 'CommandLine'),
        allow_network=True,
    ),
    ChallengeTopic.CONDITIONALS: ConstraintProfile(
        disallowed_tokens=('for', 'while', 'repeat'),
        allow_network=True,
    ),
    ChallengeTopic.LOOPS: ConstraintProfile(
        disallowed_tokens=('readLine', 'CommandLine'),
        allow_network=True,
    ),
    ChallengeTopic.FUNCTIONS: ConstraintProfile(
        disallowed_tokens=('readLine', 'CommandLine'),
        allow_network=True,
    ),
    ChallengeTopic.COLLECTIONS: ConstraintProfile(
        disallowed_tokens=('readLine', 'CommandLine'),
        allow_network=True,
        require_collection_usage=True,
    ),
    ChallengeTopic.OPTIONALS: ConstraintProfile(
        disallowed_tokens=('readLine', 'CommandLine'),
        allow_network=True,
        require_optional_usage=True,
    ),
    ChallengeTopic.STRUCTS: ConstraintProfile(
        required_tokens=('struct',),
        allow_network=True,
    ),
}


def topic_profile(topic: ChallengeTopic) -> Optional[ConstraintProfile]:
    return TOPIC_PROFILES.get(topic)


def _merge_tokens(first: Iterable[str], second: Iterable[str]) -> Tuple[str, ...]:
    """Union keeping first-seen order"""
    seen = set()
    merged = []
    for token in list(first) + list(second):
        if token not in seen:
            seen.add(token)
            merged.append(token)
    return tuple(merged)


def _first_set(base_value, topic_value):
    return base_value if base_value is not None else topic_value


def merge_profiles(
    base: Optional[ConstraintProfile],
    topic: Optional[ConstraintProfile],
) -> Optional[ConstraintProfile]:
    """
    Combine a challenge profile with its topic default.

    Token lists are unioned (base first), allow flags are ANDed, and the
    nullable settings take the base value when it is set.
    Returns None only when both inputs are None.
    """
    if base is None and topic is None:
        return None
    base = base or ConstraintProfile()
    topic = topic or ConstraintProfile()

    return ConstraintProfile(
        allowed_imports=_merge_tokens(base.allowed_imports, topic.allowed_imports),
        disallowed_tokens=_merge_tokens(base.disallowed_tokens, topic.disallowed_tokens),
        required_tokens=_merge_tokens(base.required_tokens, topic.required_tokens),
        allow_file_io=base.allow_file_io and topic.allow_file_io,
        allow_network=base.allow_network and topic.allow_network,
        allow_concurrency=base.allow_concurrency and topic.allow_concurrency,
        max_runtime_ms=_first_set(base.max_runtime_ms, topic.max_runtime_ms),
        require_optional_usage=_first_set(base.require_optional_usage, topic.require_optional_usage),
        require_collection_usage=_first_set(base.require_collection_usage, topic.require_collection_usage),
        require_closure_usage=_first_set(base.require_closure_usage, topic.require_closure_usage),
    )
