#!/usr/bin/env python3
"""
Concept catalog for the constraint engine.

Each Concept is one unit of language knowledge that the curriculum gates.
Declaration order is the evaluation order for warnings, so keep new members
grouped with their category.
"""

from enum import Enum
from typing import Dict


class Concept(Enum):
    """Closed set of gated language concepts (values match curriculum JSON)"""
    # Control flow
    IF_ELSE = 'ifElse'
    SWITCH_STATEMENT = 'switchStatement'
    FOR_IN_LOOP = 'forInLoop'
    WHILE_LOOP = 'whileLoop'
    REPEAT_WHILE_LOOP = 'repeatWhileLoop'
    BREAK_CONTINUE = 'breakContinue'
    RANGES = 'ranges'
    FUNCTIONS_BASICS = 'functionsBasics'

    # Optionals
    OPTIONALS = 'optionals'
    NIL_LITERAL = 'nilLiteral'
    OPTIONAL_BINDING = 'optionalBinding'
    GUARD_STATEMENT = 'guardStatement'
    NIL_COALESCING = 'nilCoalescing'

    # Collections and closures
    COLLECTIONS = 'collections'
    CLOSURES = 'closures'
    SHORTHAND_CLOSURE_ARGS = 'shorthandClosureArgs'
    MAP = 'map'
    FILTER = 'filter'
    REDUCE = 'reduce'
    COMPACT_MAP = 'compactMap'
    FLAT_MAP = 'flatMap'
    TYPE_ALIAS = 'typeAlias'
    ENUMS = 'enums'

    # Error handling (basic)
    DO_CATCH = 'doCatch'
    THROW_KEYWORD = 'throwKeyword'
    TRY_KEYWORD = 'tryKeyword'
    TRY_OPTIONAL = 'tryOptional'

    # Input and environment
    READ_LINE = 'readLine'
    COMMAND_LINE_ARGUMENTS = 'commandLineArguments'
    FILE_IO = 'fileIO'
    TUPLES = 'tuples'

    # Concurrency and attributes
    ASYNC_AWAIT = 'asyncAwait'
    ACTORS = 'actors'
    PROPERTY_WRAPPERS = 'propertyWrappers'

    # Types
    PROTOCOLS = 'protocols'
    STRUCTS = 'structs'
    CLASSES = 'classes'
    PROPERTIES = 'properties'
    INITIALIZERS = 'initializers'
    MUTATING_METHODS = 'mutatingMethods'
    SELF_KEYWORD = 'selfKeyword'
    EXTENSIONS = 'extensions'
    WHERE_CLAUSES = 'whereClauses'
    ASSOCIATED_TYPES = 'associatedTypes'
    GENERICS = 'generics'

    # Concurrency primitives
    TASK = 'task'
    MAIN_ACTOR = 'mainActor'
    SENDABLE = 'sendable'

    # Protocols
    PROTOCOL_CONFORMANCE = 'protocolConformance'
    PROTOCOL_EXTENSIONS = 'protocolExtensions'
    DEFAULT_IMPLEMENTATIONS = 'defaultImplementations'
    TASK_SLEEP = 'taskSleep'
    TASK_GROUP = 'taskGroup'

    # Access control
    ACCESS_CONTROL = 'accessControl'
    ACCESS_CONTROL_OPEN = 'accessControlOpen'
    ACCESS_CONTROL_FILEPRIVATE = 'accessControlFileprivate'
    ACCESS_CONTROL_INTERNAL = 'accessControlInternal'
    ACCESS_CONTROL_SETTER = 'accessControlSetter'

    # Error handling (advanced)
    ERROR_TYPES = 'errorTypes'
    THROWING_FUNCTIONS = 'throwingFunctions'
    DO_TRY_CATCH = 'doTryCatch'
    TRY_FORCE = 'tryForce'

    # Metaprogramming and packaging
    RESULT_BUILDERS = 'resultBuilders'
    MACROS = 'macros'
    PROJECTED_VALUES = 'projectedValues'
    SWIFTPM_BASICS = 'swiftpmBasics'
    SWIFTPM_DEPENDENCIES = 'swiftpmDependencies'
    BUILD_CONFIGS = 'buildConfigs'

    # Testing heuristics (togglable)
    DEPENDENCY_INJECTION = 'dependencyInjection'
    PROTOCOL_MOCKING = 'protocolMocking'

    # Operators
    COMPARISONS = 'comparisons'
    BOOLEAN_LOGIC = 'booleanLogic'
    COMPOUND_ASSIGNMENT = 'compoundAssignment'
    STRING_INTERPOLATION = 'stringInterpolation'

    @property
    def display_name(self) -> str:
        return CONCEPT_NAMES[self]


# Concepts only reported when the DI/mocking heuristics are switched on
HEURISTIC_CONCEPTS = frozenset({
    Concept.DEPENDENCY_INJECTION,
    Concept.PROTOCOL_MOCKING,
})

ERROR_HANDLING_CONCEPTS = (
    Concept.ERROR_TYPES,
    Concept.THROWING_FUNCTIONS,
    Concept.THROW_KEYWORD,
    Concept.TRY_KEYWORD,
    Concept.TRY_OPTIONAL,
    Concept.TRY_FORCE,
    Concept.DO_CATCH,
)


CONCEPT_NAMES: Dict[Concept, str] = {
    Concept.IF_ELSE: 'if/else',
    Concept.SWITCH_STATEMENT: 'switch',
    Concept.FOR_IN_LOOP: 'for-in loops',
    Concept.WHILE_LOOP: 'while loops',
    Concept.REPEAT_WHILE_LOOP: 'repeat-while loops',
    Concept.BREAK_CONTINUE: 'break/continue',
    Concept.RANGES: 'ranges',
    Concept.FUNCTIONS_BASICS: 'functions',
    Concept.OPTIONALS: 'optionals',
    Concept.NIL_LITERAL: 'nil',
    Concept.OPTIONAL_BINDING: 'optional binding',
    Concept.GUARD_STATEMENT: 'guard',
    Concept.NIL_COALESCING: 'nil coalescing',
    Concept.COLLECTIONS: 'collections',
    Concept.CLOSURES: 'closures',
    Concept.SHORTHAND_CLOSURE_ARGS: 'shorthand closure args',
    Concept.MAP: 'map',
    Concept.FILTER: 'filter',
    Concept.REDUCE: 'reduce',
    Concept.COMPACT_MAP: 'compactMap',
    Concept.FLAT_MAP: 'flatMap',
    Concept.TYPE_ALIAS: 'typealias',
    Concept.ENUMS: 'enums',
    Concept.DO_CATCH: 'do/catch',
    Concept.THROW_KEYWORD: 'throw',
    Concept.TRY_KEYWORD: 'try',
    Concept.TRY_OPTIONAL: 'try?',
    Concept.READ_LINE: 'readLine',
    Concept.COMMAND_LINE_ARGUMENTS: 'CommandLine.arguments',
    Concept.FILE_IO: 'file IO',
    Concept.TUPLES: 'tuples',
    Concept.ASYNC_AWAIT: 'async/await',
    Concept.ACTORS: 'actors',
    Concept.PROPERTY_WRAPPERS: 'property wrappers',
    Concept.PROTOCOLS: 'protocols',
    Concept.STRUCTS: 'structs',
    Concept.CLASSES: 'classes',
    Concept.PROPERTIES: 'properties',
    Concept.INITIALIZERS: 'initializers',
    Concept.MUTATING_METHODS: 'mutating methods',
    Concept.SELF_KEYWORD: 'self',
    Concept.EXTENSIONS: 'extensions',
    Concept.WHERE_CLAUSES: 'where clauses',
    Concept.ASSOCIATED_TYPES: 'associated types',
    Concept.GENERICS: 'generics',
    Concept.TASK: 'Task',
    Concept.MAIN_ACTOR: 'MainActor',
    Concept.SENDABLE: 'Sendable',
    Concept.PROTOCOL_CONFORMANCE: 'protocol conformance',
    Concept.PROTOCOL_EXTENSIONS: 'protocol extensions',
    Concept.DEFAULT_IMPLEMENTATIONS: 'default implementations',
    Concept.TASK_SLEEP: 'Task.sleep',
    Concept.TASK_GROUP: 'withTaskGroup',
    Concept.ACCESS_CONTROL: 'access control',
    Concept.ACCESS_CONTROL_OPEN: 'public/open access',
    Concept.ACCESS_CONTROL_FILEPRIVATE: 'fileprivate access',
    Concept.ACCESS_CONTROL_INTERNAL: 'internal access',
    Concept.ACCESS_CONTROL_SETTER: 'private(set)',
    Concept.ERROR_TYPES: 'error types',
    Concept.THROWING_FUNCTIONS: 'throwing functions',
    Concept.DO_TRY_CATCH: 'do/try/catch',
    Concept.TRY_FORCE: 'try!',
    Concept.RESULT_BUILDERS: 'result builders',
    Concept.MACROS: 'macros',
    Concept.PROJECTED_VALUES: 'projected values',
    Concept.SWIFTPM_BASICS: 'SwiftPM basics',
    Concept.SWIFTPM_DEPENDENCIES: 'SwiftPM dependencies',
    Concept.BUILD_CONFIGS: 'build configs',
    Concept.DEPENDENCY_INJECTION: 'dependency injection',
    Concept.PROTOCOL_MOCKING: 'protocol mocking',
    Concept.COMPARISONS: 'comparisons',
    Concept.BOOLEAN_LOGIC: 'boolean logic',
    Concept.COMPOUND_ASSIGNMENT: 'compound assignment',
    Concept.STRING_INTERPOLATION: 'string interpolation',
}


# Fallback introduction numbers for concepts no challenge lists in `introduces`
LEGACY_MINIMUMS: Dict[Concept, int] = {
    Concept.IF_ELSE: 19,
    Concept.SWITCH_STATEMENT: 21,
    Concept.FOR_IN_LOOP: 23,
    Concept.WHILE_LOOP: 24,
    Concept.REPEAT_WHILE_LOOP: 25,
    Concept.BREAK_CONTINUE: 26,
    Concept.RANGES: 22,
    Concept.FUNCTIONS_BASICS: 14,
    Concept.OPTIONALS: 37,
    Concept.NIL_LITERAL: 37,
    Concept.OPTIONAL_BINDING: 37,
    Concept.GUARD_STATEMENT: 39,
    Concept.NIL_COALESCING: 40,
    Concept.COLLECTIONS: 28,
    Concept.CLOSURES: 50,
    Concept.SHORTHAND_CLOSURE_ARGS: 54,
    Concept.MAP: 61,
    Concept.FILTER: 62,
    Concept.REDUCE: 63,
    Concept.COMPACT_MAP: 65,
    Concept.FLAT_MAP: 66,
    Concept.TYPE_ALIAS: 67,
    Concept.ENUMS: 68,
    Concept.DO_CATCH: 72,
    Concept.THROW_KEYWORD: 72,
    Concept.TRY_KEYWORD: 72,
    Concept.TRY_OPTIONAL: 73,
    Concept.READ_LINE: 74,
    Concept.COMMAND_LINE_ARGUMENTS: 75,
    Concept.FILE_IO: 76,
    Concept.TUPLES: 35,
    Concept.ASYNC_AWAIT: 172,
    Concept.ACTORS: 177,
    Concept.PROPERTY_WRAPPERS: 180,
    Concept.PROTOCOLS: 135,
    Concept.STRUCTS: 121,
    Concept.CLASSES: 127,
    Concept.PROPERTIES: 121,
    Concept.INITIALIZERS: 124,
    Concept.MUTATING_METHODS: 125,
    Concept.SELF_KEYWORD: 123,
    Concept.EXTENSIONS: 140,
    Concept.WHERE_CLAUSES: 149,
    Concept.ASSOCIATED_TYPES: 148,
    Concept.GENERICS: 145,
    Concept.TASK: 173,
    Concept.MAIN_ACTOR: 178,
    Concept.SENDABLE: 179,
    Concept.PROTOCOL_CONFORMANCE: 136,
    Concept.PROTOCOL_EXTENSIONS: 141,
    Concept.DEFAULT_IMPLEMENTATIONS: 141,
    Concept.TASK_SLEEP: 226,
    Concept.TASK_GROUP: 174,
    Concept.ACCESS_CONTROL: 142,
    Concept.ACCESS_CONTROL_OPEN: 143,
    Concept.ACCESS_CONTROL_FILEPRIVATE: 142,
    Concept.ACCESS_CONTROL_INTERNAL: 142,
    Concept.ACCESS_CONTROL_SETTER: 142,
    Concept.ERROR_TYPES: 72,
    Concept.THROWING_FUNCTIONS: 72,
    Concept.DO_TRY_CATCH: 72,
    Concept.TRY_FORCE: 73,
    Concept.RESULT_BUILDERS: 202,
    Concept.MACROS: 203,
    Concept.PROJECTED_VALUES: 182,
    Concept.SWIFTPM_BASICS: 204,
    Concept.SWIFTPM_DEPENDENCIES: 205,
    Concept.BUILD_CONFIGS: 206,
    Concept.DEPENDENCY_INJECTION: 212,
    Concept.PROTOCOL_MOCKING: 215,
    Concept.COMPARISONS: 12,
    Concept.BOOLEAN_LOGIC: 13,
    Concept.COMPOUND_ASSIGNMENT: 8,
    Concept.STRING_INTERPOLATION: 10,
}
