#!/usr/bin/env python3
"""
Pattern detectors over token streams.

Every detector is a pure function of the token texts (and sometimes the
cleaned source). They are heuristics: each one is shaped to avoid the
false positives called out next to it, not to be a parser.
"""

from typing import List, Sequence, Set

from .tokenizer import INTERPOLATION_MARKER, is_identifier


Tokens = Sequence[str]

DECLARATION_ANCHORS = frozenset({'func', 'struct', 'class', 'enum', 'protocol', 'extension'})
TYPE_KEYWORDS = frozenset({'struct', 'class', 'enum'})
CONFORMANCE_IGNORED_TYPES = frozenset({'String', 'Int', 'Double', 'Bool', 'Error'})


# ---------------------------------------------------------------------------
# Reusable families
# ---------------------------------------------------------------------------

def has_token(tokens: Tokens, token: str) -> bool:
    return token in tokens


def has_any_token(tokens: Tokens, candidates) -> bool:
    return any(token in candidates for token in tokens)


def has_sequence(tokens: Tokens, sequence: Sequence[str]) -> bool:
    """True when sequence appears contiguously in tokens"""
    size = len(sequence)
    if size == 0 or len(tokens) < size:
        return False
    target = list(sequence)
    for start in range(len(tokens) - size + 1):
        if list(tokens[start:start + size]) == target:
            return True
    return False


def has_dot_member(tokens: Tokens, member: str) -> bool:
    """`.member` anywhere, e.g. `.map`"""
    return any(
        tokens[i] == '.' and tokens[i + 1] == member
        for i in range(len(tokens) - 1)
    )


def has_initializer_label(tokens: Tokens, type_name: str, first_label: str) -> bool:
    """`TypeName(firstLabel` such as `Data(contentsOf`"""
    return any(
        tokens[i] == type_name and tokens[i + 1] == '(' and tokens[i + 2] == first_label
        for i in range(len(tokens) - 2)
    )


def _header_span(tokens: Tokens, start: int) -> range:
    """Indices from start up to (not including) the next `{`"""
    end = start
    while end < len(tokens) and tokens[end] != '{':
        end += 1
    return range(start, end)


def _conformance_targets(tokens: Tokens, colon: int) -> List[str]:
    """Names listed after a `:` in a declaration header, commas dropped"""
    return [tokens[k] for k in _header_span(tokens, colon + 1) if tokens[k] != ',']


def protocol_names(tokens: Tokens) -> Set[str]:
    """Names of protocols declared in this source"""
    names = set()
    for i in range(len(tokens) - 1):
        if tokens[i] == 'protocol':
            name = tokens[i + 1]
            if name and (name[0].isalpha() or name[0] == '_'):
                names.add(name)
    return names


# ---------------------------------------------------------------------------
# Syntax detectors
# ---------------------------------------------------------------------------

def has_optional_type(tokens: Tokens) -> bool:
    """`Type?` in a type position (`: Int?`, `-> String?`, `[Int?]`, ...)"""
    type_context = {':', '->', '[', ',', '('}
    for i in range(1, len(tokens)):
        if tokens[i] != '?':
            continue
        if not is_identifier(tokens[i - 1]):
            continue
        before = tokens[i - 2] if i >= 2 else ''
        if before in type_context:
            return True
    return False


def has_optional_usage(tokens: Tokens) -> bool:
    return (
        has_optional_type(tokens)
        or has_token(tokens, 'nil')
        or has_token(tokens, '??')
        or has_sequence(tokens, ['if', 'let'])
        or has_sequence(tokens, ['guard', 'let'])
        or has_sequence(tokens, ['as', '?'])
    )


def has_shorthand_closure_arg(tokens: Tokens) -> bool:
    return any(
        len(token) > 1 and token[0] == '$' and token[1:].isdigit()
        for token in tokens
    )


def has_closure_assignment(tokens: Tokens) -> bool:
    """`= {` or `return {`"""
    return any(
        tokens[i] in ('=', 'return') and tokens[i + 1] == '{'
        for i in range(len(tokens) - 1)
    )


def has_closure_token(tokens: Tokens) -> bool:
    """
    A `{ params in` closure header. The `in` must sit at depth 1 of the
    brace block and must not belong to a `for x in` within the four tokens
    before it.
    """
    index = 0
    while index < len(tokens):
        if tokens[index] != '{':
            index += 1
            continue
        depth = 1
        j = index + 1
        while j < len(tokens) and depth > 0:
            token = tokens[j]
            if token == '{':
                depth += 1
            elif token == '}':
                depth -= 1
                if depth == 0:
                    break
            elif token == 'in' and depth == 1:
                window_start = max(index + 1, j - 4)
                if 'for' not in tokens[window_start:j]:
                    return True
            j += 1
        # Resume inside the block so nested closures are still examined
        index += 1
    return False


def has_closure_usage(tokens: Tokens) -> bool:
    return (
        has_closure_token(tokens)
        or has_shorthand_closure_arg(tokens)
        or has_closure_assignment(tokens)
    )


def has_collection_literal(tokens: Tokens) -> bool:
    starters = {':', '=', 'return', 'in', ',', '(', '['}
    for i, token in enumerate(tokens):
        if token != '[':
            continue
        prev = tokens[i - 1] if i > 0 else ''
        if prev == '{':
            # `{ [weak self] in` capture lists
            continue
        j = i + 1
        while j < len(tokens) and tokens[j] != ']':
            j += 1
        if j >= len(tokens):
            continue
        if prev in starters:
            return True
        if any(inner in (',', ':') for inner in tokens[i + 1:j]):
            return True
    return False


def has_collection_usage(tokens: Tokens, source: str = '') -> bool:
    if has_any_token(tokens, {'Array', 'Dictionary', 'Set'}):
        return True
    return has_collection_literal(tokens)


def _tuple_parens(tokens: Tokens, start: int) -> bool:
    """From the `(` at start, balance to its `)`; True if a depth-1 comma was seen"""
    depth = 0
    saw_comma = False
    for i in range(start, len(tokens)):
        token = tokens[i]
        if token == '(':
            depth += 1
        elif token == ')':
            depth -= 1
            if depth == 0:
                return saw_comma
        elif token == ',' and depth == 1:
            saw_comma = True
    return False


def has_tuple_usage(tokens: Tokens) -> bool:
    """`= (a, b)`, `: (Int, Int)`, `-> (x, y)`, `return (a, b)`"""
    anchors = {'=', ':', '->', 'return'}
    for i in range(len(tokens) - 1):
        if tokens[i] in anchors and tokens[i + 1] == '(':
            if _tuple_parens(tokens, i + 1):
                return True
    return False


def has_try_optional(tokens: Tokens) -> bool:
    return has_sequence(tokens, ['try', '?'])


def has_try_force(tokens: Tokens) -> bool:
    return has_sequence(tokens, ['try', '!'])


def has_command_line_arguments(tokens: Tokens) -> bool:
    return (
        has_sequence(tokens, ['CommandLine', '.', 'arguments'])
        or has_sequence(tokens, ['ProcessInfo', '.', 'processInfo', '.', 'arguments'])
    )


def has_file_io(tokens: Tokens) -> bool:
    if has_token(tokens, 'contentsOfFile'):
        return True
    if has_initializer_label(tokens, 'Data', 'contentsOf'):
        return True
    if has_initializer_label(tokens, 'String', 'contentsOf'):
        return True
    if has_initializer_label(tokens, 'URL', 'fileURLWithPath'):
        return True
    for i, token in enumerate(tokens):
        if token not in ('FileHandle', 'FileManager'):
            continue
        prev = tokens[i - 1] if i > 0 else ''
        nxt = tokens[i + 1] if i + 1 < len(tokens) else ''
        if prev == '.' or nxt in ('.', '('):
            return True
    return False


def has_property_wrapper_usage(tokens: Tokens) -> bool:
    """`@Wrapper var x`: an attribute followed closely by a var/let"""
    ignored = {'MainActor'}
    for i in range(len(tokens) - 2):
        if tokens[i] != '@' or tokens[i + 1] in ignored:
            continue
        if any(t in ('var', 'let') for t in tokens[i + 1:i + 4]):
            return True
    return False


def has_property_declaration(tokens: Tokens) -> bool:
    if not (has_token(tokens, 'struct') or has_token(tokens, 'class')):
        return False
    return has_token(tokens, 'var') or has_token(tokens, 'let')


def has_generic_definition(tokens: Tokens) -> bool:
    """
    `<` or `where` in a declaration header. Only the header (up to the
    first `{`) is scanned so `case .x where cond:` in a body is ignored.
    """
    if len(tokens) < 4:
        return False
    for i, token in enumerate(tokens):
        if token not in DECLARATION_ANCHORS:
            continue
        for j in _header_span(tokens, i + 1):
            if tokens[j] in ('<', 'where'):
                return True
    return False


def has_task_usage(tokens: Tokens) -> bool:
    """
    Concurrency `Task`, not a user type named Task. A Task preceded by a
    declaration keyword (`struct Task`, `func Task`) never counts.
    """
    next_tokens = {'{', '(', '.', '<', '?', '!'}
    type_position = {':', '->'}
    declaration_prev = {
        'struct', 'class', 'enum', 'protocol', 'typealias',
        'let', 'var', 'func', 'case', 'init', 'extension',
    }
    for i, token in enumerate(tokens):
        if token != 'Task':
            continue
        if i > 0:
            prev = tokens[i - 1]
            if prev in declaration_prev:
                continue
            if prev in type_position:
                return True
        if i + 1 < len(tokens) and tokens[i + 1] in next_tokens:
            return True
    return False


def has_main_actor_usage(tokens: Tokens) -> bool:
    return has_token(tokens, 'MainActor')


def has_sendable_usage(tokens: Tokens) -> bool:
    return has_token(tokens, 'Sendable')


def has_comparison_operator(tokens: Tokens) -> bool:
    return has_any_token(tokens, {'==', '!=', '<', '>', '<=', '>='})


def has_logical_operator(tokens: Tokens) -> bool:
    return has_any_token(tokens, {'&&', '||', '!'})


def has_compound_assignment(tokens: Tokens) -> bool:
    return has_any_token(tokens, {'+=', '-=', '*=', '/=', '%='})


def has_interpolation_marker(tokens: Tokens) -> bool:
    """Marker left behind by strip_comments_and_strings"""
    return has_token(tokens, INTERPOLATION_MARKER)


# ---------------------------------------------------------------------------
# Type and protocol detectors
# ---------------------------------------------------------------------------

def _has_nontrivial_conformance(tokens: Tokens, anchors) -> bool:
    for i, token in enumerate(tokens):
        if token not in anchors:
            continue
        for j in _header_span(tokens, i + 1):
            if tokens[j] != ':':
                continue
            targets = _conformance_targets(tokens, j)
            if any(t not in CONFORMANCE_IGNORED_TYPES and t != 'where' for t in targets):
                return True
    return False


def has_protocol_conformance(tokens: Tokens) -> bool:
    """`struct S: SomeProtocol` or `extension S: SomeProtocol`, ignoring stdlib bases"""
    if len(tokens) < 3:
        return False
    return (
        _has_nontrivial_conformance(tokens, TYPE_KEYWORDS)
        or _has_nontrivial_conformance(tokens, {'extension'})
    )


def has_protocol_extension(tokens: Tokens) -> bool:
    """`extension P` where P is a protocol declared in the same source"""
    protocols = protocol_names(tokens)
    if not protocols:
        return False
    for i in range(len(tokens) - 1):
        if tokens[i] != 'extension':
            continue
        for j in range(i + 1, len(tokens)):
            name = tokens[j]
            if name in ('{', ':', 'where'):
                break
            if name in protocols:
                return True
            if name == '<':
                break
    return False


def has_dependency_injection(tokens: Tokens) -> bool:
    """
    A stored `let`/`var` typed `any P` (P declared locally) inside a type
    body. A stack of "is this brace a type body" flags tracks scope.
    """
    protocols = protocol_names(tokens)
    if not protocols:
        return False

    scope_stack: List[bool] = []
    pending_type_scope = False

    for i, token in enumerate(tokens):
        if token in ('struct', 'class', 'actor'):
            pending_type_scope = True
            continue
        if token == '{':
            scope_stack.append(pending_type_scope)
            pending_type_scope = False
            continue
        if token == '}':
            if scope_stack:
                scope_stack.pop()
            continue
        if token not in ('let', 'var') or not scope_stack or not scope_stack[-1]:
            continue

        for j in range(i + 1, len(tokens)):
            nxt = tokens[j]
            if nxt in ('let', 'var', 'func', '}', '{'):
                break
            if nxt == ':' and j + 2 < len(tokens):
                if tokens[j + 1] == 'any' and tokens[j + 2] in protocols:
                    return True
    return False


def has_protocol_mocking(tokens: Tokens) -> bool:
    """A `Mock*` struct/class/enum conforming to a locally declared protocol"""
    protocols = protocol_names(tokens)
    if not protocols:
        return False

    for i, token in enumerate(tokens):
        if token not in TYPE_KEYWORDS:
            continue
        if i + 1 >= len(tokens):
            break
        if not tokens[i + 1].startswith('Mock'):
            continue
        for j in _header_span(tokens, i + 2):
            if tokens[j] != ':':
                continue
            if any(t in protocols for t in _conformance_targets(tokens, j)):
                return True
    return False


# ---------------------------------------------------------------------------
# Concurrency, error handling, access control, tooling
# ---------------------------------------------------------------------------

def has_task_sleep_usage(tokens: Tokens) -> bool:
    return has_sequence(tokens, ['Task', '.', 'sleep'])


def has_task_group_usage(tokens: Tokens) -> bool:
    return has_any_token(tokens, {
        'withTaskGroup', 'withThrowingTaskGroup', 'TaskGroup', 'ThrowingTaskGroup',
    })


def has_access_control_keyword(tokens: Tokens) -> bool:
    return has_any_token(tokens, {'private', 'fileprivate', 'internal', 'public', 'open'})


def has_access_control_open(tokens: Tokens) -> bool:
    return has_any_token(tokens, {'public', 'open'})


def has_access_control_setter(tokens: Tokens) -> bool:
    return has_sequence(tokens, ['private', '(', 'set', ')'])


def has_error_type(tokens: Tokens) -> bool:
    if has_token(tokens, 'Error'):
        return True
    return has_sequence(tokens, ['Result', '<'])


def has_throwing_function(tokens: Tokens) -> bool:
    return has_any_token(tokens, {'throws', 'rethrows'})


def has_do_try_catch(tokens: Tokens) -> bool:
    return all(has_token(tokens, t) for t in ('do', 'catch', 'try'))


def has_macro_usage(tokens: Tokens) -> bool:
    """`macro` declarations or `#name` expansions"""
    if has_token(tokens, 'macro'):
        return True
    for i in range(len(tokens) - 1):
        if tokens[i] != '#':
            continue
        nxt = tokens[i + 1]
        if nxt and (nxt[0].isalpha() or nxt[0] == '_'):
            return True
    return False


def has_projected_values(tokens: Tokens) -> bool:
    """`$name` (but not `$0`)"""
    return any(
        len(token) > 1 and token[0] == '$' and not token[1:].isdigit()
        for token in tokens
    )


def has_swiftpm_basics(tokens: Tokens) -> bool:
    return has_any_token(tokens, {'Package', 'Target', 'PackageDescription'})


def has_swiftpm_dependencies(tokens: Tokens) -> bool:
    if has_sequence(tokens, ['.', 'package', '(']):
        return True
    for i, token in enumerate(tokens):
        if token not in ('package', 'dependencies'):
            continue
        prev = tokens[i - 1] if i > 0 else ''
        nxt = tokens[i + 1] if i + 1 < len(tokens) else ''
        if prev == '.' or nxt in (':', '('):
            return True
    return False


def has_build_configs(tokens: Tokens) -> bool:
    return any(has_sequence(tokens, ['#', word]) for word in ('if', 'elseif', 'else'))


def has_network_usage(tokens: Tokens, source: str) -> bool:
    if 'http://' in source or 'https://' in source:
        return True
    return has_any_token(tokens, {'URLSession', 'URLRequest'})


def has_concurrency_usage(tokens: Tokens) -> bool:
    return (
        has_token(tokens, 'async')
        or has_token(tokens, 'await')
        or has_task_usage(tokens)
        or has_token(tokens, 'actor')
        or has_main_actor_usage(tokens)
        or has_sendable_usage(tokens)
        or has_task_group_usage(tokens)
    )

