#!/usr/bin/env python3
"""
Lexical front end for the constraint engine.

Entry points:
- strip_comments_and_strings: blank out comments and string bodies so that
  keywords inside them never reach the detectors. Interpolation markers
  inside strings survive as the two-character token ``\\(``.
- strip_comments: remove comments only, for checks that read string literals.
- tokenize: flat scan of (cleaned) source into Token values.
- contains_string_interpolation: scan raw source for a live ``\\(`` escape.
"""

from enum import Enum
from typing import List, NamedTuple


class TokenKind(Enum):
    """Tag carried by every token"""
    IDENTIFIER = 'identifier'
    SHORTHAND_ARG = 'shorthand_arg'          # $0, $1, ...
    DOLLAR_IDENTIFIER = 'dollar_identifier'  # $name (projected value)
    OPERATOR = 'operator'
    PUNCTUATION = 'punctuation'
    CHAR = 'char'                            # anything else, verbatim


class Token(NamedTuple):
    kind: TokenKind
    text: str


INTERPOLATION_MARKER = '\\('

# Longest first so that maximal munch works with a simple prefix test
MULTI_CHAR_OPERATORS = (
    '...', '..<',
    '==', '!=', '<=', '>=',
    '&&', '||', '??', '->',
    '+=', '-=', '*=', '/=', '%=',
    INTERPOLATION_MARKER,
)

SINGLE_CHAR_OPERATORS = frozenset('.=!<>&|+-*/%?')
PUNCTUATION = frozenset('{}(),@#')


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch == '_'


def _is_identifier_part(ch: str) -> bool:
    return ch.isalnum() or ch == '_'


def is_identifier(text: str) -> bool:
    """True when text looks like a plain identifier (letters, digits, _)"""
    if not text or not _is_identifier_start(text[0]):
        return False
    return all(_is_identifier_part(ch) for ch in text[1:])


def tokenize(source: str) -> List[Token]:
    """Split source into tokens. Never raises; whitespace is dropped."""
    tokens: List[Token] = []
    i = 0
    n = len(source)

    while i < n:
        current = source[i]

        if current.isspace():
            i += 1
            continue

        if _is_identifier_start(current):
            j = i + 1
            while j < n and _is_identifier_part(source[j]):
                j += 1
            tokens.append(Token(TokenKind.IDENTIFIER, source[i:j]))
            i = j
            continue

        if current == '$':
            j = i + 1
            if j < n and _is_identifier_start(source[j]):
                j += 1
                while j < n and _is_identifier_part(source[j]):
                    j += 1
                kind = TokenKind.DOLLAR_IDENTIFIER
            else:
                while j < n and source[j].isdigit():
                    j += 1
                kind = TokenKind.SHORTHAND_ARG if j > i + 1 else TokenKind.CHAR
            tokens.append(Token(kind, source[i:j]))
            i = j
            continue

        matched = None
        for op in MULTI_CHAR_OPERATORS:
            if source.startswith(op, i):
                matched = op
                break
        if matched:
            tokens.append(Token(TokenKind.OPERATOR, matched))
            i += len(matched)
            continue

        if current in SINGLE_CHAR_OPERATORS:
            kind = TokenKind.OPERATOR
        elif current in PUNCTUATION:
            kind = TokenKind.PUNCTUATION
        else:
            kind = TokenKind.CHAR
        tokens.append(Token(kind, current))
        i += 1

    return tokens


def token_texts(tokens: List[Token]) -> List[str]:
    return [token.text for token in tokens]


class _StringState:
    """Delimiter bookkeeping for the string literal currently being scanned"""

    __slots__ = ('hashes', 'quotes', 'raw')

    def __init__(self, hashes: int, quotes: int):
        self.hashes = hashes
        self.quotes = quotes
        self.raw = hashes > 0


def _hashes_at(source: str, index: int, count: int) -> bool:
    if count == 0:
        return True
    if index + count > len(source):
        return False
    return source[index:index + count] == '#' * count


def _open_string(source: str, i: int):
    """
    If a string literal opens at i, return (state, index after opener).
    Handles "..." / \"\"\"...\"\"\" with 0+ leading '#' for raw strings.
    """
    j = i
    while j < len(source) and source[j] == '#':
        j += 1
    if j >= len(source) or source[j] != '"':
        return None, i
    hashes = j - i
    if source.startswith('"""', j):
        return _StringState(hashes, 3), j + 3
    return _StringState(hashes, 1), j + 1


def _close_string(source: str, i: int, state: _StringState):
    """Return the index after the closing delimiter at i, or None"""
    if state.quotes == 3:
        if not source.startswith('"""', i):
            return None
        end = i + 3
    else:
        end = i + 1
    if _hashes_at(source, end, state.hashes):
        return end + state.hashes
    return None


def _interpolation_at(source: str, i: int, state: _StringState):
    """
    At a backslash inside a string, report whether it starts a live
    interpolation and how far to advance.
    """
    j = i + 1
    while j < len(source) and source[j] == '#':
        j += 1
    hashes = j - (i + 1)
    opens_paren = j < len(source) and source[j] == '('
    if state.raw:
        return opens_paren and hashes == state.hashes, 1
    return opens_paren and hashes == 0, 2


def _strip(source: str, keep_strings: bool) -> str:
    """Shared scanner; string literals are copied verbatim when keep_strings is set"""
    output: List[str] = []
    i = 0
    n = len(source)
    in_line_comment = False
    in_block_comment = False
    string = None

    while i < n:
        current = source[i]
        nxt = source[i + 1] if i + 1 < n else ''

        if in_line_comment:
            if current == '\n':
                in_line_comment = False
                output.append('\n')
            i += 1
            continue

        if in_block_comment:
            if current == '*' and nxt == '/':
                in_block_comment = False
                output.append(' ')
                i += 2
                continue
            i += 1
            continue

        if string is not None:
            if current == '\\':
                live, step = _interpolation_at(source, i, string)
                if keep_strings:
                    output.append(source[i:i + step])
                elif live:
                    output.append(' ' + INTERPOLATION_MARKER + ' ')
                i += step
                continue
            if current == '"':
                end = _close_string(source, i, string)
                if end is not None:
                    string = None
                    output.append(source[i:end] if keep_strings else ' ')
                    i = end
                    continue
            if keep_strings:
                output.append(current)
            i += 1
            continue

        if current == '/' and nxt == '/':
            in_line_comment = True
            i += 2
            continue

        if current == '/' and nxt == '*':
            in_block_comment = True
            i += 2
            continue

        if current in '#"':
            opened, after = _open_string(source, i)
            if opened is not None:
                string = opened
                output.append(source[i:after] if keep_strings else ' ')
                i = after
                continue

        output.append(current)
        i += 1

    return ''.join(output)


def strip_comments_and_strings(source: str) -> str:
    """
    Remove // and /* */ comments and collapse every string literal to a
    single space. Live interpolation escapes inside strings are kept as
    ``\\(`` so the marker is still visible to token-level checks.
    Unterminated comments or strings consume the rest of the input.
    """
    return _strip(source, keep_strings=False)


def strip_comments(source: str) -> str:
    """Remove comments only; string literals stay as written"""
    return _strip(source, keep_strings=True)


def contains_string_interpolation(source: str) -> bool:
    """
    Scan raw source for a live interpolation inside a string literal.
    Comments are skipped; raw strings only interpolate with a matching
    number of hashes (``\\#(`` inside ``#"..."#``).
    """
    i = 0
    n = len(source)
    in_line_comment = False
    in_block_comment = False
    string = None

    while i < n:
        current = source[i]
        nxt = source[i + 1] if i + 1 < n else ''

        if in_line_comment:
            if current == '\n':
                in_line_comment = False
            i += 1
            continue

        if in_block_comment:
            if current == '*' and nxt == '/':
                in_block_comment = False
                i += 2
                continue
            i += 1
            continue

        if string is not None:
            if current == '\\':
                live, step = _interpolation_at(source, i, string)
                if live:
                    return True
                i += step
                continue
            if current == '"':
                end = _close_string(source, i, string)
                if end is not None:
                    string = None
                    i = end
                    continue
            i += 1
            continue

        if current == '/' and nxt == '/':
            in_line_comment = True
            i += 2
            continue

        if current == '/' and nxt == '*':
            in_block_comment = True
            i += 2
            continue

        if current in '#"':
            opened, after = _open_string(source, i)
            if opened is not None:
                string = opened
                i = after
                continue

        i += 1

    return False
