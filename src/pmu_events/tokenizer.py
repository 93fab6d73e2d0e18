"""Flat JSON tokenizer for event files.

The document is turned into a pre-order list of ``Token`` spans that point
back into the source text. Nothing is decoded: a string token covers the raw
characters between its quotes, escapes included. Composite tokens record how
many direct children follow them; for objects that count includes both the
keys and the values, so a well-formed event object of ``n`` fields has
``size == 2 * n``.

Several top-level values are accepted one after another. Consumers that
expect a single value detect the extra tokens by comparing how far they
walked against ``len(tokens)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .exceptions import SourceUnavailableError, TokenizeError
from .logging_config import get_logger

logger = get_logger(__name__)

_WHITESPACE = " \t\r\n"
_PRIMITIVE_START = "-0123456789tfn"
_PRIMITIVE_END = _WHITESPACE + ",:]}"
_ESCAPES = '"\\/bfrntu'


class TokenType(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    PRIMITIVE = "primitive"


@dataclass
class Token:
    """One syntactic unit of the source: ``text[start:end]``."""

    type: TokenType
    start: int
    end: int = -1
    size: int = 0


def _line_at(text: str, pos: int) -> int:
    return text.count("\n", 0, pos) + 1


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into a flat list of tokens.

    Raises:
        TokenizeError: On unterminated strings, unbalanced or mismatched
            brackets, or characters that cannot start a JSON value
    """
    tokens: list[Token] = []
    open_stack: list[int] = []
    pos = 0
    length = len(text)

    def add(tok: Token) -> None:
        if open_stack:
            tokens[open_stack[-1]].size += 1
        tokens.append(tok)

    while pos < length:
        c = text[pos]

        if c in "{[":
            add(Token(TokenType.OBJECT if c == "{" else TokenType.ARRAY, pos))
            open_stack.append(len(tokens) - 1)

        elif c in "}]":
            expected = TokenType.OBJECT if c == "}" else TokenType.ARRAY
            if not open_stack:
                raise TokenizeError(f"unmatched '{c}'", _line_at(text, pos))
            tok = tokens[open_stack.pop()]
            if tok.type is not expected:
                raise TokenizeError(
                    f"'{c}' closes {tok.type.value} opened on line {_line_at(text, tok.start)}",
                    _line_at(text, pos),
                )
            tok.end = pos + 1

        elif c == '"':
            start = pos + 1
            pos = start
            while pos < length and text[pos] != '"':
                if text[pos] == "\\":
                    pos += 1
                    if pos < length and text[pos] not in _ESCAPES:
                        raise TokenizeError(
                            f"invalid escape '\\{text[pos]}'", _line_at(text, pos)
                        )
                pos += 1
            if pos >= length:
                raise TokenizeError("unterminated string", _line_at(text, start - 1))
            add(Token(TokenType.STRING, start, pos))

        elif c in _PRIMITIVE_START:
            start = pos
            while pos < length and text[pos] not in _PRIMITIVE_END:
                pos += 1
            add(Token(TokenType.PRIMITIVE, start, pos))
            continue

        elif c not in _WHITESPACE and c not in ",:":
            raise TokenizeError(f"unexpected character {c!r}", _line_at(text, pos))

        pos += 1

    if open_stack:
        tok = tokens[open_stack[-1]]
        raise TokenizeError(f"unterminated {tok.type.value}", _line_at(text, tok.start))

    return tokens


def json_len(tok: Token) -> int:
    return tok.end - tok.start


def json_text(text: str, tok: Token) -> str:
    return text[tok.start:tok.end]


def json_streq(text: str, tok: Token, s: str) -> bool:
    """True when the token's raw text is exactly ``s``."""
    return json_len(tok) == len(s) and text.startswith(s, tok.start)


def json_line(text: str, tok: Token) -> int:
    """1-based source line the token starts on."""
    return _line_at(text, tok.start)


def json_name(tok: Token) -> str:
    return tok.type.value


def parse_json(path: Optional[Union[str, Path]]) -> tuple[str, list[Token]]:
    """Read and tokenize an event file.

    Args:
        path: File to read. ``None`` means no file could be resolved.

    Returns:
        The source text and its tokens

    Raises:
        SourceUnavailableError: If there is no path or it cannot be read
        TokenizeError: If the file is not well-formed JSON
    """
    if path is None:
        raise SourceUnavailableError(None, "no event file found")

    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        raise SourceUnavailableError(path, e.strerror or str(e))

    tokens = tokenize(text)
    if not tokens:
        raise TokenizeError("no JSON value", 1)

    logger.debug("Tokenized %s: %d tokens", path, len(tokens))
    return text, tokens
