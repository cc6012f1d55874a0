"""
Delimited line tokenizer.

Two modes, both lazy (one token per pull):

Literal split:
    The delimiter is matched literally (never as a regex) and may be longer
    than one character. Consecutive delimiters produce empty tokens; a
    trailing delimiter produces a trailing empty token.

Quote-aware split:
    A double quote opens or closes a quoted span. Inside a span, a
    delimiter is ordinary text and a doubled quote ("") is one literal
    quote. Enclosing quotes are not part of the token. A span that is
    never closed runs to the end of the line without error; input is
    already split into lines, so there is no continuation.

    a,"b,c",d    -> a | b,c | d
    a,"b""c",d   -> a | b"c | d
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

QUOTE = '"'


def split_literal(line: str, delimiter: str) -> Iterator[str]:
    """Split on every occurrence of delimiter."""
    start = 0
    step = len(delimiter)
    while True:
        pos = line.find(delimiter, start)
        if pos < 0:
            yield line[start:]
            return
        yield line[start:pos]
        start = pos + step


def split_quoted(line: str, delimiter: str) -> Iterator[str]:
    """Split on delimiters outside quoted spans, unescaping doubled quotes."""
    step = len(delimiter)
    length = len(line)
    token: list[str] = []
    in_quotes = False
    i = 0
    while i < length:
        ch = line[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                token.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue
        if not in_quotes and line.startswith(delimiter, i):
            yield "".join(token)
            token = []
            i += step
            continue
        token.append(ch)
        i += 1
    yield "".join(token)


def tokenize(line: str, delimiter: str, quote_aware: bool = False) -> Iterator[str]:
    """Lazily split one line into field tokens."""
    if not delimiter:
        raise ValueError("delimiter must be a non-empty string")
    if quote_aware:
        return split_quoted(line, delimiter)
    return split_literal(line, delimiter)


def count_tokens(line: str, delimiter: str, quote_aware: bool = False) -> int:
    """Number of tokens tokenize() would produce for line."""
    return sum(1 for _ in tokenize(line, delimiter, quote_aware))


def join_tokens(tokens: Iterable[str], delimiter: str, quote_aware: bool = False) -> str:
    """
    Render tokens as one delimited line that tokenize() reads back unchanged.

    With quote_aware, tokens containing the delimiter or a quote are quoted
    and their quotes doubled.

    Raises:
        ValueError: without quote_aware, a token contains the delimiter.
    """
    rendered: list[str] = []
    for token in tokens:
        if quote_aware:
            if delimiter in token or QUOTE in token:
                token = QUOTE + token.replace(QUOTE, QUOTE * 2) + QUOTE
        elif delimiter in token:
            raise ValueError(f"token {token!r} contains the delimiter {delimiter!r}")
        rendered.append(token)
    return delimiter.join(rendered)
