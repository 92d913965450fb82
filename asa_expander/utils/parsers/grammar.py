"""
Small backtracking parser combinators over whitespace-delimited tokens.

A parser is a callable ``(tokens, pos)`` that yields every way it can match
as ``(matched_tokens, next_pos)`` pairs, most preferred first. Optional parts
try the longer match before the empty one, so the first complete result of a
sequence is the same one a greedy regular expression would pick.
"""
import re
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple

Result = Tuple[Tuple[str, ...], int]
Parser = Callable[[Sequence[str], int], Iterator[Result]]
Field = Tuple[Optional[str], Parser]


def word(*choices: str) -> Parser:
    """Match one token equal to any of ``choices``."""
    def parse(tokens: Sequence[str], pos: int) -> Iterator[Result]:
        if pos < len(tokens) and tokens[pos] in choices:
            yield (tokens[pos],), pos + 1
    return parse


def pattern(regex: str) -> Parser:
    """Match one token that fully matches ``regex``."""
    compiled = re.compile(regex)

    def parse(tokens: Sequence[str], pos: int) -> Iterator[Result]:
        if pos < len(tokens) and compiled.fullmatch(tokens[pos]):
            yield (tokens[pos],), pos + 1
    return parse


def anything() -> Parser:
    """Match any single token."""
    def parse(tokens: Sequence[str], pos: int) -> Iterator[Result]:
        if pos < len(tokens):
            yield (tokens[pos],), pos + 1
    return parse


def rest() -> Parser:
    """Match all remaining tokens (at least one)."""
    def parse(tokens: Sequence[str], pos: int) -> Iterator[Result]:
        if pos < len(tokens):
            yield tuple(tokens[pos:]), len(tokens)
    return parse


def seq(*parsers: Parser) -> Parser:
    def parse(tokens: Sequence[str], pos: int) -> Iterator[Result]:
        yield from _chain(parsers, tokens, pos)
    return parse


def _chain(parsers: Sequence[Parser], tokens: Sequence[str], pos: int) -> Iterator[Result]:
    if not parsers:
        yield (), pos
        return
    for head, after_head in parsers[0](tokens, pos):
        for tail, end in _chain(parsers[1:], tokens, after_head):
            yield head + tail, end


def alt(*parsers: Parser) -> Parser:
    """Ordered choice; earlier alternatives are preferred."""
    def parse(tokens: Sequence[str], pos: int) -> Iterator[Result]:
        for parser in parsers:
            yield from parser(tokens, pos)
    return parse


def optional(parser: Parser) -> Parser:
    def parse(tokens: Sequence[str], pos: int) -> Iterator[Result]:
        yield from parser(tokens, pos)
        yield (), pos
    return parse


def after(keyword: Parser, parser: Parser) -> Parser:
    """Match ``keyword`` then ``parser``, keeping only the tokens of ``parser``."""
    def parse(tokens: Sequence[str], pos: int) -> Iterator[Result]:
        for _, after_keyword in keyword(tokens, pos):
            yield from parser(tokens, after_keyword)
    return parse


def _fields(fields: Sequence[Field], tokens: Sequence[str], pos: int) -> Iterator[Tuple[Dict[str, str], int]]:
    if not fields:
        yield {}, pos
        return
    name, parser = fields[0]
    for matched, after_field in parser(tokens, pos):
        for values, end in _fields(fields[1:], tokens, after_field):
            if name is not None:
                values = {name: " ".join(matched), **values}
            yield values, end


def match_fields(fields: Sequence[Field], text: str) -> Optional[Dict[str, str]]:
    """
    Match ``fields`` against the start of ``text``.

    Trailing tokens after the last field are ignored. Returns the first
    complete match as ``{field_name: text}`` (unmatched optional fields are
    empty strings), or None when the text does not match.
    """
    tokens = text.split()
    for values, _ in _fields(fields, tokens, 0):
        return values
    return None
