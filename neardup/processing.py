import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, TextIO

import regex as reg

# Words are maximal runs of non-whitespace, taken verbatim.
TOKEN_RE = reg.compile(r"\S+", reg.UNICODE)
IDENTIFIER_RE = reg.compile(r"[0-9]+")
# Identifiers are exported as uint64.
MAX_IDENTIFIER = 2**64 - 1


class MalformedLineError(ValueError):
    """Raised when a line does not start with a numeric identifier."""


@dataclass
class ParsedLine:
    """Identifier, word count and word tokens of one input line."""

    identifier: int
    word_count: int
    tokens: List[str]


def tokenize_words(text: str) -> List[str]:
    return TOKEN_RE.findall(text)


def process_line(line: str) -> ParsedLine:
    """
    Split a raw line into its leading identifier and the remaining word tokens.

    Words are taken verbatim: no case folding or punctuation stripping, so two
    lines only share a token when the exact spelling matches.
    """
    tokens = tokenize_words(line)
    if not tokens:
        raise MalformedLineError("empty line has no identifier")
    head, words = tokens[0], tokens[1:]
    if not IDENTIFIER_RE.fullmatch(head):
        raise MalformedLineError(f"identifier must be an unsigned integer, got {head!r}")
    identifier = int(head)
    if identifier > MAX_IDENTIFIER:
        raise MalformedLineError(f"identifier {head} does not fit in 64 bits")
    return ParsedLine(identifier=identifier, word_count=len(words), tokens=words)


def _open_source(path: Path | str) -> TextIO:
    if str(path) == "-":
        return sys.stdin
    return open(path, "r", encoding="utf-8")


def iter_lines(path: Path | str) -> Iterator[str]:
    """
    Lazily yield non-blank lines from a file, or from stdin when path is "-".
    """
    source = _open_source(path)
    try:
        for raw_line in source:
            line = raw_line.rstrip("\r\n")
            if line.strip():
                yield line
    finally:
        if source is not sys.stdin:
            source.close()
