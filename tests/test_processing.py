from __future__ import annotations

from pathlib import Path

import pytest

from neardup.processing import MalformedLineError, ParsedLine, iter_lines, process_line, tokenize_words


def test_process_line_splits_identifier_and_words() -> None:
    assert process_line("42 is the answer") == ParsedLine(42, 3, ["is", "the", "answer"])


def test_process_line_collapses_whitespace() -> None:
    parsed = process_line("  7\tfoo   bar baz ")
    assert parsed.identifier == 7
    assert parsed.tokens == ["foo", "bar", "baz"]


def test_process_line_allows_identifier_without_words() -> None:
    assert process_line("5") == ParsedLine(5, 0, [])


def test_words_keep_case_and_punctuation() -> None:
    assert process_line("1 I'm the Doctor.").tokens == ["I'm", "the", "Doctor."]


@pytest.mark.parametrize("line", ["", "   ", "abc def", "-3 minus", "4.5 float", "x12 words"])
def test_malformed_lines_raise(line: str) -> None:
    with pytest.raises(MalformedLineError):
        process_line(line)


def test_tokenize_words_splits_on_whitespace_only() -> None:
    assert tokenize_words("a\u200bb c\td") == ["a\u200bb", "c", "d"]


def test_iter_lines_skips_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "lines.txt"
    path.write_text("1 a b\n\n   \n2 c d\r\n", encoding="utf-8")
    assert list(iter_lines(path)) == ["1 a b", "2 c d"]


def test_iter_lines_is_lazy_about_missing_files(tmp_path: Path) -> None:
    lines = iter_lines(tmp_path / "missing.txt")
    with pytest.raises(FileNotFoundError):
        next(lines)


def test_identifier_must_fit_in_64_bits() -> None:
    assert process_line(f"{2**64 - 1} a").identifier == 2**64 - 1
    with pytest.raises(MalformedLineError, match="64 bits"):
        process_line(f"{2**64 + 5} a b c d e f g")
