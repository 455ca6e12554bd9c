"""
Tests for registry parsing and loading.
"""

import pytest
import requests
from unittest.mock import MagicMock, patch

from noveltymap.core.corpus_source import (
    BUILTIN_CORPUS,
    load_corpus_text,
    parse_corpus,
)


def test_builtin_registry_parses_to_ten_pitches():
    texts = parse_corpus(BUILTIN_CORPUS)
    assert len(texts) == 10
    assert texts[0] == "Uber for dog walking in urban areas"
    assert "pitch" not in texts


def test_header_is_discarded_even_if_long():
    texts = parse_corpus("this header line is long enough\nReal pitch one")
    assert texts == ["Real pitch one"]


def test_quotes_and_whitespace_are_stripped():
    raw = 'pitch\n  "Quoted pitch with spaces"  \n"Leading quote only\nTrailing quote only"'
    assert parse_corpus(raw) == [
        "Quoted pitch with spaces",
        "Leading quote only",
        "Trailing quote only",
    ]


def test_short_lines_are_dropped():
    raw = "pitch\nok\n\n   \n\"abcd\"\nabcde\nA longer pitch"
    assert parse_corpus(raw) == ["abcde", "A longer pitch"]


def test_custom_min_length():
    raw = "pitch\nshort\nsomewhat longer"
    assert parse_corpus(raw, min_length=10) == ["somewhat longer"]


def test_windows_line_endings():
    assert parse_corpus("pitch\r\nFirst pitch\r\nSecond pitch\r\n") == ["First pitch", "Second pitch"]


def test_empty_source():
    assert parse_corpus("") == []
    assert parse_corpus("pitch") == []


def test_load_without_source_uses_builtin():
    raw, origin = load_corpus_text()
    assert raw == BUILTIN_CORPUS
    assert origin == "builtin"


def test_load_from_url():
    response = MagicMock()
    response.text = "pitch\nRemote pitch text"
    with patch('noveltymap.core.corpus_source.requests.get', return_value=response) as mock_get:
        raw, origin = load_corpus_text(url="https://example.com/pitches.csv")

    mock_get.assert_called_once()
    response.raise_for_status.assert_called_once()
    assert raw == "pitch\nRemote pitch text"
    assert origin == "https://example.com/pitches.csv"


def test_failed_fetch_falls_back_to_builtin():
    with patch('noveltymap.core.corpus_source.requests.get',
               side_effect=requests.ConnectionError("offline")):
        raw, origin = load_corpus_text(url="https://example.com/pitches.csv")

    assert raw == BUILTIN_CORPUS
    assert origin == "builtin"


def test_failed_fetch_falls_back_to_file(tmp_path):
    registry = tmp_path / "registry.csv"
    registry.write_text("pitch\nLocal pitch text\n", encoding="utf-8")

    with patch('noveltymap.core.corpus_source.requests.get',
               side_effect=requests.Timeout("slow")):
        raw, origin = load_corpus_text(url="https://example.com/pitches.csv", path=registry)

    assert parse_corpus(raw) == ["Local pitch text"]
    assert origin == str(registry)


def test_missing_file_falls_back_to_builtin(tmp_path):
    raw, origin = load_corpus_text(path=tmp_path / "missing.csv")
    assert origin == "builtin"


def test_undecodable_file_falls_back_to_builtin(tmp_path):
    registry = tmp_path / "registry.csv"
    registry.write_bytes(b"pitch\n\xff\xfe Marketplace for reclaimed timber\n")

    raw, origin = load_corpus_text(path=registry)

    assert origin == "builtin"
    assert raw == BUILTIN_CORPUS
