# lambda/storyvocab/tests/test_wordlist.py
import pytest

from storyvocab.model import EmptyUploadError, UnsupportedFileTypeError
from storyvocab.wordlist import parse_word_file, sanitize_word, tokenize_story


@pytest.mark.parametrize("token, expected", [
    ("Haus,", "Haus"),
    ("«Straße»", "Straße"),
    ("„Mädchen“.", "Mädchen"),
    ("(über)", "über"),
    ("$5", "5"),
    ("—", ""),
    ("!!!", ""),
    ("€", ""),
    ("  ", ""),
])
def test_sanitize_word(token, expected):
    assert sanitize_word(token) == expected


def test_sanitize_word_composes_to_nfc():
    assert sanitize_word("Cafe\u0301!") == "Caf\u00e9"


def test_parse_txt_splits_and_dedupes():
    text = "\ufeffHund\r\nKatze, Maus;;Vogel|Hund\n\n  Baum  \n"
    assert parse_word_file("words.TXT", text) == ["Hund", "Katze", "Maus", "Vogel", "Baum"]


def test_parse_txt_bytes_normalizes():
    data = "Füße\nTür".encode("utf-8")
    assert parse_word_file("w.txt", data) == ["Füße", "Tür"]


def test_parse_csv_semicolon_flattened():
    text = "Hund;Katze\n Maus ;;\nHund;Baum\n"
    assert parse_word_file("list.csv", text) == ["Hund", "Katze", "Maus", "Baum"]


def test_parse_unsupported_extension():
    with pytest.raises(UnsupportedFileTypeError):
        parse_word_file("words.docx", "Hund")


def test_parse_empty_file():
    with pytest.raises(EmptyUploadError):
        parse_word_file("words.txt", "\n , ; \n")


def test_parse_rejects_invalid_utf8():
    with pytest.raises(UnicodeDecodeError):
        parse_word_file("words.txt", b"\xff\xfe\x00")


def test_tokenize_story_keeps_whitespace_and_punctuation():
    tokens = tokenize_story("Der Hund läuft.\n\n„Warum?“ — fragt er.")
    assert "".join(t["text"] for t in tokens) == "Der Hund läuft.\n\n„Warum?“ — fragt er."
    assert {"text": "läuft.", "word": "läuft"} in tokens
    assert {"text": "\n\n", "word": None} in tokens
    assert {"text": "„Warum?“", "word": "Warum"} in tokens
    assert {"text": "—", "word": None} in tokens


def test_tokenize_empty_story():
    assert tokenize_story("") == []
