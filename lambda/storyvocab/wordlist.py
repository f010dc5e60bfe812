# lambda/storyvocab/wordlist.py
from __future__ import annotations

import csv
import io
import re
import unicodedata
from pathlib import PurePath
from typing import Dict, List, Optional

from .model import EmptyUploadError, UnsupportedFileTypeError

BOM = "\ufeff"
TXT_SPLIT_RE = re.compile(r"\r?\n|[,;|]+")
WHITESPACE_SPLIT_RE = re.compile(r"(\s+)")
CSV_DELIMITER = ";"


def normalize(word: str) -> str:
    return unicodedata.normalize("NFC", word).strip()


def sanitize_word(token: str) -> str:
    """
    Turn a clicked story token into a word key: drop every Unicode punctuation
    (P*) and symbol (S*) character, then trim. Returns "" when nothing is left.
    """
    kept = "".join(ch for ch in token if unicodedata.category(ch)[0] not in "PS")
    return normalize(kept)


def _dedupe(words: List[str]) -> List[str]:
    # dict keeps insertion order
    return list(dict.fromkeys(w for w in words if w))


def parse_txt(text: str) -> List[str]:
    if text.startswith(BOM):
        text = text[1:]
    text = unicodedata.normalize("NFC", text)
    return _dedupe([w.strip() for w in TXT_SPLIT_RE.split(text)])


def parse_csv(text: str) -> List[str]:
    if text.startswith(BOM):
        text = text[1:]
    reader = csv.reader(io.StringIO(text), delimiter=CSV_DELIMITER)
    return _dedupe([normalize(cell) for row in reader for cell in row])


def parse_word_file(filename: str, data: bytes | str) -> List[str]:
    """
    Parse an uploaded word list (.txt or .csv) into distinct NFC words, in
    file order.
    """
    ext = PurePath(filename or "").suffix.lower().lstrip(".")
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    if ext == "txt":
        words = parse_txt(text)
    elif ext == "csv":
        words = parse_csv(text)
    else:
        raise UnsupportedFileTypeError(filename)
    if not words:
        raise EmptyUploadError()
    return words


def tokenize_story(text: str) -> List[Dict[str, Optional[str]]]:
    """
    Split a story into display tokens. Whitespace runs are kept as their own
    tokens (word=None); every other token carries the word a click on it
    records, or None when it is pure punctuation.
    """
    tokens: List[Dict[str, Optional[str]]] = []
    for part in WHITESPACE_SPLIT_RE.split(text or ""):
        if not part:
            continue
        if not part.strip():
            tokens.append({"text": part, "word": None})
        else:
            tokens.append({"text": part, "word": sanitize_word(part) or None})
    return tokens
