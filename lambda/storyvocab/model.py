# lambda/storyvocab/model.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class Tier(str, Enum):
    """Learning state of a word, recomputed from the raw counters on every selection."""
    UNSEEN = "unseen"
    SEEN_UNCLICKED = "seen_unclicked"
    CLICKED_IN_LEARNING = "clicked_in_learning"
    MASTERED_BY_REPETITION = "mastered_by_repetition"
    MASTERED_BY_REVIEW = "mastered_by_review"


MASTERED_TIERS = frozenset({Tier.MASTERED_BY_REPETITION, Tier.MASTERED_BY_REVIEW})


@dataclass
class WordStats:
    """
    Per-word counters as read from storage.
    - story_usage:      times the word went into a generated batch
    - click_count:      times the word was clicked in a displayed story
    - last_click_usage: story_usage at the moment of the latest click
    Missing words count as 0 everywhere.
    """
    story_usage: Dict[str, int] = field(default_factory=dict)
    click_count: Dict[str, int] = field(default_factory=dict)
    last_click_usage: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "WordStats":
        return cls()

    def usage(self, word: str) -> int:
        return self.story_usage.get(word, 0)

    def clicks(self, word: str) -> int:
        return self.click_count.get(word, 0)

    def exposures_since_click(self, word: str) -> int:
        return self.usage(word) - self.last_click_usage.get(word, 0)


@dataclass
class BatchSelection:
    """One selection round: the batch plus the picks of each draw step."""
    words: List[str]
    new: List[str] = field(default_factory=list)
    hard: List[str] = field(default_factory=list)
    medium: List[str] = field(default_factory=list)
    easy: List[str] = field(default_factory=list)
    backfill: List[str] = field(default_factory=list)
    tier_counts: Dict[Tier, int] = field(default_factory=dict)


# -------------------- Errors --------------------
class StoryVocabError(Exception):
    """Base class for errors surfaced to callers."""


class InsufficientCorpusError(StoryVocabError):
    def __init__(self, have: int, need: int):
        self.have = have
        self.need = need
        super().__init__(f"Need at least {need} words (have {have}).")


class EmptyWordBankError(StoryVocabError):
    def __init__(self):
        super().__init__("Upload words first.")


class StorageError(StoryVocabError):
    """Reading or writing word data failed; the whole operation may be retried."""


class StoryGenerationError(StoryVocabError):
    pass


class UnsupportedFileTypeError(StoryVocabError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__("Unsupported file type. Please upload a .txt or .csv file.")


class EmptyUploadError(StoryVocabError):
    def __init__(self):
        super().__init__("The uploaded file contains no words.")


class BadRequestError(StoryVocabError):
    """The request body is not valid JSON of the expected shape."""
