# lambda/storyvocab/config.py
import os
from dataclasses import dataclass, fields

SELECTION_MODES = ("spaced", "uniform")
# DynamoDB caps TransactWriteItems at 100 actions; a batch is counted in one transaction
MAX_BATCH_SIZE = 100

# Runtime settings (Lambda environment)
DDB_TABLE_NAME = os.getenv("DDB_TABLE", "storyvocab-Words")
ENV = os.getenv("ENV", "dev")
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "*")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "30"))

STORY_LANGUAGE = os.getenv("STORY_LANGUAGE", "German")
STORY_LINES = int(os.getenv("STORY_LINES", "13"))
STORY_PASSAGES = int(os.getenv("STORY_PASSAGES", "2"))


@dataclass(frozen=True)
class SelectionConfig:
    """
    Knobs of the word selector.
    - new_batch_size: brand-new (unseen) words per batch
    - mix_size:       review words per batch, split into hard/medium/easy quotas
    - master_threshold: exposures after which a never-clicked word is mastered
    - review_threshold: exposures since the last click after which a clicked word is mastered
    - target_batch_size: final batch size after backfill
    - mode: "spaced" (tiered selection) or "uniform" (plain random pick)
    """
    new_batch_size: int = 50
    mix_size: int = 50
    hard_quota: int = 20
    medium_quota: int = 20
    easy_quota: int = 10
    master_threshold: int = 20
    review_threshold: int = 20
    target_batch_size: int = 100
    mode: str = "spaced"

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, int) and value < 0:
                raise ValueError(f"{f.name} must be >= 0 (got {value})")
        if self.target_batch_size > MAX_BATCH_SIZE:
            raise ValueError(f"target_batch_size must be <= {MAX_BATCH_SIZE} (got {self.target_batch_size})")
        review = self.hard_quota + self.medium_quota + self.easy_quota
        if review > self.mix_size:
            raise ValueError(f"hard + medium + easy quotas ({review}) exceed mix_size ({self.mix_size})")
        if self.mode not in SELECTION_MODES:
            raise ValueError(f"mode must be one of {SELECTION_MODES} (got {self.mode!r})")

    @property
    def min_corpus_size(self) -> int:
        return self.new_batch_size + self.mix_size

    @classmethod
    def from_env(cls, environ=None) -> "SelectionConfig":
        env = os.environ if environ is None else environ
        new_batch_size = int(env.get("NEW_BATCH_SIZE", cls.new_batch_size))
        mix_size = int(env.get("MIX_SIZE", cls.mix_size))
        # sub-quotas default to a 40/40/20 split of mix_size
        hard = mix_size * 2 // 5
        medium = mix_size * 2 // 5
        easy = mix_size - hard - medium
        return cls(
            new_batch_size=new_batch_size,
            mix_size=mix_size,
            hard_quota=int(env.get("HARD_QUOTA", hard)),
            medium_quota=int(env.get("MEDIUM_QUOTA", medium)),
            easy_quota=int(env.get("EASY_QUOTA", easy)),
            master_threshold=int(env.get("MASTER_THRESHOLD", cls.master_threshold)),
            review_threshold=int(env.get("REVIEW_THRESHOLD", cls.review_threshold)),
            # target follows the two quotas unless pinned explicitly
            target_batch_size=int(env.get("TARGET_BATCH_SIZE", new_batch_size + mix_size)),
            mode=env.get("SELECTION_MODE", cls.mode).strip().lower(),
        )
