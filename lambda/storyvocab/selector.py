# lambda/storyvocab/selector.py
from __future__ import annotations

import math
import random
from typing import Dict, Iterable, List, Optional, Sequence

from .config import SelectionConfig
from .model import BatchSelection, InsufficientCorpusError, Tier, WordStats
from .observability import logger

DEFAULT_CONFIG = SelectionConfig()


# -------------------- Helpers --------------------
def _distinct(words: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for w in words:
        if w not in seen:
            seen.add(w)
            out.append(w)
    return out


def pick_random(pool: Sequence[str], n: int, rng: random.Random) -> List[str]:
    """Up to n items of pool, uniformly at random, without replacement."""
    return rng.sample(list(pool), min(n, len(pool)))


def split_bands(words: List[str]):
    """Positional thirds; the first two bands get the ceiling-sized share."""
    third = math.ceil(len(words) / 3)
    return words[:third], words[third:2 * third], words[2 * third:]


# -------------------- Tiers --------------------
def classify_tier(word: str, stats: WordStats, config: SelectionConfig = DEFAULT_CONFIG) -> Tier:
    # first match wins, which makes the tiers total and exclusive
    usage = stats.usage(word)
    clicks = stats.clicks(word)
    if usage == 0:
        return Tier.UNSEEN
    if clicks == 0:
        if usage >= config.master_threshold:
            return Tier.MASTERED_BY_REPETITION
        return Tier.SEEN_UNCLICKED
    if stats.exposures_since_click(word) >= config.review_threshold:
        return Tier.MASTERED_BY_REVIEW
    return Tier.CLICKED_IN_LEARNING


def partition_tiers(
    universe: Iterable[str],
    stats: WordStats,
    config: SelectionConfig = DEFAULT_CONFIG,
) -> Dict[Tier, List[str]]:
    """
    Map every tier to its words, in universe order. Each distinct word of the
    universe lands in exactly one tier.
    """
    tiers: Dict[Tier, List[str]] = {t: [] for t in Tier}
    for w in _distinct(universe):
        tiers[classify_tier(w, stats, config)].append(w)
    return tiers


# -------------------- Selection --------------------
def _check_corpus(universe: List[str], config: SelectionConfig) -> None:
    if len(universe) < config.min_corpus_size:
        raise InsufficientCorpusError(have=len(universe), need=config.min_corpus_size)


def plan_batch(
    universe: Iterable[str],
    stats: Optional[WordStats] = None,
    config: SelectionConfig = DEFAULT_CONFIG,
    rng: Optional[random.Random] = None,
) -> BatchSelection:
    """
    Select the next batch of words and report how it was composed.

    Unseen words fill the new-word quota; clicked words still in learning are
    sorted by click count (fewest first), cut into hard/medium/easy thirds and
    drawn per band quota; whatever is still missing comes from the remaining
    unseen, seen-unclicked and clicked-in-learning words. Mastered words are
    never selected.

    Raises InsufficientCorpusError when the universe holds fewer than
    new_batch_size + mix_size distinct words.
    """
    words = _distinct(universe)
    stats = stats or WordStats.empty()
    rng = rng or random.Random()
    _check_corpus(words, config)

    if config.mode == "uniform":
        return _plan_uniform(words, stats, config, rng)

    tiers = partition_tiers(words, stats, config)
    tier_counts = {t: len(ws) for t, ws in tiers.items()}
    logger.info("Word tiers", extra={"tier_counts": {t.value: n for t, n in tier_counts.items()}})

    unseen = tiers[Tier.UNSEEN]
    seen_unclicked = tiers[Tier.SEEN_UNCLICKED]
    # sorted() is stable, so equal click counts keep universe order
    clicked = sorted(tiers[Tier.CLICKED_IN_LEARNING], key=stats.clicks)

    new = pick_random(unseen, config.new_batch_size, rng)
    hard_band, medium_band, easy_band = split_bands(clicked)
    hard = pick_random(hard_band, config.hard_quota, rng)
    medium = pick_random(medium_band, config.medium_quota, rng)
    easy = pick_random(easy_band, config.easy_quota, rng)

    selected = new + hard + medium + easy
    backfill: List[str] = []
    if len(selected) < config.target_batch_size:
        taken = set(selected)
        fallback_pool = [w for w in unseen + seen_unclicked + clicked if w not in taken]
        backfill = pick_random(fallback_pool, config.target_batch_size - len(selected), rng)
        selected = selected + backfill

    logger.debug("Batch planned", extra={
        "new": len(new), "hard": len(hard), "medium": len(medium),
        "easy": len(easy), "backfill": len(backfill), "size": len(selected),
    })
    return BatchSelection(
        words=selected,
        new=new,
        hard=hard,
        medium=medium,
        easy=easy,
        backfill=backfill,
        tier_counts=tier_counts,
    )


def _plan_uniform(words: List[str], stats: WordStats, config: SelectionConfig,
                  rng: random.Random) -> BatchSelection:
    tier_counts = {t: len(ws) for t, ws in partition_tiers(words, stats, config).items()}
    picked = pick_random(words, config.target_batch_size, rng)
    return BatchSelection(words=picked, tier_counts=tier_counts)


def select_batch(
    universe: Iterable[str],
    stats: Optional[WordStats] = None,
    config: SelectionConfig = DEFAULT_CONFIG,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """The word list for the next story; see plan_batch."""
    return plan_batch(universe, stats, config, rng).words
