# lambda/storyvocab/story.py
from typing import Iterable, List

import requests

from . import config
from .model import StoryGenerationError
from .observability import logger, tracer
from .wordlist import sanitize_word, WHITESPACE_SPLIT_RE


def build_prompt(words: List[str]) -> str:
    return (
        f"Write a short, meaningful and coherent story in present tense in {config.STORY_LANGUAGE}. "
        f"You are only allowed to use the following words: {', '.join(words)}. "
        "Do not include any other words outside this list. "
        f"The story should be {config.STORY_LINES} lines and in {config.STORY_PASSAGES} passages. "
        "It should read like a story, not some bundled up sentences. "
        f"Important: Use correct {config.STORY_LANGUAGE} spelling, including all special characters."
    )


def _extract_text(data: dict) -> str:
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""


@tracer.capture_method
def generate_story(words: List[str]) -> str:
    """Ask Gemini for a story that uses only `words`."""
    if not config.GEMINI_API_KEY:
        raise StoryGenerationError("API key missing")

    url = f"{config.GEMINI_BASE_URL}/models/{config.GEMINI_MODEL}:generateContent"
    body = {"contents": [{"parts": [{"text": build_prompt(words)}]}]}
    try:
        res = requests.post(
            url,
            params={"key": config.GEMINI_API_KEY},
            json=body,
            timeout=config.GEMINI_TIMEOUT,
        )
        res.raise_for_status()
        data = res.json()
    except (requests.RequestException, ValueError) as e:
        logger.exception("Story generation request failed", extra={"model": config.GEMINI_MODEL})
        raise StoryGenerationError(f"Story generation failed: {e}") from e

    text = _extract_text(data).strip()
    if not text:
        logger.warning("No story in response", extra={"model": config.GEMINI_MODEL})
        raise StoryGenerationError("No story generated.")
    return text


def find_foreign_words(story: str, batch: Iterable[str]) -> List[str]:
    """Distinct story words (case-folded) that are not part of the batch."""
    allowed = {w.casefold() for w in batch}
    seen = set()
    foreign: List[str] = []
    for token in WHITESPACE_SPLIT_RE.split(story or ""):
        w = sanitize_word(token).casefold()
        if w and w not in allowed and w not in seen:
            seen.add(w)
            foreign.append(w)
    return foreign
