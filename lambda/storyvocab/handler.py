# lambda/storyvocab/handler.py
import base64
import binascii
import json
from typing import Dict, Any

from . import store
from .config import CORS_ORIGIN, ENV, SelectionConfig
from .model import (
    BadRequestError,
    EmptyUploadError,
    EmptyWordBankError,
    InsufficientCorpusError,
    StorageError,
    StoryGenerationError,
    UnsupportedFileTypeError,
)
from .observability import logger, tracer, metrics, record_batch, record_click, record_error, record_upload
from .selector import plan_batch
from .story import find_foreign_words, generate_story
from .wordlist import parse_word_file, sanitize_word, tokenize_story

SELECTION = SelectionConfig.from_env()

STORAGE_MESSAGE = "Storage temporarily unavailable, try again."


def _response(status: int, payload: Dict[str, Any], event: Dict[str, Any]) -> Dict[str, Any]:
    origin = (event.get("headers") or {}).get("origin") or CORS_ORIGIN
    return {
        "statusCode": status,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        },
        "body": json.dumps(payload, ensure_ascii=False),
    }


def _error(status: int, exc: Exception, event: Dict[str, Any]) -> Dict[str, Any]:
    record_error(type(exc).__name__, ENV)
    return _response(status, {"message": str(exc)}, event)


def _b64decode(raw: Any) -> bytes:
    try:
        return base64.b64decode(raw, validate=True)
    except (binascii.Error, TypeError, ValueError):
        raise BadRequestError("Invalid base64 content.")


def _body(event: Dict[str, Any]) -> Dict[str, Any]:
    raw = event.get("body") or "{}"
    try:
        if event.get("isBase64Encoded"):
            raw = _b64decode(raw).decode("utf-8")
        body = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError, TypeError):
        raise BadRequestError("Request body must be JSON.")
    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object.")
    return body


def _str_field(body: Dict[str, Any], key: str) -> str:
    value = body.get(key) or ""
    if not isinstance(value, str):
        raise BadRequestError(f"'{key}' must be a string.")
    return value


def _set_correlation(event: Dict[str, Any]):
    request_id = (event.get("requestContext") or {}).get("requestId")
    if request_id:
        logger.set_correlation_id(request_id)


# -------------------- Upload --------------------
@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def upload_handler(event: Dict[str, Any], context):
    _set_correlation(event)
    filename = ""
    try:
        body = _body(event)
        filename = _str_field(body, "filename")
        content = _str_field(body, "content")
        if body.get("encoding") == "base64":
            content = _b64decode(content)
        words = parse_word_file(filename, content)

        added = store.add_words(words)
        total = len(store.get_word_universe())
    except BadRequestError as e:
        logger.warning("Malformed upload request", extra={"reason": str(e)})
        return _error(400, e, event)
    except UnicodeDecodeError:
        logger.warning("Upload is not UTF-8 text", extra={"upload_filename": filename})
        return _error(400, ValueError("The file must be UTF-8 encoded text."), event)
    except (UnsupportedFileTypeError, EmptyUploadError) as e:
        logger.warning("Rejected upload", extra={"upload_filename": filename, "reason": str(e)})
        return _error(400, e, event)
    except StorageError:
        return _error(503, StorageError(STORAGE_MESSAGE), event)
    except Exception:
        logger.exception("Unhandled error")
        record_error("Unhandled", ENV)
        return _response(500, {"message": "Internal Server Error"}, event)

    message = f"{added} new words added!" if added else "All words already exist."
    record_upload(added, total, ENV)
    logger.info("Upload processed", extra={"upload_filename": filename, "parsed": len(words), "added": added})
    return _response(200, {"added": added, "total": total, "message": message}, event)


# -------------------- Generate --------------------
@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def generate_handler(event: Dict[str, Any], context):
    _set_correlation(event)
    try:
        # 1) Load word bank and counters
        universe = store.get_word_universe()
        if not universe:
            raise EmptyWordBankError()
        stats = store.get_stats()

        # 2) Select
        selection = plan_batch(universe, stats, SELECTION)

        # 3) Generate, then count the exposures
        story = generate_story(selection.words)
        store.apply_batch_usage(selection.words)

    except EmptyWordBankError as e:
        return _error(409, e, event)
    except InsufficientCorpusError as e:
        logger.warning("Insufficient corpus", extra={"have": e.have, "need": e.need})
        return _error(422, e, event)
    except StorageError:
        return _error(503, StorageError(STORAGE_MESSAGE), event)
    except StoryGenerationError as e:
        return _error(502, e, event)
    except Exception:
        logger.exception("Unhandled error")
        record_error("Unhandled", ENV)
        return _response(500, {"message": "Internal Server Error"}, event)

    foreign = find_foreign_words(story, selection.words)
    if foreign:
        logger.info("Story used words outside the batch", extra={"foreign_words": foreign[:20], "count": len(foreign)})
    record_batch(selection, len(foreign), ENV)
    logger.info("Story generated", extra={"batch_size": len(selection.words), "universe": len(universe)})

    return _response(200, {
        "words": selection.words,
        "story": story,
        "tokens": tokenize_story(story),
        "foreign_words": foreign,
    }, event)


# -------------------- Click --------------------
@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def click_handler(event: Dict[str, Any], context):
    _set_correlation(event)
    try:
        word = sanitize_word(_str_field(_body(event), "token"))
        if not word:
            # punctuation only: nothing to record
            record_click(False, ENV)
            return _response(200, {"recorded": False}, event)
        counters = store.record_click(word)
    except BadRequestError as e:
        logger.warning("Malformed click request", extra={"reason": str(e)})
        return _error(400, e, event)
    except StorageError:
        return _error(503, StorageError(STORAGE_MESSAGE), event)
    except Exception:
        logger.exception("Unhandled error")
        record_error("Unhandled", ENV)
        return _response(500, {"message": "Internal Server Error"}, event)

    record_click(True, ENV)
    logger.info("Clicked", extra={"word": word, **counters})
    return _response(200, {"recorded": True, "word": word, **counters}, event)
