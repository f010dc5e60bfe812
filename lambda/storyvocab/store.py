# lambda/storyvocab/store.py
"""
DynamoDB access for the word bank and word stats.

Single table, two partitions:
  pk=WORDBANK  sk=<word>  word, added_at
  pk=WORDSTATS sk=<word>  story_usage, click_count, last_click_usage (numbers, optional)

Counters only ever change through ADD update expressions, so concurrent
story generations and clicks never lose increments.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from .config import DDB_TABLE_NAME, MAX_BATCH_SIZE
from .model import StorageError, WordStats
from .observability import logger, tracer

WORDBANK_PK = "WORDBANK"
WORDSTATS_PK = "WORDSTATS"

ddb = boto3.resource("dynamodb")
table = ddb.Table(DDB_TABLE_NAME)
ddb_client = boto3.client("dynamodb")
_serializer = TypeSerializer()

AWS_ERRORS = (ClientError, BotoCoreError)


def _query_partition(pk: str) -> List[dict]:
    items: List[dict] = []
    kwargs = {"KeyConditionExpression": Key("pk").eq(pk), "ConsistentRead": True}
    while True:
        resp = table.query(**kwargs)
        items.extend(resp.get("Items", []))
        last = resp.get("LastEvaluatedKey")
        if not last:
            return items
        kwargs["ExclusiveStartKey"] = last


# -------------------- Word bank --------------------
@tracer.capture_method
def get_word_universe() -> List[str]:
    try:
        items = _query_partition(WORDBANK_PK)
    except AWS_ERRORS as e:
        logger.exception("Failed to read word bank")
        raise StorageError("Could not read the word bank") from e
    return [it["sk"] for it in items if it.get("sk")]


@tracer.capture_method
def add_words(words: Iterable[str]) -> int:
    """Store words missing from the bank; returns how many were new."""
    existing = set(get_word_universe())
    new = [w for w in dict.fromkeys(words) if w and w not in existing]
    if not new:
        return 0
    ts = datetime.now(timezone.utc).isoformat()
    try:
        with table.batch_writer(overwrite_by_pkeys=["pk", "sk"]) as batch:
            for w in new:
                batch.put_item(Item={"pk": WORDBANK_PK, "sk": w, "word": w, "added_at": ts})
    except AWS_ERRORS as e:
        logger.exception("Failed to write word bank", extra={"new_words": len(new)})
        raise StorageError("Could not save the uploaded words") from e
    logger.info("Words added", extra={"added": len(new), "existing": len(existing)})
    return len(new)


# -------------------- Stats --------------------
@tracer.capture_method
def get_stats() -> WordStats:
    """All word counters; an empty partition reads as empty stats."""
    try:
        items = _query_partition(WORDSTATS_PK)
    except AWS_ERRORS as e:
        logger.exception("Failed to read word stats")
        raise StorageError("Could not read word stats") from e

    stats = WordStats.empty()
    for it in items:
        w = it.get("sk")
        if not w:
            continue
        if "story_usage" in it:
            stats.story_usage[w] = int(it["story_usage"])
        if "click_count" in it:
            stats.click_count[w] = int(it["click_count"])
        if "last_click_usage" in it:
            stats.last_click_usage[w] = int(it["last_click_usage"])
    return stats


def _usage_update(word: str) -> dict:
    return {
        "Update": {
            "TableName": DDB_TABLE_NAME,
            "Key": {
                "pk": _serializer.serialize(WORDSTATS_PK),
                "sk": _serializer.serialize(word),
            },
            "UpdateExpression": "ADD story_usage :one",
            "ExpressionAttributeValues": {":one": _serializer.serialize(1)},
        }
    }


@tracer.capture_method
def apply_batch_usage(words: List[str]) -> None:
    """
    Increment story_usage by 1 for every word in a single transaction: all
    of it applies or none does. Batches above MAX_BATCH_SIZE are refused
    before anything is written.
    """
    words = list(dict.fromkeys(words))
    if not words:
        return
    if len(words) > MAX_BATCH_SIZE:
        raise ValueError(f"batch of {len(words)} words exceeds {MAX_BATCH_SIZE}")
    try:
        ddb_client.transact_write_items(TransactItems=[_usage_update(w) for w in words])
    except AWS_ERRORS as e:
        logger.exception("Failed to apply batch usage", extra={"words": len(words)})
        raise StorageError("Could not update word usage") from e


@tracer.capture_method
def record_click(word: str, current_story_usage: Optional[int] = None) -> Dict[str, int]:
    """
    Count one click on word and remember the exposure count it was clicked at.
    Without current_story_usage the item's own story_usage is copied
    server-side in the same update. Creates the stats item when missing.
    """
    values: Dict[str, object] = {":one": 1}
    if current_story_usage is None:
        usage_expr = "if_not_exists(story_usage, :zero)"
        values[":zero"] = 0
    else:
        usage_expr = ":usage"
        values[":usage"] = int(current_story_usage)
    try:
        resp = table.update_item(
            Key={"pk": WORDSTATS_PK, "sk": word},
            UpdateExpression=f"ADD click_count :one SET last_click_usage = {usage_expr}",
            ExpressionAttributeValues=values,
            ReturnValues="ALL_NEW",
        )
    except AWS_ERRORS as e:
        logger.exception("Failed to record click", extra={"word": word})
        raise StorageError("Could not record the click") from e
    attrs = resp.get("Attributes", {})
    return {k: int(attrs[k]) for k in ("story_usage", "click_count", "last_click_usage") if k in attrs}
