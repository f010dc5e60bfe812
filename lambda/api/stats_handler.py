# stats_handler.py
import json

from aws_lambda_powertools import Logger

from storyvocab import store
from storyvocab.config import CORS_ORIGIN
from storyvocab.handler import SELECTION
from storyvocab.model import StorageError
from storyvocab.selector import partition_tiers

logger = Logger(service="storyvocab-api")


def handler(event, context):
    headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": (event.get("headers") or {}).get("origin") or CORS_ORIGIN,
        "Access-Control-Allow-Credentials": "true",
    }
    try:
        universe = store.get_word_universe()
        stats = store.get_stats()
        tiers = partition_tiers(universe, stats, SELECTION)
        out = {
            "total": sum(len(ws) for ws in tiers.values()),
            "tiers": {tier.value: len(ws) for tier, ws in tiers.items()},
            "min_corpus_size": SELECTION.min_corpus_size,
        }
    except StorageError:
        logger.exception("API error")
        return {"statusCode": 503, "headers": headers,
                "body": '{"message":"Storage temporarily unavailable, try again."}'}
    except Exception:
        logger.exception("API error")
        return {"statusCode": 500, "headers": headers, "body": '{"message":"Internal Server Error"}'}

    logger.info("Tier counts", extra=out)
    return {"statusCode": 200, "headers": headers, "body": json.dumps(out)}
