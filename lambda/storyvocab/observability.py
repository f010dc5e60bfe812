# lambda/storyvocab/observability.py
from typing import Dict

from aws_lambda_powertools import Logger, Tracer, Metrics
from aws_lambda_powertools.metrics import MetricUnit

from .model import BatchSelection, Tier

# Service names show up in logs/traces/metrics
logger  = Logger(service="storyvocab")
tracer  = Tracer(service="storyvocab")
metrics = Metrics(namespace="StoryVocab")


def _dimensions(env: str):
    metrics.add_dimension(name="service", value="storyvocab")
    metrics.add_dimension(name="env", value=env or "dev")


def record_upload(added: int, total: int, env: str):
    _dimensions(env)
    metrics.add_metric(name="WordsUploaded", value=added, unit=MetricUnit.Count)
    metrics.add_metric(name="WordBankSize", value=total, unit=MetricUnit.Count)


def record_batch(selection: BatchSelection, foreign_words: int, env: str):
    """
    Emit business KPIs for one generated story:
      - BatchesGenerated / BatchSize
      - one count per tier, as seen at selection time
      - OutOfVocabularyWords: story tokens the generator used outside the batch
    """
    _dimensions(env)
    metrics.add_metric(name="BatchesGenerated", value=1, unit=MetricUnit.Count)
    metrics.add_metric(name="BatchSize", value=len(selection.words), unit=MetricUnit.Count)
    metrics.add_metric(name="BackfilledWords", value=len(selection.backfill), unit=MetricUnit.Count)
    counts: Dict[Tier, int] = selection.tier_counts
    for tier, n in counts.items():
        metrics.add_metric(name=f"Tier_{tier.value}", value=n, unit=MetricUnit.Count)
    metrics.add_metric(name="OutOfVocabularyWords", value=foreign_words, unit=MetricUnit.Count)


def record_click(recorded: bool, env: str):
    _dimensions(env)
    metrics.add_metric(name="ClicksRecorded" if recorded else "EmptyClicks", value=1, unit=MetricUnit.Count)


def record_error(kind: str, env: str):
    """
    Error counter for failed paths; kind is the error class name.
    """
    _dimensions(env)
    metrics.add_dimension(name="kind", value=kind)
    metrics.add_metric(name="Errors", value=1, unit=MetricUnit.Count)
