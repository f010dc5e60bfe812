# lambda/storyvocab/tests/test_config.py
import pytest

from storyvocab.config import MAX_BATCH_SIZE, SelectionConfig


def test_defaults():
    cfg = SelectionConfig()
    assert (cfg.new_batch_size, cfg.mix_size, cfg.target_batch_size) == (50, 50, 100)
    assert (cfg.hard_quota, cfg.medium_quota, cfg.easy_quota) == (20, 20, 10)
    assert cfg.master_threshold == cfg.review_threshold == 20
    assert cfg.min_corpus_size == 100
    assert cfg.mode == "spaced"


def test_from_env_overrides():
    cfg = SelectionConfig.from_env({
        "NEW_BATCH_SIZE": "30",
        "MIX_SIZE": "20",
        "MASTER_THRESHOLD": "12",
        "SELECTION_MODE": " Uniform ",
    })
    assert cfg.new_batch_size == 30
    assert cfg.mix_size == 20
    # target follows new + mix when not given
    assert cfg.target_batch_size == 50
    assert cfg.master_threshold == 12
    assert cfg.review_threshold == 20
    assert cfg.mode == "uniform"


def test_from_env_explicit_target():
    cfg = SelectionConfig.from_env({"TARGET_BATCH_SIZE": "80"})
    assert cfg.target_batch_size == 80
    assert cfg.min_corpus_size == 100


def test_rejects_negative_and_unknown_mode():
    with pytest.raises(ValueError):
        SelectionConfig(hard_quota=-1)
    with pytest.raises(ValueError):
        SelectionConfig.from_env({"SELECTION_MODE": "leitner"})


def test_target_above_transaction_limit_rejected():
    assert SelectionConfig(target_batch_size=MAX_BATCH_SIZE).target_batch_size == 100
    with pytest.raises(ValueError, match="target_batch_size"):
        SelectionConfig(target_batch_size=150)
    with pytest.raises(ValueError):
        SelectionConfig.from_env({"NEW_BATCH_SIZE": "80", "MIX_SIZE": "50"})


def test_review_quotas_must_fit_mix_size():
    with pytest.raises(ValueError, match="mix_size"):
        SelectionConfig(mix_size=30)
    cfg = SelectionConfig(mix_size=30, hard_quota=15, medium_quota=10, easy_quota=5)
    assert cfg.hard_quota + cfg.medium_quota + cfg.easy_quota == 30


def test_from_env_derives_review_quotas_from_mix_size():
    cfg = SelectionConfig.from_env({"MIX_SIZE": "30"})
    assert (cfg.hard_quota, cfg.medium_quota, cfg.easy_quota) == (12, 12, 6)
    cfg = SelectionConfig.from_env({})
    assert (cfg.hard_quota, cfg.medium_quota, cfg.easy_quota) == (20, 20, 10)
    with pytest.raises(ValueError):
        SelectionConfig.from_env({"MIX_SIZE": "30", "HARD_QUOTA": "25"})
