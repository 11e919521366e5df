import pytest

from etcd_sentinel.classifier import classify, usage_percent
from etcd_sentinel.models import StatusLevel

GB = 1024 ** 3
WARN = int(1.5 * GB)
CRIT = 2 * GB


@pytest.mark.parametrize(
    "max_bytes, level, exit_code",
    [
        (0, StatusLevel.OK, 0),
        (WARN - 1, StatusLevel.OK, 0),
        (WARN, StatusLevel.WARNING, 1),
        (CRIT - 1, StatusLevel.WARNING, 1),
        (CRIT, StatusLevel.CRITICAL, 2),
        (5 * GB, StatusLevel.CRITICAL, 2),
    ],
)
def test_classify_levels_and_boundaries(max_bytes, level, exit_code):
    verdict = classify(max_bytes, WARN, CRIT)
    assert verdict.level is level
    assert verdict.exit_code == exit_code


def test_usage_percent_floors():
    assert usage_percent(CRIT, CRIT) == 100
    assert usage_percent(0, CRIT) == 0
    assert usage_percent(CRIT - 1, CRIT) == 99
    assert usage_percent(3 * GB, CRIT) == 150


def test_messages_embed_percent_and_critical_gb():
    assert classify(GB, WARN, CRIT).message == "OK: ETCD DB size within safe limits (50% of 2 GB)"
    assert (
        classify(WARN, WARN, CRIT).message
        == "WARNING: ETCD DB size approaching limit (75% of 2 GB)"
    )
    assert classify(CRIT, WARN, CRIT).message == "CRITICAL: ETCD DB size exceeds 2 GB (100%)"


def test_fractional_critical_threshold_in_message():
    verdict = classify(0, GB, int(1.5 * GB))
    assert "of 1.5 GB" in verdict.message


def test_equal_thresholds_prefer_critical():
    verdict = classify(GB, GB, GB)
    assert verdict.level is StatusLevel.CRITICAL


@pytest.mark.parametrize("warn, crit", [(0, GB), (GB, 0), (2 * GB, GB)])
def test_invalid_thresholds_rejected(warn, crit):
    with pytest.raises(ValueError):
        classify(0, warn, crit)


def test_configured_critical_gb_is_used_verbatim():
    crit = int(1.23456789 * GB)
    verdict = classify(0, GB, crit, crit_gb=1.23456789)
    assert verdict.message == "OK: ETCD DB size within safe limits (0% of 1.23456789 GB)"
