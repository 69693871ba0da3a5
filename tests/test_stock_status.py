import itertools

import pytest

from brewstock.services.stock_status import URGENCY, classify_stock


def test_classifier_is_total_over_non_negative_inputs():
    values = [0, 0.5, 1, 5, 10, 20, 100]
    for current, minimum, maximum in itertools.product(values, repeat=3):
        result = classify_stock(current, minimum, maximum)
        assert result.status in URGENCY
        assert result.urgency == URGENCY[result.status]


@pytest.mark.parametrize(
    ("current", "expected"),
    [
        (0, "out"),
        (5, "critical"),
        (6, "low"),
        (10, "low"),
        (20, "good"),
        (35, "good"),
        (36, "high"),
        (60, "high"),
    ],
)
def test_classifier_buckets(current, expected):
    assert classify_stock(current, 5, 40).status == expected


def test_urgency_is_non_increasing_as_stock_grows():
    minimum, maximum = 5, 40
    checkpoints = [0, minimum, 0.25 * maximum, 0.9 * maximum, maximum, maximum * 2]
    urgencies = [classify_stock(value, minimum, maximum).urgency for value in checkpoints]
    assert urgencies == sorted(urgencies, reverse=True)


def test_critical_takes_precedence_over_percentages():
    # 3 is 15% of 20 but still at or under the minimum.
    result = classify_stock(3, 5, 20)
    assert result.status == "critical"
    assert result.urgency == 3


def test_zero_max_stock_reports_low_for_positive_stock():
    result = classify_stock(5, 0, 0)
    assert result.status == "low"
    assert result.stock_percentage == 0.0


def test_fill_percentage_is_capped():
    result = classify_stock(80, 5, 40)
    assert result.stock_percentage == 200.0
    assert result.fill_percentage == 100.0
    assert result.is_healthy


def test_malformed_values_are_coerced():
    assert classify_stock("oops", 5, 40).status == "out"
    assert classify_stock("12", None, "40").status == "good"
