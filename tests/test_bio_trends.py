from bio_trends import classify_hrv_trend, classify_series_trend, classify_trend


def test_window_compares_last_three_with_first_three():
    trend = classify_hrv_trend([10, 10, 10, 1, 1, 1])
    assert trend.direction == "declining"
    assert trend.change == -9
    assert trend.significance == "significant"
    assert trend.change_percent == -90


def test_flat_series_is_stable():
    trend = classify_hrv_trend([5, 5, 5, 5, 5, 5])
    assert trend.direction == "stable"
    assert trend.change == 0
    assert trend.significance == "none"
    assert trend.change_percent == 0


def test_middle_of_series_is_ignored():
    trend = classify_hrv_trend([40, 40, 40, 80, 20, 80, 50, 50, 50])
    assert trend.direction == "improving"
    assert trend.change == 10


def test_moderate_hrv_change():
    trend = classify_hrv_trend([50, 50, 50, 54, 54, 54])
    assert trend.direction == "improving"
    assert trend.significance == "moderate"
    assert trend.change == 4
    assert trend.change_percent == 8


def test_zero_baseline_percent_is_zero():
    trend = classify_hrv_trend([0, 0, 0, 3, 3, 3])
    assert trend.direction == "improving"
    assert trend.change_percent == 0


def test_short_series_is_insufficient():
    for values in ([], [42], [42, 50]):
        trend = classify_hrv_trend(values)
        assert trend.direction == "insufficient_data"
        assert trend.change == 0
        assert trend.significance == "none"


def test_series_variant_uses_coarse_threshold():
    assert classify_series_trend([7.0, 7.0, 7.0, 7.1, 7.1, 7.1]).direction == "stable"

    trend = classify_series_trend([7.0, 7.0, 7.0, 8.0, 8.0, 8.0])
    assert trend.direction == "improving"
    assert trend.change == 1.0
    assert trend.significance == "moderate"
    assert trend.change_percent is None


def test_series_variant_on_scores():
    trend = classify_series_trend([90, 88, 86, 70, 72, 74])
    assert trend.direction == "declining"
    assert trend.change == -16.0
    assert trend.significance == "significant"


def test_custom_thresholds():
    trend = classify_trend([1, 1, 1, 2, 2, 2], stable_below=1.5)
    assert trend.direction == "stable"


def test_generic_call_uses_hrv_stable_band():
    trend = classify_trend([10, 10, 10, 1, 1, 1])
    assert trend.direction == "declining"
    assert trend.change == -9
    assert trend.change_percent is None

    # |change| of 1.5 is inside the 2 ms band
    assert classify_trend([50, 50, 50, 51.5, 51.5, 51.5]).direction == "stable"
    assert classify_trend([50, 50, 50, 52, 52, 52]).direction == "improving"
