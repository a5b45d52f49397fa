from datetime import datetime, timedelta

import pytest

from bio_analyzer import AlertThreshold, HealthAnalyzer, HealthStatus
from bio_report_generator import HealthReportGenerator


def make_status(**overrides) -> HealthStatus:
    fields = dict(
        date="2024-03-10",
        hrv_current=45,
        hrv_trend="stable",
        hrv_category="normal",
        last_night_hours=7.5,
        avg_7_day=7.4,
        sleep_score=80,
        steps=9000,
        active_calories=500,
        exercise_minutes=30,
        alerts=(),
    )
    fields.update(overrides)
    return HealthStatus(**fields)


def warning(metric: str) -> AlertThreshold:
    return AlertThreshold(metric=metric, threshold=1, current=0, status="warning", message="below")


def ok(metric: str) -> AlertThreshold:
    return AlertThreshold(metric=metric, threshold=1, current=2, status="ok", message="fine")


@pytest.fixture
def reports(scripted_generator) -> HealthReportGenerator:
    return HealthReportGenerator(HealthAnalyzer(scripted_generator([0.5])))


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------

def test_status_payload_shape(reports):
    result = reports.generate_status()
    assert set(result) == {"date", "hrv", "sleep", "activity", "alerts", "summary", "recommendations"}
    assert result["hrv"] == {"current": 45, "trend": "stable", "category": "normal"}
    assert result["sleep"] == {"last_night_hours": 7.8, "avg_7_day": 7.8, "score": 78}
    assert result["activity"]["steps"] == 10000
    assert result["alerts"] == []
    assert result["summary"] == "🟡 Normal recovery state • 😐 Adequate sleep • 🚶 Very active"
    assert result["recommendations"] == ["Keep up the good work! Maintain current habits"]


@pytest.mark.parametrize("overrides, expected", [
    (dict(hrv_category="high", last_night_hours=8.0, steps=10000),
     "💚 Excellent recovery state • 😴 Well rested • 🚶 Very active"),
    (dict(hrv_category="normal", last_night_hours=7.0, steps=7500),
     "🟡 Normal recovery state • 😐 Adequate sleep • 🚶 Moderately active"),
    (dict(hrv_category="low", last_night_hours=6.9, steps=7499),
     "🔴 Low recovery - consider rest • 😵 Sleep deprived • 🚶 Low activity"),
])
def test_status_summary_buckets(reports, overrides, expected):
    assert reports.format_status(make_status(**overrides))["summary"] == expected


def test_status_recommendations_for_every_trigger(reports):
    status = make_status(hrv_category="low", hrv_current=25, hrv_trend="down",
                         last_night_hours=5.5, steps=6000,
                         alerts=("🔴 HRV is low - consider rest day", "😴 Insufficient sleep last night"))
    result = reports.format_status(status)

    assert result["recommendations"] == [
        "Consider a rest day or light activity",
        "Focus on stress management and recovery",
        "Prioritize earlier bedtime tonight",
        "Consider sleep hygiene improvements",
        "Add more walking or light movement today",
        "Monitor stress levels and recovery practices",
    ]
    assert result["alerts"] == ["🔴 HRV is low - consider rest day", "😴 Insufficient sleep last night"]


# ---------------------------------------------------------------------------
# hrv
# ---------------------------------------------------------------------------

def test_hrv_report_payload(reports, today):
    result = reports.generate_hrv_report(7)

    assert result["period"] == {"days": 7, "start_date": "2024-03-04", "end_date": today.isoformat()}
    assert result["current"] == {"value": 45, "category": "normal", "date": today.isoformat()}
    assert result["statistics"] == {"average": 45, "min": 45, "max": 45, "std_dev": 0.0}
    assert result["trend"] == {"direction": "stable", "change": 0, "significance": "none", "change_percent": 0}
    assert result["distribution"] == {"low": 0, "normal": 7, "high": 0}
    assert len(result["data"]) == 7
    assert result["data"][0] == {"date": "2024-03-04", "value": 45, "category": "normal"}
    assert result["insights"] == ["🟡 HRV stable - maintain current recovery practices"]


def test_hrv_report_shows_last_ten_days(reports):
    result = reports.generate_hrv_report(30)
    assert len(result["data"]) == 10
    assert result["data"][-1]["date"] == result["period"]["end_date"]


def test_hrv_insights_for_declining_low_series(scripted_generator):
    # three days at 55 ms, then three at 35 ms
    generator = scripted_generator([0.99, 0.99, 0.99, 0.0, 0.0, 0.0])
    result = HealthReportGenerator(HealthAnalyzer(generator)).generate_hrv_report(6)

    assert result["trend"]["direction"] == "declining"
    assert result["trend"]["change"] == -20
    assert result["trend"]["significance"] == "significant"
    assert result["insights"] == [
        "🔴 HRV declining - consider stress management and recovery focus",
        "📈 Significant trend detected - correlate with recent changes in routine",
    ]


def test_hrv_insights_for_improving_series(scripted_generator):
    # three days at 35 ms, then three at 55 ms
    generator = scripted_generator([0.0, 0.0, 0.0, 0.99, 0.99, 0.99])
    result = HealthReportGenerator(HealthAnalyzer(generator)).generate_hrv_report(6)

    assert result["trend"]["direction"] == "improving"
    assert result["trend"]["change"] == 20
    assert result["insights"] == [
        "💚 HRV trending upward - recovery practices are working",
        "📈 Significant trend detected - correlate with recent changes in routine",
    ]


def test_hrv_insights_for_persistently_low_hrv(struggling_generator):
    result = HealthReportGenerator(HealthAnalyzer(struggling_generator)).generate_hrv_report(10)

    assert result["distribution"] == {"low": 10, "normal": 0, "high": 0}
    assert result["insights"] == [
        "🟡 HRV stable - maintain current recovery practices",
        "⚠️ Current HRV is low - prioritize rest and recovery today",
        "📊 Frequent low HRV days - consider lifestyle factors (sleep, stress, training)",
    ]


# ---------------------------------------------------------------------------
# sleep
# ---------------------------------------------------------------------------

def test_sleep_report_payload(reports, today):
    result = reports.generate_sleep_report(7)

    assert result["period"]["days"] == 7
    assert result["last_night"] == {
        "duration": 7.8,
        "score": 78,
        "bedtime": "23:30",
        "wake_time": "07:18",
        "deep_sleep": result["data"][-1]["deep_sleep_hours"],
        "rem_sleep": result["data"][-1]["rem_sleep_hours"],
    }
    assert result["averages"]["bedtime"] == "23:30"
    assert result["patterns"]["duration_trend"] == "stable"
    assert result["patterns"]["sufficient_sleep_days"] == 7
    assert result["patterns"]["total_days"] == 7
    assert result["patterns"]["best_night"] == {"date": "2024-03-04", "score": 78, "duration": 7.8}
    assert result["sleep_debt"]["status"] == "minimal"
    assert result["consistency"] == {"bedtime_variance": 0, "wake_time_variance": 0, "consistency_score": 100}
    assert result["insights"] == ["🎯 Consistently meeting sleep duration goals"]


def test_sleep_insights_for_short_nights(scripted_generator):
    # duration draw 0.0 -> 6.5h every night
    generator = scripted_generator([0.0, 0.5, 0.5, 0.5, 0.5, 0.5])
    result = HealthReportGenerator(HealthAnalyzer(generator)).generate_sleep_report(3)

    assert result["last_night"]["duration"] == 6.5
    assert result["sleep_debt"] == {"total_hours": 4.5, "avg_per_night": 1.5, "status": "moderate"}
    assert result["insights"] == [
        "⚠️ Getting sufficient sleep (7+ hours) less than half the time",
        "😴 Last night was short - aim for earlier bedtime tonight",
    ]


# per night: duration, deep, rem, bedtime hour, minute, score
SHORT_LOW_NIGHT = [0.0, 0.5, 0.5, 0.5, 0.5, 0.0]  # 6.5h, score 60
LONG_HIGH_NIGHT = [0.8, 0.5, 0.5, 0.5, 0.5, 0.8]  # 8.5h, score 88


def test_sleep_insights_for_improving_nights(scripted_generator):
    generator = scripted_generator(SHORT_LOW_NIGHT * 3 + LONG_HIGH_NIGHT * 3)
    result = HealthReportGenerator(HealthAnalyzer(generator)).generate_sleep_report(6)

    assert result["patterns"]["duration_trend"] == "improving"
    assert result["patterns"]["quality_trend"] == "improving"
    assert result["patterns"]["sufficient_sleep_days"] == 3
    assert result["insights"] == [
        "💚 Sleep duration improving - good progress",
        "✨ Sleep quality trending up",
    ]


def test_sleep_insights_for_declining_nights(scripted_generator):
    generator = scripted_generator(LONG_HIGH_NIGHT * 3 + SHORT_LOW_NIGHT * 3)
    result = HealthReportGenerator(HealthAnalyzer(generator)).generate_sleep_report(6)

    assert result["patterns"]["duration_trend"] == "declining"
    assert result["patterns"]["quality_trend"] == "declining"
    assert result["insights"] == [
        "🔴 Sleep duration declining - focus on earlier bedtime",
        "😴 Sleep quality declining - review sleep hygiene",
        "😴 Last night was short - aim for earlier bedtime tonight",
    ]


def test_sleep_insights_for_severe_deprivation(struggling_generator):
    result = HealthReportGenerator(HealthAnalyzer(struggling_generator)).generate_sleep_report(10)

    assert result["last_night"]["duration"] == 5.0
    assert result["insights"] == [
        "⚠️ Getting sufficient sleep (7+ hours) less than half the time",
        "🚨 Last night was severely sleep deprived - prioritize recovery",
    ]


# ---------------------------------------------------------------------------
# alert
# ---------------------------------------------------------------------------

def test_alert_payload_all_ok(reports):
    result = reports.format_alerts([ok("HRV"), ok("Sleep Duration"), ok("Daily Steps")])

    assert result["alert_summary"] == {
        "total_checks": 3, "active_alerts": 0, "warnings": 0, "critical": 0, "ok": 3
    }
    assert result["active_alerts"] == []
    assert result["recommendations"] == {
        "immediate": ["All metrics within normal ranges - maintain current habits"],
        "short_term": ["Continue monitoring trends for early detection"],
        "long_term": ["Consider expanding health tracking metrics"],
    }
    assert datetime.fromisoformat(result["timestamp"]).utcoffset() == timedelta(0)


def test_alert_payload_with_warnings(reports):
    result = reports.format_alerts([warning("HRV"), ok("Sleep Duration"), warning("Daily Steps")])

    assert result["alert_summary"]["active_alerts"] == 2
    assert result["alert_summary"]["warnings"] == 2
    assert [a["metric"] for a in result["active_alerts"]] == ["HRV", "Daily Steps"]
    assert result["active_alerts"][0]["priority"] == "medium"
    assert result["active_alerts"][0]["current_value"] == 0
    assert result["recommendations"]["immediate"] == [
        "Take a rest day or reduce training intensity",
        "Take breaks for short walks throughout the day",
    ]
    assert len(result["all_thresholds"]) == 3


def test_alert_recommendations_are_deduplicated(reports):
    result = reports.format_alerts([warning("HRV"), warning("HRV")])
    assert result["recommendations"]["immediate"] == ["Take a rest day or reduce training intensity"]
    assert result["recommendations"]["long_term"] == ["Evaluate training load and recovery balance"]


def test_critical_alert_gets_high_priority(reports):
    critical = AlertThreshold(metric="HRV", threshold=30, current=10, status="critical", message="very low")
    result = reports.format_alerts([critical])
    assert result["alert_summary"]["critical"] == 1
    assert result["active_alerts"][0]["priority"] == "high"


def test_next_check_is_eight_am_tomorrow(reports):
    assert reports.generate_alert_report()["next_check"] == "2024-03-11T08:00:00"
