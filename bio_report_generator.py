"""
Health Report Generator - The Feeder
Turns analyzer metrics into the JSON-ready result payloads of each command,
with human-readable summaries, insights and recommendations.
"""

from dataclasses import asdict
from datetime import datetime, time, timedelta, timezone
from typing import Any, Dict, List

from bio_analyzer import (
    AlertThreshold,
    HealthAnalyzer,
    HealthStatus,
    HRVMetrics,
    SleepMetrics,
)
from mock_data import SleepSample


class HealthReportGenerator:
    """
    Builds result payloads for status, hrv, sleep and alert.
    Payloads are plain dicts; the response layer wraps them in the envelope.
    """

    LOW_HRV_SHARE = 0.3
    WELL_RESTED_HOURS = 8
    ADEQUATE_SLEEP_HOURS = 7
    SHORT_SLEEP_HOURS = 6
    VERY_ACTIVE_STEPS = 10000
    MODERATELY_ACTIVE_STEPS = 7500
    NEXT_CHECK_HOUR = 8

    # metric -> (immediate, short_term, long_term)
    ALERT_RECOMMENDATIONS = {
        "HRV": (
            "Take a rest day or reduce training intensity",
            "Focus on stress management and recovery practices",
            "Evaluate training load and recovery balance",
        ),
        "Sleep Duration": (
            "Prioritize earlier bedtime tonight",
            "Establish consistent sleep schedule",
            "Optimize sleep environment and hygiene",
        ),
        "Daily Steps": (
            "Take breaks for short walks throughout the day",
            "Incorporate more movement into daily routine",
            "Set progressive activity goals",
        ),
    }
    DEFAULT_ALERT_RECOMMENDATIONS = (
        "All metrics within normal ranges - maintain current habits",
        "Continue monitoring trends for early detection",
        "Consider expanding health tracking metrics",
    )

    def __init__(self, analyzer: HealthAnalyzer):
        """
        Initialize the report generator.

        Args:
            analyzer: HealthAnalyzer that supplies metrics
        """
        self.analyzer = analyzer

    # ------------------------------------------------------------------
    # status
    # ------------------------------------------------------------------

    def generate_status(self) -> Dict[str, Any]:
        """Today's overview with summary line and recommendations."""
        status = self.analyzer.analyze_status()
        return self.format_status(status)

    def format_status(self, status: HealthStatus) -> Dict[str, Any]:
        """Nest a status snapshot into the status payload."""
        return {
            "date": status.date,
            "hrv": {
                "current": status.hrv_current,
                "trend": status.hrv_trend,
                "category": status.hrv_category
            },
            "sleep": {
                "last_night_hours": status.last_night_hours,
                "avg_7_day": status.avg_7_day,
                "score": status.sleep_score
            },
            "activity": {
                "steps": status.steps,
                "active_calories": status.active_calories,
                "exercise_minutes": status.exercise_minutes
            },
            "alerts": list(status.alerts),
            "summary": self._generate_health_summary(status),
            "recommendations": self._generate_status_recommendations(status)
        }

    def _generate_health_summary(self, status: HealthStatus) -> str:
        """One line: recovery state, rest state, activity state."""
        parts = []

        if status.hrv_category == "high":
            parts.append("💚 Excellent recovery state")
        elif status.hrv_category == "normal":
            parts.append("🟡 Normal recovery state")
        else:
            parts.append("🔴 Low recovery - consider rest")

        if status.last_night_hours >= self.WELL_RESTED_HOURS:
            parts.append("😴 Well rested")
        elif status.last_night_hours >= self.ADEQUATE_SLEEP_HOURS:
            parts.append("😐 Adequate sleep")
        else:
            parts.append("😵 Sleep deprived")

        if status.steps >= self.VERY_ACTIVE_STEPS:
            parts.append("🚶 Very active")
        elif status.steps >= self.MODERATELY_ACTIVE_STEPS:
            parts.append("🚶 Moderately active")
        else:
            parts.append("🚶 Low activity")

        return " • ".join(parts)

    def _generate_status_recommendations(self, status: HealthStatus) -> List[str]:
        """Recommendations keyed off the same threshold buckets as the summary."""
        recommendations = []

        if status.hrv_category == "low":
            recommendations.append("Consider a rest day or light activity")
            recommendations.append("Focus on stress management and recovery")

        if status.last_night_hours < self.ADEQUATE_SLEEP_HOURS:
            recommendations.append("Prioritize earlier bedtime tonight")
            recommendations.append("Consider sleep hygiene improvements")

        if status.steps < self.MODERATELY_ACTIVE_STEPS:
            recommendations.append("Add more walking or light movement today")

        if status.hrv_trend == "down":
            recommendations.append("Monitor stress levels and recovery practices")

        if not recommendations:
            recommendations.append("Keep up the good work! Maintain current habits")

        return recommendations

    # ------------------------------------------------------------------
    # hrv
    # ------------------------------------------------------------------

    def generate_hrv_report(self, days: int) -> Dict[str, Any]:
        """HRV trends and distribution over the requested window."""
        hrv = self.analyzer.analyze_hrv(days)
        return {
            "period": {
                "days": hrv.days,
                "start_date": hrv.start_date,
                "end_date": hrv.end_date
            },
            "current": {
                "value": hrv.current.value,
                "category": hrv.current.category,
                "date": hrv.current.date
            },
            "statistics": {
                "average": hrv.average,
                "min": hrv.minimum,
                "max": hrv.maximum,
                "std_dev": hrv.std_dev
            },
            "trend": asdict(hrv.trend),
            "distribution": dict(hrv.distribution),
            "data": [asdict(sample) for sample in hrv.recent],
            "insights": self._generate_hrv_insights(hrv)
        }

    def _generate_hrv_insights(self, hrv: HRVMetrics) -> List[str]:
        """Generate contextual insights for HRV."""
        insights = []

        if hrv.trend.direction == "improving":
            insights.append("💚 HRV trending upward - recovery practices are working")
        elif hrv.trend.direction == "declining":
            insights.append("🔴 HRV declining - consider stress management and recovery focus")
        else:
            insights.append("🟡 HRV stable - maintain current recovery practices")

        if hrv.current.category == "low":
            insights.append("⚠️ Current HRV is low - prioritize rest and recovery today")

        if hrv.low_day_fraction > self.LOW_HRV_SHARE:
            insights.append("📊 Frequent low HRV days - consider lifestyle factors (sleep, stress, training)")

        if hrv.trend.significance == "significant":
            insights.append("📈 Significant trend detected - correlate with recent changes in routine")

        return insights

    # ------------------------------------------------------------------
    # sleep
    # ------------------------------------------------------------------

    def _format_night(self, night: SleepSample) -> Dict[str, Any]:
        return {
            "date": night.date,
            "score": night.sleep_score,
            "duration": night.duration_hours
        }

    def generate_sleep_report(self, days: int) -> Dict[str, Any]:
        """Sleep patterns, debt and consistency over the requested window."""
        sleep = self.analyzer.analyze_sleep(days)
        last_night = sleep.last_night
        return {
            "period": {
                "days": sleep.days,
                "start_date": sleep.start_date,
                "end_date": sleep.end_date
            },
            "last_night": {
                "duration": last_night.duration_hours,
                "score": last_night.sleep_score,
                "bedtime": last_night.bedtime,
                "wake_time": last_night.wake_time,
                "deep_sleep": last_night.deep_sleep_hours,
                "rem_sleep": last_night.rem_sleep_hours
            },
            "averages": {
                "duration": sleep.avg_duration,
                "score": sleep.avg_score,
                "deep_sleep": sleep.avg_deep_sleep,
                "rem_sleep": sleep.avg_rem_sleep,
                "bedtime": sleep.avg_bedtime,
                "wake_time": sleep.avg_wake_time
            },
            "patterns": {
                "duration_trend": sleep.duration_trend.direction,
                "quality_trend": sleep.quality_trend.direction,
                "sufficient_sleep_days": sleep.sufficient_sleep_days,
                "total_days": sleep.days,
                "best_night": self._format_night(sleep.best_night),
                "worst_night": self._format_night(sleep.worst_night)
            },
            "sleep_debt": asdict(sleep.debt),
            "consistency": asdict(sleep.consistency),
            "data": [asdict(sample) for sample in sleep.recent],
            "insights": self._generate_sleep_insights(sleep)
        }

    def _generate_sleep_insights(self, sleep: SleepMetrics) -> List[str]:
        """Generate contextual insights for sleep."""
        insights = []

        if sleep.duration_trend.direction == "improving":
            insights.append("💚 Sleep duration improving - good progress")
        elif sleep.duration_trend.direction == "declining":
            insights.append("🔴 Sleep duration declining - focus on earlier bedtime")

        if sleep.quality_trend.direction == "improving":
            insights.append("✨ Sleep quality trending up")
        elif sleep.quality_trend.direction == "declining":
            insights.append("😴 Sleep quality declining - review sleep hygiene")

        sufficient_percent = sleep.sufficient_sleep_days / sleep.days * 100
        if sufficient_percent < 50:
            insights.append("⚠️ Getting sufficient sleep (7+ hours) less than half the time")
        elif sufficient_percent > 80:
            insights.append("🎯 Consistently meeting sleep duration goals")

        if sleep.last_night.duration_hours < self.SHORT_SLEEP_HOURS:
            insights.append("🚨 Last night was severely sleep deprived - prioritize recovery")
        elif sleep.last_night.duration_hours < self.ADEQUATE_SLEEP_HOURS:
            insights.append("😴 Last night was short - aim for earlier bedtime tonight")

        return insights

    # ------------------------------------------------------------------
    # alert
    # ------------------------------------------------------------------

    def generate_alert_report(self) -> Dict[str, Any]:
        """Threshold check with tiered recommendations."""
        thresholds = self.analyzer.analyze_alerts()
        return self.format_alerts(thresholds)

    def format_alerts(self, thresholds: List[AlertThreshold]) -> Dict[str, Any]:
        """Partition evaluated thresholds into the alert payload."""
        active = [t for t in thresholds if t.status != "ok"]
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "alert_summary": {
                "total_checks": len(thresholds),
                "active_alerts": len(active),
                "warnings": sum(1 for t in thresholds if t.status == "warning"),
                "critical": sum(1 for t in thresholds if t.status == "critical"),
                "ok": sum(1 for t in thresholds if t.status == "ok")
            },
            "active_alerts": [
                {
                    "metric": t.metric,
                    "status": t.status,
                    "current_value": t.current,
                    "threshold": t.threshold,
                    "message": t.message,
                    "priority": "high" if t.status == "critical" else "medium"
                }
                for t in active
            ],
            "all_thresholds": [asdict(t) for t in thresholds],
            "recommendations": self._generate_alert_recommendations(thresholds),
            "next_check": self._next_check_time()
        }

    def _generate_alert_recommendations(self, thresholds: List[AlertThreshold]) -> Dict[str, List[str]]:
        """Tiered recommendations per triggered metric, deduplicated in order."""
        recommendations = {
            "immediate": [],
            "short_term": [],
            "long_term": []
        }
        tiers = list(recommendations)

        for threshold in thresholds:
            if threshold.status not in ("warning", "critical"):
                continue
            lines = self.ALERT_RECOMMENDATIONS.get(threshold.metric)
            if not lines:
                continue
            for tier, line in zip(tiers, lines):
                if line not in recommendations[tier]:
                    recommendations[tier].append(line)

        if not recommendations["immediate"]:
            for tier, line in zip(tiers, self.DEFAULT_ALERT_RECOMMENDATIONS):
                recommendations[tier].append(line)

        return recommendations

    def _next_check_time(self) -> str:
        """08:00 on the calendar day after today."""
        tomorrow = self.analyzer.today + timedelta(days=1)
        return datetime.combine(tomorrow, time(hour=self.NEXT_CHECK_HOUR)).isoformat()
