# backend/fittrack/services/analytics.py
"""
Read-only aggregations behind the dashboard and the weekly report.

Everything here takes already-loaded rows plus an explicit `today`, so the
same numbers come out regardless of when or where the request is served.
"""
import math
from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ..models.workout import INTENSITIES
from .health import calculate_bmi

WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

TOP_ACTIVITIES = 5
RECENT_WORKOUTS = 10
REPORT_WINDOW_DAYS = 7


def _weekday(d: date) -> str:
    return WEEKDAY_ABBR[d.weekday()]


def _last_7_days(today: date) -> List[date]:
    week_start = today - timedelta(days=6)
    return [week_start + timedelta(days=i) for i in range(7)]


def _stats_by_date(daily_stats) -> Dict[date, Any]:
    return {row.stat_date: row for row in daily_stats}


# -------------------------
# Today / last 7 days
# -------------------------
def today_summary(user, workouts, daily_stats, today: date) -> Dict[str, Any]:
    todays = [w for w in workouts if w.date == today]
    stats = _stats_by_date(daily_stats).get(today)

    return {
        "date": today.isoformat(),
        "workouts": len(todays),
        "steps": sum(w.steps or 0 for w in todays),
        "calories": sum(w.calories_burned or 0 for w in todays),
        "water_intake": stats.water_intake if stats else 0,
        "sleep_hours": float(stats.sleep_hours) if stats else 0.0,
        "goal_steps": user.goal_steps,
        "goal_calories": user.goal_calories,
    }


def weekly_series(workouts, daily_stats, today: date) -> List[Dict[str, Any]]:
    stats = _stats_by_date(daily_stats)
    by_date = defaultdict(list)
    for w in workouts:
        by_date[w.date].append(w)

    series = []
    for d in _last_7_days(today):
        day_workouts = by_date.get(d, [])
        row = stats.get(d)
        series.append(
            {
                "date": d.isoformat(),
                "day": _weekday(d),
                "steps": sum(w.steps or 0 for w in day_workouts),
                "calories": sum(w.calories_burned or 0 for w in day_workouts),
                "sleep": float(row.sleep_hours) if row else 0.0,
                "water": row.water_intake if row else 0,
            }
        )
    return series


# -------------------------
# Distributions
# -------------------------
def type_distribution(workouts) -> List[Dict[str, Any]]:
    counts = Counter(w.type for w in workouts if w.type)
    return [{"name": name, "value": value} for name, value in counts.items()]


def intensity_distribution(workouts) -> List[Dict[str, Any]]:
    counts = Counter(w.intensity for w in workouts if w.intensity)
    return [
        {"name": level, "value": counts[level]}
        for level in INTENSITIES
        if counts[level] > 0
    ]


def calories_by_type(workouts, limit: int = TOP_ACTIVITIES) -> List[Dict[str, Any]]:
    totals: Dict[str, int] = defaultdict(int)
    for w in workouts:
        if w.type:
            totals[w.type] += w.calories_burned or 0

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [{"name": name, "value": value} for name, value in ranked[:limit]]


# -------------------------
# Year heatmap
# -------------------------
def activity_heatmap(workouts, year: int) -> Dict[str, Any]:
    """
    Sunday-first weeks covering the whole year, padded at both ends so
    every week has 7 days. Padding days are flagged `in_selected_year: False`.
    """
    counts = Counter(w.date for w in workouts)

    start = date(year, 1, 1)
    start -= timedelta(days=(start.weekday() + 1) % 7)  # back to Sunday
    end = date(year, 12, 31)
    end += timedelta(days=(5 - end.weekday()) % 7)  # forward to Saturday

    weeks: List[List[Dict[str, Any]]] = []
    month_labels: List[Dict[str, Any]] = []
    current = start
    while current <= end:
        week = []
        for _ in range(7):
            week.append(
                {
                    "date": current.isoformat(),
                    "count": counts.get(current, 0),
                    "day_of_week": (current.weekday() + 1) % 7,
                    "month": MONTH_ABBR[current.month - 1],
                    "in_selected_year": current.year == year,
                }
            )
            if current.day == 1 and current.year == year:
                label = MONTH_ABBR[current.month - 1]
                if not month_labels or month_labels[-1]["label"] != label:
                    month_labels.append({"index": len(weeks), "label": label})
            current += timedelta(days=1)
        weeks.append(week)

    return {
        "year": year,
        "weeks": weeks,
        "month_labels": month_labels,
        "total_workouts": sum(n for d, n in counts.items() if d.year == year),
    }


def available_years(workouts, current_year: int) -> List[int]:
    """Years that have at least one workout plus the current one, newest first."""
    years = {w.date.year for w in workouts}
    years.add(current_year)
    return sorted(years, reverse=True)


# -------------------------
# Weekly report
# -------------------------
def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def weekly_report(
    user,
    workouts,
    daily_stats,
    streak: Optional[Dict[str, Any]],
    today: date,
) -> Dict[str, Any]:
    window_start = today - timedelta(days=REPORT_WINDOW_DAYS)

    weekly_workouts = [w for w in workouts if window_start <= w.date <= today]
    weekly_stats = [s for s in daily_stats if window_start <= s.stat_date <= today]

    days_logged = len(weekly_stats) or 1
    total_sleep = sum(float(s.sleep_hours or 0) for s in weekly_stats)
    total_water = sum(s.water_intake or 0 for s in weekly_stats)

    daily_calories = {d: 0 for d in _last_7_days(today)}
    for w in weekly_workouts:
        if w.date in daily_calories:
            daily_calories[w.date] += w.calories_burned or 0

    recent = sorted(workouts, key=lambda w: (w.date, w.time or ""), reverse=True)

    profile = user.profile_dict()
    bmi = calculate_bmi(user.height_cm, user.weight_kg) if profile else None

    return {
        "generated_for": today.isoformat(),
        "window_start": window_start.isoformat(),
        "profile": profile,
        "bmi": bmi,
        "streak": streak,
        "summary": {
            "workouts": len(weekly_workouts),
            "total_calories": sum(w.calories_burned or 0 for w in weekly_workouts),
            "total_minutes": sum(w.duration_minutes or 0 for w in weekly_workouts),
            "avg_sleep_hours": round(total_sleep / days_logged, 1),
            "avg_water_intake": _round_half_up(total_water / days_logged),
            "days_logged": len(weekly_stats),
        },
        "calories_chart": [
            {"date": d.isoformat(), "name": _weekday(d), "calories": kcal}
            for d, kcal in daily_calories.items()
        ],
        "recent_workouts": [w.to_dict() for w in recent[:RECENT_WORKOUTS]],
    }
