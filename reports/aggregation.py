"""
Derived views over the report feed: the admin dashboard, the 7-day trend,
the per-member month calendar and its achievement badges.

Everything here is a pure function of its arguments. Reports are read by
attribute (model instances or any object with the same fields); nothing is
written and input order does not matter.
"""
from __future__ import annotations

import calendar
import math
from datetime import date, timedelta
from typing import Iterable, Optional, Union

DateLike = Union[date, str]

FULL_ATTENDANCE_DAYS = 20

HIGH_OUTPUT_BADGE = "high_output_day"
FULL_ATTENDANCE_BADGE = "full_attendance"


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _iso(value: DateLike) -> str:
    return _as_date(value).isoformat()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_work(report) -> int:
    """Structured items when the report has them, else non-blank legacy lines."""
    items = getattr(report, "work_items", None)
    if items:
        return len(items)
    text = getattr(report, "today_work", "") or ""
    return sum(1 for line in text.split("\n") if line.strip())


# ================= DASHBOARD =================

def trend_series(
    reports: Iterable,
    today: DateLike,
    days: int = 7,
    group_id: Optional[int] = None,
) -> list[dict]:
    """``days`` points, oldest first, the last one being ``today``."""
    end = _as_date(today)
    counts: dict[str, int] = {}
    for report in reports:
        if group_id is not None and report.group_id != group_id:
            continue
        counts[report.date] = counts.get(report.date, 0) + 1

    series = []
    for offset in range(days - 1, -1, -1):
        day = (end - timedelta(days=offset)).isoformat()
        series.append({"date": day, "label": day[5:], "count": counts.get(day, 0)})
    return series


def submission_rate(today_count: int, team_size: int) -> int:
    if not team_size:
        return 0
    return _round_half_up(today_count / team_size * 100)


def build_dashboard(
    reports: Iterable,
    today: DateLike,
    team_size: int,
    group_id: Optional[int] = None,
) -> dict:
    """
    ``today_count`` covers the whole team; only the trend honours
    ``group_id``.
    """
    reports = list(reports)
    today_str = _iso(today)
    today_count = sum(1 for report in reports if report.date == today_str)
    return {
        "date": today_str,
        "today_count": today_count,
        "team_size": team_size,
        "submission_rate": submission_rate(today_count, team_size),
        "group_id": group_id,
        "trend": trend_series(reports, today_str, group_id=group_id),
    }


# ================= CALENDAR =================

def intensity_level(count: int) -> int:
    """Heatmap bucket: 0 | 1-3 | 4-6 | 7 | 8+."""
    if count <= 0:
        return 0
    if count <= 3:
        return 1
    if count <= 6:
        return 2
    if count < 8:
        return 3
    return 4


def month_reports(reports: Iterable, user_id, year: int, month: int) -> list:
    prefix = f"{year:04d}-{month:02d}-"
    return [
        report
        for report in reports
        if str(report.user_id) == str(user_id) and report.date.startswith(prefix)
    ]


def achievements(
    daily_counts: Iterable[int],
    submitted_days: int,
    thresholds: dict,
    full_attendance_days: int = FULL_ATTENDANCE_DAYS,
) -> list[dict]:
    daily = thresholds.get("daily", 8)
    badges = []
    if any(count >= daily for count in daily_counts):
        badges.append({"code": HIGH_OUTPUT_BADGE, "name": "High output day", "icon": "⚡"})
    if submitted_days >= full_attendance_days:
        badges.append({"code": FULL_ATTENDANCE_BADGE, "name": "Full attendance", "icon": "🏅"})
    return badges


def build_month_calendar(
    reports: Iterable,
    user_id,
    year: int,
    month: int,
    thresholds: dict,
    full_attendance_days: int = FULL_ATTENDANCE_DAYS,
) -> dict:
    """
    One cell per day of the month, preceded by ``leading_blanks`` empty
    cells so that the first day lands on its weekday column (Sunday first).

    When a member has several reports on one day the first one in feed
    order (the newest) represents the day.
    """
    daily_threshold = thresholds.get("daily", 8)
    by_date: dict[str, object] = {}
    for report in month_reports(reports, user_id, year, month):
        by_date.setdefault(report.date, report)

    first_weekday, days_in_month = calendar.monthrange(year, month)
    cells = []
    for day in range(1, days_in_month + 1):
        date_str = f"{year:04d}-{month:02d}-{day:02d}"
        report = by_date.get(date_str)
        count = count_work(report) if report is not None else 0
        cells.append({
            "day": day,
            "date": date_str,
            "count": count,
            "level": intensity_level(count),
            "has_report": report is not None,
            "report_id": getattr(report, "pk", None),
            "mood": getattr(report, "mood", None),
            "is_high_output": count >= daily_threshold,
        })

    submitted_days = len(by_date)
    return {
        "user_id": user_id,
        "year": year,
        "month": month,
        # monthrange() is Monday-based; the grid starts on Sunday.
        "leading_blanks": (first_weekday + 1) % 7,
        "cells": cells,
        "chart": [{"day": cell["day"], "count": cell["count"]} for cell in cells],
        "submitted_days": submitted_days,
        "total_work_items": sum(cell["count"] for cell in cells),
        "achievements": achievements(
            (cell["count"] for cell in cells if cell["has_report"]),
            submitted_days,
            thresholds,
            full_attendance_days,
        ),
    }
