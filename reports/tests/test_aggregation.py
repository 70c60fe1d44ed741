from datetime import date
from types import SimpleNamespace

import pytest

from reports.aggregation import (
    FULL_ATTENDANCE_BADGE,
    HIGH_OUTPUT_BADGE,
    achievements,
    build_dashboard,
    build_month_calendar,
    count_work,
    intensity_level,
    submission_rate,
    trend_series,
)

THRESHOLDS = {"daily": 8, "weekly": 4, "monthly": 20}


def make_report(day, user_id=1, group_id=None, items=0, today_work="", mood="neutral", pk=None):
    work_items = [{"id": i, "text": f"task {i}", "progress": 100} for i in range(items)] or None
    return SimpleNamespace(
        pk=pk,
        date=day,
        user_id=user_id,
        group_id=group_id,
        work_items=work_items,
        today_work=today_work,
        mood=mood,
    )


def test_count_work_prefers_structured_items():
    assert count_work(make_report("2024-04-01", items=3, today_work="a\nb")) == 3


def test_count_work_falls_back_to_non_blank_legacy_lines():
    assert count_work(make_report("2024-04-01", today_work="a\n\n  \nb\nc")) == 3
    assert count_work(make_report("2024-04-01")) == 0


def test_trend_has_seven_points_ending_today():
    reports = [
        make_report("2024-05-10"),
        make_report("2024-05-10"),
        make_report("2024-05-07"),
        make_report("2024-05-01"),  # outside the window
    ]
    series = trend_series(reports, date(2024, 5, 10))

    assert len(series) == 7
    assert series[0]["date"] == "2024-05-04"
    assert series[-1] == {"date": "2024-05-10", "label": "05-10", "count": 2}
    assert [point["count"] for point in series] == [0, 0, 0, 1, 0, 0, 2]


def test_trend_respects_group():
    reports = [
        make_report("2024-05-10", group_id=1),
        make_report("2024-05-10", group_id=2),
    ]
    series = trend_series(reports, "2024-05-10", group_id=2)
    assert series[-1]["count"] == 1


@pytest.mark.parametrize(
    "today_count, team_size, expected",
    [
        (3, 10, 30),
        (0, 10, 0),
        (5, 0, 0),
        (1, 8, 13),
        (2, 3, 67),
        (1, 3, 33),
    ],
)
def test_submission_rate(today_count, team_size, expected):
    assert submission_rate(today_count, team_size) == expected


def test_dashboard_counts_today_for_whole_team():
    reports = [
        make_report("2024-05-10", group_id=1),
        make_report("2024-05-10", group_id=2),
        make_report("2024-05-10", group_id=2),
        make_report("2024-05-09", group_id=1),
    ]
    dashboard = build_dashboard(reports, "2024-05-10", team_size=10, group_id=1)

    assert dashboard["today_count"] == 3
    assert dashboard["team_size"] == 10
    assert dashboard["submission_rate"] == 30
    assert dashboard["trend"][-1]["count"] == 1
    assert dashboard["trend"][-2]["count"] == 1


def test_dashboard_empty_team():
    dashboard = build_dashboard([], date(2024, 5, 10), team_size=0)
    assert dashboard["submission_rate"] == 0
    assert len(dashboard["trend"]) == 7


@pytest.mark.parametrize(
    "count, level",
    [(0, 0), (1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (8, 4), (15, 4)],
)
def test_intensity_level(count, level):
    assert intensity_level(count) == level


def test_month_calendar_for_thirty_day_month():
    reports = [
        make_report("2024-04-01", items=2, mood="happy", pk=11),
        make_report("2024-04-02", items=4),
        make_report("2024-04-03", items=7),
        make_report("2024-04-10", today_work="one\ntwo"),
        make_report("2024-04-30", items=1),
        make_report("2024-04-15", user_id=2, items=9),  # someone else
        make_report("2024-05-01", items=3),  # next month
    ]
    result = build_month_calendar(reports, 1, 2024, 4, THRESHOLDS)

    assert len(result["cells"]) == 30
    assert result["leading_blanks"] == 1  # 2024-04-01 is a Monday
    assert result["submitted_days"] == 5
    assert result["total_work_items"] == 2 + 4 + 7 + 2 + 1

    first = result["cells"][0]
    assert first == {
        "day": 1,
        "date": "2024-04-01",
        "count": 2,
        "level": 1,
        "has_report": True,
        "report_id": 11,
        "mood": "happy",
        "is_high_output": False,
    }
    assert result["cells"][2]["level"] == 3
    assert result["cells"][14]["has_report"] is False
    assert result["chart"][1] == {"day": 2, "count": 4}
    assert result["achievements"] == []


def test_month_starting_on_sunday_has_no_leading_blanks():
    result = build_month_calendar([], 1, 2024, 9, THRESHOLDS)
    assert result["leading_blanks"] == 0
    assert len(result["cells"]) == 30
    assert result["total_work_items"] == 0


def test_newest_report_represents_a_day():
    reports = [
        make_report("2024-04-05", items=5, pk=2),
        make_report("2024-04-05", items=1, pk=1),
    ]
    result = build_month_calendar(reports, 1, 2024, 4, THRESHOLDS)
    cell = result["cells"][4]
    assert cell["count"] == 5
    assert cell["report_id"] == 2
    assert result["submitted_days"] == 1


def test_high_output_day_badge_uses_daily_threshold():
    reports = [make_report("2024-04-05", items=5)]
    result = build_month_calendar(reports, 1, 2024, 4, {"daily": 5})

    assert result["cells"][4]["is_high_output"] is True
    assert [badge["code"] for badge in result["achievements"]] == [HIGH_OUTPUT_BADGE]


def test_full_attendance_after_twenty_days():
    reports = [make_report(f"2024-07-{day:02d}", items=1) for day in range(1, 21)]
    result = build_month_calendar(reports, 1, 2024, 7, THRESHOLDS)

    assert result["submitted_days"] == 20
    assert [badge["code"] for badge in result["achievements"]] == [FULL_ATTENDANCE_BADGE]


def test_achievements_are_pure():
    counts = [1, 8, 2]
    assert achievements(counts, 3, THRESHOLDS) == achievements(counts, 3, THRESHOLDS)
    assert [badge["code"] for badge in achievements(counts, 25, THRESHOLDS, 25)] == [
        HIGH_OUTPUT_BADGE,
        FULL_ATTENDANCE_BADGE,
    ]
