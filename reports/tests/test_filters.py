from types import SimpleNamespace

from reports.filters import ReportFilter


def make_report(day, user_id=1, group_id=1, mood="neutral", today_work="", problems="", plan="", items=None):
    return SimpleNamespace(
        date=day,
        user_id=user_id,
        group_id=group_id,
        mood=mood,
        today_work=today_work,
        problems=problems,
        tomorrow_plan=plan,
        work_items=items,
    )


def test_empty_filter_keeps_everything_in_order():
    reports = [make_report("2024-05-03"), make_report("2024-05-01"), make_report("2024-05-02")]
    assert ReportFilter().apply(reports) == reports


def test_date_range_is_inclusive():
    reports = [make_report(f"2024-05-{day:02d}") for day in range(1, 8)]
    result = ReportFilter(start_date="2024-05-02", end_date="2024-05-05").apply(reports)
    assert [r.date for r in result] == ["2024-05-02", "2024-05-03", "2024-05-04", "2024-05-05"]


def test_day_after_end_is_excluded():
    report = make_report("2024-05-06")
    assert not ReportFilter(end_date="2024-05-05").matches(report)
    assert ReportFilter(end_date="2024-05-06").matches(report)


def test_search_is_case_insensitive_across_fields():
    filt = ReportFilter(search="DEPLOY")
    assert filt.matches(make_report("2024-05-01", today_work="fixed deploy script"))
    assert filt.matches(make_report("2024-05-01", problems="Deploy blocked"))
    assert filt.matches(make_report("2024-05-01", plan="redeploy"))
    assert filt.matches(make_report("2024-05-01", items=[{"id": 1, "text": "Deploy v2", "progress": 10}]))
    assert not filt.matches(make_report("2024-05-01", today_work="code review"))


def test_predicates_combine_with_and():
    reports = [
        make_report("2024-05-01", user_id=1, mood="happy"),
        make_report("2024-05-01", user_id=2, mood="happy"),
        make_report("2024-05-01", user_id=1, mood="tired"),
    ]
    result = ReportFilter(user_id="1", mood="happy").apply(reports)
    assert result == [reports[0]]


def test_group_filter():
    reports = [make_report("2024-05-01", group_id=1), make_report("2024-05-01", group_id=None)]
    assert ReportFilter(group_id="1").apply(reports) == [reports[0]]


def test_from_query_params_treats_blank_as_unset():
    filt = ReportFilter.from_query_params({"search": "  ", "start": "2024-05-01", "mood": "", "group": "3"})
    assert filt == ReportFilter(start_date="2024-05-01", group_id="3")


def test_active_count_ignores_search():
    assert ReportFilter(search="x").active_count == 0
    assert ReportFilter(search="x", start_date="2024-05-01", mood="happy", user_id="2").active_count == 3
