from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterable, Optional


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class ReportFilter:
    """
    Conjunction of optional predicates over the report feed. Unset fields
    do not filter. Date bounds are inclusive ``YYYY-MM-DD`` strings.
    """

    search: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    user_id: Optional[str] = None
    group_id: Optional[str] = None
    mood: Optional[str] = None

    QUERY_PARAMS = {
        "search": "search",
        "start_date": "start",
        "end_date": "end",
        "user_id": "user",
        "group_id": "group",
        "mood": "mood",
    }

    @classmethod
    def from_query_params(cls, params) -> "ReportFilter":
        return cls(**{
            name: _clean(params.get(param))
            for name, param in cls.QUERY_PARAMS.items()
        })

    @property
    def active_count(self) -> int:
        """Filters in use besides the free-text search."""
        return sum(
            1
            for field in fields(self)
            if field.name != "search" and getattr(self, field.name)
        )

    @staticmethod
    def searchable_text(report) -> str:
        items = getattr(report, "work_items", None) or []
        item_text = " ".join(str(item.get("text", "")) for item in items)
        return f"{report.today_work} {report.problems} {report.tomorrow_plan} {item_text}"

    def matches(self, report) -> bool:
        if self.search:
            if self.search.lower() not in self.searchable_text(report).lower():
                return False

        if self.start_date and report.date < self.start_date:
            return False
        if self.end_date and report.date > self.end_date:
            return False

        if self.user_id and str(report.user_id) != self.user_id:
            return False
        if self.group_id and str(report.group_id) != self.group_id:
            return False
        if self.mood and report.mood != self.mood:
            return False

        return True

    def apply(self, reports: Iterable) -> list:
        """Keeps the incoming order."""
        return [report for report in reports if self.matches(report)]
