from django.conf import settings
from django.shortcuts import get_object_or_404
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status as drf_status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.access_policy import AccessPolicy
from accounts.models import User
from accounts.permissions import IsTeamAdmin
from common.models import AppSettings
from .aggregation import build_dashboard, build_month_calendar
from .audit import ReportsAuditService
from .filters import ReportFilter
from .models import DailyReport
from .serializers import (
    CalendarQuerySerializer,
    DailyReportCreateSerializer,
    DailyReportSerializer,
    DashboardQuerySerializer,
    LikeToggleSerializer,
)
from .services import reports_for_date, submit_report, today_str, toggle_like
from .summary import generate_team_summary, summary_sections


def _feed():
    return DailyReport.objects.prefetch_related("likes").order_by("-created_at", "-id")


# ======================
# FEED
# ======================

class ReportListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        description="""
Team report feed, newest first.

All filters are optional and combine with AND:
`search` (case-insensitive, over work, blockers, plan and work items),
`start` / `end` (inclusive YYYY-MM-DD), `user`, `group`, `mood`.
""",
        parameters=[
            OpenApiParameter("search", str),
            OpenApiParameter("start", str),
            OpenApiParameter("end", str),
            OpenApiParameter("user", int),
            OpenApiParameter("group", int),
            OpenApiParameter("mood", str),
        ],
    )
    def get(self, request):
        report_filter = ReportFilter.from_query_params(request.query_params)
        reports = report_filter.apply(_feed())
        return Response({
            "count": len(reports),
            "active_filters": report_filter.active_count,
            "results": DailyReportSerializer(reports, many=True, context={"request": request}).data,
        })

    @extend_schema(
        request=DailyReportCreateSerializer,
        responses={201: DailyReportSerializer},
        description="Submit today's report. Members mentioned as `@Name` are notified.",
    )
    def post(self, request):
        serializer = DailyReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report, notifications = submit_report(request.user, **serializer.validated_data)

        ReportsAuditService.log_report_submitted(request, report)
        if notifications:
            ReportsAuditService.log_mentions_notified(request, report, notifications)

        return Response(
            DailyReportSerializer(report, context={"request": request}).data,
            status=drf_status.HTTP_201_CREATED,
        )


class ReportDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        report = get_object_or_404(_feed(), pk=pk)
        return Response(DailyReportSerializer(report, context={"request": request}).data)


class ReportLikeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=None,
        responses={200: LikeToggleSerializer},
        description="Toggle the current user's like on a report.",
    )
    def post(self, request, pk):
        report = get_object_or_404(DailyReport, pk=pk)
        liked = toggle_like(report, request.user)
        ReportsAuditService.log_like_toggled(request, report, liked)
        return Response(LikeToggleSerializer({
            "liked": liked,
            "likes": sorted(report.likes.values_list("id", flat=True)),
        }).data)


# ======================
# ANALYTICS
# ======================

class DashboardView(APIView):
    permission_classes = [IsAuthenticated, IsTeamAdmin]

    @extend_schema(
        parameters=[
            OpenApiParameter("group", int, description="Restrict the 7-day trend to one group"),
            OpenApiParameter("date", str, description="Day treated as today (YYYY-MM-DD)"),
        ],
        description="Today's submissions, submission rate and the 7-day trend.",
    )
    def get(self, request):
        query = DashboardQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        day = query.validated_data.get("date") or timezone.localdate()

        team_size = User.objects.filter(is_active=True).count()
        return Response(
            build_dashboard(
                _feed(),
                day,
                team_size=team_size,
                group_id=query.validated_data.get("group"),
            )
        )


class CalendarView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        parameters=[
            OpenApiParameter("user", int, description="Member id, defaults to the caller"),
            OpenApiParameter("year", int),
            OpenApiParameter("month", int),
        ],
        description="""
Month heatmap of a member's work items with achievement badges.

Members can only open their own calendar; administrators can open anyone's.
""",
        responses={403: OpenApiResponse(description="Not allowed to view this member")},
    )
    def get(self, request):
        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        today = timezone.localdate()
        user_id = query.validated_data.get("user", request.user.id)
        year = query.validated_data.get("year", today.year)
        month = query.validated_data.get("month", today.month)

        if not AccessPolicy.can_view_member_data(request.user, user_id):
            return Response(
                {"detail": "You can only view your own calendar."},
                status=drf_status.HTTP_403_FORBIDDEN,
            )
        get_object_or_404(User, pk=user_id)

        app_settings = AppSettings.load()
        return Response(
            build_month_calendar(
                DailyReport.objects.filter(user_id=user_id).order_by("-created_at", "-id"),
                user_id,
                year,
                month,
                app_settings.thresholds,
                full_attendance_days=getattr(settings, "TEAMDAILY_FULL_ATTENDANCE_DAYS", 20),
            )
        )


class TeamSummaryView(APIView):
    permission_classes = [IsAuthenticated, IsTeamAdmin]

    @extend_schema(
        request=None,
        description="""
Generate an AI summary of today's reports.

Failures of the AI service come back as a readable message in `summary`,
never as an error status.
""",
    )
    def post(self, request):
        day = today_str()
        reports = list(reports_for_date(day))
        summary = generate_team_summary(reports)

        ReportsAuditService.log_summary_generated(request, day, len(reports))
        return Response({
            "date": day,
            "report_count": len(reports),
            "summary": summary,
            "sections": summary_sections(summary),
        })
