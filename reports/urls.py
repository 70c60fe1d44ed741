from django.urls import path

from .views import (
    CalendarView,
    DashboardView,
    ReportDetailView,
    ReportLikeView,
    ReportListCreateView,
    TeamSummaryView,
)

urlpatterns = [
    # ======================
    # FEED
    # ======================
    path("", ReportListCreateView.as_view(), name="reports"),
    path("<int:pk>/", ReportDetailView.as_view(), name="report-detail"),
    path("<int:pk>/like/", ReportLikeView.as_view(), name="report-like"),

    # ======================
    # ANALYTICS
    # ======================
    path("dashboard/", DashboardView.as_view(), name="reports-dashboard"),
    path("calendar/", CalendarView.as_view(), name="reports-calendar"),
    path("summary/", TeamSummaryView.as_view(), name="reports-summary"),
]
