from django.contrib import admin

from .aggregation import count_work
from .models import DailyReport


@admin.register(DailyReport)
class DailyReportAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user_name",
        "group_name",
        "date",
        "mood",
        "work_items_count",
        "created_at",
    )

    list_filter = (
        "mood",
        "group",
        "date",
    )

    search_fields = (
        "user_name",
        "user__email",
        "today_work",
        "problems",
        "tomorrow_plan",
    )

    ordering = ("-created_at",)

    readonly_fields = (
        "user",
        "user_name",
        "group",
        "group_name",
        "date",
        "today_work",
        "work_items",
        "problems",
        "tomorrow_plan",
        "mood",
        "likes",
        "created_at",
        "created_at_millis",
    )

    fieldsets = (
        ("Author", {
            "fields": (
                "user",
                "user_name",
                "group",
                "group_name",
                "date",
                "mood",
            )
        }),
        ("Report", {
            "fields": (
                "today_work",
                "work_items",
                "problems",
                "tomorrow_plan",
            )
        }),
        ("Reactions & dates", {
            "fields": (
                "likes",
                "created_at",
                "created_at_millis",
            )
        }),
    )

    @admin.display(description="Work items")
    def work_items_count(self, obj):
        return count_work(obj)

    def has_add_permission(self, request):
        # Reports are only submitted through the API.
        return False

    def has_delete_permission(self, request, obj=None):
        return False
