from django.contrib import admin

from .models import AppSettings, Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "type", "is_read", "report", "created_at")
    list_filter = ("type", "is_read")
    search_fields = ("user__email", "content")
    readonly_fields = ("user", "type", "content", "report", "created_at")


@admin.register(AppSettings)
class AppSettingsAdmin(admin.ModelAdmin):
    list_display = ("team_name", "daily_threshold", "weekly_threshold", "monthly_threshold", "updated_at")

    def has_add_permission(self, request):
        return not AppSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
