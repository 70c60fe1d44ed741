from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin
from django.utils.html import format_html

from .access_policy import AccessPolicy
from .models import AuditLog, Group, User


ROLE_BADGE_COLORS = {
    User.Role.ADMIN: "#2563eb",
    User.Role.USER: "#059669",
}


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = (
        "email",
        "name",
        "role_badge",
        "group",
        "joined_on",
        "is_active",
    )
    list_filter = (
        "role",
        "group",
        "is_active",
    )
    search_fields = (
        "email",
        "name",
    )
    ordering = ("-created_at",)
    list_select_related = ("group",)
    readonly_fields = ("last_login", "date_joined", "created_at")
    filter_horizontal = ()

    fieldsets = (
        ("Account", {"fields": ("email", "password")}),
        ("Profile", {"fields": ("name", "role", "group", "joined_on")}),
        ("Access", {"fields": ("is_active", "is_staff")}),
        (
            "System fields",
            {
                "fields": ("last_login", "date_joined", "created_at"),
                "classes": ("collapse",),
            },
        ),
    )

    add_fieldsets = (
        (
            "New member",
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "name",
                    "password1",
                    "password2",
                    "role",
                    "group",
                ),
            },
        ),
    )

    actions = ("set_active", "set_inactive")

    @admin.display(description="Role")
    def role_badge(self, obj):
        color = ROLE_BADGE_COLORS.get(obj.role, "#64748b")
        return format_html(
            '<span style="padding:4px 10px;border-radius:999px;background:{}22;color:{};font-weight:600;">{}</span>',
            color,
            color,
            obj.get_role_display(),
        )

    @admin.action(description="Activate")
    def set_active(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f"Activated users: {updated}")

    @admin.action(description="Deactivate")
    def set_inactive(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f"Deactivated users: {updated}", level=messages.WARNING)

    def save_model(self, request, obj, form, change):
        obj.username = obj.email
        super().save_model(request, obj, form, change)

    def has_module_permission(self, request):
        return AccessPolicy.can_access_admin_panel(request.user)


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "level", "category", "action", "user", "object_type", "object_id")
    list_filter = ("level", "category")
    search_fields = ("action", "object_id", "user__email")
    readonly_fields = [field.name for field in AuditLog._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
