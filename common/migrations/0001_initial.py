import common.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("reports", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AppSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("team_name", models.CharField(default="TeamDaily", max_length=150)),
                ("work_days", models.JSONField(default=common.models.default_work_days)),
                ("daily_threshold", models.PositiveIntegerField(default=8)),
                ("weekly_threshold", models.PositiveIntegerField(default=4)),
                ("monthly_threshold", models.PositiveIntegerField(default=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "App settings",
                "verbose_name_plural": "App settings",
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("mention", "Mention"), ("approval", "Approval"), ("system", "System")], default="system", max_length=50)),
                ("content", models.TextField()),
                ("is_read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("report", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="notifications", to="reports.dailyreport")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user"], name="common_noti_user_id_4c1e2a_idx"),
                    models.Index(fields=["is_read"], name="common_noti_is_read_9b0d3f_idx"),
                    models.Index(fields=["created_at"], name="common_noti_created_e27a5c_idx"),
                ],
            },
        ),
    ]
