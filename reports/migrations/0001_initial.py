import django.db.models.deletion
import reports.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DailyReport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_name", models.CharField(max_length=150)),
                ("group_name", models.CharField(blank=True, default="", max_length=150)),
                ("date", models.CharField(db_index=True, max_length=10)),
                ("today_work", models.TextField(blank=True, default="")),
                ("work_items", models.JSONField(blank=True, null=True)),
                ("problems", models.TextField(blank=True, default="")),
                ("tomorrow_plan", models.TextField(blank=True, default="")),
                ("mood", models.CharField(choices=[("energetic", "Energetic"), ("happy", "Happy"), ("neutral", "Neutral"), ("tired", "Tired"), ("stressed", "Stressed")], default="neutral", max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("created_at_millis", models.BigIntegerField(default=reports.models.epoch_millis)),
                ("group", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="daily_reports", to="accounts.group")),
                ("likes", models.ManyToManyField(blank=True, related_name="liked_reports", to=settings.AUTH_USER_MODEL)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="daily_reports", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Daily report",
                "verbose_name_plural": "Daily reports",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user", "date"], name="reports_dai_user_id_5d8e1b_idx"),
                    models.Index(fields=["group"], name="reports_dai_group_i_0a7c4f_idx"),
                ],
            },
        ),
    ]
