from rest_framework import serializers

from .models import DailyReport, epoch_millis


# =====================================================
# WORK ITEMS
# =====================================================

class WorkItemSerializer(serializers.Serializer):
    id = serializers.IntegerField(required=False)
    text = serializers.CharField(allow_blank=True, trim_whitespace=False)
    progress = serializers.IntegerField(min_value=0, max_value=100, default=100)

    def validate_progress(self, value):
        if value % 10:
            raise serializers.ValidationError("Progress moves in steps of 10.")
        return value


# =====================================================
# REPORTS
# =====================================================

class DailyReportSerializer(serializers.ModelSerializer):
    likes = serializers.SerializerMethodField()
    likes_count = serializers.SerializerMethodField()
    liked_by_me = serializers.SerializerMethodField()

    class Meta:
        model = DailyReport
        fields = (
            "id",
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
            "likes_count",
            "liked_by_me",
            "created_at",
            "created_at_millis",
        )
        read_only_fields = fields

    def _like_ids(self, report):
        # Served from prefetch_related("likes") when the view prefetched.
        return sorted(user.pk for user in report.likes.all())

    def get_likes(self, report):
        return self._like_ids(report)

    def get_likes_count(self, report):
        return len(self._like_ids(report))

    def get_liked_by_me(self, report):
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return False
        return request.user.pk in self._like_ids(report)


class DailyReportCreateSerializer(serializers.Serializer):
    work_items = WorkItemSerializer(many=True)
    problems = serializers.CharField(required=False, allow_blank=True, default="")
    tomorrow_plan = serializers.CharField(required=False, allow_blank=True, default="")
    mood = serializers.ChoiceField(
        choices=DailyReport.Mood.choices,
        default=DailyReport.Mood.NEUTRAL,
    )
    created_at_millis = serializers.IntegerField(required=False, min_value=0)

    def validate_work_items(self, items):
        if not any(item["text"].strip() for item in items):
            raise serializers.ValidationError("Fill in at least one work item.")
        # Items sent without an id get distinct time-based ids.
        base = epoch_millis()
        for index, item in enumerate(items):
            item.setdefault("id", base + index)
        return items


class LikeToggleSerializer(serializers.Serializer):
    liked = serializers.BooleanField()
    likes = serializers.ListField(child=serializers.IntegerField())


# =====================================================
# ANALYTICS
# =====================================================

class DashboardQuerySerializer(serializers.Serializer):
    group = serializers.IntegerField(required=False, allow_null=True)
    date = serializers.DateField(required=False)


class CalendarQuerySerializer(serializers.Serializer):
    user = serializers.IntegerField(required=False)
    year = serializers.IntegerField(required=False, min_value=1970, max_value=9999)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
