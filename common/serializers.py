from rest_framework import serializers

from common.models import AppSettings, Notification


class NotificationSerializer(serializers.ModelSerializer):
    link_id = serializers.PrimaryKeyRelatedField(source="report", read_only=True)

    class Meta:
        model = Notification
        fields = (
            "id",
            "type",
            "content",
            "is_read",
            "link_id",
            "created_at",
        )


class ThresholdsSerializer(serializers.Serializer):
    daily = serializers.IntegerField(min_value=1)
    weekly = serializers.IntegerField(min_value=1)
    monthly = serializers.IntegerField(min_value=1)


class AppSettingsSerializer(serializers.ModelSerializer):
    thresholds = ThresholdsSerializer(required=False)

    class Meta:
        model = AppSettings
        fields = ("team_name", "work_days", "thresholds", "updated_at")
        read_only_fields = ("updated_at",)

    def validate_work_days(self, value):
        if not isinstance(value, list) or any(
            not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6
            for day in value
        ):
            raise serializers.ValidationError("Work days are weekday numbers 0-6 (Sunday = 0).")
        return sorted(set(value))

    def update(self, instance, validated_data):
        thresholds = validated_data.pop("thresholds", None)
        if thresholds:
            instance.daily_threshold = thresholds.get("daily", instance.daily_threshold)
            instance.weekly_threshold = thresholds.get("weekly", instance.weekly_threshold)
            instance.monthly_threshold = thresholds.get("monthly", instance.monthly_threshold)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save()
        return instance
