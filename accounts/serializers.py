from rest_framework import serializers

from .models import Group, User


# =========================
# USER SERIALIZER (READ)
# =========================

class UserSerializer(serializers.ModelSerializer):
    group_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "email",
            "name",
            "role",
            "group",
            "group_name",
            "joined_on",
            "created_at",
        )
        read_only_fields = fields


# =========================
# AUTH
# =========================

class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=150)
    password = serializers.CharField(write_only=True, min_length=6)
    invite_code = serializers.CharField(required=False, allow_blank=True, default="")
    admin_secret = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name must not be blank.")
        return value


# =========================
# GROUP
# =========================

class GroupSerializer(serializers.ModelSerializer):
    members_count = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = ("id", "name", "members_count")

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Group name must not be blank.")
        qs = Group.objects.filter(name__iexact=value)
        if self.instance:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A group with this name already exists.")
        return value

    def get_members_count(self, obj):
        annotated = getattr(obj, "members_count", None)
        if annotated is not None:
            return annotated
        return obj.members.count()


class MemberGroupSerializer(serializers.Serializer):
    group = serializers.PrimaryKeyRelatedField(
        queryset=Group.objects.all(),
        allow_null=True,
    )
