from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class TeamDailyTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Only ``get_token`` is used: sessions are issued by ``session_payload``."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        token["name"] = user.name
        token["group_id"] = user.group_id
        return token
