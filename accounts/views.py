from django.db.models import Count
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .audit import AccountsAuditService
from .models import Group, User
from .permissions import IsTeamAdmin
from .serializers import (
    GroupSerializer,
    LoginSerializer,
    MemberGroupSerializer,
    RegisterSerializer,
    UserSerializer,
)
from .services import (
    AuthError,
    assign_group,
    authenticate_member,
    create_group,
    register_member,
    session_payload,
)
from .throttles import LoginRateThrottle, RegisterRateThrottle


# ================= AUTH =================

class LoginView(APIView):
    permission_classes = []
    throttle_classes = [LoginRateThrottle]

    @extend_schema(
        request=LoginSerializer,
        description="""
Sign in with email and password.

Returns a JWT pair, the landing view (`dashboard` for admins, `submit` for
members) and the user record the client keeps as its local session.
""",
        responses={
            200: OpenApiResponse(description="Session payload"),
            400: OpenApiResponse(description="Invalid email or password"),
        },
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        try:
            user = authenticate_member(email, serializer.validated_data["password"])
        except AuthError as exc:
            AccountsAuditService.log_login_failed(request, email)
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        AccountsAuditService.log_login_success(request, user)
        return Response(session_payload(user))


class RegisterView(APIView):
    permission_classes = []
    throttle_classes = [RegisterRateThrottle]

    @extend_schema(
        request=RegisterSerializer,
        description="""
Create an account.

Admission requires either the team invite code (role `user`) or the admin
secret (role `admin`). Duplicate emails are rejected.
""",
        responses={
            201: OpenApiResponse(description="Session payload of the new user"),
            400: OpenApiResponse(description="Wrong join code or email already registered"),
        },
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            user = register_member(
                name=data["name"],
                email=data["email"],
                password=data["password"],
                admin_secret=data["admin_secret"],
                invite_code=data["invite_code"],
            )
        except AuthError as exc:
            AccountsAuditService.log_registration_rejected(request, data["email"], str(exc))
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        AccountsAuditService.log_registration(request, user)
        return Response(session_payload(user), status=status.HTTP_201_CREATED)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


# ================= DIRECTORY =================

class MemberListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        members = User.objects.filter(is_active=True).select_related("group").order_by("-created_at")
        return Response(UserSerializer(members, many=True).data)


class MemberGroupView(APIView):
    permission_classes = [IsAuthenticated, IsTeamAdmin]

    def patch(self, request, pk):
        member = get_object_or_404(User, pk=pk)
        serializer = MemberGroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        assign_group(member, serializer.validated_data["group"])
        AccountsAuditService.log_member_group_assigned(request, member)
        return Response(UserSerializer(member).data)


class GroupListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsTeamAdmin()]
        return super().get_permissions()

    def get(self, request):
        groups = Group.objects.annotate(members_count=Count("members")).order_by("name")
        return Response(GroupSerializer(groups, many=True).data)

    def post(self, request):
        serializer = GroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = create_group(serializer.validated_data["name"])
        AccountsAuditService.log_group_created(request, group)
        return Response(GroupSerializer(group).data, status=status.HTTP_201_CREATED)
