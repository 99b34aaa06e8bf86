import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenRefreshView

from backend.responses import api_response

from .authentication import BearerChallengeMixin
from .models import Address
from .permissions import IsAdmin, is_self_or_admin
from .serializers import (
    AddressSerializer,
    ChangePasswordSerializer,
    LoginSerializer,
    RegisterSerializer,
    UserDetailSerializer,
    UserProfileUpdateSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


class RegisterUserView(generics.CreateAPIView):
    queryset = User.objects.all()
    serializer_class = RegisterSerializer
    authentication_classes = []
    permission_classes = [AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"[Auth] Registered user {user.id}")

        return api_response(
            data={"user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class LoginView(BearerChallengeMixin, APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return api_response(data=serializer.validated_data)


class RefreshTokenView(BearerChallengeMixin, TokenRefreshView):
    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        return api_response(data={"token": response.data["access"]})


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return api_response(data=UserSerializer(request.user).data)


class UserListView(generics.ListAPIView):
    queryset = User.objects.all().order_by("-created_at")
    serializer_class = UserSerializer
    permission_classes = [IsAdmin]
    pagination_class = None

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return api_response(data=serializer.data)


class UserDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get_user(self, request, pk):
        if not is_self_or_admin(request.user, pk):
            raise PermissionDenied("Forbidden")
        return get_object_or_404(User, pk=pk)

    def get(self, request, pk):
        user = self.get_user(request, pk)
        return api_response(data=UserDetailSerializer(user).data)

    def put(self, request, pk):
        user = self.get_user(request, pk)
        serializer = UserProfileUpdateSerializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(data=UserSerializer(user).data)


class OwnAccountMixin:
    """Restrict ``/users/<pk>/...`` sub-resources to the account owner."""

    permission_classes = [IsAuthenticated]

    def check_owner(self, request, pk):
        if str(request.user.pk) != str(pk):
            raise PermissionDenied("Forbidden")


class AddressCreateView(OwnAccountMixin, APIView):
    def post(self, request, pk):
        self.check_owner(request, pk)
        serializer = AddressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        # unset-then-insert is two statements; concurrent writers may interleave
        if serializer.validated_data.get("is_default"):
            Address.objects.filter(user=request.user).update(is_default=False)

        address = serializer.save(user=request.user)
        return api_response(
            data=AddressSerializer(address).data, status=status.HTTP_201_CREATED
        )


class AddressDetailView(OwnAccountMixin, APIView):
    def get_address(self, request, pk, address_id):
        self.check_owner(request, pk)
        return get_object_or_404(Address, pk=address_id, user=request.user)

    def put(self, request, pk, address_id):
        address = self.get_address(request, pk, address_id)
        serializer = AddressSerializer(address, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        if serializer.validated_data.get("is_default"):
            Address.objects.filter(user=request.user).update(is_default=False)

        address = serializer.save()
        return api_response(data=AddressSerializer(address).data)

    def delete(self, request, pk, address_id):
        address = self.get_address(request, pk, address_id)
        address.delete()
        return api_response(message="Address deleted successfully")


class ChangePasswordView(OwnAccountMixin, APIView):
    def put(self, request, pk):
        self.check_owner(request, pk)
        serializer = ChangePasswordSerializer(
            data=request.data, context={"user": request.user}
        )
        serializer.is_valid(raise_exception=True)

        request.user.set_password(serializer.validated_data["new_password"])
        request.user.save(update_fields=["password"])
        logger.info(f"[Auth] Password changed for user {request.user.id}")
        return api_response(message="Password updated successfully")
