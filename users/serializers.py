from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from backend.exceptions import ConflictError

from .authentication import issue_tokens
from .models import Address
from .validators import password_policy_errors

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    full_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            "id",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "phone",
            "role",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_full_name(self, obj):
        return f"{obj.first_name} {obj.last_name}".strip()


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = [
            "id",
            "first_name",
            "last_name",
            "company",
            "address_line1",
            "address_line2",
            "city",
            "state",
            "zip_code",
            "country",
            "phone",
            "is_default",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class UserDetailSerializer(UserSerializer):
    addresses = AddressSerializer(many=True, read_only=True)

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ("addresses",)
        read_only_fields = fields


class UserProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["first_name", "last_name", "phone", "email"]

    def validate_email(self, value):
        if self.instance and self.instance.email != value:
            if User.objects.filter(email__iexact=value).exists():
                raise ConflictError("This email is already in use.")
        return value


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=True)
    first_name = serializers.CharField(required=True)
    last_name = serializers.CharField(required=True)

    class Meta:
        model = User
        fields = ("email", "password", "first_name", "last_name")
        extra_kwargs = {
            # uniqueness is reported as a conflict, not a field error
            "email": {"validators": []},
        }

    def validate_password(self, value):
        errors = password_policy_errors(value)
        if errors:
            raise serializers.ValidationError(errors)
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise ConflictError("Email is already registered")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data["first_name"],
            last_name=validated_data["last_name"],
            role=User.Role.CUSTOMER,
        )


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(
        required=True,
        error_messages={
            "required": "Email is required.",
            "invalid": "Enter a valid email address.",
        },
    )
    password = serializers.CharField(
        write_only=True,
        required=True,
        error_messages={"required": "Password is required."},
    )

    def validate(self, attrs):
        user = User.objects.filter(email__iexact=attrs["email"]).first()

        if not user or not user.check_password(attrs["password"]):
            raise AuthenticationFailed(
                "Invalid email or password", code="invalid_credentials"
            )

        if not user.is_active:
            raise AuthenticationFailed(
                "Account is deactivated", code="account_inactive"
            )

        access, refresh = issue_tokens(user)
        return {
            "token": access,
            "refresh": refresh,
            "user": UserSerializer(user).data,
        }


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value):
        if not self.context["user"].check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate_new_password(self, value):
        errors = password_policy_errors(value)
        if errors:
            raise serializers.ValidationError(errors)
        return value
