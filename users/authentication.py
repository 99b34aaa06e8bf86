import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken

logger = logging.getLogger(__name__)

AUTH_HEADER_TYPE = "Bearer"


def issue_tokens(user):
    """Return ``(access, refresh)`` token strings for ``user``."""
    refresh = RefreshToken.for_user(user)
    refresh["email"] = user.email
    refresh["role"] = user.role
    return str(refresh.access_token), str(refresh)


def decode_access_token(token):
    """Verify signature and expiry, raising ``AuthenticationFailed`` with a reason code."""
    jwt_settings = settings.SIMPLE_JWT
    try:
        payload = jwt.decode(
            token,
            jwt_settings["SIGNING_KEY"],
            algorithms=[jwt_settings["ALGORITHM"]],
        )
    except ExpiredSignatureError:
        raise AuthenticationFailed("Token expired", code="token_expired")
    except JWTError as e:
        logger.debug(f"[Auth] Rejected token: {e}")
        raise AuthenticationFailed("Invalid token", code="token_invalid")

    if payload.get("token_type") != "access":
        raise AuthenticationFailed("Invalid token", code="token_invalid")
    return payload


class BearerTokenAuthentication(BaseAuthentication):
    """Resolve ``Authorization: Bearer <token>`` to an active user."""

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].decode().lower() != AUTH_HEADER_TYPE.lower():
            return None

        if len(auth) != 2:
            raise AuthenticationFailed("Invalid token", code="token_invalid")

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise AuthenticationFailed("Invalid token", code="token_invalid")

        payload = decode_access_token(token)
        user_id = payload.get(settings.SIMPLE_JWT["USER_ID_CLAIM"])

        User = get_user_model()
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise AuthenticationFailed("User not found", code="user_not_found")

        if not user.is_active:
            raise AuthenticationFailed("Account is deactivated", code="account_inactive")

        return (user, payload)

    def authenticate_header(self, request):
        return f'{AUTH_HEADER_TYPE} realm="api"'


class OptionalBearerTokenAuthentication(BearerTokenAuthentication):
    """Like ``BearerTokenAuthentication`` but any failure leaves the caller anonymous."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except AuthenticationFailed:
            return None


class BearerChallengeMixin:
    """For views without authenticators that still fail with 401, not 403."""

    def get_authenticate_header(self, request):
        return f'{AUTH_HEADER_TYPE} realm="api"'
