"""JWT authentication that honours account lockout.

``user_can_authenticate`` is SimpleJWT's ``USER_AUTHENTICATION_RULE``
(token issuance); ``LockoutAwareJWTAuthentication`` rejects tokens that
were issued before the account was locked.
"""

from __future__ import annotations

import structlog
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

logger = structlog.get_logger(__name__)


def user_can_authenticate(user) -> bool:
    if user is None or not user.is_active:
        return False
    return not getattr(user, "is_locked_out", False)


class LockoutAwareJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if getattr(user, "is_locked_out", False):
            logger.warning("auth.locked_out_user", user_id=str(user.pk))
            raise AuthenticationFailed("User account is locked.", code="user_locked")
        return user
