"""Caller identity as forwarded by the upstream authentication layer."""

from uuid import UUID

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.request import Request

from ticketing.domain import Caller, Role, UserId

USER_ID_HEADER = "X-User-Id"
ROLE_HEADER = "X-User-Role"


class MissingIdentity(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Caller identity is missing or malformed."
    default_code = "UNAUTHENTICATED"


def resolve_caller(request: Request) -> Caller:
    """Build the Caller from identity headers.

    Raises:
        MissingIdentity: If either header is absent or malformed.
    """
    raw_id = request.headers.get(USER_ID_HEADER)
    raw_role = request.headers.get(ROLE_HEADER, Role.CUSTOMER.value)
    try:
        return Caller(user_id=UserId(UUID(raw_id)), role=Role(raw_role.lower()))
    except (TypeError, ValueError, AttributeError):
        raise MissingIdentity() from None
