"""Billing trigger dependencies."""

import hmac
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...config import settings
from ...core.exceptions import AuthenticationError
from ..auth.dependencies import user_from_token
from ..auth.models import RoleSlug
from .mailer import Mailer

bearer = HTTPBearer(auto_error=False)

TRIGGER_ROLES = {RoleSlug.ADMIN.value, RoleSlug.SUPERADMIN.value}


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


async def verify_billing_trigger(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
) -> str:
    """Accept the cron token or an admin access token; returns the caller kind."""
    if credentials is None:
        raise AuthenticationError("Missing authorization header")

    token = credentials.credentials
    cron_token = settings.billing_cron_token
    if cron_token and hmac.compare_digest(token.encode(), cron_token.encode()):
        return "cron"

    user = user_from_token(token)
    if user is not None and user.role_slug in TRIGGER_ROLES:
        return f"user:{user.id}"

    raise AuthenticationError("Invalid billing trigger credentials")


BillingMailer = Annotated[Mailer, Depends(get_mailer)]
BillingTrigger = Annotated[str, Depends(verify_billing_trigger)]
