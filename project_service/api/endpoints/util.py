# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from project_service.core.security import TokenClaims, get_current_claims

router = APIRouter()


@router.get("/ping", response_class=PlainTextResponse)
def ping():
    """Liveness check, no authentication required."""
    return "Pong!"


@router.get("/auth", response_class=PlainTextResponse)
def check_auth(claims: TokenClaims = Depends(get_current_claims)):
    """Confirm that the request carries a valid bearer token."""
    return "You have sent a valid authentication token!"
