"""
Invites: admin-minted single-use codes, redeemed for an access token.

A code is Unused from the moment it is minted until its first successful
verify, after which it is Used for the rest of the process lifetime.
"""

import logging

from fastapi import APIRouter

from spirit.api.deps import IsAdminDep, LedgerDep, TokenIssuerDep
from spirit.errors import ErrorKind, error_response
from spirit.schemas import (
    ErrorResponse,
    InviteCodeInfo,
    InviteCodeListResponse,
    InviteCreateResponse,
    InviteVerifyRequest,
    InviteVerifyResponse,
)
from spirit.services import RedeemOutcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invite", tags=["Invites"])

WELCOME_MESSAGE = "Welcome to Spirit."

_REDEEM_ERRORS = {
    RedeemOutcome.NOT_FOUND: (ErrorKind.NOT_FOUND, "Invalid code"),
    RedeemOutcome.ALREADY_USED: (ErrorKind.CONFLICT, "Code already used"),
}


@router.post(
    "/create",
    response_model=InviteCreateResponse,
    responses={403: {"model": ErrorResponse}},
)
async def create_invite(is_admin: IsAdminDep, ledger: LedgerDep):
    """Mint a new invite code. Requires the x-admin-token header."""
    if not is_admin:
        logger.warning("Invite creation rejected: bad or missing admin token")
        return error_response(ErrorKind.FORBIDDEN)

    return InviteCreateResponse(code=ledger.create_code())


@router.get(
    "/codes",
    response_model=InviteCodeListResponse,
    responses={403: {"model": ErrorResponse}},
)
async def list_invites(is_admin: IsAdminDep, ledger: LedgerDep):
    """List every code minted by this process. Requires the x-admin-token header."""
    if not is_admin:
        return error_response(ErrorKind.FORBIDDEN)

    codes = [InviteCodeInfo.model_validate(c) for c in ledger.list_codes()]
    return InviteCodeListResponse(count=len(codes), codes=codes)


@router.post(
    "/verify",
    response_model=InviteVerifyResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def verify_invite(body: InviteVerifyRequest, ledger: LedgerDep, issuer: TokenIssuerDep):
    """Redeem an invite code for an access token. Each code works once."""
    outcome = ledger.redeem(body.code)
    if outcome is not RedeemOutcome.OK:
        kind, message = _REDEEM_ERRORS[outcome]
        logger.info("Invite redemption refused: %s", outcome.value)
        return error_response(kind, message)

    token = issuer.issue(body.code)
    logger.info("Invite redeemed, access token issued")
    return InviteVerifyResponse(message=WELCOME_MESSAGE, token=token)
