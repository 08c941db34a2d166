"""Shared dependencies: services held on app.state and the admin header."""

from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from spirit.services import (
    AdminGuard,
    ChatService,
    InviteLedger,
    ReflectionStore,
    TokenIssuer,
)

ADMIN_HEADER = "x-admin-token"


def get_ledger(request: Request) -> InviteLedger:
    return request.app.state.ledger


def get_admin_guard(request: Request) -> AdminGuard:
    return request.app.state.admin_guard


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_reflection_store(request: Request) -> ReflectionStore:
    return request.app.state.reflection_store


def is_admin(
    guard: AdminGuard = Depends(get_admin_guard),
    x_admin_token: Optional[str] = Header(default=None, alias=ADMIN_HEADER),
) -> bool:
    """FastAPI dependency: whether the caller presented the admin secret."""
    return guard.authorize(x_admin_token)


LedgerDep = Annotated[InviteLedger, Depends(get_ledger)]
TokenIssuerDep = Annotated[TokenIssuer, Depends(get_token_issuer)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
ReflectionStoreDep = Annotated[ReflectionStore, Depends(get_reflection_store)]
IsAdminDep = Annotated[bool, Depends(is_admin)]
