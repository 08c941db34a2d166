from spirit.services.invite_ledger import InviteLedger, InviteCode, RedeemOutcome
from spirit.services.admin_guard import AdminGuard
from spirit.services.token_issuer import TokenIssuer
from spirit.services.chat_service import ChatService, ChatReply, ChatServiceError
from spirit.services.reflection_store import ReflectionStore, ReflectionStoreError

__all__ = [
    "InviteLedger",
    "InviteCode",
    "RedeemOutcome",
    "AdminGuard",
    "TokenIssuer",
    "ChatService",
    "ChatReply",
    "ChatServiceError",
    "ReflectionStore",
    "ReflectionStoreError",
]
