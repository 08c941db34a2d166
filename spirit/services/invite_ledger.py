"""
Invite Ledger: in-memory table of single-use invite codes.

Codes live for the lifetime of the process: they are never deleted and never
expire. A code moves from unused to used at most once.

`redeem()` performs its lookup and its write without yielding to the event
loop, so two concurrent redemptions of the same code on one process can never
both succeed. Separate server processes keep separate ledgers; the guarantee
does not extend across them.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# 4 random bytes → 8 uppercase hex chars, e.g. "9F3A1B2C"
CODE_BYTES = 4


class RedeemOutcome(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"


@dataclass
class InviteCode:
    code: str
    used: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def generate_code() -> str:
    return secrets.token_hex(CODE_BYTES).upper()


class InviteLedger:
    """Owns every invite code minted by this process."""

    def __init__(self, code_factory: Callable[[], str] = generate_code):
        self._codes: Dict[str, InviteCode] = {}
        self._code_factory = code_factory

    def create_code(self) -> str:
        """Mint a new unused code and return it."""
        code = self._code_factory()
        while code in self._codes:
            code = self._code_factory()
        self._codes[code] = InviteCode(code=code)
        logger.info("Invite code minted (%d total)", len(self._codes))
        return code

    def redeem(self, code: str) -> RedeemOutcome:
        """Mark `code` as used if it exists and has not been used yet."""
        invite = self._codes.get(code)
        if invite is None:
            return RedeemOutcome.NOT_FOUND
        if invite.used:
            return RedeemOutcome.ALREADY_USED
        invite.used = True
        return RedeemOutcome.OK

    def get(self, code: str) -> Optional[InviteCode]:
        return self._codes.get(code)

    def list_codes(self) -> List[InviteCode]:
        """All codes, oldest first."""
        return sorted(self._codes.values(), key=lambda c: c.created_at)

    def __len__(self) -> int:
        return len(self._codes)

    def __contains__(self, code: object) -> bool:
        return code in self._codes
