"""Admin Guard: shared-secret check for admin-only endpoints."""

import hmac
from typing import Optional


class AdminGuard:
    def __init__(self, admin_secret: Optional[str]):
        self._secret = admin_secret or ""

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def authorize(self, supplied_secret: Optional[str]) -> bool:
        """True only when a secret is configured and `supplied_secret` matches it exactly."""
        if not self._secret or supplied_secret is None:
            return False
        return hmac.compare_digest(
            supplied_secret.encode("utf-8"),
            self._secret.encode("utf-8"),
        )
