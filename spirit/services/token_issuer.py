"""Token Issuer - signs access tokens handed out on invite redemption"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import uuid

from jose import JWTError, jwt


def new_subject() -> str:
    """Synthesize a subject identifier for a freshly redeemed invite."""
    return f"spirit_{uuid.uuid4().hex}"


class TokenIssuer:
    def __init__(self, secret: str, algorithm: str = "HS256", expire_days: int = 30):
        self._secret = secret
        self.algorithm = algorithm
        self.expire_delta = timedelta(days=expire_days)

    def issue(self, code: str, subject: Optional[str] = None) -> str:
        """Create a signed JWT binding the redeemed `code` to a new subject."""
        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": subject or new_subject(),
            "code": code,
            "iat": now,
            "exp": now + self.expire_delta,
            "jti": str(uuid.uuid4()),  # Unique token ID
        }
        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the token's claims, or None if the signature or expiry is invalid."""
        try:
            return jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError:
            return None
