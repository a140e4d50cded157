from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt

from unidirectory.core.config import Settings, settings

# Bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against a bcrypt hash"""
    password_bytes = plain_password.encode('utf-8')[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """Hash password; rounds default to BCRYPT_ROUNDS"""
    password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified bearer token"""
    user_id: int
    email: str
    expires_at: datetime


class TokenIssuer:
    """
    Issues and verifies signed, time-limited bearer tokens.

    Tokens are stateless: the signature and ``exp`` claim are the only
    things checked, there is no revocation list.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        if not secret_key:
            raise ValueError("Token signing secret is required")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expire_delta = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def issue(self, user_id: int, email: str) -> str:
        """Create a signed token for ``{userId, email}``"""
        return self.sign({"userId": user_id, "email": email})

    def sign(self, claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        to_encode = claims.copy()
        expire = datetime.now(timezone.utc) + (expires_delta or self.expire_delta)
        to_encode["exp"] = expire
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """
        Validate signature and expiry.

        Returns None on any failure; the reason is never surfaced to callers.
        """
        if not token:
            return None
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

        user_id = payload.get("userId")
        email = payload.get("email")
        exp = payload.get("exp")
        if user_id is None or not email or exp is None:
            return None
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            return None

        return TokenClaims(
            user_id=user_id,
            email=email,
            expires_at=datetime.fromtimestamp(exp, timezone.utc),
        )
