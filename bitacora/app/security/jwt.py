# bitacora/app/security/jwt.py
"""
Stateless bearer tokens.

A token is an HS256 JWT with claims ``sub`` (user id), ``iat`` and ``exp``.
Validity depends only on the signature and the expiry; there is no
server-side session table and no revocation list.
"""
import time
from datetime import timedelta
from typing import Callable, Optional

from jose import JWTError, jwt

from bitacora.app.core.config import Settings
from bitacora.app.core.exceptions import ExpiredToken, InvalidToken

Clock = Callable[[], float]


class TokenService:
    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
        clock: Clock = time.time,
    ):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl_seconds = int(ttl.total_seconds())
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = time.time) -> "TokenService":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            clock=clock,
        )

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def issue(self, user_id: str) -> str:
        issued_at = int(self._clock())
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self._ttl_seconds,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str, now: Optional[float] = None) -> str:
        """
        Return the user id bound to ``token``.

        Raises:
            InvalidToken: bad signature, malformed token or payload
            ExpiredToken: ``now`` is at or past the embedded expiry
        """
        try:
            # Expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as exc:
            raise InvalidToken() from exc

        user_id = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(user_id, str) or not user_id or not isinstance(expires_at, int):
            raise InvalidToken()

        current = self._clock() if now is None else now
        if current >= expires_at:
            raise ExpiredToken()

        return user_id
