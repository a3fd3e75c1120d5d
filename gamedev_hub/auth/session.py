# gamedev_hub/auth/session.py
from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Optional

from jose import JWTError, jwt

DEFAULT_MAX_AGE = 7 * 24 * 60 * 60  # 7 days


@dataclass
class SessionData:
    session_id: str
    expires_at: float = 0.0
    user_id: Optional[str] = None     # Discord ID of the bound account
    username: Optional[str] = None
    avatar: Optional[str] = None

    @property
    def is_bound(self) -> bool:
        return self.user_id is not None


class SessionStore:
    """
    Server-side sessions keyed by a random UUID.

    The cookie only carries the session ID, signed with the session secret
    and expiring with the session, so a client can neither forge an ID nor
    read the bound identity. Expired sessions are pruned whenever a new one
    is created.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        max_age: int = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self.max_age = max_age
        self._clock = clock
        self._sessions: dict[str, SessionData] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def _prune(self, now: float) -> None:
        expired = [sid for sid, s in self._sessions.items() if s.expires_at <= now]
        for sid in expired:
            del self._sessions[sid]

    def create(self) -> SessionData:
        now = self._clock()
        session = SessionData(session_id=str(uuid.uuid4()), expires_at=now + self.max_age)
        with self._lock:
            self._prune(now)
            self._sessions[session.session_id] = session
        return replace(session)

    def get(self, session_id: str) -> Optional[SessionData]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if session.expires_at <= self._clock():
                del self._sessions[session_id]
                return None
            return replace(session)

    def save(self, session: SessionData) -> None:
        with self._lock:
            self._sessions[session.session_id] = replace(session)

    def destroy(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    # ---------- Cookie encoding ----------

    def encode_cookie(self, session: SessionData) -> str:
        claims = {"sid": session.session_id, "exp": int(session.expires_at)}
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode_cookie(self, value: str) -> Optional[str]:
        try:
            # also rejects an expired "exp"
            payload = jwt.decode(value, self._secret, algorithms=[self._algorithm])
        except JWTError:
            return None
        sid = payload.get("sid")
        return sid if isinstance(sid, str) else None

    def from_cookie(self, value: Optional[str]) -> Optional[SessionData]:
        if not value:
            return None
        sid = self.decode_cookie(value)
        return self.get(sid) if sid else None
