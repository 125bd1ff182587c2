"""Play session storage: signed session IDs over an in-memory TTL store."""

import logging
from datetime import datetime, timedelta
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from bjsim.game.session import PlaySession
from config import config

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


class InMemorySessionStore:
    """
    Live play sessions keyed by session ID.

    A PlaySession holds an RNG mid-stream and a half-dealt shoe, so
    sessions are kept as objects rather than serialized.
    """

    def __init__(self, ttl: int | None = None) -> None:
        self._ttl = ttl or config.session_ttl
        self._sessions: dict[str, tuple[PlaySession, datetime]] = {}

    def get(self, session_id: str) -> PlaySession | None:
        """Get a session, refreshing its expiry."""
        if session_id not in self._sessions:
            return None

        table, expiry = self._sessions[session_id]
        if expiry < datetime.now():
            self.delete(session_id)
            return None

        self._sessions[session_id] = (table, self._expiry())
        return table

    def set(self, session_id: str, table: PlaySession) -> None:
        """Store a session."""
        self._sessions[session_id] = (table, self._expiry())

    def delete(self, session_id: str) -> None:
        """Delete session."""
        self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [
            sid for sid, (_, expiry) in self._sessions.items() if expiry < now
        ]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def _expiry(self) -> datetime:
        return datetime.now() + timedelta(seconds=self._ttl)

    def __len__(self) -> int:
        return len(self._sessions)


# Global instances
_session_signer: SessionSigner | None = None
_session_store: InMemorySessionStore | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


def get_session_store() -> InMemorySessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store


def create_session(table: PlaySession) -> str:
    """Store a new play session and return its signed token."""
    session_id = str(uuid4())
    get_session_store().set(session_id, table)
    logger.info("Created play session %s", session_id)
    return get_session_signer().sign(session_id)


def get_session(token: str) -> PlaySession | None:
    """Resolve a signed token to its live play session."""
    session_id = get_session_signer().unsign(token)
    if session_id is None:
        return None
    return get_session_store().get(session_id)
