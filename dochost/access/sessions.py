"""
Subdomain session storage

Sessions are opaque random tokens bound to one tenant with an absolute
expiry. Stores never hand back an expired session.

- InMemorySessionStore: process-local, for a single api process.
- RedisSessionStore: shared between processes and instances.
- RemoteSessionStore: read-only view of the api process's store, used by
  the site process so both sides agree on which sessions exist.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol
import json
import threading
import uuid

import httpx
import redis.asyncio as redis
from redis.exceptions import RedisError
import structlog

from dochost.core.clock import Clock, utcnow
from dochost.core.exceptions import DirectoryUnavailable

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SubdomainSession:
    """Proof of a successful subdomain password check"""
    tenant_id: uuid.UUID
    subdomain: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def authorizes(self, tenant_id: uuid.UUID, now: datetime) -> bool:
        return self.tenant_id == tenant_id and not self.is_expired(now)

    def to_dict(self) -> dict:
        return {
            "tenant_id": str(self.tenant_id),
            "subdomain": self.subdomain,
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SubdomainSession":
        raw = data["expires_at"]
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        expires_at = datetime.fromisoformat(raw)
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return cls(
            tenant_id=uuid.UUID(str(data["tenant_id"])),
            subdomain=data["subdomain"],
            expires_at=expires_at,
        )


class SessionReader(Protocol):
    """What the access gate needs: look a token up"""

    async def get(self, token: str) -> Optional[SubdomainSession]:
        ...


class SessionStore(SessionReader, Protocol):
    """What the issuer needs: record new sessions as well"""

    async def put(self, token: str, session: SubdomainSession) -> None:
        ...


class InMemorySessionStore:
    """Lock-guarded dict of sessions

    Expired entries are dropped lazily when read, and swept in bulk every
    `sweep_every` puts so memory stays bounded under heavy login traffic.
    """

    def __init__(self, clock: Clock = utcnow, sweep_every: int = 100):
        self.clock = clock
        self.sweep_every = max(1, sweep_every)
        self._sessions: Dict[str, SubdomainSession] = {}
        self._puts = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    async def put(self, token: str, session: SubdomainSession) -> None:
        with self._lock:
            self._sessions[token] = session
            self._puts += 1
            if self._puts % self.sweep_every == 0:
                self._sweep(self.clock())

    async def get(self, token: str) -> Optional[SubdomainSession]:
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session.is_expired(self.clock()):
                del self._sessions[token]
                return None
            return session

    def purge_expired(self) -> int:
        """Drop every expired session, returning how many were removed"""
        with self._lock:
            return self._sweep(self.clock())

    def _sweep(self, now: datetime) -> int:
        expired = [token for token, s in self._sessions.items() if s.is_expired(now)]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug(f"Swept {len(expired)} expired subdomain sessions")
        return len(expired)


class RedisSessionStore:
    """Sessions in Redis, one key per token with a TTL matching the expiry

    A failed read counts as "no session", so the gate challenges while Redis
    is down. A failed write surfaces as DirectoryUnavailable (503).
    """

    def __init__(self, client: redis.Redis, clock: Clock = utcnow, key_prefix: str = "dochost:session:"):
        self.client = client
        self.clock = clock
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, clock: Clock = utcnow) -> "RedisSessionStore":
        return cls(redis.from_url(url, decode_responses=True), clock=clock)

    def _key(self, token: str) -> str:
        return f"{self.key_prefix}{token}"

    async def put(self, token: str, session: SubdomainSession) -> None:
        ttl = int((session.expires_at - self.clock()).total_seconds())
        if ttl <= 0:
            return
        try:
            await self.client.set(self._key(token), json.dumps(session.to_dict()), ex=ttl)
        except RedisError as e:
            logger.error(f"Session store write failed: {e}")
            raise DirectoryUnavailable("Session store unavailable") from e

    async def get(self, token: str) -> Optional[SubdomainSession]:
        try:
            raw = await self.client.get(self._key(token))
        except RedisError as e:
            logger.error(f"Session store read failed: {e}")
            return None
        if raw is None:
            return None
        session = SubdomainSession.from_dict(json.loads(raw))
        # Redis TTLs have one-second granularity
        if session.is_expired(self.clock()):
            return None
        return session


class RemoteSessionStore:
    """Read-only session lookups against the api process

    Lookup failures read as "no session", so the gate fails closed.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        internal_key: str,
        key_header: str = "X-Internal-Key",
        clock: Clock = utcnow,
    ):
        self.client = client
        self.headers = {key_header: internal_key}
        self.clock = clock

    async def get(self, token: str) -> Optional[SubdomainSession]:
        try:
            response = await self.client.get(f"/subdomain/sessions/{token}", headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(f"Session lookup failed: {e}")
            return None

        if response.status_code != 200:
            if response.status_code != 404:
                logger.error(f"Session lookup returned {response.status_code}")
            return None

        try:
            session = SubdomainSession.from_dict(response.json())
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed session lookup reply: {e}")
            return None
        if session.is_expired(self.clock()):
            return None
        return session
