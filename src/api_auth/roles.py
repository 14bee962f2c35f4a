"""
Role store gateway.

RoleGateway owns the user id -> roles mapping semantics (bootstrap on first
login, strict lookup for admins, overwrite on update). Atomicity is left to
the RoleStore backend: InMemoryRoleStore serializes under a lock, and
RedisRoleStore relies on single-key SET NX / SET XX.
"""

import json
import threading
from typing import Dict, Iterable, List, Optional, Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError

from api_auth.errors import AuthError, ErrorKind
from api_auth.logging import get_logger

logger = get_logger(__name__)


def normalize_roles(roles: Optional[Iterable[str]]) -> List[str]:
    """Ordered set: keep first occurrence of each role, preserve order."""
    if roles is None:
        return []
    return list(dict.fromkeys(roles))


class RoleStore(Protocol):
    """Durable id -> roles storage."""

    async def get_roles(self, user_id: str) -> Optional[List[str]]:
        """Stored roles, or None when the id has no record."""
        ...

    async def create_roles(self, user_id: str, roles: List[str]) -> List[str]:
        """Create the record if absent; return whatever is stored afterwards."""
        ...

    async def replace_roles(self, user_id: str, roles: List[str]) -> bool:
        """Overwrite an existing record. False when the id has no record."""
        ...


class InMemoryRoleStore(RoleStore):
    """Process-local store, for development and tests."""

    def __init__(self, initial: Optional[Dict[str, List[str]]] = None):
        self._roles: Dict[str, List[str]] = {k: list(v) for k, v in (initial or {}).items()}
        self._lock = threading.Lock()

    async def get_roles(self, user_id: str) -> Optional[List[str]]:
        with self._lock:
            roles = self._roles.get(user_id)
            return None if roles is None else list(roles)

    async def create_roles(self, user_id: str, roles: List[str]) -> List[str]:
        with self._lock:
            stored = self._roles.setdefault(user_id, list(roles))
            return list(stored)

    async def replace_roles(self, user_id: str, roles: List[str]) -> bool:
        with self._lock:
            if user_id not in self._roles:
                return False
            self._roles[user_id] = list(roles)
            return True


class RedisRoleStore(RoleStore):
    """Roles stored as JSON lists under "<prefix><user id>"."""

    def __init__(self, client: redis.Redis, key_prefix: str = "roles:"):
        self.redis = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "roles:") -> "RedisRoleStore":
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, key_prefix)

    def _key(self, user_id: str) -> str:
        return f"{self.key_prefix}{user_id}"

    async def get_roles(self, user_id: str) -> Optional[List[str]]:
        try:
            raw = await self.redis.get(self._key(user_id))
        except RedisError as e:
            logger.error("role_store_read_failed", user_id=user_id, error=str(e))
            raise AuthError(ErrorKind.ROLE_READ_FAILED, f"Failed to read roles: {e}") from e
        if raw is None:
            return None
        try:
            roles = json.loads(raw)
        except ValueError as e:
            raise AuthError(ErrorKind.ROLE_READ_FAILED, f"Corrupt roles record for {user_id}: {e}") from e
        if not isinstance(roles, list) or not all(isinstance(role, str) for role in roles):
            raise AuthError(ErrorKind.ROLE_READ_FAILED, f"Corrupt roles record for {user_id}: not a list of strings")
        return roles

    async def create_roles(self, user_id: str, roles: List[str]) -> List[str]:
        try:
            created = await self.redis.set(self._key(user_id), json.dumps(roles), nx=True)
        except RedisError as e:
            logger.error("role_store_write_failed", user_id=user_id, error=str(e))
            raise AuthError(ErrorKind.ROLE_WRITE_FAILED, f"Failed to create roles: {e}") from e
        if created:
            return list(roles)
        stored = await self.get_roles(user_id)
        if stored is None:
            # Deleted between SET NX and GET.
            raise AuthError(ErrorKind.ROLE_WRITE_FAILED, f"Roles for {user_id} vanished during creation")
        return stored

    async def replace_roles(self, user_id: str, roles: List[str]) -> bool:
        try:
            updated = await self.redis.set(self._key(user_id), json.dumps(roles), xx=True)
        except RedisError as e:
            logger.error("role_store_write_failed", user_id=user_id, error=str(e))
            raise AuthError(ErrorKind.ROLE_WRITE_FAILED, f"Failed to update roles: {e}") from e
        return bool(updated)

    async def close(self) -> None:
        await self.redis.aclose()


class RoleGateway:
    """Role lookup, first-login bootstrap and role replacement."""

    def __init__(self, store: RoleStore, default_roles: Iterable[str]):
        self.store = store
        self.default_roles = normalize_roles(default_roles)

    async def get_user_roles(self, user_id: str, create_if_missing: bool) -> List[str]:
        """
        Return the roles stored for user_id.

        With create_if_missing, an absent record is created with the default
        roles (exactly once per id, even under concurrent first logins).
        Without it, an absent record raises RoleNotFound.
        """
        if create_if_missing:
            roles = await self.store.create_roles(user_id, self.default_roles)
        else:
            roles = await self.store.get_roles(user_id)
            if roles is None:
                raise AuthError(ErrorKind.ROLE_NOT_FOUND, f"Could not find roles for user {user_id}")
        return normalize_roles(roles)

    async def set_user_roles(self, user_id: str, roles: Optional[Iterable[str]]) -> None:
        """Overwrite the roles of an existing record; RoleNotFound if there is none."""
        if not await self.store.replace_roles(user_id, normalize_roles(roles)):
            raise AuthError(ErrorKind.ROLE_NOT_FOUND, f"Could not find roles for user {user_id}")
        logger.info("roles_updated", user_id=user_id)


def build_role_store(url: str, key_prefix: str = "roles:") -> RoleStore:
    """Redis store for redis:// URLs, in-memory store when no URL is configured."""
    if not url:
        logger.warning("role_store_in_memory", detail="ROLE_STORE_URL not set; roles are not durable")
        return InMemoryRoleStore()
    return RedisRoleStore.from_url(url, key_prefix)
