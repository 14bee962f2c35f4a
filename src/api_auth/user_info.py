"""
Hook for pushing basic profile data to the user service after login.

The user service call is not implemented yet; NoopUserInfoUpdater is the
default so the login pipeline already calls the hook at its final position.
"""

from typing import List, Protocol

from api_auth.protocol import Identity


class UserInfoUpdater(Protocol):
    async def update(self, identity: Identity, roles: List[str]) -> None:
        ...


class NoopUserInfoUpdater(UserInfoUpdater):
    async def update(self, identity: Identity, roles: List[str]) -> None:
        return None
