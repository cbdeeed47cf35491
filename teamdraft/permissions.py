"""Permission nodes, granted to users or roles of a guild."""

import logging

from teamdraft import constants

logger = logging.getLogger(__name__)

SUBJECT_USER = "user"
SUBJECT_ROLE = "role"
SUBJECT_TYPES = (SUBJECT_USER, SUBJECT_ROLE)


class PermissionManager():
    """Checks and manages permission grants.

       Grants are cached per (guild, subject type, subject) on first read,
       and the cache entry is dropped whenever its grants change.
    """
    def __init__(self, db):
        self.db = db
        self.permissions: dict[str, str] = {}
        self._cache: dict[tuple[int, str, int], set[str]] = {}

    def register_permission(self, node: str, help_text: str) -> None:
        self.permissions[node] = help_text

    def get_permissions(self) -> list[tuple[str, str]]:
        """Returns the registered (node, help text) pairs."""
        return list(self.permissions.items())

    async def _get_nodes(self, guild_id: int, subject_type: str,
                         subject_id: int) -> set[str]:
        key = (guild_id, subject_type, subject_id)
        nodes = self._cache.get(key)
        if nodes is None:
            nodes = await self.db.get_permission_nodes(guild_id, subject_type,
                                                       (subject_id,))
            self._cache[key] = nodes
        return nodes

    async def get_granted_nodes(self, member) -> set[str]:
        """Returns the nodes granted to the member, or any of their roles."""
        guild_id = member.guild.id
        nodes = set(await self._get_nodes(guild_id, SUBJECT_USER, member.id))
        for role in getattr(member, "roles", ()):
            nodes |= await self._get_nodes(guild_id, SUBJECT_ROLE, role.id)
        return nodes

    async def check_permission(self, member, node: str) -> bool:
        """Whether the member has the permission node.

           Guild administrators and owners of the ownership node have every
           permission.
        """
        guild_permissions = getattr(member, "guild_permissions", None)
        if guild_permissions is not None and guild_permissions.administrator:
            return True
        nodes = await self.get_granted_nodes(member)
        return node in nodes or constants.OWNERSHIP_NODE in nodes

    async def any_of(self, member, *nodes: str) -> bool:
        for node in nodes:
            if await self.check_permission(member, node):
                return True
        return False

    async def all_of(self, member, *nodes: str) -> bool:
        for node in nodes:
            if not await self.check_permission(member, node):
                return False
        return True

    async def grant_permission(self, guild_id: int, subject_type: str,
                               subject_id: int, node: str) -> bool:
        """Returns whether the node wasn't already granted."""
        assert subject_type in SUBJECT_TYPES
        granted = await self.db.add_permission(guild_id, subject_type,
                                               subject_id, node)
        self._cache.pop((guild_id, subject_type, subject_id), None)
        logger.info("Granted %s to %s %s of guild %s", node, subject_type,
                    subject_id, guild_id)
        return granted

    async def revoke_permission(self, guild_id: int, subject_type: str,
                                subject_id: int, node: str) -> bool:
        """Returns whether the node was granted."""
        assert subject_type in SUBJECT_TYPES
        removed = await self.db.remove_permissions(guild_id, subject_type,
                                                   subject_id, node)
        self._cache.pop((guild_id, subject_type, subject_id), None)
        logger.info("Revoked %s from %s %s of guild %s", node, subject_type,
                    subject_id, guild_id)
        return removed > 0

    async def clear_permissions(self, guild_id: int, subject_type: str,
                                subject_id: int) -> int:
        """Revokes every node of the subject. Returns the number revoked."""
        assert subject_type in SUBJECT_TYPES
        removed = await self.db.remove_permissions(guild_id, subject_type,
                                                   subject_id)
        self._cache.pop((guild_id, subject_type, subject_id), None)
        return removed
