"""Slash commands for managing the permission grants."""

import discord
from discord.ext import commands

from teamdraft import constants
from teamdraft import embeds
from teamdraft.permissions import SUBJECT_ROLE, SUBJECT_USER


class PermissionsCog(commands.Cog):
    """Lists, grants and revokes permission nodes of users and roles."""

    perm = discord.SlashCommandGroup("perm", "Manages permissions")

    def __init__(self, parent_bot, permissions):
        self.bot = parent_bot
        self.permissions = permissions
        permissions.register_permission(
            constants.PERM_PERMISSIONS,
            "Allows managing permissions using the perm command")

    async def _is_allowed(self, ctx):
        if await self.permissions.check_permission(
                ctx.author, constants.PERM_PERMISSIONS):
            return True
        await ctx.respond("You don't have permission to manage permissions",
                          ephemeral=True)
        return False

    async def _subject(self, ctx, user, role):
        """Returns the (subject type, subject) of exactly one user or role."""
        if (user is None) == (role is None):
            await ctx.respond("Please specify either a user or a role",
                              ephemeral=True)
            return None, None
        if user is not None:
            return SUBJECT_USER, user
        return SUBJECT_ROLE, role

    async def _is_known_node(self, ctx, node):
        known = {x for x, _ in self.permissions.get_permissions()}
        if node in known or node == constants.OWNERSHIP_NODE:
            return True
        await ctx.respond(f"Unknown permission node: `{node}`, see "
                          "`/perm list` for the available nodes",
                          ephemeral=True)
        return False

    @perm.command(name="list", description="Lists the permission nodes")
    async def perm_list(
        self, ctx,
        page: discord.Option(int, "Page number", required=False, default=1),
    ):
        if not await self._is_allowed(ctx):
            return
        await ctx.respond(embed=embeds.permissions_embed(
            self.permissions.get_permissions(), page))

    @perm.command(name="grant", description="Grants a permission node")
    async def perm_grant(
        self, ctx,
        node: discord.Option(str, "Permission node"),
        user: discord.Option(discord.Member, required=False, default=None),
        role: discord.Option(discord.Role, required=False, default=None),
    ):
        if not await self._is_allowed(ctx):
            return
        if not await self._is_known_node(ctx, node):
            return
        subject_type, subject = await self._subject(ctx, user, role)
        if subject is None:
            return
        if await self.permissions.grant_permission(
                ctx.guild.id, subject_type, subject.id, node):
            await ctx.respond(f"Granted `{node}` to {subject.mention}")
        else:
            await ctx.respond(f"{subject.mention} already has `{node}`",
                              ephemeral=True)

    @perm.command(name="revoke", description="Revokes a permission node")
    async def perm_revoke(
        self, ctx,
        node: discord.Option(str, "Permission node"),
        user: discord.Option(discord.Member, required=False, default=None),
        role: discord.Option(discord.Role, required=False, default=None),
    ):
        if not await self._is_allowed(ctx):
            return
        subject_type, subject = await self._subject(ctx, user, role)
        if subject is None:
            return
        if await self.permissions.revoke_permission(
                ctx.guild.id, subject_type, subject.id, node):
            await ctx.respond(f"Revoked `{node}` from {subject.mention}")
        else:
            await ctx.respond(f"{subject.mention} doesn't have `{node}`",
                              ephemeral=True)

    @perm.command(name="clear", description="Revokes all permission nodes")
    async def perm_clear(
        self, ctx,
        user: discord.Option(discord.Member, required=False, default=None),
        role: discord.Option(discord.Role, required=False, default=None),
    ):
        if not await self._is_allowed(ctx):
            return
        subject_type, subject = await self._subject(ctx, user, role)
        if subject is None:
            return
        count = await self.permissions.clear_permissions(
            ctx.guild.id, subject_type, subject.id)
        await ctx.respond(f"Revoked {count} permission(s) from "
                          f"{subject.mention}")
