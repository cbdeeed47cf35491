"""Slash commands for configuring the command and voice channels."""

import discord
from discord.ext import commands

from teamdraft import constants


class ChannelSettingsCog(commands.Cog):
    """Registers command channels, and their lobby and team voice channels.
    """

    channel = discord.SlashCommandGroup(
        "channel", "Manages the command and voice channel settings")

    def __init__(self, parent_bot, permissions, guild_settings, sessions):
        self.bot = parent_bot
        self.permissions = permissions
        self.guild_settings = guild_settings
        self.sessions = sessions
        permissions.register_permission(
            constants.PERM_CHANNELS,
            "Allows using all the commands related to channel configuration")

    async def _is_allowed(self, ctx, action):
        if await self.permissions.check_permission(ctx.author,
                                                   constants.PERM_CHANNELS):
            return True
        await ctx.respond(f"You don't have permission to {action}",
                          ephemeral=True)
        return False

    async def _author_voice_channel(self, ctx, target):
        """Returns the voice channel the invoker is connected to."""
        voice = ctx.author.voice
        if voice is None or voice.channel is None:
            await ctx.respond("You must be connected to a voice channel to "
                              f"set the voice channel for {target}",
                              ephemeral=True)
            return None
        return voice.channel

    @channel.command(name="set", description="Sets this text channel as a "
                                             "command channel")
    async def channel_set(self, ctx):
        if not await self._is_allowed(ctx, "set the command channel"):
            return
        if await self.guild_settings.add_command_channel(ctx.guild.id,
                                                         ctx.channel.id):
            await ctx.respond("Command channel successfully set")
        else:
            await ctx.respond("This text channel already is a command channel",
                              ephemeral=True)

    @channel.command(name="lobby", description="Sets your current voice "
                                               "channel as the lobby")
    async def channel_lobby(self, ctx):
        if not await self._is_allowed(ctx, "set the lobby voice channel"):
            return
        voice_channel = await self._author_voice_channel(ctx, "the lobby")
        if voice_channel is None:
            return
        await self.guild_settings.set_lobby_voice_channel(
            ctx.guild.id, ctx.channel.id, voice_channel.id)
        await ctx.respond("Lobby voice channel successfully set")

    @channel.command(name="voice", description="Sets your current voice "
                                               "channel as a team's channel")
    async def channel_voice(
        self, ctx,
        team: discord.Option(str, "Team to set the voice channel for",
                             choices=list(constants.TEAM_NAMES)),
    ):
        if not await self._is_allowed(ctx, "set team voice channels"):
            return
        voice_channel = await self._author_voice_channel(
            ctx, constants.TEAM_NAMES.get(team, team))
        if voice_channel is None:
            return
        await self.guild_settings.set_team_voice_channel(
            ctx.guild.id, ctx.channel.id, voice_channel.id, team)
        await ctx.respond("Team voice channel successfully set for "
                          f"{constants.TEAM_NAMES[team]}")

    @channel.command(name="delete", description="Unregisters this text "
                                                "channel as a command channel")
    async def channel_delete(self, ctx):
        if not await self._is_allowed(ctx, "remove command channels"):
            return
        session = self.sessions.get_sessions(ctx.guild.id).get(ctx.channel.id)
        if session is not None and session.initialized:
            await ctx.respond("Unable to delete the command channel during "
                              "an on-going game session", ephemeral=True)
            return
        await self.guild_settings.remove_command_channel(ctx.guild.id,
                                                         ctx.channel.id)
        self.sessions.remove_session(ctx.guild.id, ctx.channel.id)
        await ctx.respond("Command channel successfully deleted")
