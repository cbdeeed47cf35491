"""Guild specific channel settings: the registered command channels, and the
   lobby and team voice channels of each command channel.
"""

import logging

from teamdraft import constants
from teamdraft import errors

logger = logging.getLogger(__name__)

SETTING_LOBBY = "lobbyChannel"
SETTING_VOICE = "voiceChannel"


class GuildSettingsManager():
    """Reads and writes the channel settings, and maps the logical channel
       names "lobby", "team1" and "team2" to the guild's voice channels.
    """
    def __init__(self, db):
        self.db = db

    async def add_command_channel(self, guild_id: int,
                                  channel_id: int) -> bool:
        """Returns whether the channel was newly registered."""
        added = await self.db.add_command_channel(guild_id, channel_id)
        if added:
            logger.info("Registered command channel %s/%s", guild_id,
                        channel_id)
        return added

    async def remove_command_channel(self, guild_id: int,
                                     cmd_channel_id: int) -> None:
        """Unregisters the command channel along with its voice channels."""
        if not await self.db.remove_command_channel(guild_id, cmd_channel_id):
            raise errors.CommandChannelNotRegisteredError()
        logger.info("Unregistered command channel %s/%s", guild_id,
                    cmd_channel_id)

    async def get_command_channels(self, guild_id: int) -> list[int]:
        return await self.db.get_command_channels(guild_id)

    async def is_command_channel_registered(self, guild_id: int,
                                            channel_id: int) -> bool:
        return channel_id in await self.db.get_command_channels(guild_id)

    async def _ensure_registered(self, guild_id, cmd_channel_id):
        if not await self.is_command_channel_registered(guild_id,
                                                        cmd_channel_id):
            raise errors.CommandChannelNotRegisteredError()

    async def set_lobby_voice_channel(self, guild_id: int,
                                      cmd_channel_id: int,
                                      voice_channel_id: int) -> None:
        await self._ensure_registered(guild_id, cmd_channel_id)
        await self.db.set_channel_setting(guild_id, cmd_channel_id,
                                          SETTING_LOBBY, "", voice_channel_id)

    async def set_team_voice_channel(self, guild_id: int,
                                     cmd_channel_id: int,
                                     voice_channel_id: int,
                                     team_name: str) -> None:
        if team_name not in constants.TEAM_NAMES:
            raise errors.InvalidTeamNameError(team_name)
        await self._ensure_registered(guild_id, cmd_channel_id)
        await self.db.set_channel_setting(guild_id, cmd_channel_id,
                                          SETTING_VOICE, team_name,
                                          voice_channel_id)

    async def get_voice_channel_id(self, guild_id: int, cmd_channel_id: int,
                                   channel_name: str) -> int:
        """Returns the voice channel ID of "lobby", "team1" or "team2".

           Raises ChannelNotConfiguredError if it hasn't been set.
        """
        if channel_name not in constants.VOICE_CHANNEL_NAMES:
            raise ValueError(f"Invalid channel setting: {channel_name}")
        if channel_name == "lobby":
            setting, team_name = SETTING_LOBBY, ""
        else:
            setting, team_name = SETTING_VOICE, channel_name

        await self._ensure_registered(guild_id, cmd_channel_id)
        value = await self.db.get_channel_setting(guild_id, cmd_channel_id,
                                                  setting, team_name)
        if value is None:
            raise errors.ChannelNotConfiguredError(channel_name)
        return value

    async def resolve_voice_channel(self, guild, cmd_channel_id: int,
                                    channel_name: str):
        """Returns the guild's voice channel for the logical channel name.

           A channel that has been deleted from the guild since it was set
           counts as not configured.
        """
        channel_id = await self.get_voice_channel_id(guild.id, cmd_channel_id,
                                                     channel_name)
        channel = guild.get_channel(channel_id)
        if channel is None:
            raise errors.ChannelNotConfiguredError(channel_name)
        return channel
