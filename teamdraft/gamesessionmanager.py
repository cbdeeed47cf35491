"""Registry of the game sessions, one per (guild, command channel) pair."""

import logging

from teamdraft.gamerulemanager import GameRuleManager
from teamdraft.gamesession import GameSession

logger = logging.getLogger(__name__)


class GameSessionManager():
    """Creates the game sessions on first access, and keeps them for the
       lifetime of the bot. Sessions are only dropped when their command
       channel is unregistered, because the draft state isn't persisted
       and would be lost otherwise.
    """
    def __init__(self, db, guild_settings):
        self.db = db
        self.guild_settings = guild_settings
        # guild id -> command channel id -> session
        self.server_sessions: dict[int, dict[int, GameSession]] = {}

    def get_session(self, guild, cmd_channel_id: int) -> GameSession:
        sessions = self.get_sessions(guild.id)
        session = sessions.get(cmd_channel_id)
        if session is None:
            session = GameSession(
                guild=guild,
                cmd_channel_id=cmd_channel_id,
                game_rules=GameRuleManager(self.db, guild.id, cmd_channel_id),
                channels=self.guild_settings,
            )
            sessions[cmd_channel_id] = session
            logger.debug("Created game session %s/%s", guild.id,
                         cmd_channel_id)
        return session

    def get_sessions(self, guild_id: int) -> dict[int, GameSession]:
        return self.server_sessions.setdefault(guild_id, {})

    def remove_session(self, guild_id: int, cmd_channel_id: int) -> bool:
        """Forgets the session. Returns whether there was one."""
        sessions = self.server_sessions.get(guild_id, {})
        removed = sessions.pop(cmd_channel_id, None) is not None
        if not sessions:
            self.server_sessions.pop(guild_id, None)
        return removed
