#!/usr/bin/env python3

"""Discord bot for drafting two-team game sessions ("6v6").

   Players gather in the lobby voice channel, two team leaders take turns
   picking players, and the bot moves everybody to their team's voice channel
   for the game, and back to the lobby afterwards.

   Config values:
     The config values have been documented as comments in the config.yml
     file itself.
"""

# MIT License
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import logging

import discord
from discord.ext import commands

from teamdraft import __title__, __version__
from teamdraft.config import cfg
from teamdraft import cogs
from teamdraft import database
from teamdraft.gamesessionmanager import GameSessionManager
from teamdraft.guildsettings import GuildSettingsManager
from teamdraft.permissions import PermissionManager

logger = logging.getLogger(__name__)

assert discord.version_info.major == 2


def create_bot(db) -> commands.Bot:
    """Builds the bot, with all of its cogs wired to the database."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.voice_states = True  # for the lobby and team voice channels
    intents.guild_messages = True  # for the banter listener
    intents.message_content = True  # for the banter listener
    bot = commands.Bot(case_insensitive=True, intents=intents)

    permissions = PermissionManager(db)
    guild_settings = GuildSettingsManager(db)
    sessions = GameSessionManager(db, guild_settings)

    for cog in (
        cogs.GeneralCog(bot),
        cogs.BanterCog(bot),
        cogs.ErrorHandlerCog(bot),
        cogs.PermissionsCog(bot, permissions),
        cogs.ChannelSettingsCog(bot, permissions, guild_settings, sessions),
        cogs.GameManagementCog(bot, permissions, guild_settings, sessions),
    ):
        bot.add_cog(cog)
    return bot


def main():
    logging.basicConfig(
        level=logging.DEBUG if cfg("TEAMDRAFT_DEBUG") else logging.INFO,
        format="%(asctime)s:%(levelname)s:%(name)s: %(message)s")
    logger.info("Now running %s v.%s", __title__, __version__)

    db = database.connect()
    bot = create_bot(db)

    if cfg("TEAMDRAFT_DEBUG"):
        logger.debug("Intents (%s):", bot.intents)
        for intent, enabled in iter(bot.intents):
            if enabled:
                logger.debug("* %s", intent)

    try:
        bot.run(cfg("TEAMDRAFT_SECRET_TOKEN"))
    finally:
        db.close()


if __name__ == "__main__":
    main()
