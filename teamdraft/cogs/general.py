"""General purpose commands and listeners: ping, help, banter and the
   command error handler.
"""

import logging
import time

import discord
from discord.ext import commands
import pendulum

from teamdraft.config import cfg
from teamdraft import embeds
from teamdraft import errors

logger = logging.getLogger(__name__)


class GeneralCog(commands.Cog):
    """Ping and help commands."""

    def __init__(self, parent_bot):
        self.bot = parent_bot

    @discord.slash_command(description="Test if bot is active")
    async def ping(self, ctx):
        """Just a standard Discord bot ping test command for confirming
           whether the bot is online or not.
        """
        await ctx.respond("pong", ephemeral=True)

    @discord.slash_command(name="help", description="Lists the commands")
    async def help_command(
        self, ctx,
        page: discord.Option(int, "Page number", required=False, default=1),
    ):
        command_list = sorted(
            (cmd.qualified_name, cmd.description)
            for cmd in self.bot.walk_application_commands()
            if isinstance(cmd, discord.SlashCommand))
        await ctx.respond(embed=embeds.help_embed(command_list, page),
                          ephemeral=True)


class BanterCog(commands.Cog):
    """Answers "6v6" with "v6v?", and the other way around."""

    def __init__(self, parent_bot):
        self.bot = parent_bot
        self.last_reply: dict[int, float] = {}

    @staticmethod
    def reply_for(content: str):
        content = content.lower().strip()
        if "6v6" in content:
            return "v6v?"
        if "v6v" in content:
            return "6v6?"
        return None

    @commands.Cog.listener()
    async def on_message(self, msg):
        if msg.author.bot:
            return
        reply = self.reply_for(msg.content)
        if reply is None:
            return
        now = time.monotonic()
        last = self.last_reply.get(msg.channel.id)
        if (last is not None and
                now - last < cfg("TEAMDRAFT_BANTER_COOLDOWN_SECS")):
            return
        self.last_reply[msg.channel.id] = now
        await msg.channel.send(reply)


class ErrorHandlerCog(commands.Cog):
    """Helper class for error handling."""

    def __init__(self, parent_bot):
        self.bot = parent_bot

    @commands.Cog.listener()
    async def on_application_command_error(self, ctx, err):
        """Error handler for bot commands."""
        original = getattr(err, "original", err)
        # Expected failures of the draft logic; tell the user what went wrong.
        if isinstance(original, errors.TeamDraftError):
            if isinstance(original, errors.StoreError):
                logger.error("Database error in /%s: %r",
                             ctx.command.qualified_name, original.original)
            await ctx.respond(str(original),
                              ephemeral=cfg("TEAMDRAFT_EPHEMERAL_MESSAGES"))
            return
        # This command is on cooldown from being used too often.
        if isinstance(err, commands.CommandOnCooldown):
            # Returns a human readable "<so and so long> before" string.
            retry_after = pendulum.now().diff_for_humans(
                pendulum.now().add(seconds=err.retry_after)
            )
            await ctx.respond(
                f"{ctx.author.mention} You're doing it too much! Please wait "
                f"{retry_after} trying again.", ephemeral=True)
            return
        # Something else happened! Just raise the error for the logs to catch.
        logger.error("Unhandled error in /%s", ctx.command.qualified_name,
                     exc_info=original)
        raise err
