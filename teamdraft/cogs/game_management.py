"""Slash commands for running the team draft."""

import logging

import discord
from discord.ext import commands

from teamdraft import constants
from teamdraft import embeds
from teamdraft import errors
from teamdraft import gamerules

logger = logging.getLogger(__name__)

TEAM_OPTION_CHOICES = list(constants.TEAM_NAMES)


class GameManagementCog(commands.Cog):
    """Game session commands: setup, draft picks, start and end."""

    gamerule = discord.SlashCommandGroup("gamerule", "Manages game rules")

    def __init__(self, parent_bot, permissions, guild_settings, sessions):
        self.bot = parent_bot
        self.permissions = permissions
        self.guild_settings = guild_settings
        self.sessions = sessions
        permissions.register_permission(
            constants.PERM_ADMIN, "Allows administrating game sessions")
        permissions.register_permission(
            constants.PERM_SETUP, "Allows setting up game sessions")
        permissions.register_permission(
            constants.PERM_SETLEADER, "Allows setting team leaders")
        permissions.register_permission(
            constants.PERM_GAMERULE, "Allows changing the game rules")

    async def get_session(self, ctx):
        """Returns the game session of the command channel."""
        if not await self.guild_settings.is_command_channel_registered(
                ctx.guild.id, ctx.channel.id):
            raise errors.CommandChannelNotRegisteredError()
        return self.sessions.get_session(ctx.guild, ctx.channel.id)

    def _turn_message(self, session, prefix="It's"):
        turn = session.get_turn()
        leader = session.teams[turn].leader
        if leader is None:
            return ""
        return f"{prefix} {leader.mention}'s turn to pick"

    async def _auto_start(self, ctx, session) -> bool:
        """Starts the game session if the "autoStart" rule says so."""
        if session.started:
            return False
        if not await session.game_rules.is_enabled("autoStart"):
            return False
        if not await session.teams_full():
            return False
        await session.start()
        await ctx.respond("Both teams are full, game session started!",
                          embed=await embeds.teams_embed(session))
        return True

    @discord.slash_command(description="Initializes (or resets) the game "
                                       "session")
    async def setup(self, ctx):
        if not await self.permissions.any_of(ctx.author, constants.PERM_SETUP,
                                             constants.PERM_ADMIN):
            await ctx.respond("You don't have permission to setup a game "
                              "session", ephemeral=True)
            return
        session = await self.get_session(ctx)
        async with session.lock:
            await session.setup()
            msg = "Game session initialized!"
            if await session.game_rules.is_enabled("randomLeaders"):
                for team_name, slot in session.teams.items():
                    msg += (f"\n{slot.leader.mention} was randomly chosen as "
                            "leader for "
                            f"{await session.team_display_name(team_name)}")
                first = session.teams[session.get_turn()].leader
                msg += f"\n\n{first.mention} gets to pick first"
        await ctx.respond(msg)

    @discord.slash_command(description="Sets the team leader for a team, "
                                       "or picks a random one from the lobby")
    async def setleader(
        self, ctx,
        team: discord.Option(str, "Team to set the leader for",
                             choices=TEAM_OPTION_CHOICES),
        member: discord.Option(discord.Member, "Leave empty for a random "
                               "leader", required=False, default=None),
    ):
        if not await self.permissions.any_of(ctx.author,
                                             constants.PERM_SETLEADER,
                                             constants.PERM_ADMIN):
            await ctx.respond("You don't have permission to set team leaders",
                              ephemeral=True)
            return
        session = await self.get_session(ctx)
        async with session.lock:
            if not session.initialized:
                await ctx.respond(constants.MSG_NO_GAME_SESSION,
                                  ephemeral=True)
                return
            if member is None:
                if session.started:
                    await ctx.respond("You can't reroll team leaders when the "
                                      "game session has already started",
                                      ephemeral=True)
                    return
                lobby = await self.guild_settings.resolve_voice_channel(
                    ctx.guild, ctx.channel.id, "lobby")
                current = session.teams[team].leader
                member_pool = [m for m in lobby.members if not m.bot and (
                    current is None or m.id != current.id)]
                drafted = {member_id: team_name
                           for team_name, slot in session.teams.items()
                           for member_id in slot.members}
                member = session.pick_random_team_leader(team, member_pool)
                previous_team = drafted.get(member.id)
            else:
                previous_team = session.team_of(member)
                session.set_leader(team, member)
            team_display_name = await session.team_display_name(team)

        if previous_team is not None:
            msg = (f"{member.mention} has been removed from "
                   f"{await session.team_display_name(previous_team)} and "
                   f"set as the team leader for {team_display_name}")
        else:
            msg = (f"{member.mention} has been set as the team leader for "
                   f"{team_display_name}")
        await ctx.respond(msg)

    @discord.slash_command(description="Adds the target user to the team")
    async def pick(
        self, ctx,
        member: discord.Option(discord.Member, "Player to pick"),
        team: discord.Option(str, "Force the pick for a team (requires "
                             f"{constants.PERM_ADMIN})",
                             choices=TEAM_OPTION_CHOICES, required=False,
                             default=None),
    ):
        session = await self.get_session(ctx)
        async with session.lock:
            if not session.initialized:
                await ctx.respond(constants.MSG_NO_GAME_SESSION,
                                  ephemeral=True)
                return
            team1_leader = session.teams["team1"].leader
            team2_leader = session.teams["team2"].leader
            if team1_leader is None or team2_leader is None:
                await ctx.respond("Both team leaders need to be set before "
                                  "picking", ephemeral=True)
                return

            if team is not None:
                if not await self.permissions.check_permission(
                        ctx.author, constants.PERM_ADMIN):
                    await ctx.respond("You don't have permission to force "
                                      "team picks", ephemeral=True)
                    return
                await ctx.defer()
                await session.add_to_team(member, team)
                msg = (f"{member.mention} was added to "
                       f"{await session.team_display_name(team)}\n"
                       f"{self._turn_message(session)}")
            else:
                leader_team = session.leader_of(ctx.author)
                if leader_team is None:
                    await ctx.respond("Can't add players to team, you are "
                                      "not the team leader", ephemeral=True)
                    return
                turn = session.get_turn()
                if turn != leader_team:
                    await ctx.respond(
                        self._turn_message(session, "It's currently"),
                        ephemeral=True)
                    return
                await ctx.defer()
                await session.add_to_team(member, leader_team)
                session.set_last_turn(leader_team)
                prefix = "It's still" if session.get_turn() == turn else "It's"
                msg = (f"{member.mention} was added to "
                       f"{await session.team_display_name(leader_team)}\n"
                       f"{self._turn_message(session, prefix)}")
            await ctx.respond(msg)
            await self._auto_start(ctx, session)

    @discord.slash_command(description="Removes the target user from their "
                                       "team")
    async def unpick(
        self, ctx,
        member: discord.Option(discord.Member, "Player to remove"),
    ):
        session = await self.get_session(ctx)
        async with session.lock:
            if not session.initialized:
                await ctx.respond(constants.MSG_NO_GAME_SESSION,
                                  ephemeral=True)
                return
            if session.leader_of(member) is not None:
                await ctx.respond("You can't unpick a team leader",
                                  ephemeral=True)
                return
            target_team = session.team_of(member)
            if target_team is None:
                await ctx.respond(f"{member.mention} is not on a team",
                                  ephemeral=True)
                return
            leader = session.teams[target_team].leader
            is_leader = leader is not None and leader.id == ctx.author.id
            if not is_leader and not await self.permissions.check_permission(
                    ctx.author, constants.PERM_ADMIN):
                await ctx.respond(f"Can't remove {member.mention} from the "
                                  "team, as you are not the team leader",
                                  ephemeral=True)
                return
            session.remove_from_team(target_team, member)
            msg = (f"{member.mention} was removed from "
                   f"{await session.team_display_name(target_team)}\n"
                   f"{self._turn_message(session)}")
        await ctx.respond(msg)

    @commands.cooldown(rate=1, per=5, type=commands.BucketType.channel)
    @discord.slash_command(description="Displays the teams and their members")
    async def teams(self, ctx):
        session = await self.get_session(ctx)
        if not session.initialized:
            await ctx.respond(constants.MSG_NO_GAME_SESSION, ephemeral=True)
            return
        await ctx.respond(embed=await embeds.teams_embed(session))

    @discord.slash_command(description="Starts the game session")
    async def start(self, ctx):
        if not await self.permissions.any_of(ctx.author, constants.PERM_SETUP,
                                             constants.PERM_ADMIN):
            await ctx.respond("You don't have permission to start the game "
                              "session", ephemeral=True)
            return
        session = await self.get_session(ctx)
        async with session.lock:
            if not session.initialized:
                await ctx.respond(constants.MSG_NO_GAME_SESSION,
                                  ephemeral=True)
                return
            if session.started:
                await ctx.respond(constants.MSG_GAME_ALREADY_STARTED,
                                  ephemeral=True)
                return
            await ctx.defer()
            await session.start()
            await ctx.respond("Game session started!",
                              embed=await embeds.teams_embed(session))

    @discord.slash_command(description="Terminates the game session")
    async def end(self, ctx):
        if not await self.permissions.any_of(ctx.author, constants.PERM_SETUP,
                                             constants.PERM_ADMIN):
            await ctx.respond("You don't have permission to terminate the "
                              "game session", ephemeral=True)
            return
        session = await self.get_session(ctx)
        async with session.lock:
            if not session.initialized:
                await ctx.respond(constants.MSG_NO_GAME_SESSION,
                                  ephemeral=True)
                return
            await ctx.defer()
            await session.end()
        await ctx.respond("The game session has been terminated")

    async def _gamerule_session(self, ctx):
        """Returns the session if the invoker may manage its game rules."""
        if not await self.permissions.any_of(ctx.author,
                                             constants.PERM_GAMERULE,
                                             constants.PERM_ADMIN):
            await ctx.respond("You don't have permission to change the game "
                              "rules", ephemeral=True)
            return None
        return await self.get_session(ctx)

    async def _rules_locked(self, ctx, session) -> bool:
        """Must be called holding the session lock."""
        if not session.initialized:
            return False
        await ctx.respond("Unable to change game rules during setup or "
                          "during an on-going game session", ephemeral=True)
        return True

    @gamerule.command(name="list", description="Lists the game rules")
    async def gamerule_list(
        self, ctx,
        page: discord.Option(int, "Page number", required=False, default=1),
    ):
        session = await self._gamerule_session(ctx)
        if session is None:
            return
        rules = await session.game_rules.get_rules()
        await ctx.respond(embed=embeds.gamerules_embed(rules, page))

    @gamerule.command(name="show", description="Shows a game rule")
    async def gamerule_show(self, ctx, rule: discord.Option(str, "Rule name")):
        session = await self._gamerule_session(ctx)
        if session is None:
            return
        await ctx.respond(embed=embeds.gamerules_embed(
            [await session.game_rules.get_rule(rule)], 1))

    @gamerule.command(name="set", description="Sets the value of a game rule")
    async def gamerule_set(self, ctx, rule: discord.Option(str, "Rule name"),
                           value: discord.Option(str, "New value")):
        session = await self._gamerule_session(ctx)
        if session is None:
            return
        async with session.lock:
            if await self._rules_locked(ctx, session):
                return
            await session.game_rules.set_rule(rule, value)
            current = await session.game_rules.get_rule(rule)
        shown = current.enabled if current.value is None else current.value
        await ctx.respond(f"Game rule `{current.name}` set to `{shown}`")

    @gamerule.command(name="enable", description="Enables a game rule")
    async def gamerule_enable(self, ctx,
                              rule: discord.Option(str, "Rule name")):
        await self._set_enabled(ctx, rule, True)

    @gamerule.command(name="disable", description="Disables a game rule")
    async def gamerule_disable(self, ctx,
                               rule: discord.Option(str, "Rule name")):
        await self._set_enabled(ctx, rule, False)

    async def _set_enabled(self, ctx, rule, enabled):
        session = await self._gamerule_session(ctx)
        if session is None:
            return
        async with session.lock:
            if await self._rules_locked(ctx, session):
                return
            await session.game_rules.set_enabled(rule, enabled)
        state = "enabled" if enabled else "disabled"
        await ctx.respond(f"Game rule `{gamerules.by_name(rule).name}` "
                          f"{state}")
