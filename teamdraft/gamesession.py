"""The team draft of one command channel: two team leaders take turns picking
   players from the lobby voice channel, and the bot moves the players
   between the lobby and their team voice channels.
"""

import asyncio
from dataclasses import dataclass, field
import logging
import random
from typing import Any, Iterator, Optional

import discord

from teamdraft import constants
from teamdraft import errors

logger = logging.getLogger(__name__)


@dataclass
class TeamMember:
    """A drafted player, and their hero for the "ow_mysteryHeroes" rule."""
    member: Any
    hero: Optional[str] = None


@dataclass
class TeamSlot:
    """A team's leader, and its members in pick order."""
    leader: Any = None
    leader_hero: Optional[str] = None
    # Dicts preserve insertion order, which is the pick order.
    members: dict[int, TeamMember] = field(default_factory=dict)

    def __contains__(self, member) -> bool:
        return ((self.leader is not None and self.leader.id == member.id)
                or member.id in self.members)

    def __iter__(self) -> Iterator[Any]:
        """Iterates the leader (if any), followed by the members."""
        if self.leader is not None:
            yield self.leader
        for entry in self.members.values():
            yield entry.member


def other_team(team_name: str) -> str:
    return "team2" if team_name == "team1" else "team1"


def check_team_name(team_name: str) -> None:
    if team_name not in constants.TEAM_NAMES:
        raise errors.InvalidTeamNameError(team_name)


class GameSession():
    """Object for containing and operating on one command channel's team
       draft.

       The session methods don't lock by themselves. Command handlers hold
       the session's lock for the duration of a command, so that commands
       interleaving at await points can't both act on the same team state.
    """
    # pylint: disable=too-many-instance-attributes
    def __init__(self, guild, cmd_channel_id: int, game_rules, channels):
        self.guild = guild
        self.cmd_channel_id = cmd_channel_id
        self.game_rules = game_rules
        self.channels = channels
        self.initialized = False
        self.started = False
        self.last_turn: Optional[str] = None
        self.lock = asyncio.Lock()
        self.teams: dict[str, TeamSlot] = {}
        self.reset_teams()

    @property
    def guild_id(self) -> int:
        return self.guild.id

    def reset_teams(self) -> None:
        """Empties both teams, and restarts the pick order."""
        self.teams = {team_name: TeamSlot()
                      for team_name in constants.TEAM_NAMES}
        self.last_turn = None

    def team_of(self, member) -> Optional[str]:
        """Returns the team whose member list has this member, if any.
           Team leaders are not on their team's member list.
        """
        for team_name, slot in self.teams.items():
            if member.id in slot.members:
                return team_name
        return None

    def leader_of(self, member) -> Optional[str]:
        """Returns the team this member leads, if any."""
        for team_name, slot in self.teams.items():
            if slot.leader is not None and slot.leader.id == member.id:
                return team_name
        return None

    def is_assigned(self, member) -> bool:
        return any(member in slot for slot in self.teams.values())

    def set_leader(self, team_name: str, member) -> None:
        """Sets the team leader. If the member was on a team's member list,
           they're removed from it.
        """
        check_team_name(team_name)
        enemy_leader = self.teams[other_team(team_name)].leader
        if enemy_leader is not None and enemy_leader.id == member.id:
            raise errors.DuplicatePlayerError(
                f"{member.mention} is already the leader of "
                f"{constants.TEAM_NAMES[other_team(team_name)]}")
        for slot in self.teams.values():
            slot.members.pop(member.id, None)
        self.teams[team_name].leader = member
        self.teams[team_name].leader_hero = None

    def pick_random_team_leader(self, team_name: str, member_pool) -> Any:
        """Sets a random member of the pool as the team leader.

           The other team's leader is never picked. The caller's pool is
           left untouched.
        """
        check_team_name(team_name)
        leader = self._draw_leader(member_pool,
                                   self.teams[other_team(team_name)].leader)
        self.set_leader(team_name, leader)
        return leader

    @staticmethod
    def _draw_leader(member_pool, excluded=None) -> Any:
        pool = [m for m in member_pool
                if excluded is None or m.id != excluded.id]
        if not pool:
            raise errors.NotEnoughPlayersError(
                constants.MSG_NOT_ENOUGH_PLAYERS_RANDOM_LEADER)
        return random.choice(pool)

    async def pick_random_heroes(self, team_name: str) -> None:
        """Gives everybody on the team a random hero. Unless the
           "ow_noLimits" rule is enabled, a hero is given only once per team.
        """
        check_team_name(team_name)
        no_limits = await self.game_rules.is_enabled("ow_noLimits")
        pool = list(constants.OW_HEROES)

        def draw():
            if not pool:
                pool.extend(constants.OW_HEROES)
            hero = random.choice(pool)
            if not no_limits:
                pool.remove(hero)
            return hero

        slot = self.teams[team_name]
        if slot.leader is not None:
            slot.leader_hero = draw()
        for entry in slot.members.values():
            entry.hero = draw()

    async def team_size_cap(self) -> Optional[int]:
        """Returns the "maxTeamMembers" value, or None if it's disabled."""
        rule = await self.game_rules.get_rule("maxTeamMembers")
        return rule.value if rule.enabled else None

    async def teams_full(self) -> bool:
        """Whether both teams have reached the team size cap."""
        cap = await self.team_size_cap()
        return cap is not None and all(
            len(slot.members) >= cap for slot in self.teams.values())

    async def team_display_name(self, team_name: str) -> str:
        check_team_name(team_name)
        rule = await self.game_rules.get_rule(f"{team_name}Name")
        if rule.enabled and rule.value:
            return str(rule.value)
        return constants.TEAM_NAMES[team_name]

    async def add_to_team(self, member, team_name: str) -> None:
        """Adds the member as the last pick of the team, and moves them from
           the lobby to the team's voice channel.

           If the move fails, the pick is undone before the error is raised.
        """
        check_team_name(team_name)
        if self.is_assigned(member):
            raise errors.DuplicatePlayerError(
                f"{member.mention} is already on a team")
        cap = await self.team_size_cap()
        if cap is not None and len(self.teams[team_name].members) >= cap:
            display_name = await self.team_display_name(team_name)
            raise errors.TeamFullError(
                f"{display_name} is already full ({cap} players)")

        lobby = await self._voice_channel("lobby")
        team_channel = await self._voice_channel(team_name)
        self.teams[team_name].members[member.id] = TeamMember(member)
        logger.debug("Added %s to %s of %s/%s", member.id, team_name,
                     self.guild_id, self.cmd_channel_id)

        try:
            await self._move_members([(member, team_channel)],
                                     from_channel=lobby)
        except Exception:
            del self.teams[team_name].members[member.id]
            raise

    def remove_from_team(self, team_name: str, member) -> None:
        check_team_name(team_name)
        if member.id not in self.teams[team_name].members:
            raise errors.PlayerNotOnTeamError(
                f"{member.mention} is not on "
                f"{constants.TEAM_NAMES[team_name]}")
        del self.teams[team_name].members[member.id]

    def get_turn(self) -> str:
        """Returns the team whose leader picks next.

           The team with fewer members picks. If the teams are even, the
           team that didn't pick last does, starting with team2.
        """
        delta = (len(self.teams["team1"].members)
                 - len(self.teams["team2"].members))
        if delta >= 1:
            return "team2"
        if delta <= -1:
            return "team1"
        return "team1" if self.last_turn == "team2" else "team2"

    def set_last_turn(self, team_name: str) -> None:
        check_team_name(team_name)
        self.last_turn = team_name

    async def setup(self, should_reset: bool = True) -> None:
        """Initializes the game session. With the "randomLeaders" rule,
           both team leaders are picked from the lobby voice channel.
        """
        if self.started:
            raise errors.GameAlreadyStartedError()
        lobby = await self._voice_channel("lobby")

        leaders = None
        if await self.game_rules.is_enabled("randomLeaders"):
            # Both draws must succeed before the teams are touched.
            member_pool = [m for m in lobby.members if not m.bot]
            team1_leader = self._draw_leader(member_pool)
            leaders = (team1_leader,
                       self._draw_leader(member_pool, team1_leader))

        if should_reset:
            self.reset_teams()
        if leaders is not None:
            for slot in self.teams.values():
                slot.leader = None
            self.set_leader("team1", leaders[0])
            self.set_leader("team2", leaders[1])

        self.initialized = True
        logger.info("Game session %s/%s initialized", self.guild_id,
                    self.cmd_channel_id)

    async def start(self) -> None:
        """Starts the game session, moving everybody to their team's voice
           channel.
        """
        if not self.initialized:
            raise errors.NoGameSessionError()
        if self.started:
            raise errors.GameAlreadyStartedError()

        if await self.game_rules.is_enabled("ow_mysteryHeroes"):
            for team_name in self.teams:
                await self.pick_random_heroes(team_name)

        lobby = await self._voice_channel("lobby")
        moves = []
        for team_name, slot in self.teams.items():
            team_channel = await self._voice_channel(team_name)
            moves.extend((member, team_channel) for member in slot)
        await self._move_members(moves, from_channel=lobby)

        self.started = True
        logger.info("Game session %s/%s started", self.guild_id,
                    self.cmd_channel_id)

    async def end(self) -> None:
        """Terminates the game session, moving everybody back to the lobby.

           The session is reset even if some of the moves failed; the first
           failure is raised afterwards.
        """
        try:
            lobby = await self._voice_channel("lobby")
            moves = [(member, lobby)
                     for slot in self.teams.values() for member in slot]
            await self._move_members(moves)
        finally:
            self.reset_teams()
            self.initialized = False
            self.started = False
            logger.info("Game session %s/%s ended", self.guild_id,
                        self.cmd_channel_id)

    async def _voice_channel(self, channel_name: str):
        return await self.channels.resolve_voice_channel(
            self.guild, self.cmd_channel_id, channel_name)

    async def _move_members(self, moves, from_channel=None) -> None:
        """Moves the members to their channels concurrently.

           With from_channel, only members currently in that channel are
           moved, unless the "forceVoice" rule is enabled. Members that
           aren't connected to voice can't be moved, and are skipped.
           Every move is attempted; the failures are raised afterwards.
        """
        force_voice = await self.game_rules.is_enabled("forceVoice")
        timeout_rule = await self.game_rules.get_rule("moveTimeout")
        timeout = timeout_rule.value if timeout_rule.enabled else None

        def should_move(member, channel):
            voice = getattr(member, "voice", None)
            if voice is None or voice.channel is None:
                return False
            if voice.channel.id == channel.id:
                return False
            return (from_channel is None or force_voice
                    or voice.channel.id == from_channel.id)

        pending = [(member, channel) for member, channel in moves
                   if should_move(member, channel)]
        results = await asyncio.gather(
            *(asyncio.wait_for(member.move_to(channel), timeout)
              for member, channel in pending),
            return_exceptions=True)

        failures = []
        for (member, channel), res in zip(pending, results):
            if isinstance(res, BaseException):
                logger.warning("Failed to move %s to voice channel %s: %r",
                               member.id, channel.id, res)
                failures.append(res)
        if not failures:
            return
        for err in failures:
            if isinstance(err, discord.Forbidden):
                raise errors.MissingMovePermissionError() from err
        raise failures[0]
