import pytest

from teamdraft import errors
from teamdraft.gamesessionmanager import GameSessionManager
from teamdraft.guildsettings import GuildSettingsManager


@pytest.fixture
def guild_settings(db):
    return GuildSettingsManager(db)


@pytest.fixture
def sessions(db, guild_settings):
    return GameSessionManager(db, guild_settings)


async def configure(guild_settings, guild, cmd_channel_id=10):
    await guild_settings.add_command_channel(guild.id, cmd_channel_id)
    await guild_settings.set_lobby_voice_channel(guild.id, cmd_channel_id, 100)
    await guild_settings.set_team_voice_channel(guild.id, cmd_channel_id, 101,
                                                "team1")
    await guild_settings.set_team_voice_channel(guild.id, cmd_channel_id, 102,
                                                "team2")


@pytest.mark.asyncio
async def test_sessions_are_per_command_channel(sessions, guild):
    session = sessions.get_session(guild, 10)
    assert sessions.get_session(guild, 10) is session
    other = sessions.get_session(guild, 11)
    assert other is not session
    assert other.game_rules is not session.game_rules
    assert sessions.get_sessions(guild.id) == {10: session, 11: other}
    assert sessions.get_sessions(2) == {}


@pytest.mark.asyncio
async def test_remove_session(sessions, guild):
    session = sessions.get_session(guild, 10)
    assert sessions.remove_session(guild.id, 10) is True
    assert sessions.remove_session(guild.id, 10) is False
    assert sessions.get_session(guild, 10) is not session


@pytest.mark.asyncio
async def test_game_rules_persist_across_sessions(sessions, guild):
    await sessions.get_session(guild, 10).game_rules.set_rule(
        "maxTeamMembers", "2")
    sessions.remove_session(guild.id, 10)
    session = sessions.get_session(guild, 10)
    assert await session.game_rules.get_value("maxTeamMembers") == 2
    assert await sessions.get_session(guild, 11).game_rules.get_value(
        "maxTeamMembers") == 5


@pytest.mark.asyncio
async def test_full_draft(sessions, guild_settings, guild, lobby,
                          make_members):
    await configure(guild_settings, guild)
    session = sessions.get_session(guild, 10)
    await session.game_rules.set_rule("maxTeamMembers", "2")

    players = make_members(6, lobby)
    await session.setup()
    leaders = [session.teams["team1"].leader, session.teams["team2"].leader]
    assert set(leaders) <= set(players)
    assert leaders[0] is not leaders[1]

    pool = [m for m in players if m not in leaders]
    for member in pool:
        turn = session.get_turn()
        await session.add_to_team(member, turn)
        session.set_last_turn(turn)
        assert member.voice.channel.id == {"team1": 101, "team2": 102}[turn]
    assert await session.teams_full()
    assert [session.team_of(m) for m in pool] == [
        "team2", "team1", "team2", "team1"]

    await session.start()
    assert lobby.members == []
    await session.end()
    assert sorted(m.id for m in lobby.members) == sorted(
        m.id for m in players)
    assert not session.initialized


@pytest.mark.asyncio
async def test_setup_requires_channel_configuration(sessions, guild_settings,
                                                    guild):
    session = sessions.get_session(guild, 10)
    with pytest.raises(errors.CommandChannelNotRegisteredError):
        await session.setup()
    await guild_settings.add_command_channel(guild.id, 10)
    with pytest.raises(errors.ChannelNotConfiguredError):
        await session.setup()


@pytest.mark.asyncio
async def test_reregistered_channel_starts_with_default_rules(
        sessions, guild_settings, guild):
    await guild_settings.add_command_channel(guild.id, 10)
    await sessions.get_session(guild, 10).game_rules.set_rule(
        "maxTeamMembers", "2")
    await guild_settings.remove_command_channel(guild.id, 10)
    sessions.remove_session(guild.id, 10)

    await guild_settings.add_command_channel(guild.id, 10)
    rule = await sessions.get_session(guild, 10).game_rules.get_rule(
        "maxTeamMembers")
    assert (rule.enabled, rule.value) == (False, 5)
