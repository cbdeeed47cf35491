import pytest
import pytest_asyncio

from fakes import FakeGuild, FakeMember, MemoryRuleStore, StaticChannels
from teamdraft import database
from teamdraft.gamerulemanager import GameRuleManager
from teamdraft.gamesession import GameSession

GUILD_ID = 1
CMD_CHANNEL_ID = 10


def pytest_addoption(parser):
    parser.addoption(
        "--dbdrivers",
        action="store",
        default="sqlite3",
        help="which DB drivers to test",
    )


@pytest.fixture
def dbdrivers(request):
    return request.config.getoption("--dbdrivers")


@pytest.fixture
def guild():
    guild = FakeGuild(GUILD_ID)
    guild.add_voice_channel(100, "Lobby")
    guild.add_voice_channel(101, "Team 1")
    guild.add_voice_channel(102, "Team 2")
    return guild


@pytest.fixture
def lobby(guild):
    return guild.get_channel(100)


@pytest.fixture
def make_members(guild):
    """Creates players with consecutive IDs, optionally connected to voice.
    """
    counter = iter(range(1000, 10 ** 6))

    def make(count, channel=None):
        members = []
        for _ in range(count):
            member = FakeMember(next(counter), guild=guild)
            if channel is not None:
                member.connect(channel)
            members.append(member)
        return members
    return make


@pytest.fixture
def rule_store():
    return MemoryRuleStore()


@pytest.fixture
def channels(guild):
    return StaticChannels(lobby=guild.get_channel(100),
                          team1=guild.get_channel(101),
                          team2=guild.get_channel(102))


@pytest.fixture
def session(guild, rule_store, channels):
    return GameSession(guild, CMD_CHANNEL_ID,
                       GameRuleManager(rule_store, GUILD_ID, CMD_CHANNEL_ID),
                       channels)


@pytest_asyncio.fixture
async def db():
    driver = database.Sqlite3(database=":memory:")
    driver.create_tables()
    yield driver
    driver.close()
