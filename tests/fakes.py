"""Stand-ins for the Discord objects and stores the draft logic talks to."""

from types import SimpleNamespace

from teamdraft import errors


class FakeVoiceChannel:
    def __init__(self, channel_id, name):
        self.id = channel_id
        self.name = name
        self.members = []


class FakeMember:
    def __init__(self, member_id, name=None, bot=False, guild=None):
        self.id = member_id
        self.name = name if name is not None else f"player{member_id}"
        self.display_name = self.name
        self.mention = f"<@{member_id}>"
        self.bot = bot
        self.guild = guild
        self.roles = []
        self.guild_permissions = SimpleNamespace(administrator=False)
        self.voice = None
        self.move_error = None
        self.moves = []

    def connect(self, channel):
        if self.voice is not None:
            self.voice.channel.members.remove(self)
        self.voice = SimpleNamespace(channel=channel)
        channel.members.append(self)

    async def move_to(self, channel):
        self.moves.append(channel)
        if self.move_error is not None:
            raise self.move_error
        self.connect(channel)

    def __repr__(self):
        return f"FakeMember({self.id})"


class FakeGuild:
    def __init__(self, guild_id):
        self.id = guild_id
        self.channels = {}

    def add_voice_channel(self, channel_id, name):
        self.channels[channel_id] = FakeVoiceChannel(channel_id, name)
        return self.channels[channel_id]

    def get_channel(self, channel_id):
        return self.channels.get(channel_id)


class MemoryRuleStore:
    """Game rule store keeping the rows in a dict."""
    def __init__(self, rows=None):
        self.rows = {}
        for row in rows or ():
            self.rows[row["rule_name"]] = dict(row)
        self.fail = False
        self.reads = 0

    async def get_game_rules(self, guild_id, cmd_channel_id):
        self.reads += 1
        if self.fail:
            raise errors.StoreError()
        return [dict(row) for row in self.rows.values()]

    async def set_game_rule_enabled(self, guild_id, cmd_channel_id,
                                    rule_name, enabled):
        if self.fail:
            raise errors.StoreError()
        row = self.rows.setdefault(rule_name, {"rule_name": rule_name,
                                               "value": None})
        row["enabled"] = enabled

    async def set_game_rule_value(self, guild_id, cmd_channel_id, rule_name,
                                  enabled, value):
        if self.fail:
            raise errors.StoreError()
        self.rows[rule_name] = {"rule_name": rule_name, "enabled": enabled,
                                "value": value}


class StaticChannels:
    """Channel resolver with a fixed lobby/team1/team2 mapping."""
    def __init__(self, **channels):
        self.channels = channels

    async def resolve_voice_channel(self, guild, cmd_channel_id,
                                    channel_name):
        channel = self.channels.get(channel_name)
        if channel is None:
            raise errors.ChannelNotConfiguredError(channel_name)
        return channel
