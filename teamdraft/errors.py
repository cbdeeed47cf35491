"""Errors raised by the draft logic and its storage layers.

All of these are recoverable by the command layer: the error handler cog
answers them with the error message, instead of treating them as crashes.
"""

from teamdraft import constants


class TeamDraftError(Exception):
    """Base class for the errors that are shown to the command invoker."""


class InvalidTeamNameError(TeamDraftError):
    """The team name is not one of the known team names."""
    def __init__(self, team_name):
        super().__init__(constants.MSG_INVALID_TEAM_NAME)
        self.team_name = team_name


class InvalidGameRuleError(TeamDraftError):
    """No game rule exists by this name."""
    def __init__(self, rule_name):
        super().__init__(f"Unknown game rule: `{rule_name}`")
        self.rule_name = rule_name


class InvalidGameRuleValueError(TeamDraftError):
    """The value can't be converted to the game rule's value type."""
    def __init__(self, rule_type, rule_value):
        super().__init__(f"Invalid value `{rule_value}`, expected a value of "
                         f"type {rule_type}")
        self.rule_type = rule_type
        self.rule_value = rule_value


class GameRuleValidationError(TeamDraftError):
    """A game rule's validator rejected the value."""


class DuplicatePlayerError(TeamDraftError):
    """The member already is a team leader or on a team."""


class TeamFullError(TeamDraftError):
    """The team has reached the "maxTeamMembers" cap."""


class PlayerNotOnTeamError(TeamDraftError):
    """The member is not on the team."""


class NotEnoughPlayersError(TeamDraftError):
    """Nobody is left to pick a random team leader from."""


class ChannelNotConfiguredError(TeamDraftError):
    """A voice channel setting of the command channel is not set."""
    def __init__(self, channel):
        super().__init__(f"Invalid configuration; the `{channel}` channel "
                         "isn't set")
        self.channel = channel


class CommandChannelNotRegisteredError(TeamDraftError):
    """The text channel is not registered as a command channel."""
    def __init__(self):
        super().__init__(constants.MSG_CMD_CHANNEL_NOT_REGISTERED)


class MissingMovePermissionError(TeamDraftError):
    """Discord refused to move a member between voice channels."""
    def __init__(self):
        super().__init__(constants.MSG_MISSING_MOVE_PERMISSION)


class NoGameSessionError(TeamDraftError):
    """The game session has not been set up."""
    def __init__(self):
        super().__init__(constants.MSG_NO_GAME_SESSION)


class GameAlreadyStartedError(TeamDraftError):
    """The game session is already running."""
    def __init__(self):
        super().__init__(constants.MSG_GAME_ALREADY_STARTED)


class StoreError(TeamDraftError):
    """Wraps a failure of the database driver."""
    def __init__(self, err=None):
        super().__init__(constants.MSG_STORE_ERROR)
        self.original = err
