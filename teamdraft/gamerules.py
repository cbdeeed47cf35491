"""The catalog of the known game rules, and their value types."""

from dataclasses import dataclass
from enum import Enum
import math
from typing import Callable, Iterator, Optional, Union

from teamdraft import errors
from teamdraft import util

RuleValue = Union[str, float, int]


class RuleType(Enum):
    """Value type of a game rule.

       Boolean rules have no value; their state lives entirely in the
       rule's "enabled" flag.
    """
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"

    def __str__(self):
        return self.value

    def coerce(self, raw) -> RuleValue:
        """Converts user input to a value of this type.

           Raises InvalidGameRuleValueError if that's not possible.
        """
        if self is RuleType.STRING:
            return str(raw)
        if self in (RuleType.NUMBER, RuleType.INTEGER):
            try:
                num = float(raw)
            except (TypeError, ValueError) as err:
                raise errors.InvalidGameRuleValueError(self, raw) from err
            if not math.isfinite(num):
                raise errors.InvalidGameRuleValueError(self, raw)
            # int() truncates toward zero
            return num if self is RuleType.NUMBER else int(num)
        raise errors.InvalidGameRuleValueError(self, raw)

    def encode(self, value: Optional[RuleValue]) -> Optional[str]:
        """Returns the text form used for storing the value."""
        return None if value is None else str(value)

    def decode(self, text: Optional[str]) -> Optional[RuleValue]:
        """Inverse of encode(). Returns None for undecodable values."""
        if text is None or self is RuleType.BOOLEAN:
            return None
        try:
            return self.coerce(text)
        except errors.InvalidGameRuleValueError:
            return None


@dataclass(frozen=True)
class RuleDefinition:
    """A game rule, and its defaults."""
    name: str
    value_type: RuleType
    help_text: str
    default_enabled: bool = False
    default_value: Optional[RuleValue] = None
    validate: Optional[Callable[[str], None]] = None

    @property
    def key(self) -> str:
        """Normalized name, used for lookups and storage."""
        return self.name.lower()


def _positive_integer(rule_name):
    def validate(value):
        if not util.is_positive_integer(value):
            raise errors.GameRuleValidationError(
                f"`{rule_name}` must be a positive whole number")
    return validate


def _positive_number(rule_name):
    def validate(value):
        if not util.is_positive_number(value):
            raise errors.GameRuleValidationError(
                f"`{rule_name}` must be a number greater than zero")
    return validate


def _team_name(rule_name):
    def validate(value):
        if not 0 < len(str(value).strip()) <= 32:
            raise errors.GameRuleValidationError(
                f"`{rule_name}` must be between 1 and 32 characters long")
    return validate


_RULES = (
    RuleDefinition(
        name="randomLeaders",
        value_type=RuleType.BOOLEAN,
        help_text=("Picks random team leaders upon initializing a new game "
                   "session (during setup)"),
        default_enabled=True,
    ),
    RuleDefinition(
        name="forceVoice",
        value_type=RuleType.BOOLEAN,
        help_text=("Forces everybody to move to their respective team "
                   "channel, regardless of which voice channel they're "
                   "currently in"),
    ),
    RuleDefinition(
        name="maxTeamMembers",
        value_type=RuleType.INTEGER,
        help_text=("Limits how many players can be picked per team, not "
                   "counting the team leader"),
        default_value=5,
        validate=_positive_integer("maxTeamMembers"),
    ),
    RuleDefinition(
        name="autoStart",
        value_type=RuleType.BOOLEAN,
        help_text=("Starts the game session as soon as both teams are full "
                   "(requires maxTeamMembers)"),
    ),
    RuleDefinition(
        name="moveTimeout",
        value_type=RuleType.NUMBER,
        help_text=("Seconds to wait for a player to be moved to another "
                   "voice channel before giving up"),
        default_enabled=True,
        default_value=10.0,
        validate=_positive_number("moveTimeout"),
    ),
    RuleDefinition(
        name="team1Name",
        value_type=RuleType.STRING,
        help_text="Display name of the first team",
        default_value="Team 1",
        validate=_team_name("team1Name"),
    ),
    RuleDefinition(
        name="team2Name",
        value_type=RuleType.STRING,
        help_text="Display name of the second team",
        default_value="Team 2",
        validate=_team_name("team2Name"),
    ),
    RuleDefinition(
        name="ow_mysteryHeroes",
        value_type=RuleType.BOOLEAN,
        help_text="Selects random heroes upon starting the game",
    ),
    RuleDefinition(
        name="ow_noLimits",
        value_type=RuleType.BOOLEAN,
        help_text="Controls whether multiple of the same heroes can be picked",
    ),
)

GAME_RULES: dict[str, RuleDefinition] = {rule.key: rule for rule in _RULES}
assert len(GAME_RULES) == len(_RULES), "Rule names must be unique"


def by_name(name: str) -> RuleDefinition:
    """Case-insensitive rule lookup.

       Raises InvalidGameRuleError for unknown rules.
    """
    rule = GAME_RULES.get(str(name).lower())
    if rule is None:
        raise errors.InvalidGameRuleError(name)
    return rule


def all_rules() -> Iterator[RuleDefinition]:
    """Yields the rules in catalog order."""
    yield from GAME_RULES.values()
