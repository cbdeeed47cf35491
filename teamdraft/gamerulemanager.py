"""Per game session game rules, layered over the catalog defaults."""

from dataclasses import dataclass, replace
import logging
from typing import Optional

from teamdraft import errors
from teamdraft import gamerules
from teamdraft import util
from teamdraft.gamerules import RuleDefinition, RuleType, RuleValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleOverride:
    """A stored deviation from a rule's defaults. None means "use default"."""
    enabled: Optional[bool] = None
    value: Optional[RuleValue] = None


@dataclass(frozen=True)
class GameRule:
    """Merged view of a rule's definition and its override."""
    definition: RuleDefinition
    enabled: bool
    value: Optional[RuleValue]

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def value_type(self) -> RuleType:
        return self.definition.value_type

    @property
    def help_text(self) -> str:
        return self.definition.help_text


class GameRuleManager():
    """Game rules of one (guild, command channel) pair.

       The overrides are loaded from the store on first access, and every
       change is written through to the store. If the write fails, the
       in-memory change is rolled back before the StoreError is raised, so
       that the session never acts on a rule the database doesn't have.
    """
    def __init__(self, store, guild_id: int, cmd_channel_id: int):
        self.store = store
        self.guild_id = guild_id
        self.cmd_channel_id = cmd_channel_id
        self.loaded = False
        self.overrides: dict[str, RuleOverride] = {}

    async def load_overrides(self) -> dict[str, RuleOverride]:
        """Loads the stored overrides, unless already loaded.

           Rows of rules that no longer exist in the catalog are ignored.
        """
        if self.loaded:
            return self.overrides
        rows = await self.store.get_game_rules(self.guild_id,
                                               self.cmd_channel_id)
        overrides = {}
        for row in rows:
            rule = gamerules.GAME_RULES.get(str(row["rule_name"]).lower())
            if rule is None:
                logger.debug("Dropping stale game rule %r of %s/%s",
                             row["rule_name"], self.guild_id,
                             self.cmd_channel_id)
                continue
            enabled = row.get("enabled")
            overrides[rule.key] = RuleOverride(
                enabled=None if enabled is None else bool(enabled),
                value=rule.value_type.decode(row.get("value")))
        self.overrides = overrides
        self.loaded = True
        return self.overrides

    async def get_rule(self, rule_name: str) -> GameRule:
        """Returns the rule's defaults with any override applied on top."""
        rule = gamerules.by_name(rule_name)
        override = (await self.load_overrides()).get(rule.key, RuleOverride())
        return GameRule(
            definition=rule,
            enabled=(rule.default_enabled if override.enabled is None
                     else override.enabled),
            value=(rule.default_value if override.value is None
                   else override.value),
        )

    async def get_rules(self) -> list[GameRule]:
        return [await self.get_rule(rule.key)
                for rule in gamerules.all_rules()]

    async def is_enabled(self, rule_name: str) -> bool:
        return (await self.get_rule(rule_name)).enabled

    async def get_value(self, rule_name: str) -> Optional[RuleValue]:
        return (await self.get_rule(rule_name)).value

    async def set_enabled(self, rule_name: str, value) -> None:
        """Enables or disables a rule, from a "true"/"1"/"false"/"0" value."""
        rule = gamerules.by_name(rule_name)
        bool_value = util.string_to_boolean(value)
        if bool_value is None:
            raise errors.InvalidGameRuleValueError(RuleType.BOOLEAN, value)

        await self._apply(rule, enabled=bool_value)

    async def set_rule(self, rule_name: str, value) -> None:
        """Sets a rule's value, after validating and converting it to the
           rule's value type. Setting a value also enables the rule.
        """
        rule = gamerules.by_name(rule_name)
        if rule.validate is not None:
            rule.validate(value)

        if rule.value_type is RuleType.BOOLEAN:
            await self.set_enabled(rule.key, value)
        elif rule.value_type in (RuleType.STRING, RuleType.NUMBER,
                                 RuleType.INTEGER):
            await self._apply(rule, enabled=True,
                              value=rule.value_type.coerce(value))
        else:
            raise TypeError(f"Unsupported rule type: {rule.value_type!r}")

    async def _apply(self, rule: RuleDefinition, enabled: bool,
                     value: Optional[RuleValue] = None) -> None:
        overrides = await self.load_overrides()
        previous = overrides.get(rule.key)
        changed = replace(previous or RuleOverride(), enabled=enabled)
        if value is not None:
            changed = replace(changed, value=value)
        overrides[rule.key] = changed

        try:
            if value is None:
                await self.store.set_game_rule_enabled(
                    self.guild_id, self.cmd_channel_id, rule.key, enabled)
            else:
                await self.store.set_game_rule_value(
                    self.guild_id, self.cmd_channel_id, rule.key, enabled,
                    rule.value_type.encode(value))
        except errors.StoreError:
            if previous is None:
                del overrides[rule.key]
            else:
                overrides[rule.key] = previous
            raise
        logger.info("Game rule %s set to enabled=%s value=%r for %s/%s",
                    rule.name, enabled, value, self.guild_id,
                    self.cmd_channel_id)
