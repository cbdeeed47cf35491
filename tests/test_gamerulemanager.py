import asyncio

from hypothesis import given, strategies as st
import pytest

from fakes import MemoryRuleStore
from teamdraft import errors
from teamdraft.gamerulemanager import GameRuleManager


@pytest.fixture
def rules(rule_store):
    return GameRuleManager(rule_store, 1, 10)


@pytest.mark.asyncio
async def test_defaults_without_overrides(rules):
    rule = await rules.get_rule("maxTeamMembers")
    assert rule.enabled is False
    assert rule.value == 5
    assert await rules.is_enabled("randomLeaders") is True
    assert await rules.get_value("moveTimeout") == 10.0
    assert len(await rules.get_rules()) == 9


@pytest.mark.asyncio
async def test_overrides_are_loaded_once(rule_store, rules):
    await rules.get_rule("forceVoice")
    await rules.get_rules()
    assert rule_store.reads == 1


@pytest.mark.asyncio
async def test_stored_overrides_are_applied():
    store = MemoryRuleStore(rows=[
        {"rule_name": "maxteammembers", "enabled": 1, "value": "3"},
        {"rule_name": "randomleaders", "enabled": 0, "value": None},
        {"rule_name": "removedRule", "enabled": 1, "value": "x"},
    ])
    rules = GameRuleManager(store, 1, 10)
    assert await rules.get_value("maxTeamMembers") == 3
    assert await rules.is_enabled("maxTeamMembers") is True
    assert await rules.is_enabled("randomLeaders") is False
    assert "removedrule" not in rules.overrides


@pytest.mark.asyncio
async def test_set_enabled(rule_store, rules):
    await rules.set_enabled("ForceVoice", "TRUE")
    assert await rules.is_enabled("forceVoice") is True
    assert rule_store.rows["forcevoice"]["enabled"] is True
    await rules.set_enabled("forceVoice", "0")
    assert await rules.is_enabled("forceVoice") is False


@pytest.mark.asyncio
async def test_set_enabled_rejects_garbage(rules):
    with pytest.raises(errors.InvalidGameRuleValueError):
        await rules.set_enabled("forceVoice", "maybe")
    assert await rules.is_enabled("forceVoice") is False


@pytest.mark.asyncio
async def test_set_rule_enables_and_coerces(rule_store, rules):
    await rules.set_rule("maxTeamMembers", "3")
    rule = await rules.get_rule("maxTeamMembers")
    assert (rule.enabled, rule.value) == (True, 3)
    assert rule_store.rows["maxteammembers"]["value"] == "3"

    await rules.set_rule("moveTimeout", "2.5")
    assert await rules.get_value("moveTimeout") == 2.5

    await rules.set_rule("team1Name", "Blue")
    assert await rules.get_value("team1Name") == "Blue"


@pytest.mark.asyncio
async def test_set_rule_on_boolean_rule(rules):
    await rules.set_rule("autoStart", "1")
    assert await rules.is_enabled("autoStart") is True


@pytest.mark.asyncio
async def test_toggling_keeps_value(rules):
    await rules.set_rule("maxTeamMembers", "2")
    await rules.set_enabled("maxTeamMembers", False)
    rule = await rules.get_rule("maxTeamMembers")
    assert (rule.enabled, rule.value) == (False, 2)


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["0", "-2", "two", "nan", "1.5"])
async def test_set_rule_validation(rules, value):
    with pytest.raises((errors.GameRuleValidationError,
                        errors.InvalidGameRuleValueError)):
        await rules.set_rule("maxTeamMembers", value)
    assert await rules.get_rule("maxTeamMembers") == (
        await GameRuleManager(MemoryRuleStore(), 1, 10).get_rule(
            "maxTeamMembers"))


@pytest.mark.asyncio
async def test_unknown_rule(rules):
    with pytest.raises(errors.InvalidGameRuleError):
        await rules.set_rule("bogus", "1")
    with pytest.raises(errors.InvalidGameRuleError):
        await rules.get_rule("bogus")


@pytest.mark.asyncio
async def test_store_failure_rolls_back(rule_store, rules):
    await rules.set_rule("maxTeamMembers", "4")
    rule_store.fail = True
    with pytest.raises(errors.StoreError):
        await rules.set_rule("maxTeamMembers", "2")
    with pytest.raises(errors.StoreError):
        await rules.set_enabled("forceVoice", True)
    rule_store.fail = False

    rule = await rules.get_rule("maxTeamMembers")
    assert (rule.enabled, rule.value) == (True, 4)
    assert await rules.is_enabled("forceVoice") is False
    assert "forcevoice" not in rules.overrides


@given(st.integers(min_value=1, max_value=10 ** 6))
def test_positive_integers_roundtrip_through_store(value):
    async def run():
        store = MemoryRuleStore()
        await GameRuleManager(store, 1, 10).set_rule("maxTeamMembers",
                                                     str(value))
        # A fresh manager sees what the first one stored
        return await GameRuleManager(store, 1, 10).get_rule("maxTeamMembers")

    rule = asyncio.run(run())
    assert rule.enabled is True
    assert rule.value == value


@pytest.mark.asyncio
async def test_failed_load_is_retried(rule_store, rules):
    rule_store.fail = True
    with pytest.raises(errors.StoreError):
        await rules.get_rule("forceVoice")
    assert not rules.loaded
    rule_store.fail = False
    assert await rules.is_enabled("forceVoice") is False
    assert rules.loaded
