import pytest

from teamdraft import errors
from teamdraft import gamerules
from teamdraft.gamerules import RuleType


def test_catalog_defaults():
    assert [x.name for x in gamerules.all_rules()] == [
        "randomLeaders", "forceVoice", "maxTeamMembers", "autoStart",
        "moveTimeout", "team1Name", "team2Name", "ow_mysteryHeroes",
        "ow_noLimits",
    ]
    max_members = gamerules.by_name("maxTeamMembers")
    assert max_members.value_type is RuleType.INTEGER
    assert max_members.default_enabled is False
    assert max_members.default_value == 5
    assert gamerules.by_name("randomLeaders").default_enabled is True


def test_lookup_is_case_insensitive():
    assert gamerules.by_name("FORCEVOICE") is gamerules.by_name("forceVoice")


def test_unknown_rule():
    with pytest.raises(errors.InvalidGameRuleError) as excinfo:
        gamerules.by_name("noSuchRule")
    assert excinfo.value.rule_name == "noSuchRule"


@pytest.mark.parametrize("value_type, raw, expected", [
    (RuleType.STRING, "Red", "Red"),
    (RuleType.NUMBER, "2.5", 2.5),
    (RuleType.INTEGER, "7", 7),
    (RuleType.INTEGER, "7.9", 7),
    (RuleType.INTEGER, "-7.9", -7),
])
def test_coerce(value_type, raw, expected):
    res = value_type.coerce(raw)
    assert res == expected
    assert type(res) is type(expected)


@pytest.mark.parametrize("value_type, raw", [
    (RuleType.NUMBER, "abc"),
    (RuleType.NUMBER, "nan"),
    (RuleType.INTEGER, "inf"),
    (RuleType.INTEGER, None),
    (RuleType.BOOLEAN, "true"),
])
def test_coerce_invalid(value_type, raw):
    with pytest.raises(errors.InvalidGameRuleValueError) as excinfo:
        value_type.coerce(raw)
    assert excinfo.value.rule_type is value_type


def test_decode():
    assert RuleType.NUMBER.decode(RuleType.NUMBER.encode(0.25)) == 0.25
    assert RuleType.INTEGER.decode("12") == 12
    assert RuleType.INTEGER.decode("garbage") is None
    assert RuleType.BOOLEAN.decode("1") is None
    assert RuleType.STRING.decode(None) is None


@pytest.mark.parametrize("rule_name, value", [
    ("maxTeamMembers", "0"),
    ("maxTeamMembers", "-1"),
    ("maxTeamMembers", "2.5"),
    ("moveTimeout", "0"),
    ("moveTimeout", "nan"),
    ("team1Name", "   "),
    ("team2Name", "x" * 33),
])
def test_validators_reject(rule_name, value):
    with pytest.raises(errors.GameRuleValidationError):
        gamerules.by_name(rule_name).validate(value)


@pytest.mark.parametrize("rule_name, value", [
    ("maxTeamMembers", "1"),
    ("moveTimeout", "0.5"),
    ("team1Name", "Blue"),
])
def test_validators_accept(rule_name, value):
    gamerules.by_name(rule_name).validate(value)
