"""Config preferences of the bot.

   Every value is read from the system environment variable of the same name
   when it's set, and from cfg/config.yml otherwise. Both sources are type
   checked against YAML_CFG_SCHEMA.
"""

from ast import literal_eval
import os
from typing import Optional

from strictyaml import as_document, load, Bool, Float, Int, Map, Str


class BoundedInt(Int):
    """StrictYAML Int validator with inclusive lower and upper bounds."""
    def __init__(self, minimum: Optional[int] = None,
                 maximum: Optional[int] = None):
        self.minimum = minimum
        self.maximum = maximum

    def validate_scalar(self, chunk):
        val = super().validate_scalar(chunk)
        if ((self.minimum is not None and val < self.minimum)
                or (self.maximum is not None and val > self.maximum)):
            chunk.expecting_but_found(
                f"when expecting an integer in range {self._range()}")
        return val

    def _range(self) -> str:
        low = "-inf" if self.minimum is None else self.minimum
        high = "inf" if self.maximum is None else self.maximum
        return f"[{low}, {high}]"


YAML_CFG_SCHEMA = {
    "TEAMDRAFT_SECRET_TOKEN": Str(),
    "TEAMDRAFT_DEBUG": Bool(),
    "TEAMDRAFT_EPHEMERAL_MESSAGES": Bool(),
    "TEAMDRAFT_EMBED_COLOR": BoundedInt(0, 0xFFFFFF),
    "TEAMDRAFT_EMBED_TITLE": Str(),
    # Discord allows at most 25 fields per embed.
    "TEAMDRAFT_ENTRIES_PER_PAGE": BoundedInt(1, 25),
    "TEAMDRAFT_BANTER_COOLDOWN_SECS": Float(),

    "TEAMDRAFT_DB_DRIVER": Str(),
    "TEAMDRAFT_DB_NAME": Str(),
    "TEAMDRAFT_DB_USER": Str(),
    "TEAMDRAFT_DB_SECRET": Str(),
    "TEAMDRAFT_DB_HOST": Str(),
    "TEAMDRAFT_DB_PORT": BoundedInt(1, 65535),
}

CFG_PATH = os.environ.get(
    "TEAMDRAFT_CFG_PATH",
    os.path.join(os.path.dirname(os.path.realpath(__file__)),
                 "..", "cfg", "config.yml"))


def load_config(path: str):
    """Parses and validates the YAML config file at path."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path} (set "
                                "TEAMDRAFT_CFG_PATH to point to it)")
    with open(file=path, mode="r", encoding="utf-8") as f_config:
        return load(f_config.read(), Map(YAML_CFG_SCHEMA))


CFG = load_config(CFG_PATH)


def cfg(key: str):
    """Returns the config value of key. An environment variable has to be a
       Python literal of the type the schema expects, eg. quoted strings.
    """
    env_value = os.environ.get(key)
    if not env_value:
        return CFG[key].value
    # Validate just this one value, instead of populating the whole schema.
    return as_document({key: literal_eval(env_value)},
                       Map({key: YAML_CFG_SCHEMA[key]}))[key].value
