"""Shared constants: team names, permission nodes and response messages."""

TEAM_NAMES = {
    "team1": "Team 1",
    "team2": "Team 2",
}

# Logical names of the voice channels a command channel can configure.
VOICE_CHANNEL_NAMES = ("lobby", "team1", "team2")

PERM_ADMIN = "administrate_lobby"
PERM_SETUP = "setup"
PERM_GAMERULE = "gamerules"
PERM_CHANNELS = "channels"
PERM_PERMISSIONS = "permissions"
PERM_SETLEADER = "setLeader"

# Granting this node implies every other node.
OWNERSHIP_NODE = "$ownership"

TEAM_NAMES_LIST = ", ".join(f"`{x}`" for x in TEAM_NAMES)
MSG_INVALID_TEAM_NAME = ("The specified team name is invalid. Possible "
                         f"values: {TEAM_NAMES_LIST}")
MSG_CMD_CHANNEL_NOT_REGISTERED = ("This text channel is not a registered "
                                  "command channel")
MSG_ERR_LOOKUP_CMDCHANNEL = ("An error occured while trying to look up the "
                             "command channel")
MSG_INVALID_TARGET_MEMBER = ("Invalid target; the target user couldn't be "
                             "resolved")
MSG_NOT_ENOUGH_PLAYERS_RANDOM_LEADER = ("Not enough players available to "
                                        "pick a random team leader")
MSG_NO_GAME_SESSION = ("No on-going game session, use the `setup` command to "
                       "initialize the game session")
MSG_GAME_ALREADY_STARTED = ("Game session already started, use the `end` "
                            "command to stop")
MSG_MISSING_MOVE_PERMISSION = ("An error occured while trying to move users "
                               "between the voice channels; does the bot "
                               "have voice channel permissions?")
MSG_STORE_ERROR = "An error occured while accessing the database"

# Hero pool for the "ow_mysteryHeroes" game rule.
OW_HEROES = (
    "Ana", "Ashe", "Baptiste", "Bastion", "Brigitte", "Cassidy", "D.Va",
    "Doomfist", "Echo", "Genji", "Hanzo", "Junkrat", "Lúcio", "Mei",
    "Mercy", "Moira", "Orisa", "Pharah", "Reaper", "Reinhardt", "Roadhog",
    "Sigma", "Soldier: 76", "Sombra", "Symmetra", "Torbjörn", "Tracer",
    "Widowmaker", "Winston", "Wrecking Ball", "Zarya", "Zenyatta",
)
