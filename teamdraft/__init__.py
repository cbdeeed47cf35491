"""
Discord bot for drafting two-team game sessions ("6v6").

Players gather in a lobby voice channel, and two team leaders take turns
picking players for their teams. The bot keeps track of the draft, moves the
players between the lobby and the team voice channels, and stores the
per-server channel settings, permissions and game rules in a database.

Usage:
 Slash commands:
   - setup    : Initializes (or resets) the game session.
   - setleader: Sets the team leader for a team, or rolls a random one.
   - pick     : Adds a player to the picking team leader's team.
   - unpick   : Removes a player from a team.
   - teams    : Displays the teams and their members.
   - start    : Starts the game session, moving players to their team
                voice channels.
   - end      : Terminates the game session, moving players back to the
                lobby voice channel.
   - gamerule : Lists, shows and changes the game rules.
   - channel  : Registers command channels and their voice channels.
   - perm     : Lists, grants and revokes permissions.
   - help     : Lists the available commands.

 Config values:
   The config values have been documented as comments in the config.yml
   file itself.

:license: MIT License; please see the LICENSE file for info.
"""

__title__ = "Team Draft Bot for Discord"
__license__ = "MIT"
__version__ = "1.0.0"
