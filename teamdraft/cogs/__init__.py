"""The bot's slash command groups and listeners, one cog per concern."""

from teamdraft.cogs.channel_settings import ChannelSettingsCog
from teamdraft.cogs.game_management import GameManagementCog
from teamdraft.cogs.general import BanterCog, ErrorHandlerCog, GeneralCog
from teamdraft.cogs.permissions import PermissionsCog

__all__ = [
    "BanterCog",
    "ChannelSettingsCog",
    "ErrorHandlerCog",
    "GameManagementCog",
    "GeneralCog",
    "PermissionsCog",
]
