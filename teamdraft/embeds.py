"""Embed builders for the bot's listings."""

from typing import Sequence

import discord

from teamdraft.config import cfg
from teamdraft import util


def _embed(title: str, **kwargs) -> discord.Embed:
    return discord.Embed(
        title=f"{cfg('TEAMDRAFT_EMBED_TITLE')} - {title}",
        color=cfg("TEAMDRAFT_EMBED_COLOR"),
        timestamp=discord.utils.utcnow(),
        **kwargs,
    )


def _paged(embed: discord.Embed, entries: Sequence[tuple[str, str]],
           page) -> discord.Embed:
    page, max_page, entries = util.paginate(
        entries, page, cfg("TEAMDRAFT_ENTRIES_PER_PAGE"))
    for name, value in entries:
        embed.add_field(name=name, value=value, inline=False)
    embed.set_footer(text=f"Page {page} of {max_page}")
    return embed


async def teams_embed(session) -> discord.Embed:
    """Lists both teams, leader first (marked with a crown), then the
       members in pick order.
    """
    def format_entry(member, hero=None):
        entry = f"**{util.sanitize_code(member.display_name)}**"
        if hero is not None:
            entry += f" ({hero})"
        return entry

    team_names = {team_name: await session.team_display_name(team_name)
                  for team_name in session.teams}
    embed = _embed(f"{team_names['team1']} vs. {team_names['team2']}",
                   description="Drafted Teams")
    for team_name, slot in session.teams.items():
        lines = []
        if slot.leader is not None:
            lines.append(format_entry(slot.leader, slot.leader_hero)
                         + "\N{CROWN}")
        lines.extend(format_entry(x.member, x.hero)
                     for x in slot.members.values())
        embed.add_field(name=f"__**{team_names[team_name]}**__",
                        value="\n".join(lines) or "*Empty*", inline=True)
    embed.set_footer(text="Team drafts")
    return embed


def gamerules_embed(rules, page) -> discord.Embed:
    """Paginated listing of the game rules and their current state."""
    entries = []
    for rule in rules:
        state = "enabled" if rule.enabled else "disabled"
        if rule.value is not None:
            state += f", value: `{util.sanitize_code(str(rule.value))}`"
        entries.append((f"`{rule.name}` ({rule.value_type}, {state})",
                        rule.help_text))
    return _paged(_embed("Game Rules"), entries, page)


def permissions_embed(permissions, page) -> discord.Embed:
    """Paginated listing of the registered permission nodes."""
    return _paged(_embed("Permissions"),
                  [(f"`{node}`", help_text) for node, help_text in permissions],
                  page)


def help_embed(commands, page) -> discord.Embed:
    """Paginated listing of the (name, description) command pairs."""
    return _paged(_embed("Commands"),
                  [(f"/{name}", desc) for name, desc in commands], page)
