"""Finding guild members from free-form text typed into a command."""
import re
from typing import Any, List, Optional

from config.discord_config import DiscordConfig
from core.exceptions import AmbiguousResultError

_MENTION_PATTERN = re.compile(r'^<@!?(\d+)>$')
_DISCRIMINATOR_PATTERN = re.compile(r'^#\d{4}$')


def member_full_name(user: Any) -> str:
    discriminator = getattr(user, "discriminator", "0")
    if not discriminator or discriminator == "0":
        return user.name
    return f"{user.name}#{discriminator}"


def parse_user_id(query: str) -> Optional[int]:
    """A raw id or a mention (``<@id>`` or ``<@!id>``) as an int, else None"""
    query = query.strip()
    match = _MENTION_PATTERN.match(query)
    if match:
        return int(match.group(1))
    if query.isdigit():
        return int(query)
    return None


def find_member_strict(guild: Any, query: str) -> Optional[Any]:
    """Resolve a member by id or mention only"""
    user_id = parse_user_id(query)
    if user_id is None or guild is None:
        return None
    return guild.get_member(user_id)


def find_member(guild: Any, query: str) -> Optional[Any]:
    """Resolve a member from an id, mention, ``#NNNN`` discriminator or name prefix.

    Name matching is a case-insensitive prefix of the nickname or of
    ``name#discriminator``, and is only tried when the discriminator search
    found nobody. Raises AmbiguousResultError when several members match.
    """
    if guild is None:
        return None

    member = find_member_strict(guild, query)
    if member is not None:
        return member

    lowered = query.strip().lower()
    candidates: List[Any] = []

    if _DISCRIMINATOR_PATTERN.match(lowered):
        candidates = [m for m in guild.members if f"#{getattr(m, 'discriminator', '')}" == lowered]

    if not candidates:
        for m in guild.members:
            nickname = (getattr(m, "nick", None) or "").lower()
            full_name = member_full_name(m).lower()
            if nickname.startswith(lowered) and nickname:
                candidates.append(m)
            elif full_name.startswith(lowered):
                candidates.append(m)

    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    raise AmbiguousResultError(
        f"More than one member of the server was found with the search query `{query}`!",
        candidates,
    )


def format_candidates(error: AmbiguousResultError, limit: int = DiscordConfig.MAX_RESPONSE_LENGTH) -> str:
    """Describe the members an ambiguous lookup matched, cut to fit in ``limit`` characters"""
    footer = "\nYou can directly copy/paste the user's ID into this command to get that specific user."
    text = error.message + "\nThe potential users are:\n"
    shown = 0
    for candidate in error.candidates:
        line = f"{member_full_name(candidate)} (User ID: {candidate.id})\n"
        remaining = len(error.candidates) - shown - 1
        more = f"...and {remaining} more\n" if remaining else ""
        if len(text) + len(line) + len(more) + len(footer) > limit:
            text += f"...and {len(error.candidates) - shown} more\n"
            break
        text += line
        shown += 1
    return text + footer
