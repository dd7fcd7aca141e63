"""Text helpers shared by logging and chat responses."""
import re
from typing import Iterable

from config.constants import COLOR_CODE_SYM

# A soft hyphen does not render in Discord's font, so "@<soft hyphen>everyone" looks intact
# but does not resolve to a mass ping.
INVISIBLE = '\u00AD'

_COLOR_CODE_PATTERN = re.compile(re.escape(COLOR_CODE_SYM) + r'.?', re.DOTALL)
_MASS_PING_PATTERN = re.compile(r'@(everyone|here)', re.IGNORECASE)


def has_color_codes(text: str) -> bool:
    return COLOR_CODE_SYM in text


def strip_color_formatting(text: str) -> str:
    """Remove every colour code (the marker plus the character after it)."""
    if not has_color_codes(text):
        return text
    return _COLOR_CODE_PATTERN.sub('', text)


def strip_mass_pings(text: str) -> str:
    return _MASS_PING_PATTERN.sub(lambda m: '@' + INVISIBLE + m.group(1), text)


def args_to_text(args: Iterable[str]) -> str:
    """Format an argument list for audit logging, e.g. [a, b, c]."""
    return "[" + ", ".join(args) + "]"
