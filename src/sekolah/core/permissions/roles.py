"""Role string parsing.

Users store their roles as a single delimited string, e.g.
``"GURU,WALI_KELAS"`` or ``"guru | kamad"``. These helpers turn that
string into a normalized role list and answer whether it includes an
administrator role.
"""

import re
from collections.abc import Iterable

from sekolah.core.constants import ADMIN_ROLE_NAMES, ROLE_DELIMITER_PATTERN


_ROLE_SPLIT_RE = re.compile(ROLE_DELIMITER_PATTERN)


def parse_roles(raw: str | None) -> list[str]:
    """Parse a delimited role string into a list of role names.

    Splits on commas and pipes, trims whitespace, upper-cases each
    token, drops empty tokens and removes duplicates (first one wins).

    Args:
        raw: The stored role string

    Returns:
        Normalized role names in their original order

    Examples:
        >>> parse_roles("guru, Wali_Kelas|GURU")
        ['GURU', 'WALI_KELAS']
        >>> parse_roles(None)
        []
    """
    if not raw:
        return []

    tokens = (token.strip().upper() for token in _ROLE_SPLIT_RE.split(raw))
    return list(dict.fromkeys(token for token in tokens if token))


def is_admin(
    roles: Iterable[str],
    admin_roles: Iterable[str] = ADMIN_ROLE_NAMES,
) -> bool:
    """Check whether a role set contains an administrator role.

    Comparison is exact and case-insensitive, so ``SUPERADMIN`` or
    ``NON_ADMIN`` do not count.
    """
    admin_names = {name.strip().upper() for name in admin_roles}
    return any(role.strip().upper() in admin_names for role in roles if role)


def format_role_display(role: str) -> str:
    """Format a role name for display.

    Examples:
        >>> format_role_display("GURU_ASUH")
        'Guru Asuh'
        >>> format_role_display("op_absensi")
        'OP_Absensi'
    """
    if not role:
        return ""

    # Kept as-is in the school's own documents
    if role.upper() == "OP_ABSENSI":
        return "OP_Absensi"

    words = re.split(r"[_, ]", role)
    return " ".join(word.capitalize() for word in words if word)
