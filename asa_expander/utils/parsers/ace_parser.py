"""
Cisco ASA extended access-list entry parser.

Grammar (whitespace separated, keywords are case-sensitive):

    access-list <name> extended (permit|deny) <protocol> [<user>]
        [<security>] <network> [<security>] <network> [<ports>] [<options>]

Covers the full ASA 9.x extended ACE syntax including user, security-group
and IPv6 fields.
"""
import logging
from typing import Optional

from asa_expander.utils.parsers.acl_models import AccessListEntry
from asa_expander.utils.parsers.grammar import (
    alt, anything, match_fields, optional, pattern, rest, seq, word,
)

logger = logging.getLogger(__name__)

IPV4 = r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}"
IPV6 = r"[0-9a-fA-F:]*:[0-9a-fA-F:/]+"

object_ref = seq(word("object", "object-group"), anything())

protocol = alt(object_ref, anything())

# user LOCAL\bob | user-group any | user DOMAIN \ name | object-group-user NAME
user = alt(
    seq(word("object-group-user"), anything()),
    seq(
        word("user", "user-group"),
        alt(
            word("any", "none"),
            seq(anything(), word("\\", "\\\\"), anything()),
            anything(),
        ),
    ),
)

security = alt(
    seq(word("object-group-security"), anything()),
    seq(word("security-group"), word("name", "tag"), anything()),
)

network = alt(
    seq(word("host"), pattern(IPV4)),
    seq(pattern(IPV4), pattern(IPV4)),
    pattern(IPV6),
    word("any4", "any6", "any"),
    object_ref,
    seq(word("interface"), anything()),
)

ports = alt(
    seq(word("eq", "gt", "lt", "neq"), pattern(r"\d+")),
    seq(word("range"), pattern(r"\d+"), pattern(r"\d+")),
    object_ref,
)

ACE_FIELDS = (
    (None, word("access-list")),
    ("name", anything()),
    (None, word("extended")),
    ("action", word("permit", "deny")),
    ("proto", protocol),
    ("user", optional(user)),
    ("securitys", optional(security)),
    ("source", network),
    ("securityd", optional(security)),
    ("destination", network),
    ("ports", optional(ports)),
    ("options", optional(rest())),
)


def parse_ace(line: str) -> Optional[AccessListEntry]:
    """
    Parse an extended access-list entry into its fields.

    Args:
        line: One ``access-list ... extended ...`` command

    Returns:
        AccessListEntry with absent optional fields set to "", or None if
        the line is not an extended ACE.
    """
    values = match_fields(ACE_FIELDS, line)
    if values is None:
        logger.debug(f"Line is not an extended ACE: {line.strip()}")
        return None
    return AccessListEntry(**values)
