"""
Recursive expansion of access-list entries that reference objects.
"""
import logging
import re
from typing import Iterator, List, Optional

from asa_expander.core.config import settings
from asa_expander.core.exceptions import ExpansionDepthError
from asa_expander.models.catalog import ObjectCatalog, find_reference
from asa_expander.utils.parsers.ace_parser import parse_ace
from asa_expander.utils.parsers.acl_models import AccessListEntry, ServiceObjectRecord
from asa_expander.utils.parsers.service_parser import parse_service_object

logger = logging.getLogger(__name__)


def substitute_reference(line: str, reference: re.Match, member: str) -> str:
    """Replace the matched ``object[-group] NAME`` text in ``line`` with ``member``."""
    return line[:reference.start()] + member + line[reference.end():]


def build_ace(entry: AccessListEntry, service: ServiceObjectRecord, proto: Optional[str] = None) -> str:
    """
    Rebuild an ACE with the protocol and port/ICMP qualifiers of ``service``.

    Source ports follow the source network, destination ports or ICMP
    type/code follow the destination network. Empty fields are skipped and
    whitespace is collapsed.
    """
    head = ["access-list", entry.name, "extended", entry.action]
    if service.icmp:
        parts = head + [
            service.icmp,
            entry.user,
            entry.securitys,
            entry.source,
            entry.securityd,
            entry.destination,
            service.type_code,
            entry.options,
        ]
    else:
        parts = head + [
            proto or service.tcpudp,
            entry.user,
            entry.securitys,
            entry.source,
            service.source,
            entry.securityd,
            entry.destination,
            service.destination,
            entry.options,
        ]
    return " ".join(" ".join(part for part in parts if part).split())


class AceExpander:
    """
    Expands an ACE into the concrete ACEs it denotes.

    The leftmost object reference is replaced by each member of the
    referenced entry in turn and every candidate is expanded again, so the
    output is the depth-first list of fully resolved lines. Each output line
    carries one leading space.
    """

    def __init__(self, catalog: ObjectCatalog, max_depth: Optional[int] = None):
        self.catalog = catalog
        self.max_depth = max_depth if max_depth is not None else settings.MAX_EXPANSION_DEPTH

    def expand(self, line: str) -> List[str]:
        return list(self.iter_expand(line))

    def iter_expand(self, line: str, depth: int = 0) -> Iterator[str]:
        if depth > self.max_depth:
            raise ExpansionDepthError(self.max_depth, line)

        reference = find_reference(line)
        if reference is None:
            yield f" {line}"
            return

        name = reference.group(1)
        members = self.catalog.members(name, line)
        self.catalog.ensure_acyclic(name)
        logger.debug(f"Expanding {name} ({len(members)} members) in: {line}")

        for member in members:
            service = parse_service_object(member)
            if service.is_structural:
                for candidate in self._structural_candidates(line, service):
                    yield from self.iter_expand(candidate, depth + 1)
            else:
                yield from self.iter_expand(substitute_reference(line, reference, member), depth + 1)

    def _structural_candidates(self, line: str, service: ServiceObjectRecord) -> Iterator[str]:
        entry = parse_ace(line)
        if entry is None:
            logger.warning(f"Could not parse ACE for service expansion, fields left empty: {line}")
            entry = AccessListEntry()

        if service.tcpudp == "tcp-udp":
            # Generated lazily so the tcp branch is fully expanded before udp is built
            yield build_ace(entry, service, "tcp")
            yield build_ace(entry, service, "udp")
        else:
            yield build_ace(entry, service)
