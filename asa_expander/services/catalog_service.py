"""
Service for building the object catalog from a prepared configuration.
"""
import logging
import re
from typing import List, NamedTuple

from asa_expander.models.catalog import ObjectCatalog

logger = logging.getLogger(__name__)

HEADER_RE = re.compile(r"^(?:object-group|object\s+(?:network|service))\s")
NAT_OR_DESCRIPTION_RE = re.compile(r"^\s*(nat|description)(?:\s|$)")
GLOBAL_NAT_RE = re.compile(r"^nat\s")


class CatalogBuild(NamedTuple):
    """Annotated line stream plus the catalog collected from it."""
    lines: List[str]
    catalog: ObjectCatalog


def normalize_member(line: str) -> str:
    """
    Reduce an object body line to the text it stands for in an ACE.

    ``group-object G`` becomes ``object-group G``; a leading ``*-object``,
    ``subnet`` or ``service`` keyword is dropped.
    """
    text = re.sub(r"^\s*group-object", "object-group", line)
    text = re.sub(r"^\s*(?:\S+-object|subnet|service)\s+", "", text)
    return text.strip()


class ObjectCatalogBuilder:
    """
    Collects object / object-group definitions in declaration order.

    Simple ``object NAME`` members are inlined immediately with the first
    member of that object. Nested ``object-group`` members are kept as text
    and resolved later by the ACE expander.
    """

    def __init__(self, annotate_nat: bool = True):
        self.annotate_nat = annotate_nat

    def build(self, lines: List[str]) -> CatalogBuild:
        catalog = ObjectCatalog()
        output: List[str] = []
        current_group = None

        for line in lines:
            if HEADER_RE.match(line):
                fields = line.split()
                current_group = fields[2] if len(fields) > 2 else None
                output.append(line)
                continue

            if current_group and line[:1].isspace():
                output.extend(self._member_line(line, current_group, catalog))
                continue

            current_group = None

            if GLOBAL_NAT_RE.match(line):
                output.append(line)
                if self.annotate_nat:
                    output.extend(self._nat_references(line, catalog, "GLOBAL NAT OBJECT"))
                continue

            output.append(line)

        logger.info(f"Object catalog built: {len(catalog)} objects from {len(lines)} lines")
        return CatalogBuild(lines=output, catalog=catalog)

    def _member_line(self, line: str, group: str, catalog: ObjectCatalog) -> List[str]:
        sub_command = NAT_OR_DESCRIPTION_RE.match(line)
        if sub_command:
            if sub_command.group(1) == "nat" and self.annotate_nat:
                return [line] + self._object_nat(line, group, catalog)
            return [line]

        member = normalize_member(line)
        reference = re.match(r"object\s+(\S+)", member)
        if reference:
            name = reference.group(1)
            resolved = catalog.first_member(name, line)
            catalog.add_member(group, resolved)
            logger.debug(f"Inlined object {name} into {group}: {resolved}")
            return [f" ! OBJECT DEFINITION: {name} = {resolved}"]

        catalog.add_member(group, member)
        return [line]

    def _object_nat(self, line: str, group: str, catalog: ObjectCatalog) -> List[str]:
        annotations = []
        if group in catalog:
            member = catalog.first_member(group)
            prefix = "" if member.split()[:1] == ["host"] else "subnet "
            annotations.append(f" ! NAT FROM: {prefix}{member}")
        else:
            logger.warning(f"nat command in object {group} before any definition: {line.strip()}")
        annotations.extend(self._nat_references(line, catalog, "NAT TO OBJECT"))
        return annotations

    @staticmethod
    def _nat_references(line: str, catalog: ObjectCatalog, label: str) -> List[str]:
        # The first three fields of a nat command are never objects
        annotations = []
        seen = set()
        for token in line.split()[3:]:
            if token in seen or token not in catalog:
                continue
            seen.add(token)
            annotations.append(f" ! {label}: {token}")
            for member in catalog.flatten(catalog.members(token)):
                annotations.append(f" !   {member}")
        return annotations
