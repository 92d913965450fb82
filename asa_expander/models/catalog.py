"""Named object / object-group catalog."""
import logging
import re
from typing import Dict, Iterator, List, Optional, Set

from asa_expander.core.exceptions import ObjectCycleError, UnknownObjectError

logger = logging.getLogger(__name__)

# "object NAME" or "object-group NAME" as whole tokens anywhere in a line
REFERENCE_RE = re.compile(r"(?<!\S)object(?:-group)?\s+(\S+)")


def find_reference(text: str) -> Optional[re.Match]:
    """Return the leftmost object/object-group reference in ``text``."""
    return REFERENCE_RE.search(text)


class ObjectCatalog:
    """
    Ordered store of object and object-group members keyed by name.

    Members keep declaration order. Repeated declaration blocks for the
    same name append to the existing entry.
    """

    def __init__(self):
        self._entries: Dict[str, List[str]] = {}
        self._acyclic: Set[str] = set()

    def add_member(self, name: str, member: str) -> None:
        self._entries.setdefault(name, []).append(member)
        self._acyclic.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def members(self, name: str, line: Optional[str] = None) -> List[str]:
        """Members of ``name``; raises UnknownObjectError if it was never defined."""
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownObjectError(name, line) from None

    def first_member(self, name: str, line: Optional[str] = None) -> str:
        """First stored member, the whole definition of a simple object."""
        return self.members(name, line)[0]

    def as_dict(self) -> Dict[str, List[str]]:
        return {name: list(members) for name, members in self._entries.items()}

    @classmethod
    def from_dict(cls, entries: Dict[str, List[str]]) -> "ObjectCatalog":
        catalog = cls()
        for name, members in entries.items():
            for member in members:
                catalog.add_member(name, member)
        return catalog

    def flatten(self, members: List[str]) -> List[str]:
        """
        Replace every ``object[-group] <name>`` member with the flattened
        members of that entry, recursively.
        """
        flat = []
        for member in members:
            match = re.match(r"object(?:-group)?\s+(\S+)", member)
            if match:
                name = match.group(1)
                self.ensure_acyclic(name)
                flat.extend(self.flatten(self.members(name, member)))
            else:
                flat.append(member)
        return flat

    def ensure_acyclic(self, name: str) -> None:
        """
        Verify that no reference chain starting at ``name`` loops back on itself.

        Raises:
            ObjectCycleError: naming the looping chain of entries
        """
        if name in self._acyclic or name not in self._entries:
            return

        path: List[str] = []
        on_path: Set[str] = set()

        def visit(current: str) -> None:
            if current in self._acyclic or current not in self._entries:
                return
            if current in on_path:
                start = path.index(current)
                raise ObjectCycleError(path[start:] + [current])
            path.append(current)
            on_path.add(current)
            for member in self._entries[current]:
                for match in REFERENCE_RE.finditer(member):
                    visit(match.group(1))
            path.pop()
            on_path.discard(current)
            self._acyclic.add(current)

        visit(name)
