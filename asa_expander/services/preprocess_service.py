"""
Service for preparing raw ASA/PIX configuration text.

Cleans terminal capture artifacts, inserts "!" separators between groups of
related commands, clusters route/static commands and substitutes "name"
definitions, producing the line stream the object catalog is built from.
"""
import logging
import re
from typing import Dict, Iterable, List, NamedTuple, Optional

from asa_expander.utils.version_detector import is_pre83, parse_version_line

logger = logging.getLogger(__name__)

PAGER_PROMPT_RE = re.compile(r"<--- More --->", re.IGNORECASE)
PAGER_PADDING = " " * 14

NAME_RE = re.compile(r"^name\s+(\S+)\s+(\S+)")

# Commands whose leading keywords decide whether a "!" separator is needed
SIGNIFICANT_KEYWORDS = (
    (re.compile(r"^class-map"), 6),
    (re.compile(r"^crypto|policy-map"), 4),
    (re.compile(r"^(?:object |object-group|isakmp)"), 3),
    (re.compile(r"^(?:ip |access-list|aaa-server|group-policy|username|tunnel-group|vpngroup)"), 2),
)

# Lines where names are never replaced by addresses
NAME_EXEMPT_RE = re.compile(
    r"^(?:name\s|access-list|\s*nat|object network|object-group|\s*description|\s*port-forward)"
    r"|\s*network-object object"
)


class PreparedConfig(NamedTuple):
    """Cleaned and grouped configuration lines with detected platform facts."""
    lines: List[str]
    version: Optional[float]
    pre83: bool
    names: Dict[str, str]
    names_disabled: bool


def clean_line(raw: str) -> str:
    line = raw.replace("\r", "").rstrip()
    line = PAGER_PROMPT_RE.sub("", line, count=1)
    return line.replace(PAGER_PADDING, "", 1)


def clean_lines(raw_lines: Iterable[str]) -> List[str]:
    """Strip terminal artifacts and drop lines that end up blank."""
    cleaned = []
    for raw in raw_lines:
        line = clean_line(raw)
        if line.strip():
            cleaned.append(line)
    return cleaned


def _command_fields(line: str) -> List[str]:
    fields = line.split()
    if fields and fields[0] == "no":
        fields = fields[1:]
    return fields


def _is_separator_barrier(previous: str) -> bool:
    return bool(re.search(r"[:!]", previous))


class CommandGrouper:
    """Inserts "!" lines between unrelated commands and clusters route/static commands."""

    def group(self, lines: List[str]) -> List[str]:
        output: List[str] = []
        prev = [""] * 6
        index = 0

        while index < len(lines):
            line = lines[index]

            if line[:1].isspace():
                output.append(line)
                index += 1
                continue

            if line.startswith(":"):
                output.append(line)
                prev[0] = ":"
                index += 1
                continue

            if line.startswith("!"):
                if prev[0] not in ("!", ":"):
                    output.append(line)
                    prev[0] = "!"
                index += 1
                continue

            if line.startswith("static"):
                index = self._cluster(lines, index, "static", output)
                prev[0] = "static"
                continue

            if line.startswith("route "):
                index = self._cluster(lines, index, "route", output)
                prev[0] = "route"
                continue

            fields = _command_fields(line)
            padded = fields + [""] * (6 - len(fields))
            for keyword_re, significant in SIGNIFICANT_KEYWORDS:
                if keyword_re.search(line):
                    key = padded[:significant]
                    if key != prev[:significant] and not _is_separator_barrier(prev[0]) and output:
                        output.append("!")
                    prev[:significant] = key
                    break
            else:
                if padded[0] != prev[0] and not _is_separator_barrier(prev[0]) and output:
                    output.append("!")
                prev[0] = padded[0]

            output.append(line)
            index += 1

        return output

    @staticmethod
    def _cluster(lines: List[str], index: int, command: str, output: List[str]) -> int:
        """Collect the run of ``command`` lines starting at ``index`` grouped by their second field."""
        clusters: Dict[str, List[str]] = {}
        while index < len(lines) and lines[index].startswith(command):
            fields = lines[index].split()
            key = fields[1] if len(fields) > 1 else ""
            clusters.setdefault(key, []).append(lines[index])
            index += 1
        for cluster in clusters.values():
            if output and not output[-1].startswith(("!", ":")):
                output.append("!")
            output.extend(cluster)
        logger.debug(f"Clustered {command} commands into {len(clusters)} groups")
        return index


def substitute_names(line: str, names: Dict[str, str]) -> str:
    """Replace the first whole-token occurrence of each defined name with its address."""
    for name, address in names.items():
        line = re.sub(
            rf"(?<![\w.-]){re.escape(name)}(?![\w.-])",
            lambda _match: address,
            line,
            count=1,
        )
    return line


class ConfigPreprocessor:
    """Produces the prepared line stream consumed by the object catalog builder."""

    def __init__(self, substitute_names: bool = True, group_commands: bool = True):
        self.substitute_names = substitute_names
        self.group_commands = group_commands
        self.grouper = CommandGrouper()

    def prepare(self, raw_lines: Iterable[str]) -> PreparedConfig:
        lines = clean_lines(raw_lines)

        version = None
        pre83 = False
        names_disabled = False
        names: Dict[str, str] = {}

        for line in lines:
            detected = parse_version_line(line)
            if detected is not None:
                version = detected
                pre83 = is_pre83(version)
            if line.startswith("no names"):
                names_disabled = True
            name_match = NAME_RE.match(line)
            if name_match:
                address, name = name_match.groups()
                names[name] = address
            if line.startswith("object network"):
                # object network only exists from 8.3 on, whatever the version line says
                pre83 = False

        if self.group_commands:
            lines = self.grouper.group(lines)

        if self.substitute_names and not names_disabled and names:
            lines = [self._substitute(line, names, pre83) for line in lines]

        logger.info(
            f"Prepared {len(lines)} lines: version={version}, pre83={pre83}, "
            f"names={len(names)}, names_disabled={names_disabled}"
        )
        return PreparedConfig(
            lines=lines,
            version=version,
            pre83=pre83,
            names=names,
            names_disabled=names_disabled,
        )

    @staticmethod
    def _substitute(line: str, names: Dict[str, str], pre83: bool) -> str:
        if not NAME_EXEMPT_RE.search(line):
            return substitute_names(line, names)
        if pre83 and line.startswith("access-list"):
            return substitute_names(line, names)
        return line
