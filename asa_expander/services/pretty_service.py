"""
Service that renders a configuration with all object references expanded.
"""
import logging
import re
from typing import Iterable, List, NamedTuple, Optional

from asa_expander.core.config import settings
from asa_expander.models.catalog import find_reference
from asa_expander.services.catalog_service import ObjectCatalogBuilder
from asa_expander.services.expansion_service import AceExpander
from asa_expander.services.preprocess_service import ConfigPreprocessor

logger = logging.getLogger(__name__)

REMARK_RE = re.compile(r"^access-list\s+\S+\s+remark")
ACL_NAME_RE = re.compile(r"^(access-list\s+\S+)(.*)$")


class PrettyResult(NamedTuple):
    """Rendered configuration plus statistics about the run."""
    lines: List[str]
    version: Optional[float]
    pre83: bool
    input_lines: int
    catalog_size: int
    expanded_entries: int
    generated_lines: int

    @property
    def text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


def needs_expansion(line: str) -> bool:
    """True for access-list commands (other than remarks) that reference an object."""
    return (
        line.startswith("access-list")
        and not REMARK_RE.match(line)
        and find_reference(line) is not None
    )


def original_remark(line: str) -> str:
    """Turn an ACE into a remark that preserves its original text."""
    match = ACL_NAME_RE.match(line)
    return f"{match.group(1)} remark ORIGINAL:{match.group(2)}"


class ConfigPrettyPrinter:
    """
    Runs preparation, catalog building and ACE expansion over one configuration.

    Options default to the application settings.
    """

    def __init__(
        self,
        substitute_names: Optional[bool] = None,
        group_commands: Optional[bool] = None,
        annotate_nat: Optional[bool] = None,
        expand_access_lists: Optional[bool] = None,
        max_depth: Optional[int] = None,
    ):
        self.preprocessor = ConfigPreprocessor(
            substitute_names=settings.SUBSTITUTE_NAMES if substitute_names is None else substitute_names,
            group_commands=settings.GROUP_COMMANDS if group_commands is None else group_commands,
        )
        self.builder = ObjectCatalogBuilder(
            annotate_nat=settings.ANNOTATE_NAT if annotate_nat is None else annotate_nat,
        )
        self.expand_access_lists = (
            settings.EXPAND_ACCESS_LISTS if expand_access_lists is None else expand_access_lists
        )
        self.max_depth = max_depth

    def render(self, content: str) -> PrettyResult:
        return self.render_lines(content.splitlines())

    def render_lines(self, raw_lines: Iterable[str]) -> PrettyResult:
        raw_lines = list(raw_lines)
        prepared = self.preprocessor.prepare(raw_lines)
        build = self.builder.build(prepared.lines)
        expander = AceExpander(build.catalog, max_depth=self.max_depth)

        output: List[str] = []
        expanded_entries = 0
        generated_lines = 0
        for line in build.lines:
            if self.expand_access_lists and needs_expansion(line):
                expanded = expander.expand(line)
                output.append(original_remark(line))
                output.extend(expanded)
                expanded_entries += 1
                generated_lines += len(expanded)
            else:
                output.append(line)

        logger.info(
            f"Rendered configuration: {len(raw_lines)} input lines -> {len(output)} output lines, "
            f"{expanded_entries} ACEs expanded into {generated_lines} lines"
        )
        return PrettyResult(
            lines=output,
            version=prepared.version,
            pre83=prepared.pre83,
            input_lines=len(raw_lines),
            catalog_size=len(build.catalog),
            expanded_entries=expanded_entries,
            generated_lines=generated_lines,
        )
