"""
Platform and software version detection for ASA/PIX configurations.
"""
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

# "name" handling changed substantially in 8.3
NAMES_CHANGE_VERSION = 8.3

VERSION_LINE_RE = re.compile(r"^(?:ASA|PIX)\s+Version")
VERSION_NUMBER_RE = re.compile(r"^(?:ASA|PIX)\s+Version\s+(\d+\.\d+)")


def parse_version_line(line: str) -> Optional[float]:
    """
    Extract the software version from an ``ASA Version``/``PIX Version`` line.

    Returns:
        The major.minor version, 8.3 if the line carries no readable number,
        or None if the line is not a version line.
    """
    if not VERSION_LINE_RE.match(line):
        return None
    match = VERSION_NUMBER_RE.match(line)
    if not match:
        logger.warning(f"Unreadable version line, assuming {NAMES_CHANGE_VERSION}: {line.strip()}")
        return NAMES_CHANGE_VERSION
    return float(match.group(1))


def is_pre83(version: Optional[float]) -> bool:
    return version is not None and version < NAMES_CHANGE_VERSION


def looks_like_asa_config(config_content: str) -> bool:
    """
    Check whether content looks like a Cisco ASA or PIX configuration.
    Uses the same kind of indicators the device prints in a running config.
    """
    config_lower = config_content.lower()

    asa_indicators = [
        "cisco adaptive security appliance",
        "asa version",
        "pix version",
        "object-group ",
        "object network ",
        "object service ",
        "same-security-traffic",
        "nameif ",
        "access-list ",
    ]
    if any(indicator in config_lower for indicator in asa_indicators):
        return True

    logger.warning("Content does not look like an ASA/PIX configuration")
    return False
