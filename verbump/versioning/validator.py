"""Version validation utilities.

Validates version strings against the rules of the slot they go into.
"""

import re
from typing import Optional, Union

from .value import MAX_COMPONENT
from .version_set import Slot


MIN_COMPONENTS = 2
MAX_COMPONENTS = 4
# MSI setup projects carry major.minor.build only
SETUP_MAX_COMPONENTS = 3

_DIGITS = re.compile(r'^[0-9]+$')
_COMMA_SEPARATED = re.compile(r'\s*,\s*')


def normalize_version(version: str) -> str:
    """Normalize version string format.

    Examples:
        "1, 0, 0, 1" -> "1.0.0.1"
        " 2.1 " -> "2.1"
    """
    if not version:
        return ''
    return _COMMA_SEPARATED.sub('.', version.strip())


def is_wildcard_allowed(slot: Union[Slot, str]) -> bool:
    """Only the primary version may leave components to the toolchain."""
    return Slot.coerce(slot) is Slot.PRIMARY


def validate_version_string(version: str, slot: Union[Slot, str] = Slot.PRIMARY,
                            max_components: int = MAX_COMPONENTS) -> Optional[str]:
    """Check a version string for ``slot``.

    Returns:
        None when valid, otherwise a human-readable reason.
    """
    if version is None or not version.strip():
        return 'Invalid version string'
    version = version.strip()
    if version.endswith('.'):
        return 'Version must not end with dot'
    parts = version.split('.')
    if len(parts) < MIN_COMPONENTS:
        return f'Version must consist of at least {MIN_COMPONENTS} components'
    if len(parts) > max_components:
        return f'Version must consist of at most {max_components} components'
    wildcard_allowed = is_wildcard_allowed(slot)
    for part in parts[:MIN_COMPONENTS]:
        if not _DIGITS.match(part):
            if part.startswith('-') and _DIGITS.match(part[1:]):
                return 'Version must not contain negative integers'
            return 'Version may consist of non-negative integers'
        if int(part) > MAX_COMPONENT:
            return f'Version must be smaller than {MAX_COMPONENT + 1}'
    if wildcard_allowed and len(parts) > 3 and parts[2] == '*':
        return 'Asterisk may appear only at the end of version string'
    for part in parts[MIN_COMPONENTS:]:
        if part == '*':
            if not wildcard_allowed:
                return 'Asterisk not allowed'
            continue
        if not _DIGITS.match(part):
            if part.startswith('-') and _DIGITS.match(part[1:]):
                return 'Version must not contain negative integers'
            if wildcard_allowed:
                return 'Version may consist of non-negative integers or a single asterisk character'
            return 'Version may consist of non-negative integers'
        if int(part) > MAX_COMPONENT:
            return f'Version must be smaller than {MAX_COMPONENT + 1}'
    return None


def is_valid_version_string(version: str, slot: Union[Slot, str] = Slot.PRIMARY,
                            max_components: int = MAX_COMPONENTS) -> bool:
    return validate_version_string(version, slot, max_components) is None


def is_valid_pattern(pattern: str) -> bool:
    """A pattern has exactly four components: numbers, ``*`` or ``+``."""
    if not pattern:
        return False
    sections = pattern.split('.')
    if len(sections) != 4:
        return False
    for section in sections:
        if section in ('*', '+'):
            continue
        if not _DIGITS.match(section) or int(section) > MAX_COMPONENT:
            return False
    return True
