"""Version Numbers Module.

Value types for the version numbers found in project files.

Architecture:
- value.py: VersionValue, a 2 to 4 component version with wildcards
- version_set.py: Slot and VersionSet, the three versions a project carries
- validator.py: Slot-aware version format validation
- patterns.py: Version text patterns database
"""

from .value import (
    EMPTY,
    MAX_COMPONENT,
    MIN_VALUE,
    PLACEHOLDER,
    WILDCARD,
    Component,
    VersionValue,
    apply_pattern,
)
from .validator import is_valid_pattern, is_valid_version_string, validate_version_string
from .version_set import SLOTS, Slot, VersionSet

__all__ = [
    'EMPTY', 'MAX_COMPONENT', 'MIN_VALUE', 'PLACEHOLDER', 'WILDCARD',
    'Component', 'VersionValue', 'apply_pattern',
    'SLOTS', 'Slot', 'VersionSet',
    'is_valid_pattern', 'is_valid_version_string', 'validate_version_string',
]
