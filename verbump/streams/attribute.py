"""Attribute declarations in assembly info source files.

    [assembly: AssemblyVersion("1.0.*")]                  C#
    <Assembly: AssemblyFileVersion("1.0.0.0")>            Visual Basic
    [assembly:AssemblyInformationalVersion("1.0")]        C++/CLI
    /** @assembly AssemblyVersion("1.0.0.0") */           J#
"""

import re
from typing import Dict, Optional, Tuple

from ..exceptions import UnsupportedFormatError
from ..versioning.patterns import (
    ATTRIBUTE_DIALECTS,
    ATTRIBUTE_SUFFIX,
    ATTRIBUTE_VERSION_RE,
    QUOTED_STRING_RE,
    attribute_line_pattern,
)
from ..versioning.validator import MAX_COMPONENTS
from ..versioning.value import VersionValue
from ..versioning.version_set import SLOTS, Slot
from .base import AnchorNotFound, splice_within


class AttributeAdapter:
    """All three slots, one attribute declaration each."""

    name = 'attribute'
    slots = SLOTS
    max_components = MAX_COMPONENTS
    allows_free_text = True
    version_pattern = ATTRIBUTE_VERSION_RE
    identifier_keys: Tuple[str, ...] = ()

    def __init__(self, extension: str):
        extension = extension.lower()
        if extension not in ATTRIBUTE_DIALECTS:
            raise UnsupportedFormatError(extension)
        self.extension = extension
        self.dialect = ATTRIBUTE_DIALECTS[extension]
        # short name first, the full class name only when it is absent
        self._patterns: Dict[Slot, Tuple[re.Pattern, ...]] = {
            slot: (attribute_line_pattern(self.dialect, slot.attribute_name),
                   attribute_line_pattern(self.dialect, slot.attribute_name + ATTRIBUTE_SUFFIX))
            for slot in SLOTS
        }

    def _find(self, text: str, slot: Slot) -> Optional[re.Match]:
        for pattern in self._patterns[slot]:
            match = pattern.search(text)
            if match is not None:
                return match
        return None

    def locate(self, text: str, slot: Slot) -> Optional[str]:
        match = self._find(text, slot)
        return match.group(0) if match else None

    def substitute(self, text: str, slot: Slot, value: VersionValue) -> str:
        match = self._find(text, slot)
        if match is None:
            raise AnchorNotFound(f'{slot.attribute_name} attribute')
        result = splice_within(text, match.start(), match.group(0), QUOTED_STRING_RE, f'"{value}"')
        if result is None:
            raise AnchorNotFound(f'quoted argument of {slot.attribute_name}')
        return result

    def regenerate_identifiers(self, text: str) -> Tuple[str, Dict[str, str]]:
        return text, {}

    def __repr__(self):
        return f'AttributeAdapter({self.extension!r})'
