"""Unmanaged resource scripts (``*.rc``).

Each version appears twice after the ``VS_VERSION_INFO VERSIONINFO``
statement: as a header line and as a string table entry.

    VS_VERSION_INFO VERSIONINFO
     FILEVERSION 1,0,0,1
     PRODUCTVERSION 1,0,0,1
    ...
                VALUE "FileVersion", "1, 0, 0, 1\\0"
                VALUE "ProductVersion", "1.0\\0"

Both copies are rewritten. Headers take the full value, string table
entries keep the number of components they had. The separator a copy was
written with (``,``, ``, `` or ``.``) is kept.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..versioning.patterns import (
    BLOCK_KEYS,
    HEADER_KEYS,
    RESOURCE_SEPARATOR_RE,
    RESOURCE_VERSION_RE,
    VERSIONINFO_HEADER_RE,
    resource_block_pattern,
    resource_header_pattern,
)
from ..versioning.validator import MAX_COMPONENTS
from ..versioning.value import VersionValue
from ..versioning.version_set import Slot
from .base import AnchorNotFound, splice

logger = logging.getLogger('verbump.streams.resource')

_Edit = Tuple[int, int, str]


def _with_separator(existing: str, value: VersionValue) -> str:
    separator = RESOURCE_SEPARATOR_RE.search(existing)
    return (separator.group(0) if separator else '.').join(value.format().split('.'))


class ResourceScriptAdapter:
    name = 'resource'
    slots = (Slot.FILE, Slot.INFORMATIONAL)
    max_components = MAX_COMPONENTS
    allows_free_text = False
    version_pattern = RESOURCE_VERSION_RE
    identifier_keys: Tuple[str, ...] = ()

    def __init__(self):
        self._headers = {slot: resource_header_pattern(HEADER_KEYS[slot.key]) for slot in self.slots}
        self._blocks = {slot: resource_block_pattern(BLOCK_KEYS[slot.key]) for slot in self.slots}

    def locate(self, text: str, slot: Slot) -> Optional[str]:
        anchor = VERSIONINFO_HEADER_RE.search(text)
        if anchor is None or slot not in self.slots:
            return None
        header = self._headers[slot].search(text, anchor.end())
        return header.group(0) if header else None

    def substitute(self, text: str, slot: Slot, value: VersionValue) -> str:
        anchor = VERSIONINFO_HEADER_RE.search(text)
        if anchor is None:
            raise AnchorNotFound('VS_VERSION_INFO VERSIONINFO')
        edits: List[_Edit] = []
        for match in self._headers[slot].finditer(text, anchor.end()):
            edits.append(self._edit(match.start(), match.group(0), value))
        if not edits:
            raise AnchorNotFound(HEADER_KEYS[slot.key])
        for match in self._blocks[slot].finditer(text, anchor.end()):
            token = RESOURCE_VERSION_RE.search(match.group(0)).group(0)
            count = len(RESOURCE_SEPARATOR_RE.split(token))
            edits.append(self._edit(match.start(), match.group(0), value.truncated(count)))
        logger.debug('rewriting %d occurrences of %s', len(edits), slot.key)
        # back to front so earlier offsets stay valid
        for start, end, replacement in sorted(edits, reverse=True):
            text = splice(text, start, end, replacement)
        return text

    @staticmethod
    def _edit(offset: int, matched: str, value: VersionValue) -> _Edit:
        inner = RESOURCE_VERSION_RE.search(matched)
        return offset + inner.start(), offset + inner.end(), _with_separator(inner.group(0), value)

    def regenerate_identifiers(self, text: str) -> Tuple[str, Dict[str, str]]:
        return text, {}

    def __repr__(self):
        return 'ResourceScriptAdapter()'
