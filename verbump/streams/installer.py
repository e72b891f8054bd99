"""Installer projects: Visual Studio setup projects and InstallShield LE.

Both keep the product version on a single keyed line and tie it to GUID
codes that Windows Installer expects to change with the version:

    .vdproj   "ProductVersion" = "8:1.0.0"
              "ProductCode" = "8:{...}"
              "PackageCode" = "8:{...}"
    .isl      <row><td>ProductVersion</td><td>1.0.0</td><td/></row>
              <row><td>ProductCode</td><td>{...}</td><td/></row>

CAB and merge module setup projects carry a four component ``"Version"``
instead and have no codes to regenerate.
"""

import logging
import re
from typing import Callable, Dict, Optional, Tuple

from ..exceptions import FormatError
from ..versioning.patterns import (
    CAB_PROJECT_TYPES,
    GUID,
    GUID_RE,
    ISL_VERSION,
    SETUP_CAB_VERSION,
    SETUP_MSI_VERSION,
    SETUP_PROJECT_TYPE_RE,
    isl_row_pattern,
    setup_key_line_pattern,
)
from ..versioning.validator import MAX_COMPONENTS, SETUP_MAX_COMPONENTS
from ..versioning.value import VersionValue
from ..versioning.version_set import Slot
from .base import AnchorNotFound, new_identifier, splice_within

logger = logging.getLogger('verbump.streams.installer')

LinePattern = Callable[[str, str], 're.Pattern[str]']


class KeyedLineAdapter:
    """Product version on one keyed line, plus optional GUID code lines."""

    slots = (Slot.INFORMATIONAL,)
    allows_free_text = False

    def __init__(self, name: str, line_pattern: LinePattern, version_key: str, version: str,
                 components: int, identifier_keys: Tuple[str, ...] = (), exact_components: bool = False):
        self.name = name
        self.version_key = version_key
        self.max_components = components
        self.exact_components = exact_components
        self.identifier_keys = identifier_keys
        self.version_pattern = re.compile(version)
        self._version_line = line_pattern(version_key, version)
        self._code_lines = {key: line_pattern(key, GUID) for key in identifier_keys}

    def locate(self, text: str, slot: Slot) -> Optional[str]:
        if slot not in self.slots:
            return None
        match = self._version_line.search(text)
        return match.group(0) if match else None

    def substitute(self, text: str, slot: Slot, value: VersionValue) -> str:
        if self.exact_components and len(value) != self.max_components:
            raise FormatError(str(value), f'Version must consist of exactly {self.max_components} components')
        match = self._version_line.search(text)
        if match is None:
            raise AnchorNotFound(self.version_key)
        return splice_within(text, match.start(), match.group(0), self.version_pattern, value.format())

    def regenerate_identifiers(self, text: str) -> Tuple[str, Dict[str, str]]:
        codes: Dict[str, str] = {}
        for key, pattern in self._code_lines.items():
            match = pattern.search(text)
            if match is None:
                raise AnchorNotFound(key)
            code = new_identifier()
            text = splice_within(text, match.start(), match.group(0), GUID_RE, code)
            codes[key] = code
            logger.debug('new %s %s', key, code)
        return text, codes

    def __repr__(self):
        return f'KeyedLineAdapter({self.name!r}, key={self.version_key!r})'


def project_type(text: str) -> Optional[str]:
    """ProjectType GUID of a setup project, upper-cased."""
    match = SETUP_PROJECT_TYPE_RE.search(text)
    if match is None:
        return None
    return GUID_RE.search(match.group(0)).group(0).upper()


def setup_project_adapter(text: str) -> KeyedLineAdapter:
    """Adapter for a ``.vdproj`` file, chosen by its ProjectType."""
    kind = project_type(text)
    if kind in CAB_PROJECT_TYPES:
        logger.debug('setup project type %s (%s)', kind, CAB_PROJECT_TYPES[kind])
        return KeyedLineAdapter('setup', setup_key_line_pattern, 'Version', SETUP_CAB_VERSION,
                                MAX_COMPONENTS, exact_components=True)
    return KeyedLineAdapter('setup', setup_key_line_pattern, 'ProductVersion', SETUP_MSI_VERSION,
                            SETUP_MAX_COMPONENTS, identifier_keys=('PackageCode', 'ProductCode'),
                            exact_components=True)


def installshield_adapter(text: str = '') -> KeyedLineAdapter:
    """Adapter for an InstallShield LE project (``.isl``)."""
    return KeyedLineAdapter('installshield', isl_row_pattern, 'ProductVersion', ISL_VERSION,
                            MAX_COMPONENTS, identifier_keys=('ProductCode',))
