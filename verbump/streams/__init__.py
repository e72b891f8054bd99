"""Version Streams Module.

Reads and rewrites the versions stored in project files, one adapter per
file format.

Architecture:
- base.py: VersionStream, the shared locate/extract/substitute algorithm
- attribute.py: Assembly attributes in .cs, .vb, .cpp and .jsl sources
- resource.py: VERSIONINFO resources in .rc scripts
- installer.py: .vdproj setup projects and .isl InstallShield LE projects

Adapters are picked by file extension; files with an unknown extension are
sniffed for a recognizable version block.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from ..config import NumberingOptions
from ..exceptions import UnsupportedFormatError
from ..fileio import PathLike, filename_matches, read_text_file
from ..versioning.patterns import VERSIONINFO_HEADER_RE
from .attribute import AttributeAdapter
from .base import FormatAdapter, StreamState, VersionStream
from .installer import installshield_adapter, setup_project_adapter
from .resource import ResourceScriptAdapter

logger = logging.getLogger('verbump.streams')

AdapterFactory = Callable[[str], FormatAdapter]

_REGISTRY: Dict[str, AdapterFactory] = {}

# content signatures tried in order for unregistered extensions
_SNIFFERS: List[Tuple['re.Pattern[str]', AdapterFactory]] = [
    (VERSIONINFO_HEADER_RE, lambda text: ResourceScriptAdapter()),
    (re.compile(r'^\s*"DeployProject"', re.MULTILINE), setup_project_adapter),
    (re.compile(r'<row><td>ProductVersion</td>'), installshield_adapter),
]


def register_adapter(extension: str, factory: AdapterFactory) -> None:
    """Register ``factory`` (called with the file text) for ``extension``."""
    if not extension.startswith('.'):
        extension = '.' + extension
    _REGISTRY[extension.lower()] = factory


def _attribute_factory(extension: str) -> AdapterFactory:
    return lambda text: AttributeAdapter(extension)


for _extension in ('.cs', '.vb', '.cpp', '.jsl'):
    register_adapter(_extension, _attribute_factory(_extension))
register_adapter('.rc', lambda text: ResourceScriptAdapter())
register_adapter('.vdproj', setup_project_adapter)
register_adapter('.isl', installshield_adapter)


def supported_extensions() -> Tuple[str, ...]:
    return tuple(sorted(_REGISTRY))


def is_version_file(path: PathLike) -> bool:
    """Does the extension belong to a registered format?"""
    return filename_matches(path, ['*' + extension for extension in _REGISTRY])


def adapter_for(path: PathLike, text: str) -> FormatAdapter:
    """Pick the adapter for ``path`` by extension, falling back to content.

    Raises:
        UnsupportedFormatError: neither extension nor content is recognized
    """
    factory: Optional[AdapterFactory] = _REGISTRY.get(Path(path).suffix.lower())
    if factory is None:
        for signature, candidate in _SNIFFERS:
            if signature.search(text):
                logger.debug('format sniffed path=%s signature=%s', path, signature.pattern)
                factory = candidate
                break
    if factory is None:
        raise UnsupportedFormatError(str(path))
    return factory(text)


def open_stream(path: PathLike, options: Optional[NumberingOptions] = None) -> VersionStream:
    """Load ``path`` and bind it to the matching format adapter.

    Raises:
        FileAccessError: the file cannot be read
        UnsupportedFormatError: no adapter recognizes the file
    """
    options = options or NumberingOptions()
    text, encoding = read_text_file(path, options.fallback_encoding)
    adapter = adapter_for(path, text)
    return VersionStream(path, adapter, options, text=text, encoding=encoding)


__all__ = [
    'AdapterFactory', 'FormatAdapter', 'StreamState', 'VersionStream',
    'adapter_for', 'is_version_file', 'open_stream', 'register_adapter', 'supported_extensions',
]
