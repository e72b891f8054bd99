"""verbump: locate and rewrite version numbers in project files.

Typical use:
    from verbump import NumberingOptions, open_stream, Slot

    stream = open_stream('Properties/AssemblyInfo.cs', NumberingOptions.from_env())
    current = stream.get_versions()
    stream.save_version(Slot.FILE, current.file.increment(stream.options))
"""

from .config import BatchScheme, NumberingOptions
from .exceptions import (
    ConfigurationError,
    FileAccessError,
    FormatError,
    InvariantViolation,
    UnsupportedFormatError,
    UnsupportedSlotError,
    VerbumpException,
    VersionOverflowError,
)
from .provider import NewVersionProvider
from .streams import VersionStream, open_stream
from .versioning import Component, Slot, VersionSet, VersionValue, apply_pattern

__version__ = '0.1.0'

__all__ = [
    'BatchScheme', 'NumberingOptions', 'NewVersionProvider',
    'VersionStream', 'open_stream',
    'Component', 'Slot', 'VersionSet', 'VersionValue', 'apply_pattern',
    'ConfigurationError', 'FileAccessError', 'FormatError', 'InvariantViolation',
    'UnsupportedFormatError', 'UnsupportedSlotError', 'VerbumpException', 'VersionOverflowError',
]
