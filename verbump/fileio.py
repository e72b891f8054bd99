"""Reading and writing version-bearing text files.

Files are decoded from raw bytes so line endings and the byte order mark
survive a load/save cycle unchanged.
"""

import codecs
import fnmatch
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple, Union

from .exceptions import ConfigurationError, FileAccessError

logger = logging.getLogger('verbump.fileio')

PathLike = Union[str, os.PathLike]

# UTF-32 LE must be tried before UTF-16 LE, they share the first two bytes
_BOMS = (
    (codecs.BOM_UTF32_LE, 'utf-32-le'),
    (codecs.BOM_UTF32_BE, 'utf-32-be'),
    (codecs.BOM_UTF8, 'utf-8'),
    (codecs.BOM_UTF16_LE, 'utf-16-le'),
    (codecs.BOM_UTF16_BE, 'utf-16-be'),
)


@dataclass(frozen=True)
class TextEncoding:
    """Codec name plus the byte order mark the file started with."""

    name: str
    bom: bytes = b''

    def encode(self, text: str) -> bytes:
        return self.bom + text.encode(self.name)

    def __str__(self):
        return f'{self.name} (BOM)' if self.bom else self.name


def sniff_encoding(data: bytes, fallback: str = 'cp1252') -> TextEncoding:
    """BOM first, then strict UTF-8, then ``fallback``."""
    for bom, name in _BOMS:
        if data.startswith(bom):
            return TextEncoding(name, bom)
    try:
        data.decode('utf-8')
    except UnicodeDecodeError:
        return TextEncoding(fallback)
    return TextEncoding('utf-8')


def read_text_file(path: PathLike, fallback_encoding: str = 'cp1252') -> Tuple[str, TextEncoding]:
    """Load a file and return its text together with the encoding used.

    Raises:
        FileAccessError: missing, unreadable, empty or undecodable file
        ConfigurationError: ``fallback_encoding`` is not a known codec
    """
    try:
        codecs.lookup(fallback_encoding)
    except LookupError:
        raise ConfigurationError('VERBUMP_FALLBACK_ENCODING', f'unknown encoding {fallback_encoding!r}') from None
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except FileNotFoundError:
        raise FileAccessError(str(path), 'file not found') from None
    except OSError as exc:
        raise FileAccessError(str(path), exc.strerror or str(exc)) from exc
    encoding = sniff_encoding(data, fallback_encoding)
    try:
        text = data[len(encoding.bom):].decode(encoding.name)
    except UnicodeDecodeError as exc:
        raise FileAccessError(str(path), f'cannot decode as {encoding.name}: {exc.reason}') from exc
    if not text:
        raise FileAccessError(str(path), 'file is empty')
    logger.debug('loaded path=%s encoding=%s chars=%d', path, encoding, len(text))
    return text, encoding


def write_text_file(path: PathLike, text: str, encoding: TextEncoding) -> None:
    """Write ``text`` back with the encoding and BOM it was read with.

    A read-only file (typical for files checked out of source control) is
    made writable first.

    Raises:
        FileAccessError: the file vanished, cannot be made writable or the
            text cannot be encoded
    """
    file_path = Path(path)
    try:
        payload = encoding.encode(text)
    except UnicodeEncodeError as exc:
        raise FileAccessError(str(path), f'cannot encode as {encoding.name}: {exc.reason}') from exc
    try:
        mode = file_path.stat().st_mode
        if not mode & stat.S_IWRITE:
            logger.info('clearing read-only attribute path=%s', path)
            file_path.chmod(mode | stat.S_IWRITE)
        file_path.write_bytes(payload)
    except FileNotFoundError:
        raise FileAccessError(str(path), 'file not found') from None
    except OSError as exc:
        raise FileAccessError(str(path), exc.strerror or str(exc)) from exc
    logger.debug('saved path=%s encoding=%s bytes=%d', path, encoding, len(payload))


def filename_matches(path: PathLike, patterns: Iterable[str]) -> bool:
    """Case-insensitive wildcard match of the file name against ``patterns``."""
    name = Path(path).name.lower()
    return any(fnmatch.fnmatch(name, pattern.lower()) for pattern in patterns)
