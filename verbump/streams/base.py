"""Version stream: one loaded file and the version slots inside it.

The stream owns the text buffer; a format adapter knows where the versions
sit in that text. Reading locates each slot with the adapter's coarse
pattern and picks the version token out of it. Writing asks the adapter for
a rewritten buffer, then persists it.

A stream is single-writer and not thread-safe: confine it to one thread.
"""

import enum
import logging
import uuid
from typing import Dict, Optional, Pattern, Protocol, Tuple, Union

from ..config import NumberingOptions
from ..exceptions import (
    FormatError,
    InvariantViolation,
    UnsupportedSlotError,
    VerbumpException,
)
from ..fileio import PathLike, TextEncoding, read_text_file, write_text_file
from ..metrics import SaveTimer, record_error, record_identifiers, record_load, record_save
from ..versioning.patterns import QUOTED_STRING_RE
from ..versioning.validator import MAX_COMPONENTS, normalize_version, validate_version_string
from ..versioning.value import EMPTY, VersionValue
from ..versioning.version_set import SLOTS, Slot, VersionSet

logger = logging.getLogger('verbump.streams')


class StreamState(enum.Enum):
    LOADED = 'loaded'  # buffer may hold changes not yet on disk
    PERSISTED = 'persisted'


class AnchorNotFound(LookupError):
    """Raised by adapters when the text a rewrite needs is missing."""

    def __init__(self, anchor: str):
        super().__init__(anchor)
        self.anchor = anchor


class FormatAdapter(Protocol):
    """What a file format contributes to a ``VersionStream``."""

    name: str
    slots: Tuple[Slot, ...]
    max_components: int
    allows_free_text: bool
    version_pattern: Pattern[str]
    identifier_keys: Tuple[str, ...]

    def locate(self, text: str, slot: Slot) -> Optional[str]:
        """Text carrying ``slot``, or None when the file does not have it."""

    def substitute(self, text: str, slot: Slot, value: VersionValue) -> str:
        """Return ``text`` with ``slot`` rewritten; raise AnchorNotFound."""

    def regenerate_identifiers(self, text: str) -> Tuple[str, Dict[str, str]]:
        """Return ``text`` with fresh codes and the codes by key."""


# ============ Splice helpers ============


def splice(text: str, start: int, end: int, replacement: str) -> str:
    return text[:start] + replacement + text[end:]


def splice_within(text: str, outer_start: int, outer: str, inner_pattern: Pattern[str],
                  replacement: str) -> Optional[str]:
    """Replace the first ``inner_pattern`` hit inside ``outer``.

    ``outer`` is the matched text starting at ``outer_start`` in ``text``.
    Returns None when the inner pattern does not occur.
    """
    inner = inner_pattern.search(outer)
    if inner is None:
        return None
    return splice(text, outer_start + inner.start(), outer_start + inner.end(), replacement)


def new_identifier() -> str:
    """Upper-case braced GUID as used by installer projects."""
    return '{' + str(uuid.uuid4()).upper() + '}'


# ============ Extraction ============


def extract_version(adapter: FormatAdapter, text: str, slot: Slot,
                    allow_arbitrary_informational: bool = True) -> VersionValue:
    """Locate ``slot`` in ``text`` and build its value.

    Missing slots give ``EMPTY``. Text found where a version was expected
    but failing validation gives an invalid value carrying the reason, or a
    free-form value for informational text when the format and the policy
    allow arbitrary text there.
    """
    located = adapter.locate(text, slot)
    if located is None:
        return EMPTY
    match = adapter.version_pattern.search(located)
    if match is not None:
        token = match.group(0)
    else:
        quoted = QUOTED_STRING_RE.search(located)
        token = quoted.group(0)[1:-1] if quoted else located.strip()
    return make_version(token, slot, adapter.max_components,
                        allow_arbitrary_informational and adapter.allows_free_text)


def make_version(token: str, slot: Slot, max_components: int = MAX_COMPONENTS,
                 allow_free_text: bool = False) -> VersionValue:
    reason = validate_version_string(normalize_version(token), slot, max_components)
    if reason is None:
        return VersionValue.parse(token)
    if slot is Slot.INFORMATIONAL and allow_free_text and token.strip():
        return VersionValue.free_text(token)
    logger.debug('invalid version slot=%s token=%r reason=%s', slot.key, token, reason)
    return VersionValue.invalid(token, reason)


# ============ Stream ============


class VersionStream:
    """A loaded file exposing get/save of its version slots.

    Usage:
        stream = VersionStream('AssemblyInfo.cs', AttributeAdapter('.cs'))
        versions = stream.get_versions()
        stream.save_version(Slot.FILE, versions.file.increment(options))
    """

    def __init__(self, path: PathLike, adapter: FormatAdapter, options: Optional[NumberingOptions] = None,
                 text: Optional[str] = None, encoding: Optional[TextEncoding] = None):
        self.path = str(path)
        self.adapter = adapter
        self.options = options or NumberingOptions()
        if text is None:
            text, encoding = read_text_file(path, self.options.fallback_encoding)
        self._text = text
        self.encoding = encoding or TextEncoding('utf-8')
        self._state = StreamState.LOADED
        self._saved_text = text
        record_load(adapter.name)
        logger.debug('stream opened path=%s format=%s encoding=%s', self.path, adapter.name, self.encoding)

    @property
    def text(self) -> str:
        return self._text

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def has_unsaved_changes(self) -> bool:
        return self._text != self._saved_text

    @property
    def format_name(self) -> str:
        return self.adapter.name

    def supports(self, slot: Union[Slot, str]) -> bool:
        return Slot.coerce(slot) in self.adapter.slots

    def get_version(self, slot: Union[Slot, str]) -> VersionValue:
        slot = Slot.coerce(slot)
        if slot not in self.adapter.slots:
            return EMPTY
        return extract_version(self.adapter, self._text, slot, self.options.allow_arbitrary_informational)

    def get_versions(self) -> VersionSet:
        """Current value of every slot; slots the format lacks are ``EMPTY``."""
        return VersionSet(*(self.get_version(slot) for slot in SLOTS))

    def save_version(self, slot: Union[Slot, str], value: Union[VersionValue, str],
                     flush: bool = True) -> Dict[str, str]:
        """Rewrite ``slot`` with ``value``.

        Returns the package/product codes regenerated alongside (empty unless
        ``generate_package_and_product_codes`` is set and the format has
        codes).

        Raises:
            UnsupportedSlotError: the format does not carry ``slot``
            FormatError: ``value`` is not acceptable for ``slot``
            InvariantViolation: the slot text vanished from the buffer
            FileAccessError: writing failed (only when ``flush``)
        """
        slot = Slot.coerce(slot)
        if slot not in self.adapter.slots:
            error = UnsupportedSlotError(self.path, slot.attribute_name, self.adapter.name)
            record_error(error.error_code)
            raise error
        with SaveTimer() as timer:
            try:
                value = self._accepted_value(slot, value)
                try:
                    text = self.adapter.substitute(self._text, slot, value)
                except AnchorNotFound as exc:
                    raise InvariantViolation(self.path, slot.attribute_name, exc.anchor) from exc
                codes: Dict[str, str] = {}
                if self.options.generate_package_and_product_codes:
                    text, codes = self._with_new_identifiers(text)
                self._text = text
                self._state = StreamState.LOADED
                logger.info('version saved path=%s slot=%s value=%s', self.path, slot.key, value)
                if flush:
                    self.flush()
            except VerbumpException as exc:
                record_error(exc.error_code)
                raise
            record_save(self.adapter.name, slot.key, timer.duration)
        return codes

    def regenerate_identifiers(self, flush: bool = False) -> Dict[str, str]:
        """Give the file fresh package/product codes.

        Returns the new codes by key; formats without codes return ``{}``.
        """
        self._text, codes = self._with_new_identifiers(self._text)
        if codes:
            self._state = StreamState.LOADED
        if flush:
            self.flush()
        return codes

    def _with_new_identifiers(self, text: str) -> Tuple[str, Dict[str, str]]:
        if not self.adapter.identifier_keys:
            return text, {}
        try:
            text, codes = self.adapter.regenerate_identifiers(text)
        except AnchorNotFound as exc:
            raise InvariantViolation(self.path, 'identifiers', exc.anchor) from exc
        record_identifiers(self.adapter.name, len(codes))
        logger.info('identifiers regenerated path=%s keys=%s', self.path, ','.join(sorted(codes)))
        return text, codes

    def flush(self) -> None:
        write_text_file(self.path, self._text, self.encoding)
        self._saved_text = self._text
        self._state = StreamState.PERSISTED

    def _accepted_value(self, slot: Slot, value: Union[VersionValue, str]) -> VersionValue:
        allow_free_text = self.options.allow_arbitrary_informational and self.adapter.allows_free_text
        if isinstance(value, VersionValue):
            if value.is_free_form and slot is Slot.INFORMATIONAL and allow_free_text:
                return value
            if not value.is_numeric:
                raise FormatError(value.raw, value.error or 'Version is not numeric')
            token = value.format()
        else:
            token = str(value).strip()
        result = make_version(token, slot, self.adapter.max_components, allow_free_text)
        if not result.is_valid:
            raise FormatError(token, result.error)
        return result

    def __repr__(self):
        return f'VersionStream({self.path!r}, format={self.adapter.name!r}, state={self._state.value})'
