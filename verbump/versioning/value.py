"""Four-component version numbers.

A component is a non-negative integer, a wildcard (``*``, assigned later by
the toolchain) or an auto-increment placeholder (``+``, only meaningful in
patterns). Values are immutable: every operation returns a new instance.

Usage:
    current = VersionValue.parse('1.2.3.4')
    proposed = current.increment_component('build', options)
    synced = apply_pattern('1.+.*.*', current)
"""

import enum
import logging
import re
from functools import total_ordering
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple, Union

from ..exceptions import FormatError, VersionOverflowError

if TYPE_CHECKING:
    from ..config import NumberingOptions

logger = logging.getLogger('verbump.versioning')

WILDCARD = -1
PLACEHOLDER = -2
MAX_COMPONENT = 65534

# sorts below every numeric version
_NON_NUMERIC = (-3, -3, -3, -3)

_SEPARATOR_RE = re.compile(r'\s*[.,]\s*')
_COMPONENT_RE = re.compile(r'^(?:[0-9]+|\*|\+)$')


class Component(enum.IntEnum):
    MAJOR = 0
    MINOR = 1
    BUILD = 2
    REVISION = 3

    @classmethod
    def coerce(cls, which: Union['Component', int, str]) -> 'Component':
        if isinstance(which, str):
            try:
                return cls[which.strip().upper()]
            except KeyError:
                raise ValueError(f'unknown version component: {which!r}') from None
        return cls(which)

    @property
    def label(self) -> str:
        return self.name.lower()


def _render(component: int) -> str:
    if component == WILDCARD:
        return '*'
    if component == PLACEHOLDER:
        return '+'
    return str(component)


@total_ordering
class VersionValue:
    """Immutable version number with 2 to 4 components.

    Non-numeric values exist too: ``EMPTY`` (no version at all), invalid
    values (text found where a version was expected, kept with the reason
    it was rejected) and free-form values (arbitrary informational text
    accepted by policy). They render their raw text and sort below every
    numeric value.
    """

    __slots__ = ('_components', '_raw', '_error', '_free_form')

    def __init__(self, components: Sequence[int] = (), raw: str = '',
                 error: Optional[str] = None, free_form: bool = False):
        components = tuple(int(c) for c in components)
        if components and not 2 <= len(components) <= 4:
            raise ValueError(f'version must have 2 to 4 components, got {len(components)}')
        for component in components:
            if component > MAX_COMPONENT:
                raise FormatError('.'.join(map(str, components)), f'Version must be smaller than {MAX_COMPONENT + 1}')
            if component < 0 and component not in (WILDCARD, PLACEHOLDER):
                raise FormatError('.'.join(map(str, components)),
                                  'Version may consist of non-negative integers, "*" or "+"')
        object.__setattr__(self, '_components', components)
        object.__setattr__(self, '_raw', raw)
        object.__setattr__(self, '_error', error)
        object.__setattr__(self, '_free_form', free_form)

    def __setattr__(self, name, value):
        raise AttributeError('VersionValue is immutable')

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, token: str, pad: Optional[int] = None) -> 'VersionValue':
        """Parse ``component ("." component){1,3}``.

        Commas are accepted as separators so resource script headers
        (``1, 0, 0, 0``) parse directly. When ``pad`` is given, missing
        trailing components are filled with it up to four.

        Raises:
            FormatError: token does not match the grammar or a component
                exceeds ``MAX_COMPONENT``.
        """
        if token is None:
            raise FormatError('', 'Invalid version string')
        text = token.strip()
        if not text:
            raise FormatError(token, 'Invalid version string')
        parts = _SEPARATOR_RE.split(text)
        if not 2 <= len(parts) <= 4:
            raise FormatError(token, 'Version must consist of 2 to 4 components')
        components: List[int] = []
        for part in parts:
            if not _COMPONENT_RE.match(part):
                raise FormatError(token, 'Version may consist of non-negative integers, "*" or "+"')
            if part == '*':
                components.append(WILDCARD)
            elif part == '+':
                components.append(PLACEHOLDER)
            else:
                value = int(part)
                if value > MAX_COMPONENT:
                    raise FormatError(token, f'Version must be smaller than {MAX_COMPONENT + 1}')
                components.append(value)
        if pad is not None:
            components.extend([pad] * (4 - len(components)))
        return cls(components)

    @classmethod
    def of(cls, *components: int) -> 'VersionValue':
        return cls(components)

    @classmethod
    def invalid(cls, raw: str, reason: str) -> 'VersionValue':
        return cls(raw=raw, error=reason)

    @classmethod
    def free_text(cls, raw: str) -> 'VersionValue':
        return cls(raw=raw, free_form=True)

    # ------------------------------------------------------------------
    # inspection
    # ------------------------------------------------------------------

    @property
    def components(self) -> Tuple[int, ...]:
        return self._components

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_numeric(self) -> bool:
        return bool(self._components)

    @property
    def is_empty(self) -> bool:
        return not self._components and not self._raw and self._error is None

    @property
    def is_valid(self) -> bool:
        return self._error is None

    @property
    def is_free_form(self) -> bool:
        return self._free_form

    def __len__(self) -> int:
        return len(self._components)

    def __getitem__(self, which: Union[Component, int, str]) -> Optional[int]:
        index = Component.coerce(which)
        if index < len(self._components):
            return self._components[index]
        return None

    def contains_wildcard(self) -> bool:
        return WILDCARD in self._components

    def contains_placeholder(self) -> bool:
        return PLACEHOLDER in self._components

    # ------------------------------------------------------------------
    # ordering
    # ------------------------------------------------------------------

    def _key(self) -> Tuple[Tuple[int, ...], str]:
        if not self._components:
            return _NON_NUMERIC, self._raw
        key = list(self._components)
        if len(key) == 2:
            key.extend([0, 0])
        elif len(key) == 3:
            # "1.2.*" leaves the revision to the toolchain as well
            key.append(WILDCARD if key[Component.BUILD] == WILDCARD else 0)
        return tuple(key), ''

    def __eq__(self, other):
        if not isinstance(other, VersionValue):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, VersionValue):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    @staticmethod
    def max(first: 'VersionValue', second: 'VersionValue') -> 'VersionValue':
        """Return the higher of two versions; a non-numeric operand always loses."""
        if not second.is_numeric:
            return first
        if not first.is_numeric:
            return second
        return second if second > first else first

    def compare_to_pattern(self, pattern: Union[str, 'VersionValue']) -> int:
        """Compare against a 4-component pattern.

        A ``*`` position in the pattern is equal to anything; a ``+`` makes
        the pattern higher. Returns -1, 0 or 1 like ``cmp``.
        """
        pat = _pattern_components(pattern)
        key = self._key()[0]
        for mine, theirs in zip(key, pat):
            if theirs == PLACEHOLDER:
                return -1
            if theirs == WILDCARD:
                continue
            if mine < theirs:
                return -1
            if mine > theirs:
                return 1
        return 0

    def is_pattern_higher(self, pattern: Union[str, 'VersionValue']) -> bool:
        """Would applying ``pattern`` raise this version?"""
        other = pattern if isinstance(pattern, VersionValue) else VersionValue.parse(pattern)
        mine = _wildcard_high(self._key()[0])
        theirs = _wildcard_high(other._key()[0])
        for a, b in zip(mine, theirs):
            if a != b:
                return b > a
            if a == b == _WILDCARD_RANK:
                return True
        return False

    # ------------------------------------------------------------------
    # derivation
    # ------------------------------------------------------------------

    def padded(self, fill: int = WILDCARD) -> 'VersionValue':
        if not self._components:
            return self
        return VersionValue(self._components + (fill,) * (4 - len(self._components)))

    def truncated(self, count: int) -> 'VersionValue':
        if not self._components or count >= len(self._components):
            return self
        return VersionValue(self._components[:count])

    def with_build_and_revision(self, build: int, revision: int, create_revision: bool = False) -> 'VersionValue':
        """Copy with build/revision replaced, keeping the component count.

        A 3-component value gains a revision only when its build is a
        wildcard and ``create_revision`` is set.
        """
        count = len(self._components)
        if count < 3:
            return self
        major, minor = self._components[:2]
        if count == 4 or (self._components[Component.BUILD] == WILDCARD and create_revision):
            return VersionValue((major, minor, build, revision))
        return VersionValue((major, minor, build))

    def increment(self, options: 'NumberingOptions') -> 'VersionValue':
        return self.increment_component(options.increment_scheme, options)

    def increment_component(self, which: Union[Component, int, str], options: 'NumberingOptions') -> 'VersionValue':
        """Increment one component by ``options.increment_by`` and apply resets.

        Incrementing major always resets minor to 0. Build and revision are
        reset to ``options.reset_to`` according to the per-component reset
        flags. Wildcards are never reset. An absent or wildcard component is
        left as is.

        Raises:
            VersionOverflowError: the incremented component would exceed
                ``MAX_COMPONENT``; ``self`` is unaffected.
        """
        component = Component.coerce(which)
        if not self._components:
            raise FormatError(self._raw, 'Cannot increment a non-numeric version')
        values = list(self._components)
        reset_to = options.reset_to
        if options.replace_asterisk_with_version_components:
            _resolve_wildcards(values, reset_to)

        def present(index: int) -> bool:
            return index < len(values) and values[index] >= 0

        if not present(component):
            logger.debug('increment skipped component=%s version=%s', component.label, self)
            return VersionValue(values)
        incremented = values[component] + options.increment_by
        if incremented > MAX_COMPONENT:
            raise VersionOverflowError(component.label, values[component])
        values[component] = incremented

        if component == Component.MAJOR:
            values[Component.MINOR] = 0
            if options.reset_build_on_major and present(Component.BUILD):
                values[Component.BUILD] = reset_to
            if options.reset_revision_on_major and present(Component.REVISION):
                values[Component.REVISION] = reset_to
        elif component == Component.MINOR:
            if options.reset_build_on_minor and present(Component.BUILD):
                values[Component.BUILD] = reset_to
            if options.reset_revision_on_minor and present(Component.REVISION):
                values[Component.REVISION] = reset_to
        elif component == Component.BUILD:
            if options.reset_revision_on_build and present(Component.REVISION):
                values[Component.REVISION] = reset_to
        return VersionValue(values)

    def apply_pattern(self, pattern: Union[str, 'VersionValue'], reset_to: Optional[int] = None,
                      options: Optional['NumberingOptions'] = None) -> 'VersionValue':
        return apply_pattern(pattern, self, reset_to, options)

    # ------------------------------------------------------------------
    # formatting
    # ------------------------------------------------------------------

    def format(self, full: bool = False) -> str:
        """Render as dotted text.

        The short form shows the components the version was written with;
        ``full`` always shows four, filling missing ones the way they
        compare (``1.2`` -> ``1.2.0.0``, ``1.2.*`` -> ``1.2.*.*``).
        """
        if not self._components:
            return self._raw
        components = self._key()[0] if full else self._components
        return '.'.join(_render(c) for c in components)

    def __str__(self):
        return self.format()

    def __repr__(self):
        if self.is_empty:
            return 'VersionValue.EMPTY'
        if not self._components:
            kind = 'free_text' if self._free_form else 'invalid'
            return f'VersionValue.{kind}({self._raw!r})'
        return f'VersionValue({self.format()!r})'


VersionValue.EMPTY = VersionValue()
VersionValue.MIN_VALUE = VersionValue((0, 0, 0, 0))

EMPTY = VersionValue.EMPTY
MIN_VALUE = VersionValue.MIN_VALUE

_WILDCARD_RANK = MAX_COMPONENT + 1


def _wildcard_high(key: Sequence[int]) -> Tuple[int, ...]:
    # a wildcard resolves at build time, so it ranks above any number
    return tuple(_WILDCARD_RANK if c == WILDCARD else c for c in key)


def _pattern_components(pattern: Union[str, VersionValue]) -> Tuple[int, ...]:
    value = pattern if isinstance(pattern, VersionValue) else VersionValue.parse(pattern)
    if len(value) != 4:
        raise FormatError(str(pattern), 'Version pattern must consist of 4 components')
    return value.components


def _resolve_wildcards(values: List[int], reset_to: int) -> None:
    if (len(values) == 3 and values[Component.BUILD] == WILDCARD) or \
       (len(values) == 4 and values[Component.REVISION] == WILDCARD):
        if len(values) == 3:
            values.append(reset_to)
        else:
            values[Component.REVISION] = reset_to
    if len(values) >= 3 and values[Component.BUILD] == WILDCARD:
        values[Component.BUILD] = reset_to


def _more_numbers(pattern: Sequence[int], start: int) -> bool:
    return any(c >= 0 for c in pattern[start:])


def _bump(value: int, component: Component) -> int:
    if value == WILDCARD:
        return value
    bumped = value + 1
    if bumped > MAX_COMPONENT:
        raise VersionOverflowError(component.label, value)
    return bumped


def apply_pattern(pattern: Union[str, VersionValue], current: VersionValue, reset_to: Optional[int] = None,
                  options: Optional['NumberingOptions'] = None) -> VersionValue:
    """Apply a 4-component pattern to ``current``.

    ``*`` keeps the current component, ``+`` adds one to it and a number is
    taken literally. The result keeps the component count of ``current``,
    except that a trailing wildcard in ``current`` is resolved and extended
    when the pattern has more numbers after it.

    With ``options`` the reset cascade applies as well: once major or minor
    changed, build and revision go back to ``reset_to`` per the reset flags
    (and revision also when build changed), whatever the pattern says.

    Raises:
        FormatError: pattern is not a valid 4-component pattern or
            ``current`` is not numeric.
        VersionOverflowError: a ``+`` pushed a component past the maximum.
    """
    pat = _pattern_components(pattern)
    if not current.is_numeric:
        raise FormatError(current.raw, 'Cannot apply a pattern to a non-numeric version')
    if reset_to is None:
        reset_to = options.reset_to if options is not None else 0
    cur = current.components
    count = len(cur)
    result: List[int] = []
    more_numbers = _more_numbers(pat, 0)
    i = 0
    while i < count:
        section = pat[i]
        if section == PLACEHOLDER:
            result.append(_bump(cur[i], Component(i)))
        elif section != WILDCARD:
            result.append(section)
        else:
            if more_numbers:
                more_numbers = _more_numbers(pat, i + 1)
            if more_numbers and cur[i] == WILDCARD:
                result.append(reset_to if i >= Component.BUILD else 0)
                i += 1
                break
            result.append(cur[i])
        i += 1
    if cur[i - 1] == WILDCARD and more_numbers:
        while i < 4 and _more_numbers(pat, i):
            base = reset_to if i >= Component.BUILD else 0
            if pat[i] == PLACEHOLDER:
                result.append(base + 1)
            elif pat[i] == WILDCARD:
                result.append(base)
            else:
                result.append(pat[i])
            i += 1
    if options is not None:
        _reset_cascade(cur, result, reset_to, options)
    return VersionValue(result)


def _reset_cascade(current: Sequence[int], result: List[int], reset_to: int, options: 'NumberingOptions') -> None:
    def changed(index: int) -> bool:
        return (index < len(current) and index < len(result)
                and current[index] >= 0 and result[index] >= 0
                and current[index] != result[index])

    major_changed = changed(Component.MAJOR)
    minor_changed = changed(Component.MINOR)
    if len(result) > Component.BUILD and result[Component.BUILD] >= 0:
        if (major_changed and options.reset_build_on_major) or (minor_changed and options.reset_build_on_minor):
            result[Component.BUILD] = reset_to
    build_changed = changed(Component.BUILD)
    if len(result) > Component.REVISION and result[Component.REVISION] >= 0:
        if (major_changed and options.reset_revision_on_major) \
                or (minor_changed and options.reset_revision_on_minor) \
                or (build_changed and options.reset_revision_on_build):
            result[Component.REVISION] = reset_to
