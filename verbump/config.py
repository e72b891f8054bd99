"""Numbering policy.

Settings come from environment variables (``VERBUMP_*``) so build scripts can
drive the engine without a configuration file. Every field can also be set
directly when constructing ``NumberingOptions``.
"""

import enum
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from .exceptions import ConfigurationError
from .versioning.value import Component


class BatchScheme(enum.Enum):
    """How a batch run picks the projects and values to update."""

    MODIFIED_INDEPENDENTLY = 'modified-independently'
    ALL_INDEPENDENTLY = 'all-independently'
    MODIFIED_AND_SYNCHRONIZE = 'modified-and-synchronize'
    ALL_AND_SYNCHRONIZE = 'all-and-synchronize'

    @property
    def synchronizes(self) -> bool:
        return self in (BatchScheme.MODIFIED_AND_SYNCHRONIZE, BatchScheme.ALL_AND_SYNCHRONIZE)


@dataclass
class NumberingOptions:
    increment_by: int = 1
    increment_scheme: Component = Component.REVISION
    batch_scheme: BatchScheme = BatchScheme.MODIFIED_INDEPENDENTLY
    reset_to: int = 0
    reset_build_on_major: bool = True
    reset_build_on_minor: bool = True
    reset_revision_on_major: bool = True
    reset_revision_on_minor: bool = True
    reset_revision_on_build: bool = True
    replace_asterisk_with_version_components: bool = False
    use_datetime_build_and_revision: bool = False
    synchronize_all_slots: bool = False
    generate_package_and_product_codes: bool = False
    allow_arbitrary_informational: bool = True
    fallback_encoding: str = 'cp1252'

    def __post_init__(self):
        if self.reset_to not in (0, 1):
            raise ConfigurationError('reset_to', f'must be 0 or 1, got {self.reset_to!r}')
        if self.increment_by < 1:
            raise ConfigurationError('increment_by', f'must be a positive integer, got {self.increment_by!r}')
        self.increment_scheme = Component.coerce(self.increment_scheme)
        if not isinstance(self.batch_scheme, BatchScheme):
            self.batch_scheme = BatchScheme(self.batch_scheme)

    def copy(self, **changes) -> 'NumberingOptions':
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(changes)
        return NumberingOptions(**values)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'NumberingOptions':
        env = os.environ if environ is None else environ

        def flag(name: str, default: str) -> bool:
            return env.get(name, default) == '1'

        def integer(name: str, default: str) -> int:
            raw = env.get(name, default)
            try:
                return int(raw)
            except (TypeError, ValueError):
                raise ConfigurationError(name, f'expected an integer, got {raw!r}') from None

        scheme_name = env.get('VERBUMP_INCREMENT_SCHEME', 'revision')
        try:
            increment_scheme = Component.coerce(scheme_name)
        except ValueError:
            raise ConfigurationError('VERBUMP_INCREMENT_SCHEME', f'unknown component {scheme_name!r}') from None
        batch_name = env.get('VERBUMP_BATCH_SCHEME', BatchScheme.MODIFIED_INDEPENDENTLY.value)
        try:
            batch_scheme = BatchScheme(batch_name.strip().lower())
        except ValueError:
            raise ConfigurationError('VERBUMP_BATCH_SCHEME', f'unknown batch scheme {batch_name!r}') from None

        reset_to = integer('VERBUMP_RESET_TO', '0')
        if reset_to not in (0, 1):
            raise ConfigurationError('VERBUMP_RESET_TO', f'must be 0 or 1, got {reset_to}')
        increment_by = integer('VERBUMP_INCREMENT_BY', '1')
        if increment_by < 1:
            raise ConfigurationError('VERBUMP_INCREMENT_BY', f'must be positive, got {increment_by}')

        return cls(
            increment_by=increment_by,
            increment_scheme=increment_scheme,
            batch_scheme=batch_scheme,
            reset_to=reset_to,
            reset_build_on_major=flag('VERBUMP_RESET_BUILD_ON_MAJOR', '1'),
            reset_build_on_minor=flag('VERBUMP_RESET_BUILD_ON_MINOR', '1'),
            reset_revision_on_major=flag('VERBUMP_RESET_REVISION_ON_MAJOR', '1'),
            reset_revision_on_minor=flag('VERBUMP_RESET_REVISION_ON_MINOR', '1'),
            reset_revision_on_build=flag('VERBUMP_RESET_REVISION_ON_BUILD', '1'),
            replace_asterisk_with_version_components=flag('VERBUMP_REPLACE_ASTERISK', '0'),
            use_datetime_build_and_revision=flag('VERBUMP_DATETIME_NUMBERING', '0'),
            synchronize_all_slots=flag('VERBUMP_SYNCHRONIZE', '0'),
            generate_package_and_product_codes=flag('VERBUMP_GENERATE_CODES', '0'),
            allow_arbitrary_informational=flag('VERBUMP_ALLOW_ARBITRARY_INFORMATIONAL', '1'),
            fallback_encoding=env.get('VERBUMP_FALLBACK_ENCODING', 'cp1252'),
        )
