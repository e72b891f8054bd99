"""New version proposals.

Turns the versions currently found in a project's files into the versions
they should become, following the numbering policy, and answers the two
questions a batch run asks per slot: should it be updated, and to what.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from .config import BatchScheme, NumberingOptions
from .versioning.value import VersionValue, apply_pattern
from .versioning.version_set import SLOTS, Slot, VersionSet

logger = logging.getLogger('verbump.provider')

_EPOCH = datetime(2000, 1, 1)


def datetime_build_and_revision(now: Optional[datetime] = None) -> Tuple[int, int]:
    """Build = days since 2000-01-01, revision = seconds since midnight / 2."""
    now = now or datetime.now()
    build = (now - _EPOCH).days
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    revision = int((now - midnight).total_seconds() // 2)
    return build, revision


class NewVersionProvider:
    """Proposes new versions from ``NumberingOptions``.

    Usage:
        provider = NewVersionProvider(NumberingOptions.from_env())
        proposed = provider.propose(stream.get_versions())
    """

    def __init__(self, options: NumberingOptions, now: Optional[datetime] = None):
        self.options = options
        self.auto_build, self.auto_revision = datetime_build_and_revision(now)

    def propose(self, current: VersionSet) -> VersionSet:
        proposed = VersionSet(*(self._to_become(current[slot]) for slot in SLOTS))
        if self.options.synchronize_all_slots:
            proposed = proposed.synchronized_to_highest()
        return proposed

    def should_update(self, current: VersionSet, slot: Slot, highest: VersionValue,
                      modified: bool = False, marked: bool = False) -> bool:
        """Decide whether ``slot`` of a project takes part in a batch update.

        Args:
            current: versions the project's file carries now
            slot: slot being considered
            highest: highest version across all projects of the batch
            modified: the project changed since the last update
            marked: the slot was explicitly selected for update
        """
        if self.options.synchronize_all_slots and not current.are_synchronized:
            return True
        value = current[slot]
        if not value.is_numeric:
            return False
        scheme = self.options.batch_scheme
        if scheme is BatchScheme.MODIFIED_INDEPENDENTLY:
            return marked
        if scheme is BatchScheme.ALL_INDEPENDENTLY:
            return True
        synced = self._synchronized(highest, value)
        if scheme is BatchScheme.MODIFIED_AND_SYNCHRONIZE:
            return modified or synced.format() != value.format()
        return synced.format() != value.format()

    def provide(self, current: VersionSet, proposed: VersionSet, slot: Slot, highest: VersionValue,
                to_update: bool = True) -> VersionValue:
        """Value ``slot`` receives when it is written."""
        if self.options.batch_scheme.synchronizes:
            return self._synchronized(highest, current[slot])
        if self.options.synchronize_all_slots and not to_update:
            return current.highest()
        return proposed[slot]

    def _synchronized(self, highest: VersionValue, value: VersionValue) -> VersionValue:
        if not highest.is_numeric:
            return value
        return apply_pattern(highest.format(full=True), value, self.options.reset_to)

    def _to_become(self, value: VersionValue) -> VersionValue:
        if not value.is_numeric:
            return value
        if self.options.use_datetime_build_and_revision:
            return value.with_build_and_revision(
                self.auto_build, self.auto_revision, self.options.replace_asterisk_with_version_components)
        return value.increment(self.options)
