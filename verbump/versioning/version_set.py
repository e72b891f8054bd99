"""Version slots and the three-slot VersionSet.

A project carries up to three version identities: the primary (assembly)
version, the file version and the informational (product) version. A file
format only ever populates a subset; the rest hold ``EMPTY``.
"""

import enum
from dataclasses import dataclass, replace
from typing import Dict, Iterator, Optional, Tuple, Union

from .value import EMPTY, MIN_VALUE, VersionValue


class Slot(enum.Enum):
    PRIMARY = 'AssemblyVersion'
    FILE = 'AssemblyFileVersion'
    INFORMATIONAL = 'AssemblyInformationalVersion'

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def attribute_name(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, slot: Union['Slot', str]) -> 'Slot':
        if isinstance(slot, Slot):
            return slot
        text = str(slot).strip()
        for member in cls:
            if text.lower() in (member.key, member.value.lower()):
                return member
        raise ValueError(f'unknown version slot: {slot!r}')


SLOTS: Tuple[Slot, ...] = (Slot.PRIMARY, Slot.FILE, Slot.INFORMATIONAL)


@dataclass(frozen=True)
class VersionSet:
    """One version per slot, fixed record rather than a keyed map."""

    primary: VersionValue = EMPTY
    file: VersionValue = EMPTY
    informational: VersionValue = EMPTY

    def __getitem__(self, slot: Union[Slot, str]) -> VersionValue:
        return getattr(self, Slot.coerce(slot).key)

    def __iter__(self) -> Iterator[Tuple[Slot, VersionValue]]:
        for slot in SLOTS:
            yield slot, self[slot]

    def replace(self, slot: Union[Slot, str], value: VersionValue) -> 'VersionSet':
        return replace(self, **{Slot.coerce(slot).key: value})

    def valid_slots(self) -> Tuple[Slot, ...]:
        """Slots holding a numeric version."""
        return tuple(slot for slot, value in self if value.is_numeric)

    def contains(self, slot: Union[Slot, str]) -> bool:
        return Slot.coerce(slot) in self.valid_slots()

    def highest(self) -> VersionValue:
        """Highest version among the populated slots, ``EMPTY`` if none."""
        highest = EMPTY
        for slot in self.valid_slots():
            highest = VersionValue.max(highest, self[slot])
        return highest

    @property
    def are_synchronized(self) -> bool:
        values = [self[slot] for slot in self.valid_slots()]
        return all(value == values[0] for value in values[1:])

    def synchronized_to_highest(self) -> 'VersionSet':
        """Copy with every populated slot set to the highest version."""
        highest = self.highest()
        if not highest.is_numeric or highest == MIN_VALUE:
            return self
        result = self
        for slot in self.valid_slots():
            result = result.replace(slot, highest)
        return result

    def to_dict(self) -> Dict[str, str]:
        return {slot.key: value.format() for slot, value in self}

    @classmethod
    def max(cls, first: 'VersionSet', second: 'VersionSet') -> 'VersionSet':
        """Slot-by-slot maximum."""
        return cls(*(VersionValue.max(first[slot], second[slot]) for slot in SLOTS))

    @classmethod
    def max_proposed(cls, accumulated: 'VersionSet', current: 'VersionSet',
                     proposed: Optional['VersionSet'] = None) -> 'VersionSet':
        """Fold one project into a running maximum.

        A project that will be modified contributes the versions it is about
        to become; otherwise its current versions count.
        """
        return cls.max(accumulated, proposed if proposed is not None else current)


VersionSet.EMPTY = VersionSet()
VersionSet.MIN_VALUE = VersionSet(MIN_VALUE, MIN_VALUE, MIN_VALUE)
