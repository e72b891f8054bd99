"""Batch version updates over many files.

Each file is loaded, updated and written on its own; an error in one file is
recorded in the summary and the remaining files are still processed.
"""

import csv
import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .config import NumberingOptions
from .exceptions import VerbumpException, error_report
from .fileio import PathLike
from .logging_utils import log_suppressed
from .metrics import record_error
from .provider import NewVersionProvider
from .streams import VersionStream, open_stream
from .versioning.value import VersionValue
from .versioning.version_set import Slot, VersionSet

logger = logging.getLogger('verbump.batch')

SlotValues = Mapping[Union[Slot, str], Union[VersionValue, str]]

CSV_FIELDS = ['path', 'format', 'state', 'slot', 'before', 'after', 'error_code', 'error']


class UpdateState(enum.Enum):
    UPDATED = 'updated'
    NOT_UPDATED = 'not-updated'
    FAILED = 'failed'


@dataclass
class SlotChange:
    slot: Slot
    before: str
    after: str


@dataclass
class FileResult:
    path: str
    format_name: str = ''
    state: UpdateState = UpdateState.NOT_UPDATED
    changes: List[SlotChange] = field(default_factory=list)
    codes: Dict[str, str] = field(default_factory=dict)
    error: Optional[Dict] = None

    def fail(self, exc: VerbumpException) -> None:
        # nothing was written, a failed file keeps its old versions
        self.state = UpdateState.FAILED
        self.changes.clear()
        self.codes.clear()
        self.error = error_report(exc, self.path)


@dataclass
class UpdateSummary:
    results: List[FileResult] = field(default_factory=list)

    def _with_state(self, state: UpdateState) -> List[FileResult]:
        return [result for result in self.results if result.state is state]

    @property
    def updated(self) -> List[FileResult]:
        return self._with_state(UpdateState.UPDATED)

    @property
    def not_updated(self) -> List[FileResult]:
        return self._with_state(UpdateState.NOT_UPDATED)

    @property
    def failed(self) -> List[FileResult]:
        return self._with_state(UpdateState.FAILED)

    @property
    def has_failures(self) -> bool:
        return any(result.state is UpdateState.FAILED for result in self.results)

    def counts(self) -> Dict[str, int]:
        return {state.value: len(self._with_state(state)) for state in UpdateState}

    def to_rows(self) -> List[Dict[str, str]]:
        """One row per changed slot, one row for files without changes."""
        rows: List[Dict[str, str]] = []
        for result in self.results:
            base = {
                'path': result.path,
                'format': result.format_name,
                'state': result.state.value,
                'error_code': (result.error or {}).get('error_code', ''),
                'error': (result.error or {}).get('message', ''),
            }
            if not result.changes:
                rows.append(dict(base, slot='', before='', after=''))
            for change in result.changes:
                rows.append(dict(base, slot=change.slot.key, before=change.before, after=change.after))
        return rows


def write_summary_csv(summary: UpdateSummary, path: PathLike) -> int:
    """Export the summary as CSV; returns the number of data rows written."""
    rows = summary.to_rows()
    with Path(path).open('w', newline='', encoding='utf-8') as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_FIELDS)
        writer.writeheader()
        writer.writerows(rows)
    logger.info('summary exported path=%s rows=%d', path, len(rows))
    return len(rows)


def _counts_text(summary: UpdateSummary) -> str:
    return ' '.join(f'{state}={count}' for state, count in summary.counts().items())


def _open_all(paths: Iterable[PathLike], options: NumberingOptions, summary: UpdateSummary) -> List[tuple]:
    opened = []
    for path in paths:
        result = FileResult(str(path))
        summary.results.append(result)
        try:
            stream = open_stream(path, options)
        except VerbumpException as exc:
            record_error(exc.error_code)
            log_suppressed(logger, exc, f'open {exc.error_code}')
            result.fail(exc)
            continue
        result.format_name = stream.format_name
        opened.append((stream, result))
    return opened


def _save(stream: VersionStream, result: FileResult, values: Dict[Slot, VersionValue]) -> None:
    before = stream.get_versions()
    for slot, value in values.items():
        codes = stream.save_version(slot, value, flush=False)
        result.codes.update(codes)
        result.changes.append(SlotChange(slot, before[slot].format(), stream.get_version(slot).format()))
    if stream.has_unsaved_changes:
        stream.flush()
        result.state = UpdateState.UPDATED
        logger.info('updated path=%s slots=%s', stream.path, ','.join(slot.key for slot in values))


def update_files(paths: Iterable[PathLike], options: Optional[NumberingOptions] = None,
                 new_versions: Optional[SlotValues] = None,
                 slots: Optional[Sequence[Union[Slot, str]]] = None) -> UpdateSummary:
    """Update the versions of every file in ``paths``.

    Args:
        paths: files to update
        options: numbering policy, environment defaults when omitted
        new_versions: explicit value per slot; when omitted the versions
            are proposed from ``options``
        slots: slots selected for update; all slots the file carries
            when omitted
    """
    options = options or NumberingOptions.from_env()
    summary = UpdateSummary()
    opened = _open_all(paths, options, summary)
    selected = None if slots is None else {Slot.coerce(slot) for slot in slots}

    if new_versions is not None:
        explicit = {Slot.coerce(slot): value for slot, value in new_versions.items()}
        for stream, result in opened:
            values = {slot: value for slot, value in explicit.items() if stream.supports(slot)}
            if not values:
                logger.debug('no selected slot in path=%s', stream.path)
                continue
            try:
                _save(stream, result, values)
            except VerbumpException as exc:
                log_suppressed(logger, exc, f'save {exc.error_code}')
                result.fail(exc)
        logger.info('batch complete %s', _counts_text(summary))
        return summary

    provider = NewVersionProvider(options)
    planned = []
    highest = VersionSet.EMPTY
    for stream, result in opened:
        current = stream.get_versions()
        try:
            proposed = provider.propose(current)
        except VerbumpException as exc:
            record_error(exc.error_code)
            log_suppressed(logger, exc, f'propose {exc.error_code}')
            result.fail(exc)
            continue
        highest = VersionSet.max_proposed(highest, current, proposed)
        planned.append((stream, result, current, proposed))

    for stream, result, current, proposed in planned:
        values: Dict[Slot, VersionValue] = {}
        for slot in stream.adapter.slots:
            if not current[slot].is_numeric:
                continue
            marked = selected is None or slot in selected
            if not provider.should_update(current, slot, highest[slot], modified=marked, marked=marked):
                continue
            value = provider.provide(current, proposed, slot, highest[slot])
            if value.format() != current[slot].format():
                values[slot] = value
        if not values:
            logger.debug('nothing to update path=%s', stream.path)
            continue
        try:
            _save(stream, result, values)
        except VerbumpException as exc:
            log_suppressed(logger, exc, f'save {exc.error_code}')
            result.fail(exc)
    logger.info('batch complete %s', _counts_text(summary))
    return summary
