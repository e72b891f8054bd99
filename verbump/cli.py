"""Command line front end.

Usage:
  verbump show FILE...
  verbump set --slot file 2.1.0.0 AssemblyInfo.cs app.rc
  verbump bump [--component build] [--slot primary] FILE...

Numbering policy comes from the ``VERBUMP_*`` environment variables; the
flags below override the most common ones. Exit status is 1 when any file
failed.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .batch import UpdateSummary, update_files, write_summary_csv
from .config import NumberingOptions
from .exceptions import VerbumpException, error_report
from .logging_utils import configure_logging
from .streams import open_stream
from .versioning.value import Component
from .versioning.version_set import SLOTS

log = logging.getLogger('verbump.cli')

_SLOT_CHOICES = [slot.key for slot in SLOTS]
_COMPONENT_CHOICES = [component.label for component in Component]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog='verbump', description='Show and rewrite version numbers in project files.')
    ap.add_argument('--log-level', default=None, help='overrides VERBUMP_LOG_LEVEL')
    sub = ap.add_subparsers(dest='command', required=True)

    show = sub.add_parser('show', help='print the versions each file carries')
    show.add_argument('--json', action='store_true', help='one JSON object per file')
    show.add_argument('files', nargs='+')

    for name, help_text in (('set', 'write an explicit version'), ('bump', 'increment versions')):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument('--regenerate-codes', action='store_true',
                         help='give installer projects new package/product codes')
        cmd.add_argument('--summary-csv', metavar='FILE', help='export the update summary as CSV')
        if name == 'set':
            cmd.add_argument('--slot', choices=_SLOT_CHOICES, required=True)
            cmd.add_argument('version')
        else:
            cmd.add_argument('--component', choices=_COMPONENT_CHOICES, default=None,
                             help='component to increment (default: VERBUMP_INCREMENT_SCHEME)')
            cmd.add_argument('--slot', choices=_SLOT_CHOICES, action='append', default=None,
                             help='slot to update, repeatable (default: all)')
        cmd.add_argument('files', nargs='+')
    return ap


def _show(files: List[str], options: NumberingOptions, as_json: bool) -> int:
    failures = 0
    for path in files:
        try:
            versions = open_stream(path, options).get_versions()
        except VerbumpException as exc:
            failures += 1
            log.error('%s: %s', path, exc.message)
            if as_json:
                print(json.dumps(error_report(exc, path)))
            continue
        if as_json:
            print(json.dumps({'path': path, 'versions': versions.to_dict()}))
        else:
            slots = ' '.join(f'{slot.key}={value}' for slot, value in versions if not value.is_empty)
            print(f'{path}: {slots}')
    return 1 if failures else 0


def _report(summary: UpdateSummary, summary_csv: Optional[str]) -> int:
    for result in summary.results:
        if result.error:
            print(f'{result.path}: FAILED {result.error["message"]}')
            continue
        changes = ' '.join(f'{c.slot.key}={c.before}->{c.after}' for c in result.changes)
        print(f'{result.path}: {result.state.value} {changes}'.rstrip())
        for key, code in sorted(result.codes.items()):
            print(f'  {key} {code}')
    if summary_csv:
        write_summary_csv(summary, summary_csv)
    return 1 if summary.has_failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        options = NumberingOptions.from_env()
    except VerbumpException as exc:
        log.error('%s', exc.message)
        return 2
    if args.command == 'show':
        return _show(args.files, options, args.json)
    if args.regenerate_codes:
        options = options.copy(generate_package_and_product_codes=True)
    if args.command == 'set':
        summary = update_files(args.files, options, new_versions={args.slot: args.version})
    else:
        if args.component:
            options = options.copy(increment_scheme=args.component)
        summary = update_files(args.files, options, slots=args.slot)
    return _report(summary, args.summary_csv)


if __name__ == '__main__':
    sys.exit(main())
