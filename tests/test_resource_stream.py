"""Tests for resource scripts (.rc)."""
import pytest

from samples import RC_SAMPLE
from verbump.exceptions import FormatError, InvariantViolation, UnsupportedSlotError
from verbump.streams import open_stream
from verbump.versioning.value import EMPTY, VersionValue
from verbump.versioning.version_set import Slot


class TestResourceScript:
    def test_get_versions_from_headers(self, rc_file):
        versions = open_stream(rc_file).get_versions()
        assert versions.primary is EMPTY
        assert versions.file == VersionValue.parse('1.0.0.0')
        assert versions.informational.format() == '1.0.0.0'

    def test_file_version_rewrites_header_and_block(self, rc_file):
        open_stream(rc_file).save_version(Slot.FILE, '2.1.3.7')
        text = rc_file.read_text()
        assert ' FILEVERSION 2,1,3,7\n' in text
        assert 'VALUE "FileVersion", "2.1.3.7\\0"' in text
        # product version untouched
        assert ' PRODUCTVERSION 1, 0, 0, 0\n' in text
        assert 'VALUE "ProductVersion", "1.0\\0"' in text

    def test_block_keeps_its_component_count_and_header_its_separator(self, rc_file):
        open_stream(rc_file).save_version(Slot.INFORMATIONAL, '2.1.3.7')
        text = rc_file.read_text()
        assert ' PRODUCTVERSION 2, 1, 3, 7\n' in text
        assert 'VALUE "ProductVersion", "2.1\\0"' in text

    def test_only_version_text_changes(self, rc_file):
        open_stream(rc_file).save_version(Slot.FILE, '2.1.3.7')
        expected = RC_SAMPLE.replace('FILEVERSION 1,0,0,0', 'FILEVERSION 2,1,3,7') \
                            .replace('"1.0.0.0\\0"', '"2.1.3.7\\0"')
        assert rc_file.read_text() == expected

    def test_primary_slot_not_carried(self, rc_file):
        with pytest.raises(UnsupportedSlotError):
            open_stream(rc_file).save_version(Slot.PRIMARY, '2.0.0.0')

    def test_free_text_rejected(self, rc_file):
        with pytest.raises(FormatError):
            open_stream(rc_file).save_version(Slot.INFORMATIONAL, '2.0 beta')

    def test_string_table_without_terminator(self, write_sample):
        path = write_sample('plain.rc', RC_SAMPLE.replace('\\0"', '"'))
        open_stream(path).save_version(Slot.FILE, '3.0.0.0')
        assert 'VALUE "FileVersion", "3.0.0.0"' in path.read_text()

    def test_without_versioninfo(self, write_sample):
        path = write_sample('dialog.rc', 'IDD_ABOUT DIALOGEX 0, 0, 170, 62\nBEGIN\nEND\n')
        stream = open_stream(path)
        assert stream.get_versions().file is EMPTY
        with pytest.raises(InvariantViolation) as info:
            stream.save_version(Slot.FILE, '1.0.0.0')
        assert info.value.details['anchor'] == 'VS_VERSION_INFO VERSIONINFO'
