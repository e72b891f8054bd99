"""Tests for installer projects (.vdproj, .isl)."""
import pytest

from samples import ISL_SAMPLE, VDPROJ_CAB_SAMPLE, VDPROJ_MSI_SAMPLE
from verbump.config import NumberingOptions
from verbump.exceptions import FormatError, InvariantViolation, UnsupportedSlotError
from verbump.streams import open_stream
from verbump.streams.installer import project_type
from verbump.versioning.patterns import GUID_RE
from verbump.versioning.version_set import Slot

OLD_PRODUCT_CODE = '{11111111-2222-3333-4444-555555555555}'
OLD_PACKAGE_CODE = '{AAAAAAAA-BBBB-CCCC-DDDD-EEEEEEEEEEEE}'
UPGRADE_CODE = '{99999999-8888-7777-6666-555555555555}'


class TestSetupProject:
    def test_project_type(self):
        assert project_type(VDPROJ_MSI_SAMPLE) == '{978C614F-708E-4E1A-B201-565925725DBA}'
        assert project_type('"DeployProject"\n{\n}\n') is None

    def test_msi_version(self, msi_file):
        versions = open_stream(msi_file).get_versions()
        assert versions.informational.format() == '1.0.0'
        assert versions.primary.is_empty
        assert versions.file.is_empty

    def test_msi_save_keeps_codes_by_default(self, msi_file):
        codes = open_stream(msi_file).save_version(Slot.INFORMATIONAL, '1.1.0')
        text = msi_file.read_text()
        assert codes == {}
        assert '"ProductVersion" = "8:1.1.0"' in text
        assert OLD_PRODUCT_CODE in text and OLD_PACKAGE_CODE in text

    def test_msi_save_regenerates_codes(self, msi_file):
        options = NumberingOptions(generate_package_and_product_codes=True)
        codes = open_stream(msi_file, options).save_version(Slot.INFORMATIONAL, '1.1.0')
        text = msi_file.read_text()
        assert set(codes) == {'PackageCode', 'ProductCode'}
        for code in codes.values():
            assert GUID_RE.fullmatch(code)
            assert code == code.upper()
        assert f'"ProductCode" = "8:{codes["ProductCode"]}"' in text
        assert f'"PackageCode" = "8:{codes["PackageCode"]}"' in text
        assert OLD_PRODUCT_CODE not in text
        assert UPGRADE_CODE in text

    def test_missing_code_line_leaves_buffer_untouched(self, write_sample):
        lines = [line for line in VDPROJ_MSI_SAMPLE.splitlines(keepends=True) if '"PackageCode"' not in line]
        path = write_sample('Setup.vdproj', ''.join(lines))
        options = NumberingOptions(generate_package_and_product_codes=True)
        stream = open_stream(path, options)
        with pytest.raises(InvariantViolation):
            stream.save_version(Slot.INFORMATIONAL, '2.0.0')
        assert not stream.has_unsaved_changes
        assert stream.get_versions().informational.format() == '1.0.0'
        stream.flush()
        assert path.read_text() == ''.join(lines)

    @pytest.mark.parametrize('value', ['1.1.0.0', '1.1', '1.1.*'])
    def test_msi_needs_three_components(self, msi_file, value):
        with pytest.raises(FormatError):
            open_stream(msi_file).save_version(Slot.INFORMATIONAL, value)
        assert msi_file.read_text() == VDPROJ_MSI_SAMPLE

    def test_only_informational_slot(self, msi_file):
        with pytest.raises(UnsupportedSlotError):
            open_stream(msi_file).save_version(Slot.FILE, '1.1.0')

    def test_cab_project(self, cab_file):
        options = NumberingOptions(generate_package_and_product_codes=True)
        stream = open_stream(cab_file, options)
        assert stream.get_versions().informational.format() == '1.0.0.0'
        assert stream.save_version(Slot.INFORMATIONAL, '1.0.0.1') == {}
        assert '"Version" = "8:1.0.0.1"' in cab_file.read_text()
        assert stream.regenerate_identifiers() == {}

    def test_cab_needs_four_components(self, cab_file):
        with pytest.raises(FormatError):
            open_stream(cab_file).save_version(Slot.INFORMATIONAL, '1.0.1')


class TestInstallShield:
    def test_version(self, isl_file):
        assert open_stream(isl_file).get_versions().informational.format() == '1.0.0'

    def test_save(self, isl_file):
        open_stream(isl_file).save_version(Slot.INFORMATIONAL, '2.0.1')
        assert '<row><td>ProductVersion</td><td>2.0.1</td><td/></row>' in isl_file.read_text()

    def test_regenerate_only_product_code(self, isl_file):
        stream = open_stream(isl_file)
        codes = stream.regenerate_identifiers(flush=True)
        text = isl_file.read_text()
        assert list(codes) == ['ProductCode']
        assert f'<row><td>ProductCode</td><td>{codes["ProductCode"]}</td><td/></row>' in text
        assert OLD_PRODUCT_CODE not in text
        assert f'<row><td>PackageCode</td><td>{OLD_PACKAGE_CODE}</td><td/></row>' in text

    def test_identifiers_change_every_time(self, isl_file):
        stream = open_stream(isl_file)
        first = stream.regenerate_identifiers()['ProductCode']
        second = stream.regenerate_identifiers()['ProductCode']
        assert first != second
