"""Tests for verbump.versioning.value: parsing, ordering, increment and patterns."""
import pytest

from verbump.config import NumberingOptions
from verbump.exceptions import FormatError, VersionOverflowError
from verbump.versioning.value import (
    EMPTY,
    MAX_COMPONENT,
    MIN_VALUE,
    WILDCARD,
    Component,
    VersionValue,
    apply_pattern,
)

V = VersionValue.parse


class TestParse:
    def test_four_components(self):
        assert V('1.2.3.4').components == (1, 2, 3, 4)

    def test_keeps_component_count(self):
        assert len(V('1.2')) == 2
        assert V('1.2').format() == '1.2'

    def test_pad(self):
        assert V('1.2', pad=0).components == (1, 2, 0, 0)

    def test_commas_and_spaces(self):
        assert V('1, 0, 0, 1') == VersionValue.of(1, 0, 0, 1)

    def test_wildcard(self):
        value = V('1.2.*')
        assert value.contains_wildcard()
        assert value[Component.BUILD] == WILDCARD
        assert value['revision'] is None

    def test_placeholder(self):
        assert V('1.+.*.*').contains_placeholder()

    @pytest.mark.parametrize('token', ['', '1', '1.2.3.4.5', 'a.b', '1.-2', '1..2'])
    def test_rejects_malformed(self, token):
        with pytest.raises(FormatError):
            V(token)

    def test_rejects_component_above_maximum(self):
        V(f'1.2.3.{MAX_COMPONENT}')
        with pytest.raises(FormatError) as info:
            V(f'1.2.3.{MAX_COMPONENT + 1}')
        assert info.value.token == f'1.2.3.{MAX_COMPONENT + 1}'

    def test_constructor_checks_component_range(self):
        assert VersionValue.of(1, MAX_COMPONENT).format() == f'1.{MAX_COMPONENT}'
        assert VersionValue.of(1, 2, WILDCARD).contains_wildcard()
        with pytest.raises(FormatError):
            VersionValue.of(70000, 0)
        with pytest.raises(FormatError):
            VersionValue.of(1, -5)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            V('1.2').foo = 1


class TestOrdering:
    def test_missing_components_compare_as_zero(self):
        assert V('1.2') == V('1.2.0.0')
        assert hash(V('1.2')) == hash(V('1.2.0.0'))

    def test_revision_after_wildcard_build_is_wildcard(self):
        assert V('1.2.*') == V('1.2.*.*')

    def test_lexicographic(self):
        assert V('1.2.3.4') < V('1.2.3.5') < V('1.3')
        assert V('2.0') > V('1.65534.65534.65534')

    def test_wildcard_sorts_below_numbers(self):
        assert V('1.2.*') < V('1.2.0.0')

    def test_non_numeric_below_numeric(self):
        assert EMPTY < MIN_VALUE
        assert VersionValue.free_text('beta') < V('0.0')

    def test_max_ignores_non_numeric(self):
        assert VersionValue.max(EMPTY, V('1.0')) == V('1.0')
        assert VersionValue.max(V('1.0'), VersionValue.invalid('x', 'bad')) == V('1.0')
        assert VersionValue.max(V('1.0'), V('2.0')) == V('2.0')

    @pytest.mark.parametrize('first, second', [
        ('1.2.3.4', '1.2.3.5'),
        ('2.0', '1.65534.65534.65534'),
        ('1.2.*', '1.2.0.0'),
        ('1.2', '1.2.0.0'),
        ('1.2.3', '1.2.3.0'),
    ])
    def test_max_is_symmetric_and_an_upper_bound(self, first, second):
        a, b = V(first), V(second)
        assert VersionValue.max(a, b) == VersionValue.max(b, a)
        assert VersionValue.max(a, b) >= a
        assert VersionValue.max(a, b) >= b

    def test_compare_to_pattern(self):
        value = V('1.2.3.4')
        assert value.compare_to_pattern('1.2.*.*') == 0
        assert value.compare_to_pattern('1.3.*.*') == -1
        assert value.compare_to_pattern('1.1.9.9') == 1
        assert value.compare_to_pattern('+.*.*.*') == -1

    def test_is_pattern_higher(self):
        value = V('1.2.3.4')
        assert value.is_pattern_higher('1.2.3.5')
        assert not value.is_pattern_higher('1.2.3.4')
        assert not value.is_pattern_higher('1.2.3.3')
        assert value.is_pattern_higher('1.2.*')


class TestFormat:
    def test_full_form(self):
        assert V('1.2').format(full=True) == '1.2.0.0'
        assert V('1.2.*').format(full=True) == '1.2.*.*'

    @pytest.mark.parametrize('text', ['1.2', '1.2.*', '1.2.3', '1.2.3.4'])
    def test_full_form_parses_back_equal(self, text):
        assert V(V(text).format(full=True)) == V(text)

    @pytest.mark.parametrize('text', ['1.2', '1.2.*', '1.2.3', '1.2.3.4', '1, 0, 0, 1'])
    def test_short_form_parses_back_unchanged(self, text):
        short = V(text).format()
        assert V(short).format() == short

    def test_non_numeric_render_raw(self):
        assert str(VersionValue.free_text('1.0 beta')) == '1.0 beta'
        invalid = VersionValue.invalid('1.x', 'Version may consist of non-negative integers')
        assert str(invalid) == '1.x'
        assert not invalid.is_valid
        assert VersionValue.free_text('beta').is_valid
        assert EMPTY.is_empty


class TestIncrement:
    def setup_method(self):
        self.options = NumberingOptions()

    def test_revision(self):
        assert V('1.2.3.4').increment(self.options) == V('1.2.3.5')

    def test_build_resets_revision(self):
        assert V('2.4.9.1').increment_component('build', self.options).format() == '2.4.10.0'

    def test_major_resets_everything(self):
        assert V('1.2.3.4').increment_component(Component.MAJOR, self.options).format() == '2.0.0.0'

    def test_major_without_reset_flags_keeps_build_and_revision(self):
        options = NumberingOptions(reset_build_on_major=False, reset_revision_on_major=False)
        assert V('1.2.3.4').increment_component('major', options).format() == '2.0.3.4'

    def test_reset_to_one(self):
        options = NumberingOptions(reset_to=1)
        assert V('1.2.3.4').increment_component('minor', options).format() == '1.3.1.1'

    def test_increment_by(self):
        options = NumberingOptions(increment_by=10)
        assert V('1.2.3.4').increment(options).format() == '1.2.3.14'

    def test_absent_component_is_left_alone(self):
        assert V('1.2').increment(self.options).format() == '1.2'

    def test_wildcard_is_never_reset(self):
        assert V('1.2.*').increment_component('build', self.options).format() == '1.2.*'
        assert V('1.2.*').increment_component('major', self.options).format() == '2.0.*'

    def test_replace_asterisk(self):
        options = NumberingOptions(replace_asterisk_with_version_components=True)
        assert V('1.2.*').increment_component('build', options).format() == '1.2.1.0'

    def test_overflow(self):
        value = V(f'1.2.3.{MAX_COMPONENT}')
        with pytest.raises(VersionOverflowError) as info:
            value.increment(self.options)
        assert info.value.component == 'revision'
        assert value.format() == f'1.2.3.{MAX_COMPONENT}'

    def test_non_numeric_cannot_increment(self):
        with pytest.raises(FormatError):
            VersionValue.free_text('beta').increment(self.options)


class TestApplyPattern:
    def test_literal_pattern_with_reset_cascade(self):
        result = apply_pattern('1.3.5.5', V('1.2.3.4'), options=NumberingOptions())
        assert result.format() == '1.3.0.0'

    def test_literal_pattern_without_options(self):
        assert apply_pattern('1.3.5.5', V('1.2.3.4')).format() == '1.3.5.5'

    def test_asterisk_keeps_and_plus_increments(self):
        assert V('1.2.3.4').apply_pattern('*.*.+.*').format() == '1.2.4.4'

    def test_plus_on_major_with_cascade_keeps_minor(self):
        result = V('1.2.3.4').apply_pattern('+.*.*.*', options=NumberingOptions())
        assert result.format() == '2.2.0.0'

    def test_keeps_component_count(self):
        assert apply_pattern('2.*.*.*', V('1.2')).format() == '2.2'

    def test_wildcard_current_stays_under_asterisk(self):
        assert apply_pattern('*.*.*.*', V('1.0.*')).format() == '1.0.*'

    def test_trailing_wildcard_extended_by_pattern_numbers(self):
        assert apply_pattern('1.2.3.4', V('1.0.*')).format() == '1.2.3.4'

    def test_plus_on_wildcard_stays_wildcard(self):
        assert apply_pattern('*.*.+.*', V('1.0.*')).format() == '1.0.*'

    def test_plus_overflow(self):
        with pytest.raises(VersionOverflowError):
            apply_pattern('*.*.*.+', V(f'1.0.0.{MAX_COMPONENT}'))

    @pytest.mark.parametrize('pattern', ['1.2.3', '1.2.3.x', '1.2.3.4.5'])
    def test_invalid_pattern(self, pattern):
        with pytest.raises(FormatError):
            apply_pattern(pattern, V('1.2.3.4'))


class TestWithBuildAndRevision:
    def test_four_components(self):
        assert V('1.2.3.4').with_build_and_revision(100, 200).format() == '1.2.100.200'

    def test_two_components_unchanged(self):
        assert V('1.2').with_build_and_revision(100, 200).format() == '1.2'

    def test_three_components_set_build_only(self):
        assert V('1.2.3').with_build_and_revision(100, 200).format() == '1.2.100'

    def test_wildcard_build_may_gain_revision(self):
        assert V('1.2.*').with_build_and_revision(100, 200, True).format() == '1.2.100.200'
        assert V('1.2.*').with_build_and_revision(100, 200, False).format() == '1.2.100'
