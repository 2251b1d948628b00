"""Tests for header detection."""
from geomech.header_mapping import (
    HEADER_RULES,
    MatchPriority,
    apply_overrides,
    describe_mapping,
    detect_columns,
    normalize_label,
)


def test_normalize_label_collapses_punctuation():
    assert normalize_label('  Vp_Km/s ') == 'vp km s'
    assert normalize_label('Density (g/cc)') == 'density g cc'
    assert normalize_label(None) == ''
    assert normalize_label(42) == '42'


def test_detects_all_four_fields():
    headers = ['Depth_m', 'Density_kg/m3', 'Vp_Km/s', 'Vs_Km/s']
    assert detect_columns(headers) == {
        'depth': 'Depth_m',
        'density': 'Density_kg/m3',
        'vp': 'Vp_Km/s',
        'vs': 'Vs_Km/s',
    }


def test_density_from_unit_token_alone():
    assert detect_columns(['Bulk (kg/m)']) == {'density': 'Bulk (kg/m)'}
    assert detect_columns(['Depth', 'RHOB kg m'])['density'] == 'RHOB kg m'
    # "kg m3" is a different token: the trailing digit breaks the word boundary
    assert 'density' not in detect_columns(['kg/m3'])


def test_phrase_spellings():
    mapping = detect_columns(['DEPTH', 'RHO g/cc', 'P-wave velocity', 'Shear velocity'])
    assert mapping == {
        'depth': 'DEPTH',
        'density': 'RHO g/cc',
        'vp': 'P-wave velocity',
        'vs': 'Shear velocity',
    }

    mapping = detect_columns(['depthm', 'dens', 'P vel', 'S vel'])
    assert mapping['depth'] == 'depthm'
    assert mapping['vp'] == 'P vel'
    assert mapping['vs'] == 'S vel'


def test_last_matching_header_wins():
    mapping = detect_columns(['Depth', 'Vp', 'TVD depth', 'Vp (m/s)'])
    assert mapping['depth'] == 'TVD depth'
    assert mapping['vp'] == 'Vp (m/s)'


def test_prefix_fallback_only_fills_unassigned_field():
    assert detect_columns(['VpKms'])['vp'] == 'VpKms'
    assert detect_columns(['VsRaw'])['vs'] == 'VsRaw'

    # fallback does not replace an earlier whole-token match
    assert detect_columns(['Vp', 'VpRaw'])['vp'] == 'Vp'

    # a later whole-token match replaces a fallback
    assert detect_columns(['VpRaw', 'P-wave'])['vp'] == 'P-wave'


def test_unrelated_headers_give_partial_mapping():
    assert detect_columns(['GR', 'NPHI', 'CALI']) == {}
    assert detect_columns(['Depth', 'GR']) == {'depth': 'Depth'}
    assert detect_columns([]) == {}


def test_non_string_headers_are_tolerated():
    assert detect_columns([None, 3.5, 'depth']) == {'depth': 'depth'}


def test_rule_table_is_declarative():
    fields = {rule.field for rule in HEADER_RULES}
    assert fields == {'depth', 'density', 'vp', 'vs'}
    fallbacks = [rule.field for rule in HEADER_RULES if rule.priority is MatchPriority.FALLBACK]
    assert sorted(fallbacks) == ['vp', 'vs']


def test_apply_overrides_replaces_only_given_fields():
    detected = {'depth': 'Depth', 'vp': 'Vp'}
    merged = apply_overrides(detected, {'vp': 'VP_ALT', 'density': 'RHOB', 'vs': '', 'gr': 'GR'})
    assert merged == {'depth': 'Depth', 'vp': 'VP_ALT', 'density': 'RHOB'}
    assert detected == {'depth': 'Depth', 'vp': 'Vp'}
    assert apply_overrides(detected, None) == detected


def test_describe_mapping_marks_missing_fields():
    assert describe_mapping({'depth': 'D'}) == 'depth=D, density=?, vp=?, vs=?'
