"""Tests for the delimited text decoder."""
import math

import pytest

from geomech.ascii_parser import AsciiFormatDetector, DelimiterType, load_ascii_table
from geomech.errors import FileLoadError


def test_detect_delimiter():
    detector = AsciiFormatDetector()
    assert detector.detect_delimiter(['a,b,c', '1,2,3'])[1] == DelimiterType.COMMA
    assert detector.detect_delimiter(['a\tb\tc', '1\t2\t3'])[1] == DelimiterType.TAB
    assert detector.detect_delimiter(['a;b;c', '1;2;3'])[1] == DelimiterType.SEMICOLON
    assert detector.detect_delimiter(['a|b|c', '1|2|3'])[1] == DelimiterType.PIPE
    assert detector.detect_delimiter(['a  b c', '1 2   3'])[1] == DelimiterType.WHITESPACE


def test_detect_header_row_after_comments():
    detector = AsciiFormatDetector()
    lines = ['# Well A', '# units SI', 'Depth,Density', '1000,2500']
    assert detector.detect_header_row(lines, ',') == (2, 3)
    assert detector.detect_header_row(['1000,2500', '1005,2510'], ',') == (-1, 0)


def test_comma_separated_table():
    table = load_ascii_table(b"Depth,Density,Vp,Vs\n1000,2500,3000,1500\n1005,2510,3010,1510\n")
    assert table.headers == ['Depth', 'Density', 'Vp', 'Vs']
    assert table.num_rows == 2
    assert table.rows[1]['Vs'] == 1510
    assert table.source_format == 'csv'


def test_semicolon_table_with_comments():
    content = b"# exported log\n# depth in m\nDepth;Density;Vp;Vs\n1000;2500;3000;1500\n"
    table = load_ascii_table(content, filename='log.txt')
    assert table.headers == ['Depth', 'Density', 'Vp', 'Vs']
    assert table.rows == [{'Depth': 1000, 'Density': 2500, 'Vp': 3000, 'Vs': 1500}]
    assert table.filename == 'log.txt'
    assert any('comment' in note for note in table.notes)


def test_whitespace_table():
    table = load_ascii_table(b"DEPTH  RHOB  VP  VS\n1000  2.50  3.0  1.5\n1005  2.51  3.1  1.6\n")
    assert table.headers == ['DEPTH', 'RHOB', 'VP', 'VS']
    assert table.rows[0]['RHOB'] == pytest.approx(2.5)


def test_null_values_become_missing():
    table = load_ascii_table(b"Depth,Density,Vp,Vs\n1000,-999.25,3000,1500\n1005,2500,-9999,1500\n")
    assert math.isnan(table.rows[0]['Density'])
    assert math.isnan(table.rows[1]['Vp'])
    assert table.rows[1]['Density'] == 2500


def test_headerless_table_gets_generated_names():
    table = load_ascii_table(b"1000,2500,3000,1500\n1005,2510,3010,1510\n")
    assert table.headers == ['COL_0', 'COL_1', 'COL_2', 'COL_3']
    assert table.num_rows == 2


def test_header_labels_are_stripped():
    table = load_ascii_table(b" Depth , Density \n1000,2500\n")
    assert table.headers == ['Depth', 'Density']


def test_blank_rows_dropped():
    table = load_ascii_table(b"Depth,Density\n1000,2500\n,\n1005,2510\n")
    assert table.num_rows == 2


def test_file_path(tmp_path):
    path = tmp_path / 'log.csv'
    path.write_text("Depth,Vp\n1,2\n")
    table = load_ascii_table(str(path))
    assert table.headers == ['Depth', 'Vp']


@pytest.mark.parametrize('content', [b'', b'  \n\n'])
def test_empty_file(content):
    with pytest.raises(FileLoadError):
        load_ascii_table(content)


def test_latin1_fallback():
    table = load_ascii_table("Depth,Densit\xe9\n1000,2500\n".encode('latin-1'))
    assert table.headers == ['Depth', 'Densit\xe9']
