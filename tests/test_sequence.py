import logging

import pytest

from abcanon.errors import SequenceFormatError
from abcanon.sequence import parse_sequence, read_sequence, residue_code

SAMPLE = """\
# light chain
L1   D
L2   ile
L27A -
L27B ---
H1   e
H100A   GLY
Heavy chain follows
   L3 V
"""


def test_parse_sample():
    assert parse_sequence(SAMPLE.splitlines()) == [
        ("L1", "D"),
        ("L2", "I"),
        ("H1", "E"),
        ("H100A", "G"),
    ]


def test_residue_codes():
    assert residue_code("a") == "A"
    assert residue_code("TRP") == "W"
    assert residue_code("Cys") == "C"


def test_unknown_three_letter_code_becomes_x(caplog):
    with caplog.at_level(logging.WARNING):
        assert residue_code("MSE") == "X"
    assert "MSE" in caplog.text


def test_label_without_residue_is_an_error():
    with pytest.raises(SequenceFormatError, match="Line 2: residue L2"):
        parse_sequence(["L1 D", "L2", "L3 V"])


def test_empty_input():
    assert parse_sequence([]) == []


def test_read_sequence(tmp_path):
    path = tmp_path / "antibody.seq"
    path.write_text(SAMPLE)
    assert len(read_sequence(path)) == 4
    assert read_sequence(str(path))[0] == ("L1", "D")
