import io

from abcanon.constants import NumberingScheme
from abcanon.report import format_result, write_report
from abcanon.types import (
    ClassDefinition,
    MatchedClass,
    MissingResidues,
    PositionMismatch,
    UnmatchedClass,
)


def test_matched_class_is_padded():
    assert format_result(MatchedClass("L1", "2")) == ["CDR L1  Class 2  "]
    assert format_result(MatchedClass("H2", "10a")) == ["CDR H2  Class 10a"]


def test_source_only_shown_when_verbose():
    result = MatchedClass("L1", "1", "Chothia et al. (1989)")
    assert format_result(result) == ["CDR L1  Class 1  "]
    assert format_result(result, verbose=True) == [
        "CDR L1  Class 1   Chothia et al. (1989)"
    ]


def test_missing_residues():
    result = MissingResidues("H1", "H26")
    assert format_result(result, verbose=True) == ["CDR H1  Missing Residues"]


def test_unmatched_without_explanation():
    result = UnmatchedClass("L3", 12)
    assert format_result(result) == ["CDR L3  Class ?"]


def test_unmatched_explanations():
    best = ClassDefinition(def_id=0, loop_id="L1", class_name="2", length=13)
    result = UnmatchedClass(
        "L1",
        13,
        best=best,
        mismatch_count=2,
        mismatches=(
            PositionMismatch("L25", "L25", "A", "S", NumberingScheme.KABAT),
            PositionMismatch(
                "L29", "---L29", "V", None, NumberingScheme.CHOTHIA
            ),
        ),
    )
    assert format_result(result, verbose=True) == [
        "CDR L1  Class ?",
        "! Similar to class 2, but:",
        "!    L25 = S (allows: A)",
        "!    L29 is deleted (Chothia numbering: ---L29)",
    ]


def test_write_report_strips_trailing_spaces():
    out = io.StringIO()
    write_report(
        [MatchedClass("L1", "2"), MissingResidues("H1", "H26")], out
    )
    assert out.getvalue() == "CDR L1  Class 2\nCDR H1  Missing Residues\n"
