"""Shared test fixtures and utilities for abcanon tests."""

from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pytest

from abcanon.constants import NumberingScheme
from abcanon.database import ClassDatabase
from abcanon.residue_index import ResidueIndex
from abcanon.rules import parse_rules

# Last numbered position of each chain in the synthetic sequences
CHAIN_ENDS = (("L", 107), ("H", 113))


def build_residues(
    overrides: Optional[Dict[str, str]] = None,
    drop: Iterable[str] = (),
    insertions: Optional[Dict[str, List[str]]] = None,
    default: str = "S",
) -> List[Tuple[str, str]]:
    """Create a numbered light + heavy chain sequence.

    Args:
        overrides: Residue to use at specific labels.
        drop: Labels to leave out.
        insertions: Insertion labels to add after a given label.
        default: Residue used everywhere else.

    Returns:
        List of (label, residue) pairs, light chain first.
    """
    overrides = overrides or {}
    insertions = insertions or {}
    drop = set(drop)
    residues = []
    for chain, last in CHAIN_ENDS:
        for number in range(1, last + 1):
            label = f"{chain}{number}"
            if label not in drop:
                residues.append((label, overrides.get(label, default)))
            for inserted in insertions.get(label, []):
                residues.append((inserted, overrides.get(inserted, default)))
    return residues


def sequence_text(residues: Iterable[Tuple[str, str]]) -> str:
    """Render residues in the numbered-sequence file format."""
    return "".join(f"{label} {residue}\n" for label, residue in residues)


def database_from_text(text: str) -> ClassDatabase:
    rule_set = parse_rules(text.splitlines())
    return ClassDatabase.from_records(rule_set.records, rule_set.scheme)


@pytest.fixture
def make_index() -> Callable[..., ResidueIndex]:
    """Factory for ResidueIndex objects over synthetic sequences."""

    def _make(
        overrides: Optional[Dict[str, str]] = None,
        drop: Iterable[str] = (),
        insertions: Optional[Dict[str, List[str]]] = None,
        scheme: NumberingScheme = NumberingScheme.KABAT,
    ) -> ResidueIndex:
        return ResidueIndex(
            build_residues(overrides, drop, insertions), scheme=scheme
        )

    return _make


@pytest.fixture
def make_database() -> Callable[[str], ClassDatabase]:
    return database_from_text


# H3 of length 5: H95 H96 H97 H101 H102
SHORT_H3_DROP = ("H98", "H99", "H100")

H3_RULES = """\
# single H3 class
LOOP H3 h3a 5
SOURCE synthetic
H101 AG
"""


@pytest.fixture
def h3_rules_file(tmp_path):
    path = tmp_path / "chothia.dat"
    path.write_text(H3_RULES)
    return path


@pytest.fixture
def write_sequence(tmp_path):
    """Factory writing a synthetic numbered sequence file under tmp_path."""

    def _write(name: str = "antibody.seq", **kwargs) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(sequence_text(build_residues(**kwargs)))
        return str(path)

    return _write
