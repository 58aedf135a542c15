#!/usr/bin/env python3
"""Constants and configuration values for abcanon.

This module defines constants used throughout the abcanon package including:
- CDR loop identifiers and their boundary residues
- Kabat/Chothia CDR1 insertion layouts
- Sentinels used by the residue lookup and the classifier
- Amino acid mappings
"""

from enum import Enum
from typing import Dict, List, Tuple

# Type alias for a numbered sequence: list of (position_label, residue)
NumberedSequence = List[Tuple[str, str]]


class NumberingScheme(str, Enum):
    """Residue numbering conventions understood by the classifier."""

    KABAT = "kabat"
    CHOTHIA = "chothia"

    @property
    def label(self) -> str:
        return self.value.capitalize()


LOOP_IDS = ("L1", "L2", "L3", "H1", "H2", "H3")

# Loop boundaries are inclusive and fixed
LOOP_BOUNDARIES: List[Tuple[str, str, str]] = [
    ("L1", "L24", "L34"),
    ("L2", "L50", "L56"),
    ("L3", "L89", "L97"),
    ("H1", "H26", "H35B"),
    ("H2", "H50", "H58"),
    ("H3", "H95", "H102"),
]

# First CDR of each chain; its length drives Kabat <-> Chothia translation
CDR1_FOR_CHAIN = {"L": "L1", "H": "H1"}

# CDR1 regions spanned by the numbering translation. Each entry gives the
# first and last numbered positions, the position Kabat inserts after and
# the position Chothia inserts after.
CDR1_REGIONS: Dict[str, Dict[str, int]] = {
    "L1": {"first": 24, "last": 34, "kabat": 27, "chothia": 30},
    "H1": {"first": 26, "last": 35, "kabat": 35, "chothia": 31},
}

# A label carrying this prefix marks a deleted or unrequested position
DELETED_PREFIX = "---"

# Starting mismatch count for a definition whose loop or length differs
NOT_APPLICABLE = 10000

# Key residues allowed per canonical definition
MAX_KEY_POSITIONS = 80

# Residue tokens starting with this marker are absent from the sequence
ABSENT_MARKER = "-"

# Default canonical definition file and its search directory variable
DEFAULT_RULES_FILE = "chothia.dat"
RULES_DIR_ENV = "KABATDIR"

STRUCTURE_EXTENSIONS = (".pdb", ".ent", ".cif")

AA_3TO1 = {
    "ALA": "A",
    "CYS": "C",
    "ASP": "D",
    "GLU": "E",
    "PHE": "F",
    "GLY": "G",
    "HIS": "H",
    "ILE": "I",
    "LYS": "K",
    "LEU": "L",
    "MET": "M",
    "ASN": "N",
    "PRO": "P",
    "GLN": "Q",
    "ARG": "R",
    "SER": "S",
    "THR": "T",
    "VAL": "V",
    "TRP": "W",
    "TYR": "Y",
}
