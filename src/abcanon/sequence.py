#!/usr/bin/env python3
"""Reader for numbered antibody sequences.

Each useful line holds a residue label such as ``L27A`` or ``H100`` and the
residue at that position, as a one-letter or three-letter code::

    L1   D
    L2   ILE
    L27A -

Only lines starting with ``L`` or ``H`` followed by a digit are read. A
residue token starting with ``-`` marks the position as absent and the
line is skipped.
"""

import logging
from pathlib import Path
from typing import Iterable, Union

from abcanon import constants
from abcanon.constants import NumberedSequence
from abcanon.errors import SequenceFormatError

LOGGER = logging.getLogger(__name__)


def residue_code(token: str) -> str:
    """Normalize a one-letter or three-letter residue token to one letter."""
    if len(token) == 1:
        return token.upper()
    code = constants.AA_3TO1.get(token.upper())
    if code is None:
        LOGGER.warning(f"Unknown residue '{token}'; using X")
        return "X"
    return code


def parse_sequence(lines: Iterable[str]) -> NumberedSequence:
    """Parse (label, residue) pairs from an iterable of text lines."""
    sequence: NumberedSequence = []
    for line_number, line in enumerate(lines, 1):
        if len(line) < 2 or line[0] not in "LH" or not line[1].isdigit():
            continue
        words = line.split()
        if len(words) < 2:
            raise SequenceFormatError(
                f"Line {line_number}: residue {words[0]} has no amino acid"
            )
        label, token = words[0], words[1]
        if token.startswith(constants.ABSENT_MARKER):
            continue
        sequence.append((label, residue_code(token)))

    LOGGER.info(f"Read {len(sequence)} numbered residues")
    return sequence


def read_sequence(path: Union[str, Path]) -> NumberedSequence:
    with open(path, encoding="utf-8") as handle:
        return parse_sequence(handle)
