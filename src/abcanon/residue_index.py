#!/usr/bin/env python3
"""Position lookup over a numbered sequence.

Numbered sequences are not always consistent about insertion codes: a
definition may ask for ``H35B`` in a sequence that only has ``H35A``, or
for ``L27A`` in one with no insertion at L27 at all. ``ResidueIndex.locate``
resolves such labels with an ordered fallback:

1. labels starting with ``---`` are deleted and never found;
2. an exact match;
3. the insertion letter stepped down one at a time to ``A``;
4. the bare number, compared against stored labels with their own
   insertion codes removed.
"""

import logging
from typing import Dict, Iterator, Optional, Sequence, Tuple

from abcanon import constants
from abcanon.constants import NumberingScheme

LOGGER = logging.getLogger(__name__)


def insertion_position(label: str) -> Optional[int]:
    """Index of the first letter after the chain identifier, or None."""
    for idx in range(1, len(label)):
        if label[idx].isalpha():
            return idx
    return None


def strip_insertion(label: str) -> str:
    """Remove the insertion code (and anything after it) from ``label``."""
    pos = insertion_position(label)
    return label if pos is None else label[:pos]


class ResidueIndex:
    """Immutable numbered sequence with tolerant label lookup.

    Args:
        residues: Ordered (label, one-letter residue) pairs.
        scheme: Numbering scheme of the labels.
    """

    def __init__(
        self,
        residues: Sequence[Tuple[str, str]],
        scheme: NumberingScheme = NumberingScheme.KABAT,
    ) -> None:
        self._residues: Tuple[Tuple[str, str], ...] = tuple(
            (label, residue) for label, residue in residues
        )
        self._scheme = NumberingScheme(scheme)
        self._exact: Dict[str, int] = {}
        for idx, (label, _) in enumerate(self._residues):
            self._exact.setdefault(label, idx)
        LOGGER.debug(
            f"Indexed {len(self._residues)} residues "
            f"({self._scheme.label} numbering)"
        )

    @property
    def scheme(self) -> NumberingScheme:
        return self._scheme

    def __len__(self) -> int:
        return len(self._residues)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._residues)

    def __getitem__(self, idx: int) -> Tuple[str, str]:
        return self._residues[idx]

    def locate(self, label: str) -> Optional[int]:
        """Return the sequence offset holding ``label``, or None."""
        if label.startswith(constants.DELETED_PREFIX):
            return None

        if label in self._exact:
            return self._exact[label]

        pos = insertion_position(label)
        if pos is None:
            return None

        # A missing insertion may be represented by an earlier letter
        code = ord(label[pos]) - 1
        while code >= ord("A") and chr(code).isalpha():
            candidate = label[:pos] + chr(code) + label[pos + 1 :]
            if candidate in self._exact:
                LOGGER.debug(f"{label} found as {candidate}")
                return self._exact[candidate]
            code -= 1

        bare = label[:pos]
        for idx, (stored, _) in enumerate(self._residues):
            if strip_insertion(stored) == bare:
                LOGGER.debug(f"{label} found as {stored}")
                return idx
        return None

    def residue_at(self, label: str) -> Optional[str]:
        idx = self.locate(label)
        return None if idx is None else self._residues[idx][1]
