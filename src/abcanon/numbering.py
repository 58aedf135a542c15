#!/usr/bin/env python3
"""Translation of residue labels between Kabat and Chothia numbering.

The two schemes agree everywhere except in CDR1 of each chain, where they
place insertion codes after different residues:

- L1: Kabat inserts after L27 (L27A, L27B, ...), Chothia after L30.
- H1: Kabat inserts after H35 (H35A, H35B), Chothia after H31.

Given the observed CDR1 length, both label layouts of the region are built
and labels are mapped position by position.
"""

import logging
import re
from string import ascii_uppercase
from typing import List, Optional

from abcanon import constants
from abcanon.constants import NumberingScheme

LOGGER = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"^([LH])(\d+)([A-Za-z]*)$")


def _region_labels(
    cdr1_loop: str, n_insertions: int, scheme: NumberingScheme
) -> List[str]:
    """Lay out the CDR1 region labels for ``n_insertions`` inserted residues."""
    region = constants.CDR1_REGIONS[cdr1_loop]
    chain = cdr1_loop[0]
    labels = []
    for number in range(region["first"], region["last"] + 1):
        labels.append(f"{chain}{number}")
        if number == region[scheme.value]:
            labels.extend(
                f"{chain}{number}{code}"
                for code in ascii_uppercase[:n_insertions]
            )
    return labels


def cdr1_insertions(cdr1_loop: str, cdr1_length: Optional[int]) -> int:
    """Number of inserted residues in a CDR1 of ``cdr1_length`` residues."""
    if cdr1_loop not in constants.CDR1_REGIONS:
        raise ValueError(f"{cdr1_loop!r} is not a CDR1 loop")
    if cdr1_length is None:
        return 0
    region = constants.CDR1_REGIONS[cdr1_loop]
    return max(0, cdr1_length - (region["last"] - region["first"] + 1))


def translate_label(
    label: str,
    from_scheme: NumberingScheme,
    to_scheme: NumberingScheme,
    cdr1_loop: str,
    cdr1_length: Optional[int],
) -> str:
    """Translate ``label`` from one numbering scheme to the other.

    Labels outside the CDR1 region of ``cdr1_loop``'s chain are returned
    unchanged. A CDR1 label with no counterpart at this loop length is
    returned with the deleted prefix.
    """
    n_insertions = cdr1_insertions(cdr1_loop, cdr1_length)
    if from_scheme == to_scheme:
        return label

    match = _LABEL_RE.match(label)
    if match is None or match.group(1) != cdr1_loop[0]:
        return label
    region = constants.CDR1_REGIONS[cdr1_loop]
    if not region["first"] <= int(match.group(2)) <= region["last"]:
        return label
    if n_insertions > len(ascii_uppercase):
        LOGGER.warning(
            f"{cdr1_loop} has {n_insertions} insertions but only "
            f"{len(ascii_uppercase)} insertion codes exist; treating {label} "
            "as deleted"
        )
        return constants.DELETED_PREFIX + label

    source = _region_labels(cdr1_loop, n_insertions, from_scheme)
    target = _region_labels(cdr1_loop, n_insertions, to_scheme)
    if label not in source:
        LOGGER.info(
            f"{label} does not exist in {from_scheme.label} numbering for "
            f"{cdr1_loop} of length {cdr1_length}"
        )
        return constants.DELETED_PREFIX + label
    return target[source.index(label)]


def kabat_to_chothia(
    cdr1_loop: str, cdr1_length: Optional[int], label: str
) -> str:
    return translate_label(
        label,
        NumberingScheme.KABAT,
        NumberingScheme.CHOTHIA,
        cdr1_loop,
        cdr1_length,
    )


def chothia_to_kabat(
    cdr1_loop: str, cdr1_length: Optional[int], label: str
) -> str:
    return translate_label(
        label,
        NumberingScheme.CHOTHIA,
        NumberingScheme.KABAT,
        cdr1_loop,
        cdr1_length,
    )
