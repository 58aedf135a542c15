#!/usr/bin/env python3
"""CDR loop length measurement from the fixed boundary table."""

import logging
from dataclasses import dataclass
from typing import Dict, Union

from abcanon import constants
from abcanon.errors import MissingResiduesError
from abcanon.residue_index import ResidueIndex
from abcanon.types import MissingResidues

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoopBoundary:
    """Inclusive start and stop labels of a CDR loop."""

    name: str
    start: str
    stop: str


LOOPS = tuple(
    LoopBoundary(name, start, stop)
    for name, start, stop in constants.LOOP_BOUNDARIES
)


def loop_length(boundary: LoopBoundary, index: ResidueIndex) -> int:
    """Number of residues from ``boundary.start`` to ``boundary.stop``.

    The result is not checked: a stop found before its start yields a zero
    or negative length, which simply matches no definition.

    Raises:
        MissingResiduesError: If either boundary residue cannot be located.
    """
    start = index.locate(boundary.start)
    if start is None:
        raise MissingResiduesError(boundary.name, boundary.start)
    stop = index.locate(boundary.stop)
    if stop is None:
        raise MissingResiduesError(boundary.name, boundary.stop)
    return 1 + stop - start


def locate_loops(index: ResidueIndex) -> Dict[str, Union[int, MissingResidues]]:
    """Measure every CDR; loops with a missing boundary map to MissingResidues."""
    lengths: Dict[str, Union[int, MissingResidues]] = {}
    for boundary in LOOPS:
        try:
            lengths[boundary.name] = loop_length(boundary, index)
        except MissingResiduesError as e:
            LOGGER.warning(str(e))
            lengths[boundary.name] = MissingResidues(e.loop_id, e.label)
        else:
            LOGGER.info(
                f"CDR {boundary.name} has length {lengths[boundary.name]}"
            )
    return lengths
