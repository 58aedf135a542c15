#!/usr/bin/env python3

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from abcanon import constants

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPosition:
    """A diagnostic position and the residue types allowed there."""

    label: str
    allowed: str

    def allows(self, residue: str) -> bool:
        return len(residue) == 1 and residue in self.allowed


@dataclass(frozen=True)
class ClassDefinition:
    """One canonical class of a CDR loop at a given length.

    ``priority_over`` and ``subordinate_to`` hold ``def_id`` values of other
    definitions in the same ClassDatabase.
    """

    def_id: int
    loop_id: str
    class_name: str
    length: int
    key_positions: Tuple[KeyPosition, ...] = ()
    source: str = ""
    priority_over: Optional[int] = None
    subordinate_to: Optional[int] = None

    def __post_init__(self) -> None:
        if self.loop_id not in constants.LOOP_IDS:
            raise ValueError(
                f"loop_id must be one of {constants.LOOP_IDS}; "
                f"got {self.loop_id!r} for class {self.class_name}"
            )
        LOGGER.debug(
            f"Initialized ClassDefinition {self.loop_id}/{self.class_name} "
            f"(length={self.length}, keys={len(self.key_positions)})"
        )


@dataclass(frozen=True)
class PositionMismatch:
    """Why one key position of the closest class was not satisfied.

    ``observed`` is None when the position could not be located in the
    sequence, i.e. it is deleted.
    """

    label: str
    lookup_label: str
    allowed: str
    observed: Optional[str]
    scheme: constants.NumberingScheme

    @property
    def deleted(self) -> bool:
        return self.observed is None


@dataclass(frozen=True)
class MatchedClass:
    loop_id: str
    class_name: str
    source: str = ""


@dataclass(frozen=True)
class UnmatchedClass:
    """No class matched exactly.

    ``best`` is the closest same-length definition, or None when the
    database holds no definition of this length for the loop.
    """

    loop_id: str
    length: int
    best: Optional[ClassDefinition] = None
    mismatch_count: Optional[int] = None
    mismatches: Tuple[PositionMismatch, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MissingResidues:
    """A loop whose boundary residue is absent; it was not classified."""

    loop_id: str
    label: str


ClassificationResult = Union[MatchedClass, UnmatchedClass]
LoopResult = Union[MatchedClass, UnmatchedClass, MissingResidues]
