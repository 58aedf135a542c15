#!/usr/bin/env python3
"""Canonical class assignment for CDR loops.

For a loop of known length the classifier scans the loop's definitions in
file order and counts, for each, the key positions whose residue is absent
or not allowed. The first definition with no mismatch is assigned. When
none matches, the closest definition of the right length is reported with
the positions that failed.

Priority chains let overlapping definitions be ranked. A definition that
is subordinate to another, and outranks none itself, is the low end of a
chain: the chain is walked from its top down through the ``priority_over``
links and the first exact match wins. Definitions that outrank another are
only ever tested from such a walk, never as candidates of their own.

Example usage:
    from abcanon import classifier
    from abcanon.database import ClassDatabase
    from abcanon.residue_index import ResidueIndex

    database = ClassDatabase.from_file("chothia.dat")
    index = ResidueIndex(residues)
    for result in classifier.assign_canonicals(database, index):
        print(result)
"""

import logging
from typing import Dict, List, Optional, Tuple

from abcanon import constants, numbering
from abcanon.constants import NumberingScheme
from abcanon.database import ClassDatabase
from abcanon.loops import LOOPS, locate_loops
from abcanon.residue_index import ResidueIndex
from abcanon.types import (
    ClassDefinition,
    ClassificationResult,
    LoopResult,
    MatchedClass,
    MissingResidues,
    PositionMismatch,
    UnmatchedClass,
)

LOGGER = logging.getLogger(__name__)

# (CDR1 loop id, CDR1 length) of the chain being classified
Cdr1Context = Tuple[str, Optional[int]]


def default_cdr1_context(loop_id: str) -> Cdr1Context:
    return constants.CDR1_FOR_CHAIN[loop_id[0]], None


class Classifier:
    """Match observed loops against a ClassDatabase.

    The classifier holds no per-sequence state; one instance may serve any
    number of sequences.
    """

    def __init__(self, database: ClassDatabase) -> None:
        self.database = database

    def resolve_label(
        self,
        label: str,
        index: ResidueIndex,
        cdr1_context: Cdr1Context,
    ) -> str:
        """Translate a key position label into the sequence's numbering."""
        rule_scheme = self.database.rule_scheme
        if rule_scheme == index.scheme:
            return label
        cdr1_loop, cdr1_length = cdr1_context
        if rule_scheme == NumberingScheme.KABAT:
            return numbering.kabat_to_chothia(cdr1_loop, cdr1_length, label)
        return numbering.chothia_to_kabat(cdr1_loop, cdr1_length, label)

    def test_candidate(
        self,
        definition: ClassDefinition,
        loop_id: str,
        observed_length: int,
        index: ResidueIndex,
        cdr1_context: Cdr1Context,
    ) -> int:
        """Count the key positions of ``definition`` the sequence violates.

        A definition for another loop or length starts from
        ``NOT_APPLICABLE``, so 0 always means an exact match.
        """
        if definition.loop_id == loop_id and definition.length == observed_length:
            n_mismatch = 0
        else:
            n_mismatch = constants.NOT_APPLICABLE

        for key in definition.key_positions:
            residue = index.residue_at(
                self.resolve_label(key.label, index, cdr1_context)
            )
            if residue is None or not key.allows(residue):
                n_mismatch += 1
        return n_mismatch

    def _resolve_chain(
        self,
        start: ClassDefinition,
        loop_id: str,
        observed_length: int,
        index: ResidueIndex,
        cdr1_context: Cdr1Context,
    ) -> Tuple[ClassDefinition, int]:
        """Test a priority chain from its highest-ranked member downwards.

        Returns the first exactly matching member, or ``start`` (the lowest
        ranked member) with its own mismatch count.
        """
        top = start
        while top.subordinate_to is not None:
            top = self.database[top.subordinate_to]

        counts: Dict[int, int] = {}
        node: Optional[ClassDefinition] = top
        while node is not None:
            n_mismatch = self.test_candidate(
                node, loop_id, observed_length, index, cdr1_context
            )
            if n_mismatch == 0:
                if node is not start:
                    LOGGER.info(
                        f"{loop_id} class {node.class_name} takes priority "
                        f"over class {start.class_name}"
                    )
                return node, 0
            counts[node.def_id] = n_mismatch
            if node.priority_over is None:
                node = None
            else:
                node = self.database[node.priority_over]

        if start.def_id not in counts:
            counts[start.def_id] = self.test_candidate(
                start, loop_id, observed_length, index, cdr1_context
            )
        return start, counts[start.def_id]

    def mismatches(
        self,
        definition: ClassDefinition,
        index: ResidueIndex,
        cdr1_context: Cdr1Context,
    ) -> Tuple[PositionMismatch, ...]:
        """Key positions of ``definition`` not satisfied by the sequence."""
        out = []
        for key in definition.key_positions:
            lookup = self.resolve_label(key.label, index, cdr1_context)
            residue = index.residue_at(lookup)
            if residue is not None and key.allows(residue):
                continue
            out.append(
                PositionMismatch(
                    label=key.label,
                    lookup_label=lookup,
                    allowed=key.allowed,
                    observed=residue,
                    scheme=index.scheme,
                )
            )
        return tuple(out)

    def classify(
        self,
        loop_id: str,
        observed_length: int,
        index: ResidueIndex,
        cdr1_context: Optional[Cdr1Context] = None,
    ) -> ClassificationResult:
        """Assign a canonical class to one loop.

        Args:
            loop_id: One of L1, L2, L3, H1, H2, H3.
            observed_length: Loop length measured in the sequence.
            index: The numbered sequence.
            cdr1_context: (CDR1 loop id, CDR1 length) of the same chain,
                used when the definitions and the sequence are numbered
                with different schemes. Defaults to an unknown length.

        Returns:
            MatchedClass for the first exact match in file order, else
            UnmatchedClass with the closest same-length definition.
        """
        if cdr1_context is None:
            cdr1_context = default_cdr1_context(loop_id)

        best: Optional[ClassDefinition] = None
        min_mismatch = constants.NOT_APPLICABLE

        for candidate in self.database.candidates_for(loop_id):
            if candidate.priority_over is not None:
                continue
            if candidate.subordinate_to is not None:
                tested, n_mismatch = self._resolve_chain(
                    candidate, loop_id, observed_length, index, cdr1_context
                )
            else:
                tested = candidate
                n_mismatch = self.test_candidate(
                    candidate, loop_id, observed_length, index, cdr1_context
                )

            if n_mismatch == 0:
                return MatchedClass(loop_id, tested.class_name, tested.source)
            if n_mismatch < min_mismatch:
                min_mismatch = n_mismatch
                best = tested

        if best is None:
            LOGGER.info(f"No {loop_id} definitions of length {observed_length}")
            return UnmatchedClass(loop_id, observed_length)

        LOGGER.info(
            f"{loop_id} closest to class {best.class_name} "
            f"with {min_mismatch} mismatches"
        )
        return UnmatchedClass(
            loop_id,
            observed_length,
            best=best,
            mismatch_count=min_mismatch,
            mismatches=self.mismatches(best, index, cdr1_context),
        )


def assign_canonicals(
    database: ClassDatabase, index: ResidueIndex
) -> List[LoopResult]:
    """Classify all six CDRs of a numbered sequence.

    A loop whose boundary residue is missing yields MissingResidues and the
    remaining loops are still classified.
    """
    lengths = locate_loops(index)
    classifier = Classifier(database)
    results: List[LoopResult] = []

    for boundary in LOOPS:
        length = lengths[boundary.name]
        if isinstance(length, MissingResidues):
            results.append(length)
            continue
        cdr1_loop = constants.CDR1_FOR_CHAIN[boundary.name[0]]
        cdr1_length = lengths[cdr1_loop]
        if isinstance(cdr1_length, MissingResidues):
            cdr1_length = None
        results.append(
            classifier.classify(
                boundary.name, length, index, (cdr1_loop, cdr1_length)
            )
        )
    return results
