#!/usr/bin/env python3
"""Numbered sequences from antibody structure files.

The structure must already carry Kabat or Chothia residue numbers; its
residue ids are read as they are.
"""

import logging
from typing import Optional

from Bio.PDB import PDBParser
from Bio.PDB.MMCIFParser import MMCIFParser
from Bio.PDB.Structure import Structure

from abcanon.constants import AA_3TO1, NumberedSequence

LOGGER = logging.getLogger(__name__)


def read_structure_biopython(file_path: str) -> Structure:
    """Read a structure file using BioPython.

    Args:
        file_path: Path to PDB or mmCIF file.

    Returns:
        BioPython Structure object.
    """
    if file_path.lower().endswith(".cif"):
        parser = MMCIFParser(QUIET=True)
    else:
        parser = PDBParser(QUIET=True)

    structure = parser.get_structure("structure", file_path)
    LOGGER.info(f"Read structure from {file_path} using BioPython")
    return structure


def sequence_from_structure(
    structure: Structure,
    heavy_chain: Optional[str] = "H",
    light_chain: Optional[str] = "L",
) -> NumberedSequence:
    """Extract labelled residues of the heavy and light chains.

    Residue ids become labels such as ``H52A`` or ``L95``. Light chain
    residues come first, then heavy chain residues. HETATM records are
    skipped and non-standard residues are reported as ``X``.

    Args:
        structure: BioPython Structure object.
        heavy_chain: Chain identifier of the heavy chain, or None.
        light_chain: Chain identifier of the light chain, or None.

    Returns:
        List of (label, one-letter residue) pairs.

    Raises:
        ValueError: If a requested chain is not in the first model.
    """
    model = structure[0]
    available = [ch.id for ch in model]
    sequence: NumberedSequence = []

    for prefix, chain_id in (("L", light_chain), ("H", heavy_chain)):
        if chain_id is None:
            continue
        if chain_id not in available:
            raise ValueError(
                f"Chain '{chain_id}' not found in structure. "
                f"Available chains: {available}"
            )
        for res in model[chain_id]:
            hetflag, resseq, icode = res.get_id()
            if hetflag.strip():
                continue
            label = f"{prefix}{resseq}{icode.strip()}"
            sequence.append((label, AA_3TO1.get(res.get_resname(), "X")))

    LOGGER.info(
        f"Extracted {len(sequence)} numbered residues from chains "
        f"L={light_chain} H={heavy_chain}"
    )
    return sequence
