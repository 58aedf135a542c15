#!/usr/bin/env python3
"""Reader for canonical class definition files.

The file is line oriented. Blank lines and lines starting with ``!`` or
``#`` are ignored and keywords are case-insensitive::

    CHOTHIANUMBERING
    LOOP L1 2 16
    SOURCE Chothia et al. (1989)
    PRIORITY 2a
    L2    I
    L25   S
    L29   VI

``LOOP`` starts a definition (loop id, class name, loop length). ``SOURCE``
records where it came from, ``PRIORITY`` names a class of the same loop
that this one outranks and ``SUBORDINATE`` one that outranks it. Any other
line is a key position followed by the one-letter codes allowed there. A
``CHOTHIANUM`` line anywhere switches the key positions to Chothia
numbering.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from abcanon import constants
from abcanon.errors import RuleSyntaxError
from abcanon.types import KeyPosition

LOGGER = logging.getLogger(__name__)


@dataclass
class RuleRecord:
    """A definition as read from the file, with links still given by name."""

    loop_id: str
    class_name: str
    length: int
    key_positions: List[KeyPosition] = field(default_factory=list)
    source: str = ""
    priority_name: Optional[str] = None
    subordinate_name: Optional[str] = None
    line_number: int = 0


@dataclass
class RuleSet:
    records: List[RuleRecord]
    chothia_numbering: bool = False

    @property
    def scheme(self) -> constants.NumberingScheme:
        if self.chothia_numbering:
            return constants.NumberingScheme.CHOTHIA
        return constants.NumberingScheme.KABAT


def _keyword(line: str, keyword: str) -> bool:
    return line[: len(keyword)].upper() == keyword


def _rest(line: str) -> str:
    """Drop the first word of ``line``."""
    parts = line.split(None, 1)
    return parts[1].strip() if len(parts) > 1 else ""


def _parse_loop_header(line: str, line_number: int) -> RuleRecord:
    words = line.split()
    if len(words) < 4:
        raise RuleSyntaxError(
            f"LOOP needs a loop id, class name and length: '{line}'",
            line_number,
        )
    loop_id, class_name, length = words[1].upper(), words[2], words[3]
    if loop_id not in constants.LOOP_IDS:
        raise RuleSyntaxError(
            f"Unknown loop '{words[1]}'; expected one of "
            f"{', '.join(constants.LOOP_IDS)}",
            line_number,
        )
    try:
        length_value = int(length)
    except ValueError:
        raise RuleSyntaxError(
            f"Loop length must be an integer; got '{length}'", line_number
        ) from None
    return RuleRecord(
        loop_id=loop_id,
        class_name=class_name,
        length=length_value,
        line_number=line_number,
    )


def parse_rules(lines: Iterable[str]) -> RuleSet:
    """Parse canonical definitions from an iterable of text lines."""
    records: List[RuleRecord] = []
    chothia_numbering = False
    current: Optional[RuleRecord] = None

    for line_number, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line or line[0] in "!#":
            continue

        if _keyword(line, "CHOTHIANUM"):
            chothia_numbering = True
        elif _keyword(line, "LOOP"):
            current = _parse_loop_header(line, line_number)
            records.append(current)
        elif current is None:
            LOGGER.warning(
                f"Line {line_number}: '{line}' precedes the first LOOP "
                "entry. Skipping."
            )
        elif _keyword(line, "SOURCE"):
            current.source = _rest(line)
        elif _keyword(line, "PRIORITY"):
            current.priority_name = _rest(line) or None
        elif _keyword(line, "SUBORDINATE"):
            current.subordinate_name = _rest(line) or None
        else:
            words = line.split()
            if len(words) < 2:
                raise RuleSyntaxError(
                    f"Key position '{words[0]}' of {current.loop_id} class "
                    f"{current.class_name} lists no allowed residues",
                    line_number,
                )
            if len(current.key_positions) >= constants.MAX_KEY_POSITIONS:
                raise RuleSyntaxError(
                    f"Too many key residues for {current.loop_id} class "
                    f"{current.class_name} (maximum "
                    f"{constants.MAX_KEY_POSITIONS})",
                    line_number,
                )
            current.key_positions.append(
                KeyPosition(label=words[0], allowed=words[1].upper())
            )

    LOGGER.info(
        f"Parsed {len(records)} canonical definitions "
        f"({'Chothia' if chothia_numbering else 'Kabat'} numbering)"
    )
    return RuleSet(records=records, chothia_numbering=chothia_numbering)


def read_rules(path: Union[str, Path]) -> RuleSet:
    """Read a canonical definition file."""
    with open(path, encoding="utf-8") as handle:
        rule_set = parse_rules(handle)
    LOGGER.info(f"Read canonical definitions from {path}")
    return rule_set
