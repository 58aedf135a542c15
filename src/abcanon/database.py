#!/usr/bin/env python3
"""In-memory store of canonical class definitions.

Definitions live in an ordered arena and are addressed by ``def_id``, their
position in the file. Priority and subordinate links are stored as ids
and resolved once, after every definition has been read.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from abcanon import rules
from abcanon.constants import NumberingScheme
from abcanon.errors import MalformedRulesError
from abcanon.types import ClassDefinition

LOGGER = logging.getLogger(__name__)


def _resolve_link(
    records: Sequence[rules.RuleRecord],
    def_id: int,
    name: Optional[str],
    kind: str,
) -> Optional[int]:
    """Return the id of the definition ``name`` refers to, or None."""
    if name is None:
        return None
    record = records[def_id]
    matches = [
        idx
        for idx, other in enumerate(records)
        if idx != def_id
        and other.loop_id == record.loop_id
        and other.class_name == name
    ]
    if len(matches) != 1:
        raise MalformedRulesError(
            f"{kind} class '{name}' of {record.loop_id} class "
            f"{record.class_name} (line {record.line_number}) matches "
            f"{len(matches)} definitions; exactly one is required"
        )
    target = records[matches[0]]
    if target.length != record.length:
        raise MalformedRulesError(
            f"{kind} class '{name}' of {record.loop_id} class "
            f"{record.class_name} has length {target.length}, "
            f"expected {record.length}"
        )
    return matches[0]


class ClassDatabase:
    """Read-only collection of ClassDefinitions.

    Args:
        definitions: Definitions in file order; ``def_id`` must equal the
            position of each definition.
        rule_scheme: Numbering scheme used by the key positions.
    """

    def __init__(
        self,
        definitions: Sequence[ClassDefinition],
        rule_scheme: NumberingScheme = NumberingScheme.KABAT,
    ) -> None:
        for idx, definition in enumerate(definitions):
            if definition.def_id != idx:
                raise ValueError(
                    f"def_id ({definition.def_id}) must match position "
                    f"({idx}) for {definition.loop_id} class "
                    f"{definition.class_name}"
                )
        self._definitions = tuple(definitions)
        self._rule_scheme = NumberingScheme(rule_scheme)
        self._check_acyclic()

    @classmethod
    def from_records(
        cls,
        records: Sequence[rules.RuleRecord],
        rule_scheme: NumberingScheme = NumberingScheme.KABAT,
    ) -> "ClassDatabase":
        """Build the database from parsed records, resolving class links.

        PRIORITY and SUBORDINATE names are looked up among the other
        definitions of the same loop only, so class names need to be unique
        per loop rather than across the whole file.

        Raises:
            MalformedRulesError: If a PRIORITY or SUBORDINATE name does not
                resolve to exactly one other definition of the same loop,
                or resolves to one of a different length.
        """
        definitions: List[ClassDefinition] = []
        for def_id, record in enumerate(records):
            definitions.append(
                ClassDefinition(
                    def_id=def_id,
                    loop_id=record.loop_id,
                    class_name=record.class_name,
                    length=record.length,
                    key_positions=tuple(record.key_positions),
                    source=record.source,
                    priority_over=_resolve_link(
                        records, def_id, record.priority_name, "Priority"
                    ),
                    subordinate_to=_resolve_link(
                        records, def_id, record.subordinate_name, "Subordinate"
                    ),
                )
            )
        database = cls(definitions, rule_scheme)
        LOGGER.info(
            f"Built canonical database with {len(database)} definitions "
            f"({database.rule_scheme.label} numbering)"
        )
        return database

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ClassDatabase":
        rule_set = rules.read_rules(path)
        return cls.from_records(rule_set.records, rule_set.scheme)

    def _check_acyclic(self) -> None:
        for definition in self._definitions:
            for attr in ("subordinate_to", "priority_over"):
                seen = {definition.def_id}
                link = getattr(definition, attr)
                while link is not None:
                    if not 0 <= link < len(self._definitions):
                        raise MalformedRulesError(
                            f"{attr} of {definition.loop_id} class "
                            f"{definition.class_name} refers to unknown "
                            f"definition {link}"
                        )
                    if link in seen:
                        raise MalformedRulesError(
                            f"{attr} links starting at "
                            f"{definition.loop_id} class "
                            f"{definition.class_name} form a cycle"
                        )
                    seen.add(link)
                    link = getattr(self._definitions[link], attr)

    @property
    def rule_scheme(self) -> NumberingScheme:
        return self._rule_scheme

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[ClassDefinition]:
        return iter(self._definitions)

    def __getitem__(self, def_id: int) -> ClassDefinition:
        return self._definitions[def_id]

    def candidates_for(self, loop_id: str) -> Iterator[ClassDefinition]:
        """Yield the definitions of ``loop_id`` in file order.

        Lengths are not filtered here; the classifier tests the length of
        every definition it reaches.
        """
        for definition in self._definitions:
            if definition.loop_id == loop_id:
                yield definition
