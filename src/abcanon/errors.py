#!/usr/bin/env python3
"""Exceptions raised by abcanon.

All errors derive from ``ValueError``: they describe bad input data rather
than programming faults.
"""


class RuleSyntaxError(ValueError):
    """A canonical definition file line could not be parsed."""

    def __init__(self, message: str, line_number: int = 0) -> None:
        if line_number:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class MalformedRulesError(ValueError):
    """Priority or subordinate links between definitions are inconsistent."""


class SequenceFormatError(ValueError):
    """A numbered sequence line could not be parsed."""


class MissingResiduesError(ValueError):
    """A loop boundary residue is absent from the sequence."""

    def __init__(self, loop_id: str, label: str) -> None:
        super().__init__(
            f"Unable to find residue {label} in input (loop {loop_id})"
        )
        self.loop_id = loop_id
        self.label = label
