#!/usr/bin/env python3
"""Plain-text rendering of canonical class assignments."""

from typing import Iterable, List, TextIO

from abcanon.types import LoopResult, MatchedClass, MissingResidues


def format_result(result: LoopResult, verbose: bool = False) -> List[str]:
    """Render one loop's result as report lines.

    With ``verbose`` the source of a matched class is appended and an
    unmatched loop is followed by the reasons no class fitted.
    """
    if isinstance(result, MissingResidues):
        return [f"CDR {result.loop_id}  Missing Residues"]

    if isinstance(result, MatchedClass):
        line = f"CDR {result.loop_id}  Class {result.class_name:<3}"
        if verbose and result.source:
            line += f" {result.source}"
        return [line]

    lines = [f"CDR {result.loop_id}  Class ?"]
    if not verbose:
        return lines
    if result.best is None:
        lines.append("! Length mismatch")
        return lines

    lines.append(f"! Similar to class {result.best.class_name}, but:")
    for mismatch in result.mismatches:
        if mismatch.deleted:
            lines.append(
                f"!    {mismatch.label} is deleted "
                f"({mismatch.scheme.label} numbering: {mismatch.lookup_label})"
            )
        else:
            lines.append(
                f"!    {mismatch.label} = {mismatch.observed} "
                f"(allows: {mismatch.allowed})"
            )
    return lines


def write_report(
    results: Iterable[LoopResult], out: TextIO, verbose: bool = False
) -> None:
    for result in results:
        for line in format_result(result, verbose):
            out.write(line.rstrip() + "\n")
