#!/usr/bin/env python3
"""Command-line interface for abcanon canonical class assignment.

This module provides the CLI entry point. It orchestrates the full
assignment pipeline:

1. Read the canonical class definitions (resolving priority links)
2. Read the numbered sequence, or the numbered residues of a structure
3. Measure each CDR and match it against the definitions
4. Write one report line per CDR, with explanations if requested

Usage:
    abcanon -c chothia.dat -v antibody.seq
    abcanon -n chothia --heavy-chain A --light-chain B antibody.pdb out.txt
"""

import logging

import click

from abcanon import classifier, constants, report, sequence, structure, util
from abcanon.config import AssignmentConfig, InputConfig, RulesConfig
from abcanon.database import ClassDatabase
from abcanon.residue_index import ResidueIndex

LOGGER = logging.getLogger(__name__)


def load_database(rules: RulesConfig) -> ClassDatabase:
    """Locate and read the canonical definition file.

    Raises:
        FileNotFoundError: If the file is in neither the working directory
            nor the fallback directory.
        RuleSyntaxError, MalformedRulesError: If the definitions are invalid.
    """
    path = util.resolve_rules_path(rules.rules_file, rules.env_var)
    if path is None:
        raise FileNotFoundError(
            f"Unable to find canonical definitions file '{rules.rules_file}' "
            f"(also searched ${rules.env_var})"
        )
    return ClassDatabase.from_file(path)


def read_input_index(io: InputConfig) -> ResidueIndex:
    """Read the numbered input named by ``io`` (stdin if no file)."""
    if io.is_structure:
        residues = structure.sequence_from_structure(
            structure.read_structure_biopython(io.input_file),
            heavy_chain=io.heavy_chain,
            light_chain=io.light_chain,
        )
    else:
        with click.open_file(io.input_file or "-", "r") as handle:
            residues = sequence.parse_sequence(handle)
    return ResidueIndex(residues, io.scheme)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    help=(
        "Assign canonical classes to the CDRs of a numbered antibody "
        "sequence. INPUT is a list of residue labels and amino acids "
        "(or a numbered PDB/mmCIF file); the report goes to OUTPUT. "
        "I/O is through stdin/stdout if files are not specified."
    ),
)
@click.option(
    "-c",
    "--rules",
    "rules_file",
    default=constants.DEFAULT_RULES_FILE,
    show_default=True,
    help=(
        "Canonical definition file. Looked for in the current directory, "
        f"then in the directory named by ${constants.RULES_DIR_ENV}."
    ),
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Give explanations when no canonical is found and show sources.",
)
@click.option(
    "-n",
    "--numbering",
    "numbering",
    default="kabat",
    show_default=True,
    type=click.Choice(
        [s.value for s in constants.NumberingScheme], case_sensitive=False
    ),
    help="Numbering scheme of the input sequence.",
)
@click.option(
    "--heavy-chain",
    "heavy_chain",
    default="H",
    show_default=True,
    help="Heavy chain identifier when INPUT is a structure file.",
)
@click.option(
    "--light-chain",
    "light_chain",
    default="L",
    show_default=True,
    help="Light chain identifier when INPUT is a structure file.",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.argument(
    "input_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=str),
)
@click.argument(
    "output_file",
    required=False,
    type=click.Path(dir_okay=False, writable=True, path_type=str),
)
def main(
    rules_file: str,
    verbose: bool,
    numbering: str,
    heavy_chain: str,
    light_chain: str,
    debug: bool,
    input_file: str,
    output_file: str,
) -> None:
    """Run the command-line workflow for canonical class assignment."""
    util.configure_logging(debug)

    config = AssignmentConfig.from_cli_args(
        input_file=input_file,
        output_file=output_file,
        rules_file=rules_file,
        numbering=numbering,
        heavy_chain=heavy_chain,
        light_chain=light_chain,
        verbose=verbose,
        debug=debug,
    )
    LOGGER.info(
        f"Starting abcanon with input={input_file or '<stdin>'} "
        f"rules={rules_file} numbering={config.io.scheme.label}"
    )

    try:
        database = load_database(config.rules)
    except (OSError, ValueError) as e:
        raise click.ClickException(
            f"Unable to read canonical definitions: {e}"
        ) from e

    try:
        index = read_input_index(config.io)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Error in input data: {e}") from e
    if len(index) == 0:
        raise click.ClickException("Error in input data: no numbered residues")

    results = classifier.assign_canonicals(database, index)

    with click.open_file(config.io.output_file or "-", "w") as out:
        report.write_report(results, out, verbose=config.verbose)
    LOGGER.info(f"Finished; report written to {output_file or '<stdout>'}")


if __name__ == "__main__":
    main()
