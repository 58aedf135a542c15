#!/usr/bin/env python3
"""
Parallelized batch processing CLI for abcanon.

Classifies many numbered sequences (or numbered structures) against one
set of canonical definitions. The definitions are read once; each input is
classified in its own job with its own ResidueIndex, so jobs can run in
separate processes.
"""

import logging
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set

import click

from abcanon import classifier, constants, report, util
from abcanon.cli import load_database, read_input_index
from abcanon.config import InputConfig, RulesConfig
from abcanon.database import ClassDatabase

LOGGER = logging.getLogger(__name__)

SEQUENCE_EXTENSIONS = (".seq", ".num")


@dataclass
class ClassificationJob:
    """Represents a single input to classify."""

    io: InputConfig
    verbose: bool


@dataclass
class ClassificationOutcome:
    """Result of processing a single input."""

    job: ClassificationJob
    success: bool
    error_msg: Optional[str] = None


def process_single_input(
    job: ClassificationJob, database: ClassDatabase
) -> ClassificationOutcome:
    """Classify one input file and write its report.

    Designed to run in a separate process; the database is read-only and
    is shared by pickling.
    """
    try:
        index = read_input_index(job.io)
        if len(index) == 0:
            return ClassificationOutcome(
                job=job, success=False, error_msg="No numbered residues"
            )
        results = classifier.assign_canonicals(database, index)
        with open(job.io.output_file, "w", encoding="utf-8") as out:
            report.write_report(results, out, verbose=job.verbose)
        LOGGER.info(f"Successfully processed {job.io.output_file}")
        return ClassificationOutcome(job=job, success=True)

    except Exception as e:
        LOGGER.error(f"Error processing {job.io.input_file}: {e}")
        return ClassificationOutcome(job=job, success=False, error_msg=str(e))


def collect_inputs(input_source: str) -> List[str]:
    """List the files named by ``input_source``.

    A directory contributes its sequence and structure files; any other
    file is a list of input paths, one per line (``#`` starts a comment).
    """
    if os.path.isdir(input_source):
        extensions = SEQUENCE_EXTENSIONS + constants.STRUCTURE_EXTENSIONS
        return sorted(
            str(p)
            for p in Path(input_source).iterdir()
            if p.is_file() and p.suffix.lower() in extensions
        )

    paths = []
    with open(input_source, encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if not os.path.exists(line):
                LOGGER.warning(
                    f"Line {line_num}: input file not found: {line}. Skipping."
                )
                continue
            paths.append(line)
    return paths


def report_path(
    input_file: str, output_dir: Path, suffix: str, claimed: Set[Path]
) -> Optional[Path]:
    """Choose the report file for ``input_file``.

    Reports are named after the input stem. When another input of this run
    already claimed that name (``a.seq`` and ``a.num``), the full input file
    name is used instead. Returns None if both names are taken, which only
    happens when the same input is listed twice.
    """
    by_stem = output_dir / f"{Path(input_file).stem}{suffix}.txt"
    if by_stem not in claimed:
        return by_stem
    by_name = output_dir / f"{Path(input_file).name}{suffix}.txt"
    if by_name not in claimed:
        LOGGER.warning(
            f"{by_stem.name} is already used by another input; "
            f"writing {input_file} to {by_name.name}"
        )
        return by_name
    return None


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    help=(
        "Parallelized batch processing for abcanon. Assign canonical "
        "classes to every numbered sequence in a directory or listed in a "
        "file, writing one report per input."
    ),
)
@click.option(
    "-i",
    "--input",
    "input_source",
    required=True,
    type=click.Path(exists=True, readable=True, path_type=str),
    help=(
        "Input source. Can be: (1) a directory of numbered sequence or "
        "structure files, or (2) a text file listing input paths "
        "(one per line)."
    ),
)
@click.option(
    "-o",
    "--output-dir",
    "output_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=str),
    help="Output directory for the reports.",
)
@click.option(
    "-c",
    "--rules",
    "rules_file",
    default=constants.DEFAULT_RULES_FILE,
    show_default=True,
    help="Canonical definition file.",
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
    help="Numbering scheme of the inputs.",
)
@click.option(
    "--heavy-chain",
    "heavy_chain",
    default="H",
    show_default=True,
    help="Heavy chain identifier for structure inputs.",
)
@click.option(
    "--light-chain",
    "light_chain",
    default="L",
    show_default=True,
    help="Light chain identifier for structure inputs.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Give explanations when no canonical is found.",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.option(
    "--overwrite",
    is_flag=True,
    help="Overwrite existing output files.",
)
@click.option(
    "-j",
    "--jobs",
    "num_jobs",
    type=int,
    default=1,
    show_default=True,
    help=(
        "Number of parallel jobs. Use 1 for sequential, >1 for parallel "
        "processing across inputs."
    ),
)
@click.option(
    "--output-suffix",
    "output_suffix",
    default="_canonicals",
    show_default=True,
    help="Suffix added to each input name to form its report name.",
)
def main(
    input_source: str,
    output_dir: str,
    rules_file: str,
    numbering: str,
    heavy_chain: str,
    light_chain: str,
    verbose: bool,
    debug: bool,
    overwrite: bool,
    num_jobs: int,
    output_suffix: str,
) -> None:
    """Run parallelized canonical class assignment over many inputs."""
    util.configure_logging(debug)

    if num_jobs < 1:
        raise click.ClickException(f"--jobs must be at least 1. Got: {num_jobs}")

    try:
        database = load_database(RulesConfig(rules_file=rules_file))
    except (OSError, ValueError) as e:
        raise click.ClickException(
            f"Unable to read canonical definitions: {e}"
        ) from e

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    scheme = constants.NumberingScheme(numbering.lower())

    jobs: List[ClassificationJob] = []
    claimed: Set[Path] = set()
    for input_file in collect_inputs(input_source):
        output_file = report_path(input_file, output_path, output_suffix, claimed)
        if output_file is None:
            LOGGER.warning(f"Skipping {input_file} (listed more than once)")
            continue
        claimed.add(output_file)
        if output_file.exists() and not overwrite:
            LOGGER.warning(f"Skipping {output_file} (exists, use --overwrite)")
            continue
        jobs.append(
            ClassificationJob(
                io=InputConfig(
                    input_file=input_file,
                    output_file=str(output_file),
                    scheme=scheme,
                    heavy_chain=heavy_chain or None,
                    light_chain=light_chain or None,
                ),
                verbose=verbose,
            )
        )

    if not jobs:
        click.echo("No jobs to process.")
        return

    click.echo(f"Processing {len(jobs)} input(s)...")
    results: List[ClassificationOutcome] = []

    if num_jobs == 1:
        for i, job in enumerate(jobs, 1):
            click.echo(f"Processing {i}/{len(jobs)}: {job.io.input_file}")
            result = process_single_input(job, database)
            results.append(result)
            if not result.success:
                click.echo(f"  ERROR: {result.error_msg}", err=True)
    else:
        with ProcessPoolExecutor(max_workers=num_jobs) as executor:
            futures = {
                executor.submit(process_single_input, job, database): job
                for job in jobs
            }
            with click.progressbar(
                length=len(futures), label="Processing"
            ) as pbar:
                for future in as_completed(futures):
                    result = future.result()
                    results.append(result)
                    pbar.update(1)
                    if not result.success:
                        click.echo(
                            f"\nFailed: {result.job.io.input_file}: "
                            f"{result.error_msg}",
                            err=True,
                        )

    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful
    click.echo(f"\nCompleted: {successful} successful, {failed} failed")

    if failed > 0:
        click.echo("\nFailed jobs:")
        for r in results:
            if not r.success:
                click.echo(f"  {r.job.io.input_file}: {r.error_msg}")


if __name__ == "__main__":
    main()
