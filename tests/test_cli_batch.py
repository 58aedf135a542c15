from pathlib import Path

import pytest
from click.testing import CliRunner

from abcanon import cli_batch
from abcanon.config import InputConfig
from abcanon.database import ClassDatabase

SHORT_H3_DROP = ("H98", "H99", "H100")


def make_inputs(tmp_path, write_sequence):
    write_sequence("inputs/good.seq", overrides={"H101": "A"}, drop=SHORT_H3_DROP)
    write_sequence("inputs/other.num", overrides={"H101": "K"}, drop=SHORT_H3_DROP)
    inputs = tmp_path / "inputs"
    (inputs / "empty.seq").write_text("! no residues\n")
    (inputs / "notes.txt").write_text("not an input\n")
    return inputs


def test_collect_inputs_from_directory(tmp_path, write_sequence):
    inputs = make_inputs(tmp_path, write_sequence)
    names = [Path(p).name for p in cli_batch.collect_inputs(str(inputs))]
    assert names == ["empty.seq", "good.seq", "other.num"]


def test_collect_inputs_from_list_file(tmp_path, write_sequence, caplog):
    good = write_sequence("good.seq")
    listing = tmp_path / "inputs.txt"
    listing.write_text(f"# inputs\n\n{good}\n{tmp_path / 'missing.seq'}\n")

    assert cli_batch.collect_inputs(str(listing)) == [good]
    assert "Line 4: input file not found" in caplog.text


def test_process_single_input(tmp_path, h3_rules_file, write_sequence):
    database = ClassDatabase.from_file(h3_rules_file)
    out = tmp_path / "good.txt"
    job = cli_batch.ClassificationJob(
        io=InputConfig(
            input_file=write_sequence(
                overrides={"H101": "G"}, drop=SHORT_H3_DROP
            ),
            output_file=str(out),
        ),
        verbose=False,
    )

    outcome = cli_batch.process_single_input(job, database)

    assert outcome.success
    assert outcome.error_msg is None
    assert out.read_text().splitlines()[-1] == "CDR H3  Class h3a"


def test_process_single_input_reports_failure(tmp_path, h3_rules_file):
    bad = tmp_path / "bad.seq"
    bad.write_text("H1\n")
    job = cli_batch.ClassificationJob(
        io=InputConfig(input_file=str(bad), output_file=str(tmp_path / "o")),
        verbose=False,
    )

    outcome = cli_batch.process_single_input(
        job, ClassDatabase.from_file(h3_rules_file)
    )

    assert not outcome.success
    assert "has no amino acid" in outcome.error_msg
    assert not (tmp_path / "o").exists()


def test_batch_sequential(tmp_path, h3_rules_file, write_sequence):
    inputs = make_inputs(tmp_path, write_sequence)
    out_dir = tmp_path / "reports"

    result = CliRunner().invoke(
        cli_batch.main,
        ["-i", str(inputs), "-o", str(out_dir), "-c", str(h3_rules_file), "-v"],
    )

    assert result.exit_code == 0, result.output
    assert "Completed: 2 successful, 1 failed" in result.output
    good = (out_dir / "good_canonicals.txt").read_text().splitlines()
    assert good[-1] == "CDR H3  Class h3a synthetic"
    other = (out_dir / "other_canonicals.txt").read_text().splitlines()
    assert other[-1] == "!    H101 = K (allows: AG)"
    assert not (out_dir / "empty_canonicals.txt").exists()


def test_batch_parallel(tmp_path, h3_rules_file, write_sequence):
    inputs = make_inputs(tmp_path, write_sequence)
    out_dir = tmp_path / "reports"

    result = CliRunner().invoke(
        cli_batch.main,
        [
            "-i", str(inputs),
            "-o", str(out_dir),
            "-c", str(h3_rules_file),
            "-j", "2",
            "--output-suffix", ".abc",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Completed: 2 successful, 1 failed" in result.output
    good = (out_dir / "good.abc.txt").read_text().splitlines()
    assert good[-1] == "CDR H3  Class h3a"


def test_batch_skips_existing_reports(tmp_path, h3_rules_file, write_sequence):
    inputs = tmp_path / "inputs"
    write_sequence("inputs/good.seq")
    out_dir = tmp_path / "reports"
    out_dir.mkdir()
    existing = out_dir / "good_canonicals.txt"
    existing.write_text("keep\n")
    args = ["-i", str(inputs), "-o", str(out_dir), "-c", str(h3_rules_file)]

    result = CliRunner().invoke(cli_batch.main, args)
    assert result.exit_code == 0, result.output
    assert "No jobs to process." in result.output
    assert existing.read_text() == "keep\n"

    result = CliRunner().invoke(cli_batch.main, args + ["--overwrite"])
    assert result.exit_code == 0, result.output
    assert existing.read_text().startswith("CDR L1")


def test_batch_rejects_zero_jobs(tmp_path, h3_rules_file):
    result = CliRunner().invoke(
        cli_batch.main,
        [
            "-i", str(tmp_path),
            "-o", str(tmp_path / "out"),
            "-c", str(h3_rules_file),
            "-j", "0",
        ],
    )
    assert result.exit_code == 1
    assert "--jobs must be at least 1" in result.output


@pytest.mark.parametrize("num_jobs", ["1", "2"])
def test_batch_survives_unreadable_structure(
    tmp_path, h3_rules_file, write_sequence, num_jobs
):
    write_sequence("inputs/a.seq", overrides={"H101": "A"}, drop=SHORT_H3_DROP)
    inputs = tmp_path / "inputs"
    (inputs / "b.cif").write_text("data_x\nloop_\n_atom_site.id\n1\n")
    out_dir = tmp_path / "reports"

    result = CliRunner().invoke(
        cli_batch.main,
        [
            "-i", str(inputs),
            "-o", str(out_dir),
            "-c", str(h3_rules_file),
            "-j", num_jobs,
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Completed: 1 successful, 1 failed" in result.output
    assert (out_dir / "a_canonicals.txt").exists()
    assert not (out_dir / "b_canonicals.txt").exists()


def test_batch_inputs_sharing_a_stem_get_separate_reports(
    tmp_path, h3_rules_file, write_sequence
):
    write_sequence("inputs/a.seq", overrides={"H101": "A"}, drop=SHORT_H3_DROP)
    write_sequence("inputs/a.num", overrides={"H101": "K"}, drop=SHORT_H3_DROP)
    out_dir = tmp_path / "reports"

    result = CliRunner().invoke(
        cli_batch.main,
        [
            "-i", str(tmp_path / "inputs"),
            "-o", str(out_dir),
            "-c", str(h3_rules_file),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Completed: 2 successful, 0 failed" in result.output
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "a.seq_canonicals.txt",
        "a_canonicals.txt",
    ]
    from_num = (out_dir / "a_canonicals.txt").read_text().splitlines()
    from_seq = (out_dir / "a.seq_canonicals.txt").read_text().splitlines()
    assert from_num[-1] == "CDR H3  Class ?"
    assert from_seq[-1] == "CDR H3  Class h3a"


def test_report_path_for_repeated_input(tmp_path):
    claimed = set()
    first = cli_batch.report_path("x/a.seq", tmp_path, "_c", claimed)
    claimed.add(first)
    second = cli_batch.report_path("y/a.seq", tmp_path, "_c", claimed)
    claimed.add(second)

    assert first == tmp_path / "a_c.txt"
    assert second == tmp_path / "a.seq_c.txt"
    assert cli_batch.report_path("x/a.seq", tmp_path, "_c", claimed) is None
