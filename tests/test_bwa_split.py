import os

import pytest

import bwa_split
from bwa_split import is_gzipped_fastq, split_fastq, split_paired_end_fastq_files
from bwa_utilities import FilesystemError, ValidationError


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_split_line_count_and_numeric_suffix(in_tmp):
    res = split_fastq(fastq="x.fastq", number_of_reads=1000)
    assert res.command == "split -l 4000 -d x.fastq x.fastq."
    assert res.output_path == "x.fastq."


def test_split_default_reads(in_tmp):
    res = split_fastq(fastq="x.fastq")
    assert "-l 40000000" in res.command


def test_split_alphabetic_suffix(in_tmp):
    res = split_fastq(fastq="x.fastq", number_of_reads=10, numeric_suffix="false")
    assert res.command == "split -l 40 x.fastq x.fastq."


def test_split_gzipped_prefix(in_tmp):
    res = split_fastq(fastq="x.fastq.gz", number_of_reads=1000, is_gzipped=True, prefix="out.gz")
    assert res.command == "zcat x.fastq.gz | split -l 4000 -d - out."
    assert res.output_path == "out."


def test_split_gzipped_default_prefix(in_tmp):
    res = split_fastq(fastq="/data/x.fastq.gz", number_of_reads=5, is_gzipped="true",
                      zcat_bin="gzcat", split_bin="gsplit")
    assert res.command == "gzcat /data/x.fastq.gz | gsplit -l 20 -d - x.fastq."


def test_split_creates_output_directory(tmp_path):
    outdir = tmp_path / "chunks" / "r1"
    res = split_fastq(fastq="x.fq", number_of_reads=1, output_directory=str(outdir))
    assert outdir.is_dir()
    assert res.output_path == os.path.join(str(outdir), "x.fq.")
    assert res.command.endswith(" x.fq " + os.path.join(str(outdir), "x.fq."))


def test_split_absolute_prefix_kept(tmp_path):
    prefix = str(tmp_path / "abs.")
    res = split_fastq(fastq="x.fq", prefix=prefix, output_directory=str(tmp_path / "out"))
    assert res.output_path == prefix


def test_split_directory_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(FilesystemError):
        split_fastq(fastq="x.fq", output_directory=str(blocker / "sub"))


@pytest.mark.parametrize("kwargs", [
    {},
    {"fastq": ""},
    {"fastq": "x.fq", "number_of_reads": 0},
    {"fastq": "x.fq", "number_of_reads": "100"},
    {"fastq": "x.fq", "is_gzipped": "perhaps"},
    {"fastq": "x.fq", "split_bin": ""},
])
def test_split_validation(in_tmp, kwargs):
    with pytest.raises(ValidationError):
        split_fastq(**kwargs)


def test_invalid_arguments_do_not_create_directory(tmp_path):
    outdir = tmp_path / "never"
    with pytest.raises(ValidationError):
        split_fastq(fastq="x.fq", number_of_reads=-1, output_directory=str(outdir))
    assert not outdir.exists()


def test_is_gzipped_fastq():
    assert is_gzipped_fastq("a.fastq.gz")
    assert not is_gzipped_fastq("a.fastq")
    assert not is_gzipped_fastq("a.gz.fastq")


def test_paired_gzip_detection(in_tmp):
    res = split_paired_end_fastq_files(fastq1="s_R1.fastq.gz", fastq2="s_R2.fastq", number_of_reads=10)
    assert res.read1_gzipped is True
    assert res.read2_gzipped is False
    assert res.read1.command.startswith("zcat s_R1.fastq.gz | split")
    assert res.read2.command.startswith("split -l 40 -d s_R2.fastq")


def test_paired_prefix_collision(in_tmp):
    with pytest.raises(ValidationError):
        split_paired_end_fastq_files(fastq1="a.fq", fastq2="b.fq", read1_prefix="same.", read2_prefix="same.")


def test_paired_missing_mate(in_tmp):
    with pytest.raises(ValidationError):
        split_paired_end_fastq_files(fastq1="a.fq")


def test_cli_single_guesses_gzip(in_tmp, capsys):
    bwa_split.main(["single", "-i", "x.fastq.gz", "-n", "100"])
    assert capsys.readouterr().out.strip() == "zcat x.fastq.gz | split -l 400 -d - x.fastq."


def test_cli_paired(in_tmp, capsys):
    bwa_split.main(["paired", "-1", "a.fq", "-2", "b.fq", "-n", "1", "--numeric_suffix", "n"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == ["split -l 4 a.fq a.fq.", "split -l 4 b.fq b.fq."]


def test_cli_directory_failure_exits(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(SystemExit) as exc:
        bwa_split.main(["single", "-i", "x.fq", "-o", str(blocker)])
    assert exc.value.code == 1


def test_paired_collision_leaves_directory_uncreated(tmp_path):
    outdir = tmp_path / "chunks"
    with pytest.raises(ValidationError) as exc:
        split_paired_end_fastq_files(fastq1="R1/s.fq", fastq2="R2/s.fq", output_directory=str(outdir))
    assert "read1_prefix" in str(exc.value)
    assert "read2_prefix" in str(exc.value)
    assert not outdir.exists()


def test_paired_same_name_with_distinct_prefixes(tmp_path):
    outdir = tmp_path / "chunks"
    res = split_paired_end_fastq_files(fastq1="R1/s.fq", fastq2="R2/s.fq", read1_prefix="s_R1.",
                                       read2_prefix="s_R2.", output_directory=str(outdir))
    assert res.read1.output_path == os.path.join(str(outdir), "s_R1.")
    assert res.read2.output_path == os.path.join(str(outdir), "s_R2.")


def test_paired_output_directory(tmp_path):
    outdir = tmp_path / "pairs" / "chunks"
    res = split_paired_end_fastq_files(fastq1="s_R1.fastq.gz", fastq2="s_R2.fastq.gz",
                                       number_of_reads=2, output_directory=str(outdir))
    assert outdir.is_dir()
    assert res.read1.output_path == os.path.join(str(outdir), "s_R1.fastq.")
    assert res.read2.output_path == os.path.join(str(outdir), "s_R2.fastq.")
    assert res.read1.command == "zcat s_R1.fastq.gz | split -l 8 -d - " + os.path.join(str(outdir), "s_R1.fastq.")
    assert res.read2.command == "zcat s_R2.fastq.gz | split -l 8 -d - " + os.path.join(str(outdir), "s_R2.fastq.")


@pytest.mark.parametrize("prefix", [" ", "  ", "\t"])
def test_split_blank_prefix_rejected(in_tmp, prefix):
    with pytest.raises(ValidationError):
        split_fastq(fastq="x.fq", prefix=prefix)


def test_paired_blank_prefix_rejected(in_tmp):
    with pytest.raises(ValidationError):
        split_paired_end_fastq_files(fastq1="a.fq", fastq2="b.fq", read2_prefix="   ")


def test_empty_prefix_uses_default(in_tmp):
    assert split_fastq(fastq="x.fq", prefix="").output_path == "x.fq."
