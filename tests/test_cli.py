"""Command-line behaviour: arguments, exit codes and diagnostics."""

from pathlib import Path

import pytest

from conftest import EXAMPLE_MS, TWO_REPLICATE_MS
from ms_to_vcf import cli


def test_parse_arguments_requires_input():
    with pytest.raises(SystemExit):
        cli.parse_arguments([])


def test_version_flag_prints_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_arguments(["-v"])
    assert excinfo.value.code == 0
    assert "Version 1.0 December 2024." in capsys.readouterr().out


def test_parse_arguments_leaves_unset_options_empty():
    args = cli.parse_arguments(["sim.ms"])
    assert args.input == "sim.ms"
    assert args.segment_length is None
    assert args.unphased is None
    assert args.compress is None
    assert args.missing_probability is None


def test_parse_arguments_supports_short_options():
    args = cli.parse_arguments(
        ["sim.ms", "-p", "2", "-l", "5000", "-u", "-m", "0.25", "-c", "-o", "out", "--seed", "3"]
    )
    assert args.ploidy == 2
    assert args.segment_length == 5000
    assert args.unphased is True
    assert args.missing_probability == 0.25
    assert args.compress is True
    assert args.output_dir == "out"
    assert args.seed == 3


def test_negative_seed_is_rejected():
    with pytest.raises(SystemExit):
        cli.parse_arguments(["sim.ms", "--seed", "-1"])


def test_main_converts_every_replicate(write_ms, tmp_path, capsys):
    path = write_ms(TWO_REPLICATE_MS)
    out_dir = tmp_path / "out"

    status = cli.main([str(path), "-o", str(out_dir), "--validate"])

    assert status == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["sim_rep0.vcf", "sim_rep1.vcf"]
    assert f"Wrote: {out_dir / 'sim_rep0.vcf'} x 2." in capsys.readouterr().out


def test_main_reads_settings_from_config_file(write_ms, tmp_path):
    path = write_ms(EXAMPLE_MS)
    settings = tmp_path / "settings.yaml"
    settings.write_text("length: 2000\ncompress: true\n", encoding="utf-8")

    assert cli.main([str(path), "--config", str(settings)]) == 0
    assert (tmp_path / "sim_rep0.vcf.gz").exists()


def test_main_rejects_invalid_configuration(write_ms, tmp_path, capsys):
    path = write_ms(EXAMPLE_MS)

    status = cli.main([str(path), "-l", "10"])

    assert status == 1
    assert "ERROR: ConfigError: Length must be 1000 or greater" in capsys.readouterr().out
    assert not list(tmp_path.glob("*.vcf"))


def test_main_reports_format_errors(write_ms, capsys):
    path = write_ms("segsites: 3\npositions: 0.1\n000\n111\n")

    assert cli.main([str(path)]) == 1
    assert "ERROR: FormatError:" in capsys.readouterr().out


def test_main_reports_io_errors(tmp_path, capsys):
    assert cli.main([str(tmp_path / "absent.ms")]) == 1
    assert "ERROR: IOError:" in capsys.readouterr().out


def test_main_reports_truncated_gzip_as_io_error(write_ms, capsys):
    haplotypes = "".join(f"{i:016b}\n" for i in range(4000))
    path = write_ms("segsites: 16\npositions: " + "0.5 " * 16 + "\n" + haplotypes, "cut.ms.gz")
    data = path.read_bytes()
    path.write_bytes(data[: len(data) // 2])

    assert cli.main([str(path)]) == 1
    assert "ERROR: IOError: Failed to read input" in capsys.readouterr().out


def test_main_reports_undecodable_input_as_io_error(tmp_path, capsys):
    path = tmp_path / "binary.ms"
    path.write_bytes(b"\xff\xfesegsites: 1\n")

    assert cli.main([str(path)]) == 1
    assert "ERROR: IOError: Failed to read input" in capsys.readouterr().out


def test_main_without_arguments_prints_help(capsys):
    assert cli.main([]) == 1
    out = capsys.readouterr().out
    assert out.startswith("usage: ms-to-vcf")
    assert "--unphased" in out


def test_verbose_messages_are_shown_once(write_ms, capsys):
    path = write_ms(EXAMPLE_MS)

    assert cli.main([str(path), "--verbose"]) == 0

    captured = capsys.readouterr()
    combined = captured.out + captured.err
    assert combined.count("Replicate 0: wrote 2 site(s) for 1 sample(s)") == 1
    assert combined.count("Settings: length=1000000") == 1


def test_main_writes_log_file(write_ms, tmp_path):
    path = write_ms(EXAMPLE_MS)
    log_path = tmp_path / "logs" / "run.log"

    assert cli.main([str(path), "--log-file", str(log_path)]) == 0

    contents = Path(log_path).read_text(encoding="utf-8")
    assert "Replicate 0: wrote 2 site(s) for 1 sample(s)" in contents
