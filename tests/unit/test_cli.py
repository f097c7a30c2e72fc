"""
Unit Tests for pngstego Command Line Interface

This module contains unit tests for command resolution, argument handling,
the truncation prompt and exit statuses.
"""

import json
import os

import pytest

from pngstego.cli.main import PngStegoCLI, resolve_command


def run_cli(*args):
    return PngStegoCLI().run([str(a) for a in args])


class TestCommandResolution:
    """Test cases for case-insensitive keyword matching."""

    @pytest.mark.parametrize("token,expected", [
        ("embed", "embed"),
        ("EMBED", "embed"),
        ("Embedded", "embed"),
        ("extract", "extract"),
        ("ExTrAcTion", "extract"),
        ("capacity", "capacity"),
        ("emb", None),
        ("ext", None),
        ("hide", None),
    ])
    def test_resolve(self, token, expected):
        assert resolve_command(token) == expected


class TestEmbedCommand:
    """Test cases for the embed command."""

    def test_embed_default_output(self, make_png, sample_data, tmp_path, capsys):
        image = make_png(100, 100)

        status = run_cli("embed", image, sample_data)

        out = capsys.readouterr().out
        assert status == 0
        assert "Image is 100px x 100px" in out
        assert "Able to embed 3750 bytes (3.75 kilobytes) of data" in out
        assert "Message has been embedded!" in out
        assert f"{len(sample_data.read_bytes())} bytes embedded" in out
        assert os.path.exists(tmp_path / "embedded_carrier.png")

    def test_uppercase_keyword(self, make_png, sample_data, tmp_path):
        output = tmp_path / "hidden.png"

        assert run_cli("EMBED", make_png(), sample_data, "--output", output) == 0
        assert output.exists()

    def test_not_a_png(self, sample_data, capsys):
        status = run_cli("embed", sample_data, sample_data)

        assert status == 1
        assert "NotAnImageError" in capsys.readouterr().err

    def test_missing_message(self, make_png, tmp_path, capsys):
        status = run_cli("embed", make_png(), tmp_path / "missing.txt")

        assert status == 1
        assert "PayloadSourceUnavailableError" in capsys.readouterr().err
        assert not (tmp_path / "embedded_carrier.png").exists()

    @pytest.fixture
    def oversized(self, tmp_path):
        message = tmp_path / "big.bin"
        message.write_bytes(bytes(range(40)))
        return message

    def test_prompt_declined(self, make_png, oversized, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda: "n")

        status = run_cli("embed", make_png(10, 10), oversized)

        err = capsys.readouterr().err
        assert status == 1
        assert "(3 bytes too large)" in err
        assert "embed only the first 37 bytes" in err
        assert "CapacityExceededError" in err
        assert not (tmp_path / "embedded_carrier.png").exists()

    def test_prompt_accepted(self, make_png, oversized, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda: "  yes")

        status = run_cli("embed", make_png(10, 10), oversized)

        assert status == 0
        assert "37 bytes embedded" in capsys.readouterr().out
        assert (tmp_path / "embedded_carrier.png").exists()

    def test_prompt_eof_declines(self, make_png, oversized, monkeypatch):
        def closed_stdin():
            raise EOFError

        monkeypatch.setattr("builtins.input", closed_stdin)

        assert run_cli("embed", make_png(10, 10), oversized) == 1

    def test_yes_flag_skips_prompt(self, make_png, oversized, monkeypatch):
        def no_prompt():
            raise AssertionError("prompted")

        monkeypatch.setattr("builtins.input", no_prompt)

        assert run_cli("embed", make_png(10, 10), oversized, "--yes") == 0
        assert run_cli("embed", make_png(10, 10, name="other.png"), oversized, "-n") == 1

    def test_yes_and_no_are_exclusive(self, make_png, oversized):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("embed", make_png(), oversized, "-y", "-n")
        assert exc_info.value.code == 2


class TestExtractCommand:
    """Test cases for the extract command."""

    def test_image_too_small_writes_nothing(self, make_png, tmp_path, capsys):
        recovered = tmp_path / "recovered.bin"

        status = run_cli("extract", make_png(2, 2), recovered)

        assert status == 1
        assert "ImageTooSmallError" in capsys.readouterr().err
        assert not recovered.exists()

    def test_round_trip(self, make_png, sample_binary_data, tmp_path, capsys):
        image = make_png(50, 50)
        run_cli("embed", image, sample_binary_data)
        recovered = tmp_path / "recovered.bin"

        status = run_cli("Extract", tmp_path / "embedded_carrier.png", recovered)

        out = capsys.readouterr().out
        assert status == 0
        assert "Done extracting!" in out
        assert "9 bytes extracted" in out
        assert recovered.read_bytes() == sample_binary_data.read_bytes()

    def test_incomplete(self, make_png, tmp_path, capsys):
        message = tmp_path / "big.bin"
        message.write_bytes(bytes(range(40)))
        run_cli("embed", make_png(10, 10), message, "--yes")
        recovered = tmp_path / "recovered.bin"

        status = run_cli("extract", tmp_path / "embedded_carrier.png", recovered)

        err = capsys.readouterr().err
        assert status == 1
        assert "IncompleteExtractionError" in err
        assert "33 of 37 bytes" in err
        assert recovered.read_bytes() == bytes(range(33))


class TestGeneralOptions:
    """Test cases for capacity, configuration and usage handling."""

    def test_capacity(self, make_png, capsys):
        assert run_cli("capacity", make_png(10, 10)) == 0

        out = capsys.readouterr().out
        assert "Image is 10px x 10px" in out
        assert "Able to embed 37 bytes" in out
        assert "33 bytes fit after the 32-bit length header" in out

    def test_config_file(self, make_png, tmp_path, capsys):
        config = tmp_path / "stego.json"
        config.write_text(json.dumps({"net_capacity": True}))

        assert run_cli("capacity", make_png(10, 10), "--config", config) == 0
        assert "Able to embed 33 bytes" in capsys.readouterr().out

    def test_bad_config_file(self, make_png, tmp_path, capsys):
        config = tmp_path / "stego.json"
        config.write_text(json.dumps({"colour": "blue"}))

        assert run_cli("capacity", make_png(), "--config", config) == 1
        assert "cannot load configuration" in capsys.readouterr().err

    @pytest.mark.parametrize("data", [{"chunk_size": "4096"}, {"net_capacity": "false"}])
    def test_mistyped_config_file(self, make_png, tmp_path, capsys, data):
        config = tmp_path / "stego.json"
        config.write_text(json.dumps(data))

        assert run_cli("capacity", make_png(), "--config", config) == 1
        assert "cannot load configuration" in capsys.readouterr().err

    def test_options_before_command(self, make_png, sample_data, tmp_path, capsys):
        config = tmp_path / "stego.json"
        config.write_text(json.dumps({"net_capacity": True}))

        assert run_cli("--config", config, "Capacity", make_png(10, 10)) == 0
        assert "Able to embed 33 bytes" in capsys.readouterr().out
        assert run_cli("-v", "EMBED", make_png(), sample_data) == 0
        assert (tmp_path / "embedded_carrier.png").exists()

    def test_option_after_command_keeps_earlier_value(self, make_png, tmp_path, capsys):
        config = tmp_path / "stego.json"
        config.write_text(json.dumps({"net_capacity": True}))

        assert run_cli("--config", config, "capacity", make_png(10, 10), "-v") == 0
        assert "Able to embed 33 bytes" in capsys.readouterr().out

    def test_unknown_command(self):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("hide", "a.png", "b.txt")
        assert exc_info.value.code == 2

    def test_no_command_prints_help(self, capsys):
        assert run_cli() == 0
        assert "usage: pngstego" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("--version")
        assert exc_info.value.code == 0
        assert "pngstego v1.0.0" in capsys.readouterr().out
