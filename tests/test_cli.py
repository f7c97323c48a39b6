"""Tests for the command-line interface."""

import json

import pytest
from PIL import Image
from rich.prompt import Prompt

from dither_maker.cli import main


@pytest.fixture
def sample_png(tmp_path):
    path = tmp_path / "in.png"
    Image.new("RGB", (8, 6), (100, 100, 100)).save(str(path))
    return path


class TestConvert:
    def test_json_success(self, sample_png, tmp_path, capsys):
        out = tmp_path / "out.png"
        main(["convert", str(sample_png), "-o", str(out), "-m", "2", "--json"])

        payload = json.loads(capsys.readouterr().out)
        assert payload["status"] == "success"
        assert payload["output"] == str(out.resolve())
        assert payload["settings"]["method"] == "floyd_steinberg"
        assert payload["settings"]["mode"] == "mono"
        assert payload["metadata"]["output_width"] == 8
        assert Image.open(str(out)).mode == "L"

    def test_color_mode(self, sample_png, tmp_path, capsys):
        out = tmp_path / "out.png"
        main(["convert", str(sample_png), "-o", str(out), "--color", "--json"])

        payload = json.loads(capsys.readouterr().out)
        assert payload["settings"]["mode"] == "color"
        assert Image.open(str(out)).mode == "RGBA"

    def test_default_output_path(self, sample_png, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        main(["convert", str(sample_png), "-m", "shtuki"])

        assert (tmp_path / "output" / "output_shtuki_mono.png").exists()
        assert "Dithered image saved as" in capsys.readouterr().err

    def test_unknown_method_falls_back(self, sample_png, tmp_path, capsys):
        out = tmp_path / "out.png"
        main(["convert", str(sample_png), "-o", str(out), "-m", "9"])

        err = capsys.readouterr().err
        assert "Using Atkinson dithering by default" in err
        assert out.exists()

    def test_non_ascii_digit_method_falls_back(self, sample_png, tmp_path, capsys):
        out = tmp_path / "out.png"
        main(["convert", str(sample_png), "-o", str(out), "-m", "²", "--json"])

        payload = json.loads(capsys.readouterr().out)
        assert payload["settings"]["method"] == "atkinson"
        assert out.exists()

    def test_missing_file_json(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["convert", str(tmp_path / "missing.png"), "--json"])
        assert exc.value.code == 1

        err = json.loads(capsys.readouterr().err)
        assert err["status"] == "error"
        assert err["code"] == "FILE_NOT_FOUND"

    def test_unsupported_input(self, tmp_path, capsys):
        path = tmp_path / "in.bmp"
        Image.new("RGB", (2, 2)).save(str(path))
        with pytest.raises(SystemExit):
            main(["convert", str(path), "--json"])

        err = json.loads(capsys.readouterr().err)
        assert err["code"] == "INVALID_INPUT"

    def test_bad_output_extension(self, sample_png, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["convert", str(sample_png), "-o", str(tmp_path / "x.jpg")])
        assert "Unsupported output format" in capsys.readouterr().err


class TestKernelsCommand:
    def test_lists_catalog(self, capsys):
        main(["kernels"])
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 4
        assert "floyd_steinberg" in lines[1]
        assert "divisor=16" in lines[1]


class TestPromptCommand:
    def test_prompt_flow(self, sample_png, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        answers = iter([str(sample_png), "1", "4"])
        monkeypatch.setattr(Prompt, "ask", lambda *a, **k: next(answers))

        main(["prompt"])

        out = tmp_path / "output" / "output_sierra_lite_color.png"
        assert out.exists()
        assert Image.open(str(out)).mode == "RGBA"

    def test_prompt_invalid_choice(self, sample_png, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        answers = iter([str(sample_png), "2", "x"])
        monkeypatch.setattr(Prompt, "ask", lambda *a, **k: next(answers))

        main(["prompt"])

        assert (tmp_path / "output" / "output_atkinson_mono.png").exists()
        assert "Atkinson" in capsys.readouterr().err

    def test_prompt_non_ascii_digit_choice(self, sample_png, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        answers = iter([str(sample_png), "2", "①"])
        monkeypatch.setattr(Prompt, "ask", lambda *a, **k: next(answers))

        main(["prompt"])

        assert (tmp_path / "output" / "output_atkinson_mono.png").exists()
        assert "Atkinson" in capsys.readouterr().err

    def test_prompt_missing_file(self, tmp_path, monkeypatch):
        answers = iter([str(tmp_path / "nope.png")])
        monkeypatch.setattr(Prompt, "ask", lambda *a, **k: next(answers))

        with pytest.raises(SystemExit):
            main(["prompt"])
