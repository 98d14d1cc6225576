"""Tests for the logocrop CLI."""

from __future__ import annotations

import json
from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import httpx
import pytest
import respx
from PIL import Image
from typer.testing import CliRunner

from logocrop import __version__
from logocrop.cli.main import app

runner = CliRunner()


def _last_json(output: str) -> dict[str, object]:
    lines = [line for line in output.splitlines() if line.strip()]
    assert lines, "Expected output on stdout"
    return json.loads(lines[-1])


@pytest.fixture
def source_png(
    tmp_path: Path, gradient_image_factory: Callable[[int, int], Image.Image]
) -> Path:
    path = tmp_path / "logo.png"
    gradient_image_factory(200, 100).save(path)
    return path


# =============================================================================
# Version Command
# =============================================================================


class TestVersionCommand:
    """Tests for `logocrop version`."""

    def test_version_outputs_version_string(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"logocrop {__version__}" in result.stdout

    def test_version_json_output(self) -> None:
        result = runner.invoke(app, ["version", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"version": __version__}


# =============================================================================
# Bbox Command
# =============================================================================


class TestBboxCommand:
    """Tests for `logocrop bbox`."""

    def test_bbox_quarter_turn_json(self) -> None:
        result = runner.invoke(app, ["bbox", "200", "100", "90", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["surface_width"] == 100
        assert data["surface_height"] == 200

    def test_bbox_text_output(self) -> None:
        result = runner.invoke(app, ["bbox", "100", "100", "45"])
        assert result.exit_code == 0
        assert "Surface: 142 x 142" in result.stdout

    def test_bbox_negative_angle(self) -> None:
        result = runner.invoke(app, ["bbox", "--json", "100", "50", "--", "-90"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert (data["surface_width"], data["surface_height"]) == (50, 100)

    def test_bbox_rejects_zero_size(self) -> None:
        result = runner.invoke(app, ["bbox", "0", "100", "0"])
        assert result.exit_code == 1
        assert "Error" in result.output


# =============================================================================
# Crop Command
# =============================================================================


class TestCropCommand:
    """Tests for `logocrop crop`."""

    def test_explicit_crop(self, source_png: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.png"
        result = runner.invoke(
            app, ["crop", str(source_png), str(out), "--crop", "10,20,30,40", "--json"]
        )
        assert result.exit_code == 0, result.output
        data = _last_json(result.stdout)
        assert data["media_type"] == "image/png"
        assert (data["width"], data["height"]) == (30, 40)
        assert data["crop"] == [10, 20, 30, 40]
        assert data["bytes"] == out.stat().st_size

        with Image.open(out) as written, Image.open(source_png) as source:
            expected = source.convert("RGBA").crop((10, 20, 40, 60))
            assert written.size == (30, 40)
            assert written.convert("RGBA").tobytes() == expected.tobytes()

    def test_default_centred_crop_with_rotation(
        self, source_png: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out.png"
        result = runner.invoke(
            app, ["crop", str(source_png), str(out), "-r", "90", "--json"]
        )
        assert result.exit_code == 0, result.output
        data = _last_json(result.stdout)
        assert data["crop"] == [0, 50, 100, 100]
        assert data["rotation"] == 90.0
        with Image.open(out) as written:
            assert written.size == (100, 100)

    def test_aspect_and_zoom(self, source_png: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.png"
        result = runner.invoke(
            app, ["crop", str(source_png), str(out), "-a", "2", "-z", "2", "--json"]
        )
        assert result.exit_code == 0, result.output
        data = _last_json(result.stdout)
        assert (data["width"], data["height"]) == (100, 50)

    def test_crop_outside_image_is_padded(
        self, source_png: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "out.png"
        result = runner.invoke(
            app, ["crop", str(source_png), str(out), "--crop=-10,0,50,50"]
        )
        assert result.exit_code == 0, result.output
        assert "Wrote 50x50 PNG" in result.stdout
        with Image.open(out) as written:
            assert written.getpixel((5, 5))[3] == 0
            assert written.getpixel((15, 5))[3] == 255

    @pytest.mark.parametrize("value", ["1,2,3", "a,b,c,d", "0,0,0,10"])
    def test_bad_crop_option(
        self, source_png: Path, tmp_path: Path, value: str
    ) -> None:
        result = runner.invoke(
            app, ["crop", str(source_png), str(tmp_path / "o.png"), "--crop", value]
        )
        assert result.exit_code == 2

    def test_missing_source(self, tmp_path: Path) -> None:
        out = tmp_path / "out.png"
        result = runner.invoke(app, ["crop", str(tmp_path / "nope.png"), str(out)])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert not out.exists()

    def test_missing_source_json(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["crop", str(tmp_path / "nope.png"), str(tmp_path / "o.png"), "--json"]
        )
        assert result.exit_code == 1
        assert "Cannot read image file" in _last_json(result.stdout)["error"]

    def test_bad_aspect(self, source_png: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["crop", str(source_png), str(tmp_path / "o.png"), "-a", "0"]
        )
        assert result.exit_code == 1
        assert "aspect_ratio" in result.output

    @respx.mock
    def test_url_source(self, tmp_path: Path) -> None:
        buffer = BytesIO()
        Image.new("RGB", (40, 40), "blue").save(buffer, format="PNG")
        url = "https://cdn.example.com/logos/blue.png"
        respx.get(url).mock(return_value=httpx.Response(200, content=buffer.getvalue()))

        out = tmp_path / "out.png"
        result = runner.invoke(app, ["crop", url, str(out), "--json"])
        assert result.exit_code == 0, result.output
        with Image.open(out) as written:
            assert written.size == (40, 40)
            assert written.getpixel((20, 20)) == (0, 0, 255, 255)
