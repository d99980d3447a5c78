import io

import pytest
from PIL import Image

from og_assets import converter, scanner
from og_assets.config import Config
from og_assets.models import AssetPair, ConversionTask
from conftest import svg_markup


@pytest.mark.parametrize(
    "width,height",
    [(200, 100), (100, 300), (1000, 100), (100, 1000), (1200, 630)],
)
def test_render_png_has_canonical_size(width, height):
    png = converter.render_png(svg_markup(width, height).encode())
    with Image.open(io.BytesIO(png)) as img:
        assert img.format == "PNG"
        assert img.size == (1200, 630)
        assert img.mode == "RGB"


def test_render_png_pads_with_opaque_background():
    png = converter.render_png(svg_markup(100, 1000, fill="#ff0000").encode())
    with Image.open(io.BytesIO(png)) as img:
        assert img.getpixel((0, 0)) == (255, 255, 255)
        red, green, blue = img.getpixel((600, 315))
        assert red > 200 and green < 60 and blue < 60


def test_render_png_rejects_invalid_markup():
    with pytest.raises(Exception):
        converter.render_png(b"<svg><rect")


@pytest.mark.asyncio
async def test_convert_asset_writes_output_and_fingerprint(tmp_path, write_svg):
    source = write_svg(tmp_path / "a.svg")
    task = ConversionTask(AssetPair.from_source(source, "posts"))

    assert await converter.convert_asset(task, Config(root=tmp_path)) is True
    assert task.done
    assert task.fingerprint == scanner.compute_fingerprint(source)
    with Image.open(task.pair.output) as img:
        assert img.size == (1200, 630)


@pytest.mark.asyncio
async def test_convert_asset_failure_leaves_no_output(tmp_path):
    source = tmp_path / "broken.svg"
    source.write_text("<svg><rect")
    task = ConversionTask(AssetPair.from_source(source, "posts"))

    assert await converter.convert_asset(task, Config(root=tmp_path)) is False
    assert not task.done
    assert task.fingerprint is None
    assert sorted(p.name for p in tmp_path.iterdir()) == ["broken.svg"]


def test_write_atomic_replaces_existing_file(tmp_path):
    target = tmp_path / "out.png"
    target.write_bytes(b"old")
    converter.write_atomic(target, b"new contents")
    assert target.read_bytes() == b"new contents"
    assert [p.name for p in tmp_path.iterdir()] == ["out.png"]


def test_abandoned_attempt_refuses_to_commit():
    attempt = converter._Attempt()
    assert attempt.abandon() is False
    assert attempt.commit() is False


def test_committed_attempt_cannot_be_abandoned():
    attempt = converter._Attempt()
    assert attempt.commit() is True
    assert attempt.abandon() is True


def test_convert_file_skips_write_when_abandoned(tmp_path, write_svg):
    source = write_svg(tmp_path / "a.svg")
    attempt = converter._Attempt()
    attempt.abandon()

    with pytest.raises(converter.ConversionAbandoned):
        converter.convert_file(source, source.with_suffix(".png"), Config(root=tmp_path), attempt)
    assert not source.with_suffix(".png").exists()
