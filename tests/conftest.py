from pathlib import Path

import pytest


def svg_markup(width: int, height: int, fill: str = "#3366cc") -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
        f'<rect x="0" y="0" width="{width}" height="{height}" fill="{fill}"/>'
        "</svg>"
    )


@pytest.fixture
def write_svg():
    def _write(path: Path, width: int = 200, height: int = 100, fill: str = "#3366cc") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(svg_markup(width, height, fill), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def posts_dir(tmp_path):
    return tmp_path / "public" / "images" / "posts"
