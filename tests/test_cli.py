import json

import pytest
from PIL import Image

from og_assets import cli


def test_build_then_rebuild(tmp_path, posts_dir, write_svg, capsys):
    write_svg(posts_dir / "a.svg")

    cli.main(["build", "--root", str(tmp_path), "--concurrency", "2"])
    out = capsys.readouterr().out
    assert "Successfully converted 1/1 images" in out
    assert (posts_dir / "a.png").exists()

    cli.main(["build", "--root", str(tmp_path)])
    assert "All PNG images are up to date (1 checked)." in capsys.readouterr().out

    cli.main(["build", "--root", str(tmp_path), "--force"])
    assert "Successfully converted 1/1 images" in capsys.readouterr().out


def test_build_custom_cache_file(tmp_path, posts_dir, write_svg):
    write_svg(posts_dir / "a.svg")
    cache_file = tmp_path / "state" / "cache.json"

    cli.main(["build", "--root", str(tmp_path), "--cache-file", str(cache_file)])
    assert list(json.loads(cache_file.read_text())) == ["public/images/posts/a.svg"]


def test_build_reports_failures_without_error_exit(tmp_path, posts_dir, write_svg, capsys):
    write_svg(posts_dir / "good.svg")
    (posts_dir / "bad.svg").write_text("<svg><rect")

    cli.main(["build", "--root", str(tmp_path)])
    out = capsys.readouterr().out
    assert "bad.svg" in out
    assert "Successfully converted 1/2 images" in out


def test_build_missing_root_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["build", "--root", str(tmp_path / "nope")])
    assert "does not exist" in str(excinfo.value)


def test_convert_single_file(tmp_path, write_svg, capsys):
    source = write_svg(tmp_path / "hero.svg", 300, 900)

    cli.main(["convert", str(source)])
    out = capsys.readouterr().out
    assert "Size:   1200x630 pixels" in out
    with Image.open(tmp_path / "hero.png") as img:
        assert img.size == (1200, 630)


def test_convert_rejects_non_svg_and_broken_files(tmp_path):
    text_file = tmp_path / "notes.txt"
    text_file.write_text("hello")
    with pytest.raises(SystemExit):
        cli.main(["convert", str(text_file)])

    broken = tmp_path / "broken.svg"
    broken.write_text("<svg><rect")
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["convert", str(broken)])
    assert "Conversion failed" in str(excinfo.value)


def test_convert_dir(tmp_path, write_svg, capsys):
    folder = tmp_path / "art"
    write_svg(folder / "one.svg")
    write_svg(folder / "two.svg", 100, 400)

    cli.main(["convert-dir", str(folder)])
    out = capsys.readouterr().out
    assert "Successful: 2" in out
    assert (folder / "one.png").exists()
    assert (folder / "two.png").exists()


def test_convert_dir_missing_directory_exits(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["convert-dir", str(tmp_path / "missing")])


def test_rejects_zero_concurrency(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["build", "--root", str(tmp_path), "--concurrency", "0"])


def test_explain_structure(tmp_path, capsys):
    cli.main(["explain-structure", "--root", str(tmp_path)])
    out = capsys.readouterr().out
    assert "interview-questions" in out
    assert ".png-cache.json" in out


def test_no_arguments_builds_every_category(tmp_path, posts_dir, write_svg, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    write_svg(posts_dir / "a.svg")
    write_svg(tmp_path / "public" / "images" / "news" / "n.svg", 100, 400)

    cli.main([])
    out = capsys.readouterr().out
    assert "Successfully converted 2/2 images" in out
    assert (posts_dir / "a.png").exists()
    cache = json.loads((tmp_path / ".png-cache.json").read_text())
    assert set(cache) == {"public/images/posts/a.svg", "public/images/news/n.svg"}

    cli.main([])
    assert "All PNG images are up to date (2 checked)." in capsys.readouterr().out

    cli.main(["--force"])
    assert "Successfully converted 2/2 images" in capsys.readouterr().out


def test_top_level_options_carry_into_subcommands(tmp_path, posts_dir, write_svg, capsys):
    write_svg(posts_dir / "a.svg")

    cli.main(["--root", str(tmp_path), "--concurrency", "1", "build"])
    assert "Successfully converted 1/1 images" in capsys.readouterr().out

    cli.main(["--root", str(tmp_path), "explain-structure"])
    assert str(tmp_path) in capsys.readouterr().out
