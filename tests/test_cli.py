import numpy as np
import pytest
from PIL import Image

import sketch
from sketch_map.image_io import load_image_rgba, save_png_rgba


@pytest.fixture
def folder(tmp_path, photo, make_rgba):
    save_png_rgba(tmp_path / "a.png", photo)
    save_png_rgba(tmp_path / "b.png", make_rgba(20, 10, rgb=(200, 30, 30), alpha=128))
    # an earlier output is skipped
    save_png_rgba(tmp_path / "old_sketch.png", photo)
    (tmp_path / "notes.txt").write_text("ignore me")
    return tmp_path


def test_single_file(tmp_path, photo, capsys):
    src = save_png_rgba(tmp_path / "cat.png", photo)
    code = sketch.main([str(src), "--filter", "charcoal", "--intensity", "0.7", "--workers", "1"])
    assert code == 0
    out_path = tmp_path / "cat_sketch.png"
    assert out_path.exists()
    out = load_image_rgba(out_path)
    assert out.shape == photo.shape
    np.testing.assert_array_equal(out[..., 3], photo[..., 3])
    stdout = capsys.readouterr().out
    assert "Wrote cat_sketch.png" in stdout
    assert "Filter: charcoal" in stdout


def test_max_dim_and_outdir(tmp_path, make_rgba):
    src = save_png_rgba(tmp_path / "wide.png", make_rgba(80, 40))
    outdir = tmp_path / "out"
    code = sketch.main([str(src), "--outdir", str(outdir), "--max-dim", "20", "--no-noise"])
    assert code == 0
    out = load_image_rgba(outdir / "wide_sketch.png")
    assert out.shape == (10, 20, 4)


def test_seeded_runs_match(tmp_path, photo):
    src = save_png_rgba(tmp_path / "p.png", photo)
    a_dir, b_dir = tmp_path / "a", tmp_path / "b"
    sketch.main([str(src), "--outdir", str(a_dir), "--seed", "11", "--intensity", "0.2"])
    sketch.main([str(src), "--outdir", str(b_dir), "--seed", "11", "--intensity", "0.2"])
    np.testing.assert_array_equal(
        load_image_rgba(a_dir / "p_sketch.png"), load_image_rgba(b_dir / "p_sketch.png")
    )


@pytest.mark.parametrize("jobs", ["1", "3"])
def test_folder(folder, jobs):
    code = sketch.main([str(folder), "--jobs", jobs, "--workers", "1"])
    assert code == 0
    assert (folder / "a_sketch.png").exists()
    assert (folder / "b_sketch.png").exists()
    assert not (folder / "old_sketch_sketch.png").exists()


def test_folder_sequential_output_order(folder, capsys):
    sketch.main([str(folder), "--jobs", "1", "--workers", "1"])
    stdout = capsys.readouterr().out
    assert stdout.index("=== a.png ===") < stdout.index("=== b.png ===")


def test_list_input_images(folder):
    names = [p.name for p in sketch.list_input_images(folder)]
    assert names == ["a.png", "b.png"]


def test_missing_source(tmp_path, capsys):
    code = sketch.main([str(tmp_path / "nope.png")])
    assert code == 2
    assert "not found" in capsys.readouterr().err


def test_unreadable_file_reports_error(tmp_path, capsys):
    bad = tmp_path / "broken.png"
    bad.write_bytes(b"garbage")
    code = sketch.main([str(bad)])
    assert code == 1
    assert "[error] broken.png" in capsys.readouterr().err


def test_rejects_bad_max_dim(tmp_path):
    with pytest.raises(SystemExit):
        sketch.parse_cli_args([str(tmp_path), "--max-dim", "0"])


def test_output_path_for(tmp_path):
    assert sketch.output_path_for(tmp_path / "x.jpg", None) == tmp_path / "x_sketch.png"
    assert sketch.output_path_for(tmp_path / "x.jpg", tmp_path / "o") == tmp_path / "o" / "x_sketch.png"


def _blocks_by_banner(stdout):
    """Map banner title -> lines printed under it, in order of appearance."""
    blocks = []
    for line in stdout.splitlines():
        if line.startswith("=== ") and line.endswith(" ==="):
            blocks.append((line[4:-4], []))
        elif blocks:
            blocks[-1][1].append(line)
    return blocks


@pytest.mark.parametrize("jobs", ["3", "6"])
def test_parallel_folder_keeps_each_files_output_together(tmp_path, make_rgba, capsys, jobs):
    names = [f"img{i:02d}.png" for i in range(10)]
    for i, name in enumerate(names):
        save_png_rgba(tmp_path / name, make_rgba(40 + i, 30, rgb=(20 * i, 90, 200)))

    code = sketch.main([str(tmp_path), "--jobs", jobs, "--workers", "1", "--no-noise"])
    assert code == 0

    blocks = _blocks_by_banner(capsys.readouterr().out)
    assert [title for title, _lines in blocks] == names
    for title, lines in blocks:
        stem = title[: -len(".png")]
        wrote = [line for line in lines if line.startswith("Wrote ")]
        assert wrote == [f"Wrote {stem}_sketch.png | size={40 + int(stem[3:])}x30"]


def test_decompression_bomb_is_reported_not_raised(folder, monkeypatch, capsys):
    real_load = sketch.load_image_rgba

    def load(path):
        if path.name == "a.png":
            raise Image.DecompressionBombError("image too large")
        return real_load(path)

    monkeypatch.setattr(sketch, "load_image_rgba", load)
    code = sketch.main([str(folder), "--jobs", "2", "--workers", "1"])
    assert code == 1
    assert "[error] a.png: image too large" in capsys.readouterr().err
    assert (folder / "b_sketch.png").exists()
