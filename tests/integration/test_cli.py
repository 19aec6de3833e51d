from __future__ import annotations

from pathlib import Path

import numpy as np
import yaml
from typer.testing import CliRunner

from ultvox.cli.main import app
from ultvox.core.scene import Scene, SphereElement
from ultvox.io.snapshot import load_snapshot, save_snapshot


def _write_obj_cube(path: Path) -> None:
    vertices = [
        (-2.0, -2.0, -2.0),
        (2.0, -2.0, -2.0),
        (2.0, 2.0, -2.0),
        (-2.0, 2.0, -2.0),
        (-2.0, -2.0, 2.0),
        (2.0, -2.0, 2.0),
        (2.0, 2.0, 2.0),
        (-2.0, 2.0, 2.0),
    ]
    faces = [
        (1, 2, 3, 4),
        (5, 8, 7, 6),
        (1, 5, 6, 2),
        (2, 6, 7, 3),
        (3, 7, 8, 4),
        (4, 8, 5, 1),
    ]
    with open(path, "w", encoding="utf-8") as f:
        f.write("# cube\n")
        for v in vertices:
            f.write(f"v {v[0]} {v[1]} {v[2]}\n")
        for face in faces:
            f.write("f " + " ".join(f"{i}//{i}" for i in face) + "\n")


def test_cli_run_npz(tmp_path: Path) -> None:
    scene_path = tmp_path / "ball.yaml"
    save_snapshot(Scene(points={0: (0.0, 0.0, 0.0)}, elements=[SphereElement(0, 3.0)]), scene_path)

    config = {
        "scene": {"path": scene_path.name},
        "transform": {"rotation": {"kind": "euler", "pitch_deg": 45.0}, "scale": 1.0},
        "layers": {"up_to_y": 1},
        "output": {"path": "out/ball.npz", "format": "npz"},
    }
    cfg_path = tmp_path / "config.yaml"
    with open(cfg_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f)

    runner = CliRunner()
    result = runner.invoke(app, ["run", str(cfg_path)])
    assert result.exit_code == 0, result.stdout
    assert "voxels" in result.stdout

    out_path = tmp_path / "out" / "ball.npz"
    assert out_path.exists()
    with np.load(out_path) as data:
        ijk = data["ijk"]
        transparent = data["transparent"]
    assert ijk.shape[0] > 0
    assert ijk[:, 1].max() == 3
    assert transparent[ijk[:, 1] > 1].all()
    d = np.linalg.norm(ijk.astype(np.float64), axis=1)
    assert np.all(np.abs(d - 3.0) <= np.sqrt(3.0) / 2.0)


def test_cli_run_with_overrides(tmp_path: Path) -> None:
    obj_path = tmp_path / "cube.obj"
    _write_obj_cube(obj_path)
    config = {
        "scene": {"path": obj_path.name},
        "output": {"path": "cube.npz"},
    }
    cfg_path = tmp_path / "config.yaml"
    with open(cfg_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config, f)

    override_path = tmp_path / "custom_output.ply"
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["run", str(cfg_path), "--output", str(override_path), "--up-to-y", "0", "--log-level", "DEBUG"],
    )

    assert result.exit_code == 0, result.stdout
    assert override_path.exists()
    with open(override_path, "r", encoding="utf-8") as f:
        header = f.readline().strip()
    assert header == "ply"
    assert not (tmp_path / "cube.npz").exists()


def test_cli_run_rejects_bad_output_extension(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.yaml"
    with open(cfg_path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"scene": {"path": "x.yaml"}, "output": {"path": "x.npz"}}, f)
    runner = CliRunner()
    result = runner.invoke(app, ["run", str(cfg_path), "--output", str(tmp_path / "x.vox")])
    assert result.exit_code != 0


def test_cli_voxelize_cube(tmp_path: Path) -> None:
    obj_path = tmp_path / "cube.obj"
    _write_obj_cube(obj_path)
    out_path = tmp_path / "cube.npz"

    runner = CliRunner()
    result = runner.invoke(app, ["voxelize", str(obj_path), "--output", str(out_path)])
    assert result.exit_code == 0, result.stdout

    with np.load(out_path) as data:
        ijk = data["ijk"]
    cells = {tuple(v) for v in ijk.tolist()}
    # hollow 5x5x5 shell
    assert len(cells) == 5 ** 3 - 3 ** 3
    assert (0, 0, 0) not in cells
    assert (-2, -2, -2) in cells and (2, 2, 2) in cells


def test_cli_voxelize_las_scaled(tmp_path: Path) -> None:
    obj_path = tmp_path / "cube.obj"
    _write_obj_cube(obj_path)
    out_path = tmp_path / "cube.las"

    runner = CliRunner()
    result = runner.invoke(app, ["voxelize", str(obj_path), "-o", str(out_path), "--scale", "2.0"])
    assert result.exit_code == 0, result.stdout

    import laspy

    with laspy.open(out_path) as reader:
        points = reader.read()
        assert len(points.x) == 9 ** 3 - 7 ** 3
        assert np.max(points.y) == 4
        assert "palette_index" in reader.header.point_format.extra_dimension_names


def test_cli_voxelize_rejects_bad_options(tmp_path: Path) -> None:
    obj_path = tmp_path / "cube.obj"
    _write_obj_cube(obj_path)
    runner = CliRunner()

    result = runner.invoke(app, ["voxelize", str(obj_path), "--scale", "0"])
    assert result.exit_code != 0

    result = runner.invoke(app, ["voxelize", str(obj_path), "-o", str(tmp_path / "cube.txt")])
    assert result.exit_code != 0


def test_cli_reports_invalid_reference(tmp_path: Path) -> None:
    scene_path = tmp_path / "broken.yaml"
    save_snapshot(Scene(points={}, elements=[SphereElement(5, 1.0)]), scene_path)
    runner = CliRunner()
    result = runner.invoke(app, ["voxelize", str(scene_path), "-o", str(tmp_path / "broken.npz")])
    assert result.exit_code == 1
    assert not (tmp_path / "broken.npz").exists()


def test_scene_generate_command(tmp_path: Path) -> None:
    output = tmp_path / "pyramid.yaml"
    runner = CliRunner()
    result = runner.invoke(app, ["scene", "generate", str(output), "--preset", "pyramid", "--size", "6"])
    assert result.exit_code == 0, result.stdout
    scene = load_snapshot(output)
    assert len(scene.points) == 5
    assert len(scene.elements) == 5

    result = runner.invoke(app, ["scene", "generate", str(tmp_path / "x.yaml"), "--preset", "torus"])
    assert result.exit_code != 0


def test_scene_import_command(tmp_path: Path) -> None:
    obj_path = tmp_path / "cube.obj"
    _write_obj_cube(obj_path)
    output = tmp_path / "cube.yaml"

    runner = CliRunner()
    result = runner.invoke(app, ["scene", "import", str(obj_path), str(output)])
    assert result.exit_code == 0, result.stdout
    scene = load_snapshot(output)
    assert sorted(scene.points) == list(range(1, 9))
    assert [e.ids for e in scene.elements][0] == (1, 2, 3, 4)


def test_cli_empty_scene_still_writes_output(tmp_path: Path) -> None:
    scene_path = tmp_path / "empty.yaml"
    save_snapshot(Scene(), scene_path)
    runner = CliRunner()

    npz_path = tmp_path / "empty.npz"
    result = runner.invoke(app, ["voxelize", str(scene_path), "-o", str(npz_path)])
    assert result.exit_code == 0, result.stdout
    assert "0 voxels" in result.stdout
    with np.load(npz_path) as data:
        assert data["ijk"].shape == (0, 3)

    las_path = tmp_path / "empty.las"
    result = runner.invoke(app, ["voxelize", str(scene_path), "-o", str(las_path)])
    assert result.exit_code == 0, result.stdout
    assert las_path.exists()


def test_cli_reports_malformed_input(tmp_path: Path) -> None:
    bad_yaml = tmp_path / "bad.yaml"
    bad_yaml.write_text("points: [unclosed\n", encoding="utf-8")
    bad_obj = tmp_path / "bad.obj"
    bad_obj.write_text("v 0 0 0\nv 1 nope 0\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["voxelize", str(bad_yaml), "-o", str(tmp_path / "a.npz")])
    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)

    result = runner.invoke(app, ["voxelize", str(bad_obj), "-o", str(tmp_path / "b.npz")])
    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)

    result = runner.invoke(app, ["scene", "import", str(bad_obj), str(tmp_path / "bad_scene.yaml")])
    assert result.exit_code == 1
    assert not (tmp_path / "bad_scene.yaml").exists()

    cfg_path = tmp_path / "config.yaml"
    with open(cfg_path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"scene": {"path": bad_yaml.name}, "output": {"path": "c.npz"}}, f)
    result = runner.invoke(app, ["run", str(cfg_path)])
    assert result.exit_code == 1
    assert not (tmp_path / "c.npz").exists()
