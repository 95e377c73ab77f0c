"""Tests for writing generated files into the backend and frontend trees."""
import json
import tempfile
from pathlib import Path
import pytest
from app.core.errors import ProjectWriteError
from app.generators.code_gen.render import render_root_package_json
from app.generators.code_gen.types import GeneratedFile, TargetTree
from app.generators.code_gen.writer import ProjectBuilder


def _file(path, content, tree=TargetTree.BACKEND):
    return GeneratedFile(relative_path=path, content=content, target_tree=tree)


def test_builds_skeleton_manifests_and_files():
    """Both trees get their skeleton directories, manifests and generated files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir) / "run"
        builder = ProjectBuilder(root)

        result = builder.write_files([
            _file("entities/user.entity.ts", "export class User {}"),
            _file("app/models/user.model.ts", "export interface User {}", TargetTree.FRONTEND),
        ])

        assert result.files_written == 2
        assert result.duplicate_paths == []
        assert (root / "backend/src/entities/user.entity.ts").read_text(encoding="utf-8") == "export class User {}"
        assert (root / "frontend/src/app/models/user.model.ts").exists()

        for subdir in ("entities", "controllers", "services", "modules", "dto"):
            assert (root / "backend/src" / subdir).is_dir()
        for subdir in ("app/components", "app/services", "app/models"):
            assert (root / "frontend/src" / subdir).is_dir()

        backend_manifest = json.loads((root / "backend/package.json").read_text(encoding="utf-8"))
        frontend_manifest = json.loads((root / "frontend/package.json").read_text(encoding="utf-8"))
        assert "@nestjs/core" in backend_manifest["dependencies"]
        assert "@angular/core" in frontend_manifest["dependencies"]
        assert (root / "backend/tsconfig.json").exists()
        assert (root / "frontend/tsconfig.json").exists()


def test_rebuild_discards_previous_run():
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        builder = ProjectBuilder(root)

        builder.write_files([_file("services/old.service.ts", "old")])
        builder.write_files([_file("services/new.service.ts", "new")])

        assert not (root / "backend/src/services/old.service.ts").exists()
        assert (root / "backend/src/services/new.service.ts").read_text(encoding="utf-8") == "new"


def test_same_input_gives_same_tree():
    files = [
        _file("entities/a.entity.ts", "a"),
        _file("app/components/a/a.component.ts", "c", TargetTree.FRONTEND),
    ]
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        builder = ProjectBuilder(root)

        builder.write_files(files)
        first = {p.relative_to(root): p.read_bytes() for p in root.rglob("*") if p.is_file()}
        builder.write_files(files)
        second = {p.relative_to(root): p.read_bytes() for p in root.rglob("*") if p.is_file()}

        assert first == second


def test_duplicate_paths_last_write_wins():
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        result = ProjectBuilder(root).write_files([
            _file("entities/user.entity.ts", "first"),
            _file("entities/user.entity.ts", "second"),
        ])

        assert result.duplicate_paths == ["backend/entities/user.entity.ts"]
        assert (root / "backend/src/entities/user.entity.ts").read_text(encoding="utf-8") == "second"


def test_paths_cannot_escape_their_tree():
    with tempfile.TemporaryDirectory() as temp_dir:
        builder = ProjectBuilder(Path(temp_dir))
        with pytest.raises(ProjectWriteError):
            builder.write_files([_file("../../outside.ts", "nope")])
        assert not (Path(temp_dir) / "outside.ts").exists()


def test_cross_tree_imports_are_reported_not_rejected():
    with tempfile.TemporaryDirectory() as temp_dir:
        result = ProjectBuilder(Path(temp_dir)).write_files([
            _file("app/models/user.model.ts", "import { Injectable } from '@nestjs/common';", TargetTree.FRONTEND),
            _file("services/user.service.ts", "import { Injectable } from '@nestjs/common';"),
        ])

        assert result.files_written == 2
        assert result.warnings == ["frontend/app/models/user.model.ts references '@nestjs/'"]


def test_write_failure_raises_project_write_error():
    with tempfile.TemporaryDirectory() as temp_dir:
        blocker = Path(temp_dir) / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(ProjectWriteError):
            ProjectBuilder(blocker / "run").write_files([])


def test_frontend_bootstrap_baselines_can_be_replaced():
    """index.html and main.ts exist in every frontend tree; a generated file at the same path wins."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        ProjectBuilder(root).write_files([
            _file("index.html", "<custom></custom>", TargetTree.FRONTEND),
        ])

        assert (root / "frontend/src/index.html").read_text(encoding="utf-8") == "<custom></custom>"
        assert "bootstrapApplication" in (root / "frontend/src/main.ts").read_text(encoding="utf-8")
        assert not (root / "backend/src/index.html").exists()


def test_workspace_scripts_exist_in_both_trees():
    """Every `npm run <script>` the root workspace delegates to is defined in the tree it targets."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        ProjectBuilder(root).write_files([])
        root_scripts = json.loads(render_root_package_json())["scripts"]
        tree_scripts = {
            tree: json.loads((root / tree / "package.json").read_text(encoding="utf-8"))["scripts"]
            for tree in ("backend", "frontend")
        }

        for command in root_scripts.values():
            for step in command.split("&&"):
                step = step.strip()
                if step.startswith("cd "):
                    tree = step[3:].replace("../", "")
                elif step.startswith("npm run "):
                    assert step[len("npm run "):] in tree_scripts[tree], f"{tree} lacks '{step}'"

        assert tree_scripts["backend"]["test"].startswith("jest")
