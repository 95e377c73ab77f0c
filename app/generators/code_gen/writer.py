"""Project builder: writes generated files into the backend and frontend trees."""
import logging
import shutil
from pathlib import Path
from typing import Callable, Dict, List, Set, Tuple
from app.core.errors import ProjectWriteError
from app.generators.code_gen.render import (
    render_backend_package_json,
    render_backend_tsconfig,
    render_frontend_index_html,
    render_frontend_main_ts,
    render_frontend_package_json,
    render_frontend_tsconfig,
)
from app.generators.code_gen.types import BuildResult, GeneratedFile, TargetTree

log = logging.getLogger(__name__)

SOURCE_DIR = "src"

TREE_SKELETONS: Dict[TargetTree, Tuple[str, ...]] = {
    TargetTree.BACKEND: ("entities", "controllers", "services", "modules", "dto"),
    TargetTree.FRONTEND: ("app/components", "app/services", "app/models"),
}

TREE_MANIFESTS: Dict[TargetTree, Dict[str, Callable[[], str]]] = {
    TargetTree.BACKEND: {
        "package.json": render_backend_package_json,
        "tsconfig.json": render_backend_tsconfig,
    },
    TargetTree.FRONTEND: {
        "package.json": render_frontend_package_json,
        "tsconfig.json": render_frontend_tsconfig,
    },
}

# Baseline sources written under <tree>/src before generated files, which may replace them
TREE_BASELINES: Dict[TargetTree, Dict[str, Callable[[], str]]] = {
    TargetTree.BACKEND: {},
    TargetTree.FRONTEND: {
        "main.ts": render_frontend_main_ts,
        "index.html": render_frontend_index_html,
    },
}

# Imports that belong to the other tree's framework
CROSS_TREE_MARKERS: Dict[TargetTree, Tuple[str, ...]] = {
    TargetTree.BACKEND: ("@angular/",),
    TargetTree.FRONTEND: ("@nestjs/", "from 'typeorm'", 'from "typeorm"'),
}


def cross_tree_warnings(files: List[GeneratedFile]) -> List[str]:
    """Advisory check: files whose content uses the other framework's imports."""
    warnings = []
    for file in files:
        for marker in CROSS_TREE_MARKERS[file.target_tree]:
            if marker in file.content:
                warnings.append(
                    f"{file.target_tree.value}/{file.relative_path} references '{marker.strip()}'"
                )
                break
    return warnings


class ProjectBuilder:
    """
    Rebuilds ``<output_root>/backend`` and ``<output_root>/frontend`` from scratch.

    Every call starts with a destructive reset of ``output_root``, so two runs
    must never share a root concurrently.
    """

    def __init__(self, output_root: Path, run_id: str = "-"):
        self.output_root = Path(output_root)
        self.run_id = run_id

    def _extra(self) -> dict:
        return {"run_id": self.run_id, "stage": "BUILD_PROJECT"}

    def tree_root(self, tree: TargetTree) -> Path:
        return self.output_root / tree.value

    def source_root(self, tree: TargetTree) -> Path:
        return self.tree_root(tree) / SOURCE_DIR

    def reset(self) -> None:
        """Remove the output root entirely; a missing root is fine."""
        try:
            shutil.rmtree(self.output_root)
        except FileNotFoundError:
            pass

    def scaffold(self) -> None:
        for tree, subdirs in TREE_SKELETONS.items():
            for subdir in subdirs:
                (self.source_root(tree) / subdir).mkdir(parents=True, exist_ok=True)

    def write_manifests(self) -> None:
        for tree, manifests in TREE_MANIFESTS.items():
            for filename, render in manifests.items():
                (self.tree_root(tree) / filename).write_text(render(), encoding="utf-8")

    def write_baselines(self) -> None:
        for tree, baselines in TREE_BASELINES.items():
            for filename, render in baselines.items():
                (self.source_root(tree) / filename).write_text(render(), encoding="utf-8")

    def target_path(self, file: GeneratedFile) -> Path:
        """Absolute destination of a file, confined to its tree's source root."""
        base = self.source_root(file.target_tree).resolve()
        target = (base / file.relative_path).resolve()
        if target == base or base not in target.parents:
            raise ProjectWriteError(f"Refusing to write outside the {file.target_tree.value} tree: {file.relative_path}")
        return target

    def write_files(self, files: List[GeneratedFile]) -> BuildResult:
        """
        Reset, scaffold and populate both trees.

        Args:
            files: Files produced by the output parser

        Returns:
            BuildResult with counts, duplicate paths and advisory warnings

        Raises:
            ProjectWriteError: on any filesystem failure; the tree is left as-is
        """
        result = BuildResult(output_root=str(self.output_root))
        seen: Set[Tuple[TargetTree, str]] = set()
        try:
            self.reset()
            self.scaffold()
            self.write_manifests()
            self.write_baselines()

            for file in files:
                file_path = self.target_path(file)
                key = (file.target_tree, file.relative_path)
                if key in seen:
                    result.duplicate_paths.append(f"{file.target_tree.value}/{file.relative_path}")
                    log.warning("Duplicate path %s/%s, last write wins", file.target_tree.value,
                                file.relative_path, extra=self._extra())
                seen.add(key)
                # Create parent directories if needed
                file_path.parent.mkdir(parents=True, exist_ok=True)
                file_path.write_text(file.content, encoding="utf-8")
                result.files_written += 1
        except OSError as e:
            log.error("Writing project tree failed: %s", e, extra=self._extra())
            raise ProjectWriteError(f"Failed to write project tree under {self.output_root}: {e}") from e

        result.warnings = cross_tree_warnings(files)
        for warning in result.warnings:
            log.warning("Cross-tree import: %s", warning, extra=self._extra())

        log.info("Wrote %d files under %s", result.files_written, self.output_root, extra=self._extra())
        return result
