"""Zip packaging of the generated backend and frontend trees."""
import io
import logging
import zipfile
from pathlib import Path
from typing import Callable, Dict
from app.core.errors import ArchiveError, OutputTreeMissingError
from app.generators.code_gen.render import render_readme, render_root_package_json
from app.generators.code_gen.types import TargetTree

log = logging.getLogger(__name__)

ROOT_ENTRIES: Dict[str, Callable[[], str]] = {
    "package.json": render_root_package_json,
    "README.md": render_readme,
}


class ArchivePackager:
    """Packs ``<output_root>/backend`` and ``<output_root>/frontend`` into one zip."""

    def __init__(self, output_root: Path, run_id: str = "-", compresslevel: int = 9):
        self.output_root = Path(output_root)
        self.run_id = run_id
        self.compresslevel = compresslevel

    def _extra(self) -> dict:
        return {"run_id": self.run_id, "stage": "PACKAGE_ARCHIVE"}

    def _check_trees(self) -> None:
        for tree in TargetTree:
            if not (self.output_root / tree.value).is_dir():
                raise OutputTreeMissingError(
                    f"{tree.value} tree not found under {self.output_root}; build the project first"
                )

    def package(self) -> bytes:
        """
        Build the archive in memory.

        The bytes are returned only once the zip has been closed, so a caller
        never sees a truncated archive.

        Raises:
            OutputTreeMissingError: if either tree does not exist
            ArchiveError: on any failure while writing the archive
        """
        self._check_trees()
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED,
                                 compresslevel=self.compresslevel) as archive:
                for tree in TargetTree:
                    tree_root = self.output_root / tree.value
                    for path in sorted(tree_root.rglob("*")):
                        if path.is_file():
                            arcname = f"{tree.value}/{path.relative_to(tree_root).as_posix()}"
                            archive.write(path, arcname)
                for name, render in ROOT_ENTRIES.items():
                    archive.writestr(name, render())
                entry_count = len(archive.namelist())
        except (OSError, zipfile.BadZipFile, ValueError) as e:
            log.error("Archive creation failed: %s", e, extra=self._extra())
            raise ArchiveError(f"Failed to package {self.output_root}: {e}") from e

        data = buffer.getvalue()
        if not data:
            raise ArchiveError("Generated ZIP archive is empty")
        log.info("ZIP archive finalized: %d entries, %d bytes", entry_count, len(data), extra=self._extra())
        return data
