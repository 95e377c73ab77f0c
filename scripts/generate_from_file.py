#!/usr/bin/env python3
"""
Run the generation pipeline against diagram JSON files instead of the database.

Usage:
    python scripts/generate_from_file.py --class-diagram model.json --response canned.md -o project.zip
    python scripts/generate_from_file.py --usecase-diagram cases.json -o project.zip   # calls Gemini
"""
import sys
import asyncio
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.engine import GenerationEngine
from app.core.errors import GenerationError
from app.core.gemini import GeminiClient
from app.core.logging import configure_logging
from app.generators.code_gen.types import DiagramRecord, DiagramType, GroupedDiagrams

BUCKET_OPTIONS = {
    "class_diagram": ("class_diagrams", DiagramType.CLASS),
    "usecase_diagram": ("usecase_diagrams", DiagramType.USECASE),
    "component_diagram": ("component_diagrams", DiagramType.COMPONENT),
    "package_diagram": ("package_diagrams", DiagramType.PACKAGE),
    "sequence_diagram": ("sequence_diagrams", DiagramType.SEQUENCE),
}


class FileDiagramSource:
    """Serves one fixed set of diagrams loaded from disk."""

    def __init__(self, grouped: GroupedDiagrams):
        self.grouped = grouped

    def get_project_diagrams_grouped(self, project_id: int) -> GroupedDiagrams:
        return self.grouped


class CannedResponse:
    """Replays a saved LLM response."""

    def __init__(self, path: Path):
        self.path = path

    async def generate_code(self, prompt: str) -> str:
        return self.path.read_text(encoding="utf-8")


def load_diagrams(args) -> GroupedDiagrams:
    grouped = GroupedDiagrams()
    for option, (bucket, diagram_type) in BUCKET_OPTIONS.items():
        for path in getattr(args, option) or []:
            record = DiagramRecord(name=Path(path).stem, info=Path(path).read_text(encoding="utf-8"), type=diagram_type)
            getattr(grouped, bucket).append(record)
    return grouped


def main():
    parser = argparse.ArgumentParser(description="Generate a project archive from diagram JSON files")
    for option in BUCKET_OPTIONS:
        parser.add_argument(f"--{option.replace('_', '-')}", dest=option, action="append",
                            help="Diagram JSON file (repeatable)")
    parser.add_argument("--response", help="Use a saved LLM response instead of calling Gemini")
    parser.add_argument("--output-root", help="Directory for the intermediate trees (kept after the run)")
    parser.add_argument("--project-name", default="MyGeneratedProject", help="Name given to the generated project")
    parser.add_argument("-o", "--output", default="project.zip", help="Where to write the zip archive")
    args = parser.parse_args()

    configure_logging()
    grouped = load_diagrams(args)
    if grouped.total() == 0:
        print("Warning: no diagrams given, the prompt will be empty")

    llm = CannedResponse(Path(args.response)) if args.response else GeminiClient()
    engine = GenerationEngine(
        FileDiagramSource(grouped),
        llm,
        output_root=Path(args.output_root) if args.output_root else None,
        project_name=args.project_name,
        keep_output=bool(args.output_root),
    )

    try:
        result = asyncio.run(engine.run(0))
    except GenerationError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    Path(args.output).write_bytes(result.archive)
    print(f"Wrote {len(result.archive)} bytes to {args.output}")
    print(f"Files: {len(result.files)} generated, {len(result.build.duplicate_paths)} duplicate paths")
    for warning in result.warnings:
        print(f"  Skipped {warning.diagram_type.name.lower()} diagram '{warning.diagram_name}': {warning.message}")
    for warning in result.build.warnings:
        print(f"  {warning}")


if __name__ == "__main__":
    main()
