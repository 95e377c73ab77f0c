"""
Turn a raw LLM response into GeneratedFile objects.

Each fenced code block becomes one file. Its path comes from the first rule
that applies, in order:

1. ``comment``: the block's first line is a single-line comment naming the file
2. ``content``: the exported class/interface and its decorators imply a path
3. ``default``: a fixed path keyed by the fence's language tag

Regex/keyword matching only; no TypeScript parsing.
"""
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from app.generators.code_gen.types import GeneratedFile, PathSource, TargetTree
from app.generators.code_gen.utils import to_kebab_case

log = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"```[ \t]*([\w.+#-]*)[^\n]*\n(.*?)```", re.DOTALL)

COMMENT_PATH_PATTERN = re.compile(
    r"^\s*(?://+|#+|/\*+|<!--|--)\s*"
    r"(?:(?:file(?:name)?|path)\s*:\s*)?"
    r"([\w@\-./\\]*\.[A-Za-z0-9]+)"
    r"\s*(?:\*+/|-->)?\s*$",
    re.IGNORECASE,
)

EXPORT_PATTERN = re.compile(r"export\s+(?:default\s+)?(?:abstract\s+)?(class|interface)\s+([A-Za-z_]\w*)")

# Leading segments naming a tree root; the project builder adds its own
ROOT_SEGMENTS = {"generated", "backend", "frontend", "nest", "angular", "src"}

# (decorator marker, path template, class-name suffix to drop)
CONTENT_MARKERS = (
    ("@Controller(", "controllers/{slug}.controller.ts", "Controller"),
    ("@Injectable(", "services/{slug}.service.ts", "Service"),
    ("@Entity(", "entities/{slug}.entity.ts", "Entity"),
    ("@Component(", "app/components/{slug}/{slug}.component.ts", "Component"),
    ("@Module(", "modules/{slug}.module.ts", "Module"),
)

LANGUAGE_EXTENSIONS = {
    "ts": "ts", "typescript": "ts",
    "js": "js", "javascript": "js",
    "tsx": "tsx", "jsx": "jsx",
    "html": "html", "css": "css", "scss": "scss",
    "json": "json",
    "yaml": "yaml", "yml": "yaml",
    "md": "md", "markdown": "md",
    "sh": "sh", "bash": "sh",
    "sql": "sql",
    "py": "py", "python": "py",
}

DEFAULT_DIR = "unclassified"

BACKEND_KEYWORDS = ("controller", "service", "entity", "dto", "module")
FRONTEND_COMPONENTS_PREFIX = "app/components/"
BACKEND_BOOTSTRAP = "main.ts"


@dataclass
class CodeBlock:
    language: str
    content: str


def find_code_blocks(raw_text: str) -> List[CodeBlock]:
    """All non-empty fenced blocks, in source order, with trimmed content."""
    blocks = []
    for match in FENCE_PATTERN.finditer(raw_text or ""):
        content = match.group(2).strip()
        if content:
            blocks.append(CodeBlock(language=match.group(1).lower(), content=content))
    return blocks


def normalize_path(raw_path: str) -> str:
    """Relative, slash-separated path with dot segments and tree-root prefixes removed."""
    parts = [p for p in raw_path.replace("\\", "/").split("/") if p not in ("", ".", "..")]
    while len(parts) > 1 and parts[0].lower() in ROOT_SEGMENTS:
        parts = parts[1:]
    return "/".join(parts)


def path_from_comment(content: str) -> Optional[Tuple[str, str]]:
    """(path, content without the comment line) when the first line names the file."""
    first_line, _, rest = content.partition("\n")
    match = COMMENT_PATH_PATTERN.match(first_line)
    if not match:
        return None
    path = normalize_path(match.group(1))
    if not path or "." not in path.rsplit("/", 1)[-1]:
        return None
    return path, rest.strip()


def path_from_content(content: str) -> Optional[str]:
    """Infer a path from the exported declaration and its decorators."""
    match = EXPORT_PATTERN.search(content)
    if not match:
        return None
    kind, name = match.groups()

    for marker, template, suffix in CONTENT_MARKERS:
        if marker in content:
            base = name[: -len(suffix)] if name.endswith(suffix) and name != suffix else name
            return template.format(slug=to_kebab_case(base))

    if kind == "class" and name.endswith("Dto") and name != "Dto":
        return f"dto/{to_kebab_case(name[:-3])}.dto.ts"
    if kind == "interface":
        return f"app/models/{to_kebab_case(name)}.model.ts"
    return None


def default_path(language: str) -> str:
    extension = LANGUAGE_EXTENSIONS.get(language.lower(), "txt")
    return f"{DEFAULT_DIR}/generated.{extension}"


def infer_path(language: str, content: str) -> Tuple[str, PathSource, str]:
    """Apply the path rules in order; returns (path, rule that fired, file content)."""
    from_comment = path_from_comment(content)
    if from_comment is not None:
        path, remaining = from_comment
        return path, PathSource.COMMENT, remaining

    from_content = path_from_content(content)
    if from_content is not None:
        return from_content, PathSource.CONTENT, content

    return default_path(language), PathSource.DEFAULT, content


def classify_path(path: str) -> TargetTree:
    """Route a relative path to the backend or frontend tree."""
    lowered = path.lower()
    if lowered.startswith(FRONTEND_COMPONENTS_PREFIX):
        return TargetTree.FRONTEND
    if any(keyword in lowered for keyword in BACKEND_KEYWORDS):
        return TargetTree.BACKEND
    if lowered == BACKEND_BOOTSTRAP:
        return TargetTree.BACKEND
    return TargetTree.FRONTEND


def parse_output(raw_text: str) -> List[GeneratedFile]:
    """
    Extract one GeneratedFile per fenced code block of an LLM response.

    Blocks that infer the same path are all kept; the last one written wins.

    Args:
        raw_text: LLM completion text

    Returns:
        GeneratedFile objects in the order their blocks appear
    """
    files: List[GeneratedFile] = []
    for block in find_code_blocks(raw_text):
        path, source, content = infer_path(block.language, block.content)
        if not content:
            continue
        files.append(GeneratedFile(
            relative_path=path,
            content=content,
            target_tree=classify_path(path),
            path_source=source,
        ))
    log.info(
        "Parsed %d files from LLM output (%d backend, %d frontend)",
        len(files),
        sum(1 for f in files if f.target_tree == TargetTree.BACKEND),
        sum(1 for f in files if f.target_tree == TargetTree.FRONTEND),
    )
    return files
