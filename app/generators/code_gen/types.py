"""Dataclasses for diagram-to-code generation."""
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, List, Optional


class DiagramType(IntEnum):
    """Diagram kinds, numbered as they are stored by the diagram source."""
    CLASS = 1
    USECASE = 2
    SEQUENCE = 3
    PACKAGE = 4
    COMPONENT = 5


class RelationKind(str, Enum):
    ONE_TO_MANY = "OneToMany"
    MANY_TO_ONE = "ManyToOne"
    ONE_TO_ONE = "OneToOne"
    MANY_TO_MANY = "ManyToMany"


class TargetTree(str, Enum):
    BACKEND = "backend"
    FRONTEND = "frontend"


class PathSource(str, Enum):
    """Which path-inference rule produced a GeneratedFile's path."""
    COMMENT = "comment"
    CONTENT = "content"
    DEFAULT = "default"


@dataclass
class DiagramRecord:
    """One diagram as handed over by the diagram source."""
    name: str
    info: Any  # JSON string, or an already-decoded payload
    type: Optional[DiagramType] = None


@dataclass
class GroupedDiagrams:
    """A project's diagrams grouped by type, in retrieval order."""
    class_diagrams: List[DiagramRecord] = field(default_factory=list)
    usecase_diagrams: List[DiagramRecord] = field(default_factory=list)
    component_diagrams: List[DiagramRecord] = field(default_factory=list)
    package_diagrams: List[DiagramRecord] = field(default_factory=list)
    sequence_diagrams: List[DiagramRecord] = field(default_factory=list)

    def total(self) -> int:
        return (
            len(self.class_diagrams) + len(self.usecase_diagrams) + len(self.component_diagrams)
            + len(self.package_diagrams) + len(self.sequence_diagrams)
        )


# Canonical per-type records. ``shape`` names the input variant the record was
# adapted from and is excluded from equality.

@dataclass
class ParsedField:
    name: str
    type: str
    visibility: str = "private"
    nullable: bool = False
    primary: bool = False


@dataclass
class ParsedRelation:
    kind: RelationKind
    target: str
    field_label: str


@dataclass
class ParsedClass:
    name: str
    fields: List[ParsedField] = field(default_factory=list)
    relations: List[ParsedRelation] = field(default_factory=list)


@dataclass
class ParsedClassDiagram:
    classes: List[ParsedClass] = field(default_factory=list)
    shape: str = field(default="unknown", compare=False)


@dataclass
class ParsedAction:
    name: str
    http_method: str
    path: str
    description: str = ""


@dataclass
class ParsedUseCase:
    usecase_name: str
    primary_actor: str
    actions: List[ParsedAction] = field(default_factory=list)
    shape: str = field(default="unknown", compare=False)


@dataclass
class ParsedComponent:
    name: str
    responsibilities: str
    dependencies: List[str] = field(default_factory=list)


@dataclass
class ParsedComponentDiagram:
    components: List[ParsedComponent] = field(default_factory=list)
    shape: str = field(default="unknown", compare=False)


@dataclass
class ParsedModule:
    name: str
    components: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)


@dataclass
class ParsedPackage:
    name: str
    modules: List[ParsedModule] = field(default_factory=list)
    shape: str = field(default="unknown", compare=False)


@dataclass
class ParsedMessage:
    sender: str
    receiver: str
    label: str
    kind: str = "call"  # "call" or "return"


@dataclass
class ParsedSequence:
    name: str
    primary_actor: str
    messages: List[ParsedMessage] = field(default_factory=list)
    shape: str = field(default="unknown", compare=False)


@dataclass
class ContextEntry:
    """A prompt-ready artifact: a name and a pre-rendered multi-line body."""
    name: str
    body: str


@dataclass
class DiagramWarning:
    """A diagram that was skipped during aggregation."""
    diagram_type: DiagramType
    diagram_name: str
    message: str


@dataclass
class GenerationContext:
    entities: List[ContextEntry] = field(default_factory=list)
    dtos: List[ContextEntry] = field(default_factory=list)
    services: List[ContextEntry] = field(default_factory=list)
    controllers: List[ContextEntry] = field(default_factory=list)
    modules: List[ContextEntry] = field(default_factory=list)
    warnings: List[DiagramWarning] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.entities or self.dtos or self.services or self.controllers or self.modules)


@dataclass(frozen=True)
class GeneratedFile:
    """Represents a generated file."""
    relative_path: str  # Relative to the tree's src/ directory
    content: str  # File contents
    target_tree: TargetTree
    path_source: PathSource = PathSource.COMMENT


@dataclass
class BuildResult:
    """Outcome of writing the two target trees."""
    output_root: str
    files_written: int = 0
    duplicate_paths: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class GenerationResult:
    archive: bytes
    files: List[GeneratedFile]
    warnings: List[DiagramWarning]
    build: BuildResult
