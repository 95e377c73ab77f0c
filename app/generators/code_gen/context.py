"""Fold parsed diagrams into a prompt-ready GenerationContext."""
import logging
from typing import Callable, List, Tuple
from app.generators.code_gen.parsers import decode_info, parse_diagram
from app.generators.code_gen.types import (
    ContextEntry,
    DiagramRecord,
    DiagramType,
    DiagramWarning,
    GenerationContext,
    GroupedDiagrams,
    ParsedClass,
    ParsedClassDiagram,
    ParsedComponentDiagram,
    ParsedPackage,
    ParsedSequence,
    ParsedUseCase,
)

log = logging.getLogger(__name__)


def render_class_body(parsed: ParsedClass) -> str:
    """One line per field, then one line per relation."""
    lines = []
    for f in parsed.fields:
        line = f"{f.name}: {f.type}"
        if f.nullable:
            line += " (nullable)"
        if f.primary:
            line += " (primary)"
        lines.append(f"{line} - {f.visibility}")
    for rel in parsed.relations:
        label = f" ({rel.field_label})" if rel.field_label else ""
        lines.append(f"relation: {rel.kind.value} -> {rel.target}{label}")
    return "\n".join(lines)


def _fold_class(ctx: GenerationContext, parsed: ParsedClassDiagram) -> None:
    for cls in parsed.classes:
        ctx.entities.append(ContextEntry(name=cls.name, body=render_class_body(cls)))


def _fold_usecase(ctx: GenerationContext, parsed: ParsedUseCase) -> None:
    actions = "\n".join(
        f"{a.http_method} {a.path} - {a.name}: {a.description}" for a in parsed.actions
    )
    ctx.controllers.append(ContextEntry(name=parsed.primary_actor, body=actions))
    ctx.services.append(ContextEntry(
        name=parsed.primary_actor,
        body=f"Handle operations like:\n{actions}",
    ))
    ctx.dtos.append(ContextEntry(
        name=f"{parsed.primary_actor}Dto",
        body="\n".join(f"{a.name}: string" for a in parsed.actions),
    ))


def _fold_package(ctx: GenerationContext, parsed: ParsedPackage) -> None:
    for mod in parsed.modules:
        parts = []
        if mod.components:
            parts.append(f"Includes: {', '.join(mod.components)}")
        if mod.dependencies:
            parts.append(f"Depends on: {', '.join(mod.dependencies)}")
        ctx.modules.append(ContextEntry(
            name=mod.name,
            body="\n".join(parts) or "No responsibilities defined",
        ))


def _fold_component(ctx: GenerationContext, parsed: ParsedComponentDiagram) -> None:
    for comp in parsed.components:
        ctx.services.append(ContextEntry(
            name=comp.name,
            body=f"Responsibilities: {comp.responsibilities}\nDependencies: {', '.join(comp.dependencies)}",
        ))


def _fold_sequence(ctx: GenerationContext, parsed: ParsedSequence) -> None:
    interactions = "\n".join(
        f"{m.sender} -> {m.receiver}: {m.label} ({m.kind})" for m in parsed.messages
    )
    ctx.services.append(ContextEntry(
        name=parsed.name,
        body=f"Actor: {parsed.primary_actor}\nInteractions:\n{interactions}",
    ))


def _buckets(grouped: GroupedDiagrams) -> List[Tuple[DiagramType, List[DiagramRecord], Callable]]:
    """Diagram buckets in folding order."""
    return [
        (DiagramType.CLASS, grouped.class_diagrams, _fold_class),
        (DiagramType.USECASE, grouped.usecase_diagrams, _fold_usecase),
        (DiagramType.PACKAGE, grouped.package_diagrams, _fold_package),
        (DiagramType.COMPONENT, grouped.component_diagrams, _fold_component),
        (DiagramType.SEQUENCE, grouped.sequence_diagrams, _fold_sequence),
    ]


def aggregate(grouped: GroupedDiagrams, run_id: str = "-") -> GenerationContext:
    """
    Parse every diagram of a project and fold the results into one context.

    A diagram that fails to decode or parse is skipped and recorded in
    ``context.warnings``; aggregation always continues with the rest.

    Args:
        grouped: The project's diagrams, grouped by type
        run_id: Generation run identifier used in log records

    Returns:
        GenerationContext with entries in diagram retrieval order
    """
    ctx = GenerationContext()
    extra = {"run_id": run_id, "stage": "AGGREGATE_CONTEXT"}

    for diagram_type, diagrams, fold in _buckets(grouped):
        for diagram in diagrams:
            try:
                parsed = parse_diagram(diagram_type, decode_info(diagram.info))
                fold(ctx, parsed)
            except Exception as e:
                log.warning(
                    "Skipping %s diagram '%s': %s", diagram_type.name.lower(), diagram.name, e,
                    extra=extra,
                )
                ctx.warnings.append(DiagramWarning(
                    diagram_type=diagram_type,
                    diagram_name=diagram.name,
                    message=str(e),
                ))

    log.info(
        "Aggregated context: %d entities, %d dtos, %d services, %d controllers, %d modules (%d skipped)",
        len(ctx.entities), len(ctx.dtos), len(ctx.services), len(ctx.controllers), len(ctx.modules),
        len(ctx.warnings),
        extra=extra,
    )
    return ctx
