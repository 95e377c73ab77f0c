"""Diagram parsers, one per diagram type, dispatched by ``parse_diagram``."""
import json
from typing import Any, Callable, Dict
from app.generators.code_gen.types import DiagramType
from app.generators.code_gen.parsers.class_diagram import parse_class_diagram
from app.generators.code_gen.parsers.usecase_diagram import parse_usecase_diagram
from app.generators.code_gen.parsers.component_diagram import parse_component_diagram
from app.generators.code_gen.parsers.package_diagram import parse_package_diagram
from app.generators.code_gen.parsers.sequence_diagram import parse_sequence_diagram


class DiagramParseError(ValueError):
    """A diagram payload could not be decoded at all."""


PARSERS: Dict[DiagramType, Callable[[Any], Any]] = {
    DiagramType.CLASS: parse_class_diagram,
    DiagramType.USECASE: parse_usecase_diagram,
    DiagramType.COMPONENT: parse_component_diagram,
    DiagramType.PACKAGE: parse_package_diagram,
    DiagramType.SEQUENCE: parse_sequence_diagram,
}


def decode_info(info: Any) -> Any:
    """Decode a diagram's info payload; strings are JSON, anything else is taken as-is."""
    if isinstance(info, (bytes, bytearray)):
        info = info.decode("utf-8")
    if isinstance(info, str):
        try:
            return json.loads(info)
        except json.JSONDecodeError as e:
            raise DiagramParseError(f"info is not valid JSON: {e}") from e
    return info


def parse_diagram(diagram_type: DiagramType, data: Any) -> Any:
    """Normalize one diagram payload into the canonical record for its type."""
    return PARSERS[DiagramType(diagram_type)](data)


__all__ = [
    "DiagramParseError",
    "PARSERS",
    "decode_info",
    "parse_diagram",
    "parse_class_diagram",
    "parse_usecase_diagram",
    "parse_component_diagram",
    "parse_package_diagram",
    "parse_sequence_diagram",
]
