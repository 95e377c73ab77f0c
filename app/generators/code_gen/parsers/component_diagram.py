"""Component diagram parser."""
from typing import Any, Dict, List
from app.generators.code_gen.parsers.shapes import (
    FLOW,
    GO_MODEL,
    detect_shape,
    flow_parts,
    go_model_parts,
    resolve_links,
)
from app.generators.code_gen.types import ParsedComponent, ParsedComponentDiagram
from app.generators.code_gen.utils import as_dict, first_text, node_id, node_label

DEFAULT_RESPONSIBILITIES = "Responsibilities not defined"


def _is_component(node: Dict[str, Any]) -> bool:
    kind = first_text(node.get("type"), node.get("category")).lower()
    # Untyped nodes count as components; typed ones must say so
    return not kind or kind == "component"


def _build(
    nodes: List[Dict[str, Any]],
    index: Dict[str, Dict[str, Any]],
    links: List[Dict[str, Any]],
    id_key: str,
    from_key: str,
    to_key: str,
    shape: str,
) -> ParsedComponentDiagram:
    by_node: Dict[str, ParsedComponent] = {}
    components: List[ParsedComponent] = []
    for node in nodes:
        if not _is_component(node):
            continue
        data = as_dict(node.get("data"))
        component = ParsedComponent(
            name=node_label(node, "Component"),
            responsibilities=first_text(
                data.get("responsibilities"), node.get("responsibilities"),
                data.get("description"), node.get("description"),
                default=DEFAULT_RESPONSIBILITIES,
            ),
        )
        components.append(component)
        ident = node_id(node, id_key)
        if ident is not None:
            by_node[ident] = component

    for _, source, target in resolve_links(links, index, from_key, to_key):
        component = by_node.get(node_id(source, id_key))
        if component is None:
            continue
        dependency = node_label(target)
        if dependency and dependency not in component.dependencies:
            component.dependencies.append(dependency)

    return ParsedComponentDiagram(components=components, shape=shape)


def _from_go_model(data: Dict[str, Any]) -> ParsedComponentDiagram:
    nodes, index, links = go_model_parts(data)
    return _build(nodes, index, links, "key", "from", "to", GO_MODEL)


def _from_flow(data: Dict[str, Any]) -> ParsedComponentDiagram:
    nodes, index, links = flow_parts(data)
    return _build(nodes, index, links, "id", "source", "target", FLOW)


def parse_component_diagram(data: Any) -> ParsedComponentDiagram:
    shape = detect_shape(data)
    if shape == GO_MODEL:
        return _from_go_model(data)
    if shape == FLOW:
        return _from_flow(data)
    return ParsedComponentDiagram(components=[], shape=shape)
