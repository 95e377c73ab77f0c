"""Use-case diagram parser: primary actor plus REST-style actions."""
import re
from typing import Any, Dict, List
from app.generators.code_gen.parsers.shapes import (
    FLOW,
    GO_MODEL,
    detect_shape,
    flow_parts,
    go_model_parts,
    link_data,
    resolve_links,
)
from app.generators.code_gen.types import ParsedAction, ParsedUseCase
from app.generators.code_gen.utils import as_dict, first_text, node_label

DEFAULT_ACTOR = "Default"
DEFAULT_USECASE_NAME = "Untitled Use Case"

# Checked in order; the first verb family found in the action text wins.
VERB_METHODS = (
    ("POST", ("create", "add", "save", "register", "insert",
              "crear", "agregar", "añadir", "anadir", "registrar", "guardar", "insertar")),
    ("PUT", ("update", "modify", "edit",
             "actualizar", "modificar", "editar", "cambiar")),
    ("DELETE", ("delete", "remove",
                "eliminar", "borrar", "quitar")),
)

_VERB_PATTERNS = [
    (method, re.compile(r"\b(?:" + "|".join(verbs) + r")"))
    for method, verbs in VERB_METHODS
]


def infer_http_method(text: str) -> str:
    """Map the verb of an action to an HTTP method, defaulting to GET."""
    lowered = text.lower()
    for method, pattern in _VERB_PATTERNS:
        if pattern.search(lowered):
            return method
    return "GET"


def _is_actor(node: Dict[str, Any]) -> bool:
    data = as_dict(node.get("data"))
    kind = first_text(node.get("category"), node.get("type"), data.get("category"), data.get("type"))
    return kind.lower() == "actor"


def _build(
    data: Dict[str, Any],
    nodes: List[Dict[str, Any]],
    index: Dict[str, Dict[str, Any]],
    links: List[Dict[str, Any]],
    from_key: str,
    to_key: str,
    shape: str,
) -> ParsedUseCase:
    actor_node = next((n for n in nodes if _is_actor(n)), None)
    actor = node_label(actor_node, DEFAULT_ACTOR) if actor_node else DEFAULT_ACTOR

    actions: List[ParsedAction] = []
    for link, source, target in resolve_links(links, index, from_key, to_key):
        attrs = link_data(link)
        name = first_text(attrs.get("text"), attrs.get("label"), attrs.get("name"))
        if not name:
            # Unlabelled association: the use case is the non-actor end
            usecase_node = target if not _is_actor(target) else source
            if _is_actor(usecase_node):
                continue
            name = node_label(usecase_node)
        if not name:
            continue
        actions.append(ParsedAction(
            name=name,
            http_method=infer_http_method(name),
            path=f"/{actor.lower()}",
            description=first_text(attrs.get("description"), default=name),
        ))

    return ParsedUseCase(
        usecase_name=first_text(data.get("name"), default=DEFAULT_USECASE_NAME),
        primary_actor=actor,
        actions=actions,
        shape=shape,
    )


def _from_go_model(data: Dict[str, Any]) -> ParsedUseCase:
    nodes, index, links = go_model_parts(data)
    return _build(data, nodes, index, links, "from", "to", GO_MODEL)


def _from_flow(data: Dict[str, Any]) -> ParsedUseCase:
    nodes, index, links = flow_parts(data)
    return _build(data, nodes, index, links, "source", "target", FLOW)


def parse_usecase_diagram(data: Any) -> ParsedUseCase:
    shape = detect_shape(data)
    if shape == GO_MODEL:
        return _from_go_model(data)
    if shape == FLOW:
        return _from_flow(data)
    return ParsedUseCase(
        usecase_name=first_text(as_dict(data).get("name"), default=DEFAULT_USECASE_NAME),
        primary_actor=DEFAULT_ACTOR,
        actions=[],
        shape=shape,
    )
