"""Sequence diagram parser: lifelines and the messages exchanged between them."""
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
from app.generators.code_gen.types import ParsedMessage, ParsedSequence
from app.generators.code_gen.utils import as_dict, first_text, node_id, node_label

DEFAULT_SEQUENCE_NAME = "Default Sequence"
DEFAULT_ACTOR = "DefaultActor"

LIFELINE_KINDS = {"lifeline", "actor", "participant", "object"}


def _is_lifeline(node: Dict[str, Any]) -> bool:
    kind = first_text(node.get("category"), node.get("type")).lower()
    return kind in LIFELINE_KINDS or node.get("isLifeline") is True or node.get("isGroup") is True


def _build(
    data: Dict[str, Any],
    nodes: List[Dict[str, Any]],
    index: Dict[str, Dict[str, Any]],
    links: List[Dict[str, Any]],
    id_key: str,
    parent_keys: tuple,
    from_key: str,
    to_key: str,
    shape: str,
) -> ParsedSequence:
    lifelines = [n for n in nodes if _is_lifeline(n)]
    actors = [node_label(n, f"Actor{i + 1}") for i, n in enumerate(lifelines)]

    def participant(node: Dict[str, Any]) -> str:
        # Activation boxes sit inside their lifeline group
        for key in parent_keys:
            parent = index.get(node_id(node, key) or "")
            if parent is not None and _is_lifeline(parent):
                return node_label(parent, "UnknownActor")
        return node_label(node, "UnknownActor")

    messages: List[ParsedMessage] = []
    for link, source, target in resolve_links(links, index, from_key, to_key):
        attrs = link_data(link)
        kind = first_text(attrs.get("category"), attrs.get("type"), attrs.get("kind")).lower()
        messages.append(ParsedMessage(
            sender=participant(source),
            receiver=participant(target),
            label=first_text(attrs.get("text"), attrs.get("label"), attrs.get("name"), default="Unnamed Message"),
            kind="return" if kind == "return" else "call",
        ))

    if actors:
        primary = actors[0]
    elif messages:
        primary = messages[0].sender
    else:
        primary = DEFAULT_ACTOR

    return ParsedSequence(
        name=first_text(data.get("name"), data.get("class"), default=DEFAULT_SEQUENCE_NAME),
        primary_actor=primary,
        messages=messages,
        shape=shape,
    )


def _from_go_model(data: Dict[str, Any]) -> ParsedSequence:
    nodes, index, links = go_model_parts(data)
    return _build(data, nodes, index, links, "key", ("group",), "from", "to", GO_MODEL)


def _from_flow(data: Dict[str, Any]) -> ParsedSequence:
    nodes, index, links = flow_parts(data)
    return _build(data, nodes, index, links, "id", ("parentNode", "parentId"), "source", "target", FLOW)


def parse_sequence_diagram(data: Any) -> ParsedSequence:
    shape = detect_shape(data)
    if shape == GO_MODEL:
        return _from_go_model(data)
    if shape == FLOW:
        return _from_flow(data)
    payload = as_dict(data)
    return ParsedSequence(
        name=first_text(payload.get("name"), payload.get("class"), default=DEFAULT_SEQUENCE_NAME),
        primary_actor=DEFAULT_ACTOR,
        messages=[],
        shape=shape,
    )
