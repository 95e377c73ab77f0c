"""Class diagram parser: classes with typed fields and relations."""
import re
from typing import Any, Dict, List, Optional
from app.generators.code_gen.parsers.shapes import (
    FLOW,
    GO_MODEL,
    detect_shape,
    flow_parts,
    go_model_parts,
    link_data,
    resolve_links,
)
from app.generators.code_gen.types import (
    ParsedClass,
    ParsedClassDiagram,
    ParsedField,
    ParsedRelation,
    RelationKind,
)
from app.generators.code_gen.utils import as_dict, as_text, first_text, node_id, node_label

# "- nombre: String", "+ edad: int", "# items: List<Item>"
PROPERTY_PATTERN = re.compile(r"^\s*([-+#~])?\s*(\w+)\s*:\s*([\w<>\[\],.?]+(?:\s+[\w<>\[\],.?]+)*)\s*$")

VISIBILITY_SYMBOLS = {"+": "public", "-": "private", "#": "protected", "~": "package"}
VISIBILITY_WORDS = {"public", "private", "protected", "package"}

INTERFACE_MARKERS = ("<<Interface>>", "<<interface>>", "«interface»")

IGNORED_NODE_KINDS = {"note", "comment"}

INHERITANCE_LABEL = "herencia"


def invalid_field() -> ParsedField:
    """Sentinel for a property that could not be parsed."""
    return ParsedField(name="invalid", type="string", visibility="private")


def _visibility(raw: Any) -> str:
    text = as_text(raw).lower()
    if text in VISIBILITY_SYMBOLS:
        return VISIBILITY_SYMBOLS[text]
    if text in VISIBILITY_WORDS:
        return text
    return "private"


def _make_field(name: str, type_name: str, visibility: str) -> ParsedField:
    primary = name.lower() == "id"
    return ParsedField(
        name=name,
        type=type_name.lower(),
        visibility=visibility,
        nullable=not primary,
        primary=primary,
    )


def parse_property(prop: Any) -> ParsedField:
    """Parse one class property, either a UML string or a {name, type, visibility} object."""
    if isinstance(prop, str):
        match = PROPERTY_PATTERN.match(prop)
        if not match:
            return invalid_field()
        symbol, name, type_name = match.groups()
        return _make_field(name, type_name.replace(" ", ""), _visibility(symbol or "-"))

    if isinstance(prop, dict):
        name = as_text(prop.get("name"))
        if not name or not re.fullmatch(r"\w+", name):
            return invalid_field()
        parsed = _make_field(name, as_text(prop.get("type")) or "string", _visibility(prop.get("visibility")))
        if isinstance(prop.get("nullable"), bool):
            parsed.nullable = prop["nullable"]
        if isinstance(prop.get("primary"), bool):
            parsed.primary = prop["primary"]
        return parsed

    return invalid_field()


def determine_relation_kind(text: str, from_text: str, to_text: str) -> RelationKind:
    if text == INHERITANCE_LABEL:
        return RelationKind.MANY_TO_ONE
    if from_text == "1" and to_text in ("0..n", "1..n"):
        return RelationKind.ONE_TO_MANY
    if from_text == "1" and to_text == "1":
        return RelationKind.ONE_TO_ONE
    return RelationKind.MANY_TO_MANY


def clean_class_name(name: str) -> str:
    for marker in INTERFACE_MARKERS:
        name = name.replace(marker, "")
    return name.strip() or "UnnamedClass"


def _node_properties(node: Dict[str, Any]) -> List[Any]:
    data = as_dict(node.get("data"))
    for container in (node, data):
        for key in ("properties", "attributes", "fields"):
            if isinstance(container.get(key), list):
                return container[key]
    return []


def _is_class_node(node: Dict[str, Any]) -> bool:
    kind = first_text(node.get("category"), node.get("type")).lower()
    return kind not in IGNORED_NODE_KINDS


def _build(
    nodes: List[Dict[str, Any]],
    index: Dict[str, Dict[str, Any]],
    links: List[Dict[str, Any]],
    id_key: str,
    from_key: str,
    to_key: str,
    shape: str,
) -> ParsedClassDiagram:
    classes: List[ParsedClass] = []
    by_node: Dict[str, ParsedClass] = {}

    for node in nodes:
        if not _is_class_node(node):
            continue
        parsed = ParsedClass(
            name=clean_class_name(node_label(node)),
            fields=[parse_property(p) for p in _node_properties(node)],
        )
        classes.append(parsed)
        ident = node_id(node, id_key)
        if ident is not None:
            by_node[ident] = parsed

    for link, source, target in resolve_links(links, index, from_key, to_key):
        owner: Optional[ParsedClass] = by_node.get(node_id(source, id_key))
        if owner is None or node_id(target, id_key) not in by_node:
            continue
        attrs = link_data(link)
        text = first_text(attrs.get("text"), attrs.get("label"), attrs.get("name"))
        from_text = first_text(attrs.get("fromText"), attrs.get("sourceCardinality"), attrs.get("sourceLabel"))
        to_text = first_text(attrs.get("toText"), attrs.get("targetCardinality"), attrs.get("targetLabel"))
        owner.relations.append(ParsedRelation(
            kind=determine_relation_kind(text, from_text, to_text),
            target=by_node[node_id(target, id_key)].name,
            field_label=text.lower(),
        ))

    return ParsedClassDiagram(classes=classes, shape=shape)


def _from_go_model(data: Dict[str, Any]) -> ParsedClassDiagram:
    nodes, index, links = go_model_parts(data)
    return _build(nodes, index, links, "key", "from", "to", GO_MODEL)


def _from_flow(data: Dict[str, Any]) -> ParsedClassDiagram:
    nodes, index, links = flow_parts(data)
    return _build(nodes, index, links, "id", "source", "target", FLOW)


def parse_class_diagram(data: Any) -> ParsedClassDiagram:
    """Normalize a class diagram payload into its classes, fields and relations."""
    shape = detect_shape(data)
    if shape == GO_MODEL:
        return _from_go_model(data)
    if shape == FLOW:
        return _from_flow(data)
    return ParsedClassDiagram(classes=[], shape=shape)
