"""Package diagram parser: packages become modules, grouped nodes their components."""
from typing import Any, Dict, List, Optional
from app.generators.code_gen.parsers.shapes import (
    FLOW,
    GO_MODEL,
    detect_shape,
    flow_parts,
    go_model_parts,
    resolve_links,
)
from app.generators.code_gen.types import ParsedModule, ParsedPackage
from app.generators.code_gen.utils import as_dict, first_text, node_id, node_label

DEFAULT_PACKAGE_NAME = "Default Package"

PACKAGE_KINDS = {"package", "group"}


def _is_package(node: Dict[str, Any]) -> bool:
    kind = first_text(node.get("category"), node.get("type")).lower()
    return node.get("isGroup") is True or kind in PACKAGE_KINDS


def _parent_ref(node: Dict[str, Any], parent_keys: tuple) -> Optional[str]:
    data = as_dict(node.get("data"))
    for container in (node, data):
        for key in parent_keys:
            ref = node_id(container, key)
            if ref is not None:
                return ref
    return None


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
) -> ParsedPackage:
    modules: List[ParsedModule] = []
    module_of: Dict[str, ParsedModule] = {}

    # Packages first so members can be attached regardless of node order
    for node in nodes:
        if not _is_package(node):
            continue
        module = ParsedModule(name=node_label(node, "Unnamed Module"))
        modules.append(module)
        ident = node_id(node, id_key)
        if ident is not None:
            module_of[ident] = module

    for node in nodes:
        if _is_package(node):
            continue
        ident = node_id(node, id_key)
        parent = _parent_ref(node, parent_keys)
        if parent is not None and parent in module_of:
            module = module_of[parent]
            module.components.append(node_label(node, "Unnamed Component"))
        else:
            # A free-standing node is a module of its own
            module = ParsedModule(name=node_label(node, "Unnamed Module"))
            modules.append(module)
        if ident is not None:
            module_of.setdefault(ident, module)

    for _, source, target in resolve_links(links, index, from_key, to_key):
        source_module = module_of.get(node_id(source, id_key))
        target_module = module_of.get(node_id(target, id_key))
        if source_module is None or target_module is None or source_module is target_module:
            continue
        if target_module.name not in source_module.dependencies:
            source_module.dependencies.append(target_module.name)

    return ParsedPackage(
        name=first_text(data.get("name"), data.get("class"), default=DEFAULT_PACKAGE_NAME),
        modules=modules,
        shape=shape,
    )


def _from_go_model(data: Dict[str, Any]) -> ParsedPackage:
    nodes, index, links = go_model_parts(data)
    return _build(data, nodes, index, links, "key", ("group",), "from", "to", GO_MODEL)


def _from_flow(data: Dict[str, Any]) -> ParsedPackage:
    nodes, index, links = flow_parts(data)
    return _build(data, nodes, index, links, "id", ("parentNode", "parentId", "parent"), "source", "target", FLOW)


def parse_package_diagram(data: Any) -> ParsedPackage:
    shape = detect_shape(data)
    if shape == GO_MODEL:
        return _from_go_model(data)
    if shape == FLOW:
        return _from_flow(data)
    return ParsedPackage(
        name=first_text(as_dict(data).get("name"), as_dict(data).get("class"), default=DEFAULT_PACKAGE_NAME),
        modules=[],
        shape=shape,
    )
