"""Input-shape variants shared by the diagram parsers.

Diagram JSON has been stored in two layouts over time:

* ``go-model``: ``{"nodeDataArray": [{"key": ...}], "linkDataArray": [{"from": ..., "to": ...}]}``
* ``flow``: ``{"nodes": [{"id": ..., "data": {"label": ...}}], "connections": [{"source": ..., "target": ...}]}``
  (``edges`` is accepted as an alias of ``connections``)

Each parser detects the variant once and hands the payload to a dedicated adapter.
"""
from typing import Any, Dict, Iterator, List, Tuple
from app.generators.code_gen.utils import as_dict, as_list, index_nodes, node_id

GO_MODEL = "go-model"
FLOW = "flow"
EMPTY = "empty"


def detect_shape(data: Any) -> str:
    payload = as_dict(data)
    if "nodeDataArray" in payload or "linkDataArray" in payload:
        return GO_MODEL
    if "nodes" in payload or "connections" in payload or "edges" in payload:
        return FLOW
    return EMPTY


def go_model_parts(data: Dict[str, Any]) -> Tuple[List[Dict[str, Any]], Dict[str, Dict[str, Any]], List[Dict[str, Any]]]:
    """(nodes, nodes-by-key, links) of a go-model payload."""
    nodes = [n for n in as_list(data.get("nodeDataArray")) if isinstance(n, dict)]
    links = [l for l in as_list(data.get("linkDataArray")) if isinstance(l, dict)]
    return nodes, index_nodes(nodes, "key"), links


def flow_parts(data: Dict[str, Any]) -> Tuple[List[Dict[str, Any]], Dict[str, Dict[str, Any]], List[Dict[str, Any]]]:
    """(nodes, nodes-by-id, links) of a flow payload."""
    nodes = [n for n in as_list(data.get("nodes")) if isinstance(n, dict)]
    raw_links = data.get("connections") if "connections" in data else data.get("edges")
    links = [l for l in as_list(raw_links) if isinstance(l, dict)]
    return nodes, index_nodes(nodes, "id"), links


def resolve_links(
    links: List[Dict[str, Any]],
    index: Dict[str, Dict[str, Any]],
    from_key: str,
    to_key: str,
) -> Iterator[Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]]:
    """Yield (link, source_node, target_node); links with a dangling endpoint are dropped."""
    for link in links:
        source_id = node_id(link, from_key)
        target_id = node_id(link, to_key)
        if source_id is None or target_id is None:
            continue
        source = index.get(source_id)
        target = index.get(target_id)
        if source is None or target is None:
            continue
        yield link, source, target


def link_data(link: Dict[str, Any]) -> Dict[str, Any]:
    """Flow links keep their extra attributes either flat or under ``data``."""
    merged = dict(as_dict(link.get("data")))
    for key, value in link.items():
        if key != "data":
            merged.setdefault(key, value)
    return merged
