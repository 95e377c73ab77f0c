"""Utility functions for diagram-to-code generation."""
import re
from typing import Any, Dict, List, Optional


def to_kebab_case(name: str) -> str:
    """Convert PascalCase or camelCase to kebab-case."""
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1-\2', name)
    s2 = re.sub('([a-z0-9])([A-Z])', r'\1-\2', s1)
    s3 = re.sub(r'[\s_]+', '-', s2)
    return s3.lower()


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def as_text(value: Any) -> str:
    """Return value as a stripped string, or '' for anything that is not a scalar."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def node_label(node: Dict[str, Any], default: str = "") -> str:
    """Label of a diagram node across schema versions (data.label, label, name, text)."""
    for candidate in (as_dict(node.get("data")).get("label"), node.get("label"), node.get("name"), node.get("text")):
        text = as_text(candidate)
        if text:
            return text
    return default


def node_id(node: Dict[str, Any], key: str) -> Optional[str]:
    """Identifier of a node as a string so int and str keys cross-reference."""
    value = node.get(key)
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    return str(value)


def index_nodes(nodes: List[Any], key: str) -> Dict[str, Dict[str, Any]]:
    """Map node identifier -> node, skipping entries that are not objects or lack an id."""
    index = {}
    for node in nodes:
        if not isinstance(node, dict):
            continue
        ident = node_id(node, key)
        if ident is not None:
            index[ident] = node
    return index


def first_text(*values: Any, default: str = "") -> str:
    for value in values:
        text = as_text(value)
        if text:
            return text
    return default
