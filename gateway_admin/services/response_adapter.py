"""Response shaping for read operations."""
from typing import List, Optional

MAX_PAGE_SIZE = 500


def fix_count(body: dict, resource_id: Optional[str] = None) -> dict:
    """
    Correct ``count`` on a store read body.

    A single read always counts one. A collection read drops placeholder
    nodes (nodes without a value) and recounts.
    """
    if "count" not in body:
        return body

    if resource_id:
        body["count"] = 1
        return body

    node = body.get("node") or {}
    nodes = [n for n in node.get("nodes", []) if n.get("value") is not None]
    node["nodes"] = nodes
    body["count"] = len(nodes)
    return body


def _parse_labels(label: str) -> List[tuple]:
    wanted = []
    for item in label.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition(":")
        wanted.append((key, value if sep else None))
    return wanted


def _matches(node: dict, name: Optional[str], labels: List[tuple]) -> bool:
    value = node.get("value") or {}
    if name and name not in (value.get("name") or ""):
        return False
    node_labels = value.get("labels") or {}
    for key, expected in labels:
        if key not in node_labels:
            return False
        if expected is not None and node_labels[key] != expected:
            return False
    return True


def filter_response(
    body: dict,
    api_version: str = "v3",
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    name: Optional[str] = None,
    label: Optional[str] = None,
) -> dict:
    """
    Reshape a store read body for the requested admin API version.

    v2 returns the store body as-is. v3 flattens a single node into
    ``{key, value, createdIndex, modifiedIndex}`` and turns a collection into
    ``{total, list}``, with optional name/label filtering and pagination.
    Bodies without a node (e.g. not-found) pass through untouched.
    """
    if api_version != "v3" or "node" not in body:
        return body

    node = body["node"]
    if not node.get("dir"):
        return dict(node)

    nodes = node.get("nodes", [])
    labels = _parse_labels(label) if label else []
    if name or labels:
        nodes = [n for n in nodes if _matches(n, name, labels)]

    result = {"total": len(nodes)}
    if page is not None or page_size is not None:
        page = max(int(page or 1), 1)
        page_size = min(max(int(page_size or 10), 1), MAX_PAGE_SIZE)
        start = (page - 1) * page_size
        nodes = nodes[start:start + page_size]
    result["list"] = nodes
    return result
