from __future__ import annotations

from typing import Any

from .. import config
from ..errors import UnresolvablePathError
from ..mappings import ENTITY_ID_FIELDS
from ..models import is_number

MISSING = object()


def to_keys(path: Any) -> list[str]:
    """'/a/b/c' and 'a.b.c' both become ['a', 'b', 'c']."""
    if not isinstance(path, str) or not path.strip():
        return []
    p = path.strip()
    p = p[1:] if p.startswith("/") else p.replace(".", "/")
    return [k for k in p.split("/") if k]


def _list_index(items: list, key: str, collection: str | None) -> int | None:
    # Roster lists are addressed by entity id first, then by position.
    fields = (ENTITY_ID_FIELDS[collection], "id") if collection in ENTITY_ID_FIELDS else ("id",)
    for i, el in enumerate(items):
        if isinstance(el, dict) and any(f in el and str(el[f]) == key for f in fields):
            return i
    if collection not in ENTITY_ID_FIELDS:
        for i, el in enumerate(items):
            if isinstance(el, dict) and any(k.endswith("_id") and str(v) == key for k, v in el.items()):
                return i
    if key.isdigit() and int(key) < len(items):
        return int(key)
    return None


def resolve_parent(root: dict, keys: list[str]) -> tuple[dict | list, str]:
    """Walk keys[:-1] from root, creating maps where structure is missing.

    Returns (parent, last_key). Mapping walks always succeed; a segment that
    names no element of a list raises UnresolvablePathError.
    """
    if not keys:
        raise UnresolvablePathError(keys, "empty path")
    if not isinstance(root, dict):
        raise UnresolvablePathError(keys, "root is not a mapping")

    obj: dict | list = root
    for i, k in enumerate(keys[:-1]):
        if isinstance(obj, dict):
            if not isinstance(obj.get(k), (dict, list)):
                obj[k] = {}
            obj = obj[k]
            continue
        idx = _list_index(obj, k, keys[i - 1] if i else None)
        if idx is None:
            raise UnresolvablePathError(keys, f"no element '{k}' in list")
        if not isinstance(obj[idx], (dict, list)):
            obj[idx] = {}
        obj = obj[idx]
    return obj, keys[-1]


def get_slot(parent: dict | list, key: str, collection: str | None = None) -> Any:
    if isinstance(parent, dict):
        return parent.get(key, MISSING)
    idx = _list_index(parent, key, collection)
    return MISSING if idx is None else parent[idx]


def set_slot(parent: dict | list, key: str, value: Any, collection: str | None = None) -> None:
    if isinstance(parent, dict):
        parent[key] = value
        return
    idx = _list_index(parent, key, collection)
    if idx is None:
        raise UnresolvablePathError([key], "no such list element")
    parent[idx] = value


def clamp_attribute(keys: list[str], value: Any) -> Any:
    if not is_number(value) or config.VEHICLE_SEGMENT not in keys:
        return value
    return max(config.CAR_ATTR_MIN, min(config.CAR_ATTR_MAX, value))
