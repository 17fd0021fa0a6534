"""
Cache Serialization — Tagged JSON for cached provider results.

Payloads come in four shapes:

    {"shape": "single", "type": "Commit", "data": {...}}
    {"shape": "list",   "items": [{"type": "Comment", "data": {...}}, ...]}
    {"shape": "map",    "items": {"alice": {"type": "OrgMember", "data": {...}}}}
    {"shape": "value",  "data": <plain JSON>}

``type`` is looked up in a TypeRegistry on the way back. A tag the registry
does not know is an error, never a guess. Mapping keys must be strings so
that a cold read returns the same keys as the in-memory entry.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel

from ..errors import CacheError, CacheRestorationError
from ..models.provider import Comment, Commit, OrgMember

Restore = Callable[[Dict[str, Any]], Any]
Dump = Callable[[Any], Dict[str, Any]]

SHAPE_SINGLE = "single"
SHAPE_LIST = "list"
SHAPE_MAP = "map"
SHAPE_VALUE = "value"


class TypeRegistry:
    """Maps type tags to the functions that dump and rebuild them."""

    def __init__(self):
        self._by_tag: Dict[str, Tuple[type, Restore, Dump]] = {}

    def register(self, tag: str, cls: type, restore: Restore, dump: Dump) -> None:
        self._by_tag[tag] = (cls, restore, dump)

    def register_model(self, model_cls: type) -> None:
        """Register a pydantic model under its class name."""
        self.register(
            model_cls.__name__,
            model_cls,
            model_cls.model_validate,
            lambda obj: obj.model_dump(mode="json"),
        )

    def tag_for(self, obj: Any) -> Optional[str]:
        for tag, (cls, _, _) in self._by_tag.items():
            if type(obj) is cls:
                return tag
        return None

    def dump(self, obj: Any) -> Dict[str, Any]:
        tag = self.tag_for(obj)
        if tag is None:
            raise CacheError(f"No cache type registered for {type(obj).__name__}")
        _, _, dump = self._by_tag[tag]
        return {"type": tag, "data": dump(obj)}

    def restore(self, tagged: Any) -> Any:
        if not isinstance(tagged, dict) or "type" not in tagged:
            raise CacheRestorationError(f"Untagged cache object: {tagged!r:.80}")
        tag = tagged["type"]
        if tag not in self._by_tag:
            raise CacheRestorationError(f"Unknown cache type tag: {tag!r}")
        _, restore, _ = self._by_tag[tag]
        try:
            return restore(tagged.get("data") or {})
        except (TypeError, ValueError) as e:
            raise CacheRestorationError(f"Cannot restore {tag}: {e}") from e


def default_registry() -> TypeRegistry:
    """Registry with every provider model."""
    registry = TypeRegistry()
    for model_cls in (Commit, Comment, OrgMember):
        registry.register_model(model_cls)
    return registry


def _is_object(value: Any, registry: TypeRegistry) -> bool:
    return registry.tag_for(value) is not None


def _check_keys(value: Any) -> None:
    """JSON turns mapping keys into strings; refuse anything else."""
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise CacheError(f"Cache mapping keys must be strings, got {type(key).__name__}")
            _check_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_keys(item)


def dump_payload(payload: Any, registry: TypeRegistry) -> Dict[str, Any]:
    """Serialize a result into its tagged form."""
    if _is_object(payload, registry):
        return {"shape": SHAPE_SINGLE, **registry.dump(payload)}

    if isinstance(payload, (list, tuple)) and payload and all(
        _is_object(item, registry) for item in payload
    ):
        return {"shape": SHAPE_LIST, "items": [registry.dump(item) for item in payload]}

    if isinstance(payload, dict) and payload and all(
        _is_object(item, registry) for item in payload.values()
    ):
        _check_keys({k: None for k in payload})
        return {
            "shape": SHAPE_MAP,
            "items": {k: registry.dump(v) for k, v in payload.items()},
        }

    if isinstance(payload, BaseModel):
        raise CacheError(f"No cache type registered for {type(payload).__name__}")

    _check_keys(payload)
    try:
        json.dumps(payload)
    except (TypeError, ValueError) as e:
        raise CacheError(f"Payload is not cacheable: {e}") from e
    return {"shape": SHAPE_VALUE, "data": payload}


def restore_objects(serialized: Any, registry: TypeRegistry) -> Any:
    """
    Rebuild a payload from its tagged form.

    Raises:
        CacheRestorationError: If the shape or a type tag is unknown
    """
    if not isinstance(serialized, dict):
        raise CacheRestorationError(f"Malformed cache payload: {serialized!r:.80}")

    shape = serialized.get("shape")
    if shape == SHAPE_SINGLE:
        return registry.restore(serialized)
    if shape == SHAPE_LIST:
        return [registry.restore(item) for item in serialized.get("items", [])]
    if shape == SHAPE_MAP:
        return {k: registry.restore(v) for k, v in serialized.get("items", {}).items()}
    if shape == SHAPE_VALUE:
        return serialized.get("data")
    raise CacheRestorationError(f"Unknown cache payload shape: {shape!r}")
