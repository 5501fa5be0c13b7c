from __future__ import annotations

import threading
import weakref

from service_config.errors import MethodNameError
from service_config.json_tree import JsonNode

WILDCARD = "*"

_NAME_FIELDS = ("service", "method")


class InternedPath(str):
    # Shared path handle; the arena drops it once no table references it.
    pass


class PathInterner:
    # Arena of canonical path strings; equal content always yields the same live instance.
    def __init__(self) -> None:
        self._paths: weakref.WeakValueDictionary[str, InternedPath] = weakref.WeakValueDictionary()
        self._lock = threading.Lock()

    def intern(self, path: str) -> InternedPath:
        existing = self._paths.get(path)
        if existing is not None:
            return existing
        with self._lock:
            existing = self._paths.get(path)
            if existing is None:
                existing = InternedPath(path)
                self._paths[path] = existing
            return existing

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)


DEFAULT_INTERNER = PathInterner()


def make_path(service: str, method: str | None = None) -> str:
    # Canonical "/service/method", or "/service/*" for a service-wide entry.
    return f"/{service}/{WILDCARD if method is None else method}"


def canonicalize_method_name(node: JsonNode, *, where: str = "name") -> str:
    # Validate one {"service", "method"?} object and turn it into a path.
    if not node.is_object:
        raise MethodNameError(f"{where} must be an object")
    found: dict[str, str] = {}
    for child in node:
        if child.key not in _NAME_FIELDS:
            raise MethodNameError(f"{where} has unsupported key {child.key!r}; allowed keys: {list(_NAME_FIELDS)}")
        if child.key in found:
            raise MethodNameError(f"{where}.{child.key} is duplicated")
        if not child.is_string:
            raise MethodNameError(f"{where}.{child.key} must be a string")
        found[child.key] = child.value  # type: ignore[assignment]
    service = found.get("service")
    if service is None:
        raise MethodNameError(f"{where}.service is required")
    if not service:
        raise MethodNameError(f"{where}.service must be a non-empty string")
    return make_path(service, found.get("method"))


def wildcard_path(path: str) -> str | None:
    # "/svc/m" -> "/svc/*"; None when the path has no separator to split on.
    sep = path.rfind("/")
    if sep < 0:
        return None
    return path[: sep + 1] + WILDCARD
