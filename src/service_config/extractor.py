from __future__ import annotations

from dataclasses import dataclass
from typing import Generic

from service_config.errors import DuplicatePathError, EmptyNamesError, FactoryError, SchemaError
from service_config.json_tree import JsonNode
from service_config.paths import canonicalize_method_name
from service_config.values import V, ValueFactory, ValueVTable


@dataclass(frozen=True, slots=True)
class ExtractedMethodConfig(Generic[V]):
    # One methodConfig entry: its paths in document order and the single value built for them.
    paths: tuple[str, ...]
    value: V


def count_method_names(node: JsonNode) -> int:
    # Number of name objects in one entry; malformed entries count as zero and fail later.
    if not node.is_object:
        return 0
    return sum(len(child.children) for child in node.fields("name") if child.is_array)


def extract_method_config(
    node: JsonNode,
    factory: ValueFactory,
    vtable: ValueVTable[V],
    *,
    where: str = "methodConfig[0]",
) -> ExtractedMethodConfig[V]:
    # Build the entry's value, then resolve its names; the value is destroyed on any failure.
    if not node.is_object:
        raise SchemaError(f"{where} must be an object")
    value = _build_value(node, factory, where)
    try:
        paths = _collect_paths(node, where)
    except Exception:
        vtable.destroy(value)
        raise
    return ExtractedMethodConfig(paths=paths, value=value)


def _build_value(node: JsonNode, factory: ValueFactory, where: str) -> V:
    try:
        value = factory(node)
    except FactoryError:
        raise
    except ValueError as exc:
        raise FactoryError(f"{where} rejected by value factory: {exc}") from exc
    if value is None:
        raise FactoryError(f"{where} rejected by value factory")
    return value


def _collect_paths(node: JsonNode, where: str) -> tuple[str, ...]:
    names = node.fields("name")
    if len(names) > 1:
        raise SchemaError(f"{where}.name is duplicated")
    paths: list[str] = []
    for name_list in names:
        if not name_list.is_array:
            raise SchemaError(f"{where}.name must be an array")
        for index, name in enumerate(name_list):
            path = canonicalize_method_name(name, where=f"{where}.name[{index}]")
            if path in paths:
                raise DuplicatePathError(f"{where}.name[{index}] repeats path {path!r}")
            paths.append(path)
    if not paths:
        raise EmptyNamesError(f"{where} must name at least one method")
    return tuple(paths)
