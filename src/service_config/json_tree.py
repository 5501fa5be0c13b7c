from __future__ import annotations

import json
import math
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

import yaml

from service_config.errors import ParseError


class NodeType(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"


@dataclass(frozen=True, slots=True)
class JsonNode:
    # Read-only typed node; object children keep document order and duplicate keys.
    type: NodeType
    key: str | None = None
    value: object = None
    children: tuple[JsonNode, ...] = ()

    @property
    def is_object(self) -> bool:
        return self.type is NodeType.OBJECT

    @property
    def is_array(self) -> bool:
        return self.type is NodeType.ARRAY

    @property
    def is_string(self) -> bool:
        return self.type is NodeType.STRING

    def __iter__(self) -> Iterator[JsonNode]:
        return iter(self.children)

    def fields(self, key: str) -> list[JsonNode]:
        # All children carrying `key`; more than one means the key is duplicated.
        return [child for child in self.children if child.key == key]

    def to_python(self) -> object:
        # Plain dict/list view for factories; on duplicate keys the last one wins.
        if self.type is NodeType.OBJECT:
            return {child.key: child.to_python() for child in self.children}
        if self.type is NodeType.ARRAY:
            return [child.to_python() for child in self.children]
        return self.value


class _Pairs(list):
    # Marks an object decoded by json.loads so it is not mistaken for an array.
    pass


def parse_json_tree(text: str) -> JsonNode:
    # Tokenize JSON text into a JsonNode tree (root carries no key).
    try:
        raw = json.loads(text, object_pairs_hook=_Pairs, parse_constant=_reject_constant)
        return _from_json(raw, None)
    except RecursionError as exc:
        raise ParseError("Invalid JSON: nesting is too deep") from exc
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc


def compose_yaml_tree(text: str) -> JsonNode:
    # Compose (not construct) YAML so mapping keys keep order and duplicates.
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
        if root is None:
            raise ParseError("Invalid YAML: empty document")
        return _from_yaml(root, None)
    except RecursionError as exc:
        raise ParseError("Invalid YAML: nesting is too deep") from exc
    except yaml.YAMLError as exc:
        raise ParseError(f"Invalid YAML: {exc}") from exc


def _reject_constant(name: str) -> object:
    raise ValueError(f"{name} is not valid JSON")


def _from_json(raw: object, key: str | None) -> JsonNode:
    if isinstance(raw, _Pairs):
        children = tuple(_from_json(value, child_key) for child_key, value in raw)
        return JsonNode(NodeType.OBJECT, key, None, children)
    if isinstance(raw, list):
        return JsonNode(NodeType.ARRAY, key, None, tuple(_from_json(item, None) for item in raw))
    if isinstance(raw, str):
        return JsonNode(NodeType.STRING, key, raw)
    if isinstance(raw, bool):
        return JsonNode(NodeType.BOOL, key, raw)
    if isinstance(raw, (int, float)):
        return JsonNode(NodeType.NUMBER, key, raw)
    return JsonNode(NodeType.NULL, key, None)


_YAML_SCALARS = {
    "tag:yaml.org,2002:str": NodeType.STRING,
    "tag:yaml.org,2002:bool": NodeType.BOOL,
    "tag:yaml.org,2002:int": NodeType.NUMBER,
    "tag:yaml.org,2002:float": NodeType.NUMBER,
    "tag:yaml.org,2002:null": NodeType.NULL,
}


def _from_yaml(node: yaml.Node, key: str | None) -> JsonNode:
    if isinstance(node, yaml.MappingNode):
        children: list[JsonNode] = []
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode) or key_node.tag != "tag:yaml.org,2002:str":
                raise ParseError(f"YAML mapping keys must be strings (line {key_node.start_mark.line + 1})")
            children.append(_from_yaml(value_node, key_node.value))
        return JsonNode(NodeType.OBJECT, key, None, tuple(children))
    if isinstance(node, yaml.SequenceNode):
        return JsonNode(NodeType.ARRAY, key, None, tuple(_from_yaml(item, None) for item in node.value))
    node_type = _YAML_SCALARS.get(node.tag)
    if node_type is None:
        raise ParseError(f"Unsupported YAML tag {node.tag!r} (line {node.start_mark.line + 1})")
    # Same scalar typing as yaml.safe_load.
    value = yaml.SafeLoader.yaml_constructors[node.tag](_SCALAR_LOADER, node)
    if isinstance(value, float) and not math.isfinite(value):
        raise ParseError(f"Non-finite number is not valid (line {node.start_mark.line + 1})")
    return JsonNode(node_type, key, value)


_SCALAR_LOADER = yaml.SafeLoader("")
