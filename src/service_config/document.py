from __future__ import annotations

from dataclasses import dataclass, field

from service_config.errors import ParseError, SchemaError, ServiceConfigError
from service_config.json_tree import JsonNode, NodeType, compose_yaml_tree, parse_json_tree
from service_config.observability import LogMessage, LogSink, StdlibLogSink

LB_POLICY_KEY = "loadBalancingPolicy"
METHOD_CONFIG_KEY = "methodConfig"

# Known top-level keys and the node type each must carry; other keys are left to other consumers.
_TOP_LEVEL_TYPES = {
    LB_POLICY_KEY: NodeType.STRING,
    METHOD_CONFIG_KEY: NodeType.ARRAY,
}


@dataclass(slots=True)
class ServiceConfig:
    # Owns the config text and its parsed tree; both are released together by destroy().
    _text: str | None
    _tree: JsonNode | None
    log_sink: LogSink = field(default_factory=StdlibLogSink)

    @classmethod
    def create(cls, json_text: str, *, log_sink: LogSink | None = None) -> ServiceConfig:
        return cls._parse(json_text, parse_json_tree, "json", log_sink)

    @classmethod
    def from_yaml(cls, yaml_text: str, *, log_sink: LogSink | None = None) -> ServiceConfig:
        return cls._parse(yaml_text, compose_yaml_tree, "yaml", log_sink)

    @classmethod
    def _parse(cls, text, parse, fmt: str, log_sink: LogSink | None) -> ServiceConfig:
        sink = log_sink if log_sink is not None else StdlibLogSink()
        if not isinstance(text, str):
            raise ParseError(f"Service config must be text, got {type(text).__name__}")
        try:
            tree = parse(text)
        except ParseError as exc:
            sink.emit(
                LogMessage(
                    level="INFO",
                    message="service_config.parse_failed",
                    fields={"format": fmt, "error": str(exc)},
                )
            )
            raise
        # str is immutable, so holding the reference is an independent copy of the caller's buffer.
        return cls(_text=text, _tree=tree, log_sink=sink)

    @property
    def text(self) -> str:
        if self._text is None:
            raise ServiceConfigError("ServiceConfig has been destroyed")
        return self._text

    @property
    def tree(self) -> JsonNode:
        if self._tree is None:
            raise ServiceConfigError("ServiceConfig has been destroyed")
        return self._tree

    @property
    def destroyed(self) -> bool:
        return self._tree is None

    def destroy(self) -> None:
        self._tree = None
        self._text = None

    close = destroy

    def __enter__(self) -> ServiceConfig:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()

    def get_lb_policy_name(self) -> str | None:
        # Only the root shape and loadBalancingPolicy itself matter here; irregularities yield None.
        try:
            fields = top_level_fields(self.tree, keys=(LB_POLICY_KEY,))
        except SchemaError:
            return None
        policy = fields.get(LB_POLICY_KEY)
        return None if policy is None else policy.value  # type: ignore[return-value]

    @property
    def lb_policy_name(self) -> str | None:
        return self.get_lb_policy_name()


def top_level_fields(
    tree: JsonNode,
    keys: tuple[str, ...] = (LB_POLICY_KEY, METHOD_CONFIG_KEY),
) -> dict[str, JsonNode]:
    # Validate the root object and return the requested known keys (each present at most once, well-typed).
    if not tree.is_object or tree.key is not None:
        raise SchemaError("Service config root must be a JSON object")
    known: dict[str, JsonNode] = {}
    for child in tree:
        if child.key is None:
            raise SchemaError("Service config root contains an unkeyed node")
        if child.key not in keys:
            continue
        expected = _TOP_LEVEL_TYPES[child.key]
        if child.key in known:
            raise SchemaError(f"{child.key} is duplicated")
        if child.type is not expected:
            raise SchemaError(f"{child.key} must be of type {expected.value}, got {child.type.value}")
        known[child.key] = child
    return known
