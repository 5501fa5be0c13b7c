from .document import ServiceConfig
from .errors import (
    DuplicatePathError,
    EmptyNamesError,
    FactoryError,
    MethodNameError,
    ParseError,
    SchemaError,
    ServiceConfigError,
)
from .extractor import ExtractedMethodConfig, extract_method_config
from .json_tree import JsonNode, NodeType, parse_json_tree
from .loader import load_service_config
from .method_config import METHOD_CONFIG_VTABLE, MethodConfig, method_config_factory
from .paths import PathInterner, canonicalize_method_name, make_path, wildcard_path
from .table import MethodConfigTable, build_method_config_table, lookup
from .values import DEEPCOPY_VTABLE, SHARED_VTABLE, ValueVTable

__all__ = [
    "DEEPCOPY_VTABLE",
    "DuplicatePathError",
    "EmptyNamesError",
    "ExtractedMethodConfig",
    "FactoryError",
    "JsonNode",
    "METHOD_CONFIG_VTABLE",
    "MethodConfig",
    "MethodConfigTable",
    "MethodNameError",
    "NodeType",
    "ParseError",
    "PathInterner",
    "SHARED_VTABLE",
    "SchemaError",
    "ServiceConfig",
    "ServiceConfigError",
    "ValueVTable",
    "build_method_config_table",
    "canonicalize_method_name",
    "extract_method_config",
    "load_service_config",
    "lookup",
    "make_path",
    "method_config_factory",
    "parse_json_tree",
    "wildcard_path",
]
