from __future__ import annotations


class ServiceConfigError(ValueError):
    # Raised for an unusable service config (fail fast, never a partial result).
    kind = "service_config"


class ParseError(ServiceConfigError):
    # Config text is not well-formed JSON/YAML.
    kind = "parse"


class SchemaError(ServiceConfigError):
    # Wrong top-level shape, duplicate top-level key or wrong node type for a known key.
    kind = "schema"


class DuplicatePathError(SchemaError):
    # Two name objects resolve to the same path; no silent winner is picked.
    kind = "duplicate_path"


class MethodNameError(ServiceConfigError):
    # Name object is missing service, repeats a field or carries a non-string value.
    kind = "name"


class EmptyNamesError(ServiceConfigError):
    # A methodConfig entry resolved to zero paths.
    kind = "empty_names"


class FactoryError(ServiceConfigError):
    # Caller-supplied value factory rejected a methodConfig entry.
    kind = "factory"
