from __future__ import annotations

from datetime import timedelta

import pytest

from service_config.document import ServiceConfig
from service_config.errors import FactoryError
from service_config.json_tree import parse_json_tree
from service_config.method_config import METHOD_CONFIG_VTABLE, MethodConfig, method_config_factory
from service_config.table import build_method_config_table


def test_factory_reads_documented_fields() -> None:
    node = parse_json_tree(
        '{"name":[{"service":"Foo"}],"waitForReady":true,"timeout":"1.5s",'
        '"maxRequestMessageBytes":"1024","maxResponseMessageBytes":2048}'
    )
    value = method_config_factory(node)
    assert value.wait_for_ready is True
    assert value.timeout == timedelta(seconds=1, milliseconds=500)
    assert value.max_request_message_bytes == 1024
    assert value.max_response_message_bytes == 2048


def test_factory_defaults_absent_fields() -> None:
    value = method_config_factory(parse_json_tree('{"name":[{"service":"Foo"}]}'))
    assert value == MethodConfig()
    assert value.timeout is None


def test_extra_fields_are_kept_but_name_is_not() -> None:
    value = method_config_factory(parse_json_tree('{"name":[{"service":"Foo"}],"retryPolicy":{"maxAttempts":3}}'))
    assert value.model_extra == {"retryPolicy": {"maxAttempts": 3}}


@pytest.mark.parametrize(
    ("timeout", "expected"),
    [
        ("0s", timedelta(0)),
        ("30s", timedelta(seconds=30)),
        ("0.000340012s", timedelta(microseconds=340)),
        ("1.000000001s", timedelta(seconds=1)),
    ],
)
def test_duration_parsing(timeout: str, expected: timedelta) -> None:
    assert MethodConfig(timeout=timeout).timeout == expected


@pytest.mark.parametrize(
    "fields",
    [
        '"timeout":"1"',
        '"timeout":"-1s"',
        '"timeout":"1.0000000001s"',
        '"timeout":1',
        '"waitForReady":"yes"',
        '"maxRequestMessageBytes":"-5"',
        '"maxRequestMessageBytes":"12abc"',
        '"maxResponseMessageBytes":true',
        '"maxResponseMessageBytes":1.5',
        '"maxResponseMessageBytes":"9223372036854775808"',
    ],
)
def test_table_build_rejects_invalid_policy_fields(fields: str) -> None:
    config = ServiceConfig.create('{"methodConfig":[{"name":[{"service":"Foo"}],' + fields + "}]}")
    with pytest.raises(FactoryError):
        build_method_config_table(config, method_config_factory, METHOD_CONFIG_VTABLE)


def test_table_with_builtin_values() -> None:
    config = ServiceConfig.create(
        '{"loadBalancingPolicy":"round_robin","methodConfig":['
        '{"name":[{"service":"Foo"}],"timeout":"5s"},'
        '{"name":[{"service":"Foo","method":"Stream"}],"waitForReady":true}]}'
    )
    table = build_method_config_table(config, method_config_factory, METHOD_CONFIG_VTABLE)
    unary = table.lookup("/Foo/Unary")
    stream = table.lookup("/Foo/Stream")
    assert unary is not None and unary.timeout == timedelta(seconds=5)
    assert stream is not None and stream.wait_for_ready is True and stream.timeout is None


def test_values_are_immutable() -> None:
    value = MethodConfig(timeout="1s")
    with pytest.raises(ValueError):
        value.timeout = None  # type: ignore[misc]
