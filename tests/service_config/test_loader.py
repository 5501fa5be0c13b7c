from __future__ import annotations

from pathlib import Path

import pytest

from service_config.errors import ParseError, ServiceConfigError
from service_config.loader import load_service_config
from service_config.table import build_method_config_table
from service_config.values import SHARED_VTABLE


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_load_json_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "service_config.json",
        '{"loadBalancingPolicy":"round_robin","methodConfig":[{"name":[{"service":"Foo"}]}]}',
    )
    config = load_service_config(path)
    assert config.get_lb_policy_name() == "round_robin"
    table = build_method_config_table(config, lambda node: "v", SHARED_VTABLE)
    assert table.lookup("/Foo/Bar") == "v"


@pytest.mark.parametrize("name", ["service_config.yaml", "service_config.YML"])
def test_load_yaml_file(tmp_path: Path, name: str) -> None:
    path = _write(
        tmp_path,
        name,
        "loadBalancingPolicy: pick_first\n"
        "methodConfig:\n"
        "  - name:\n"
        "      - service: Foo\n"
        "        method: Bar\n"
        "    timeout: 2s\n",
    )
    config = load_service_config(path)
    assert config.get_lb_policy_name() == "pick_first"
    table = build_method_config_table(config, lambda node: node.to_python()["timeout"], SHARED_VTABLE)
    assert table.lookup("/Foo/Bar") == "2s"
    assert table.lookup("/Foo/Baz") is None


def test_load_rejects_unknown_suffix(tmp_path: Path) -> None:
    path = _write(tmp_path, "service_config.toml", "")
    with pytest.raises(ServiceConfigError):
        load_service_config(path)


def test_load_rejects_malformed_file(tmp_path: Path) -> None:
    path = _write(tmp_path, "service_config.json", "{")
    with pytest.raises(ParseError):
        load_service_config(path)
