"""Tests for the peerbind command line interface."""

import json
from ipaddress import ip_address
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from peerbind import __version__
from peerbind.__main__ import cli
from peerbind.discovery.network import HostInterface, InterfaceAddress
from peerbind.exceptions import EnumerationError


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    return CliRunner()

@pytest.fixture
def host_interfaces():
    return [
        HostInterface(name='eth0', addresses=[
            InterfaceAddress(address=ip_address('10.0.0.5'), broadcast=ip_address('10.0.0.255')),
            InterfaceAddress(address=ip_address('fe80::1')),
        ]),
        HostInterface(name='lo', addresses=[InterfaceAddress(address=ip_address('127.0.0.1'))]),
    ]


def test_version(runner):
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert f"peerbind v{__version__}" in result.output

def test_discover(runner, host_interfaces):
    with patch('peerbind.bindings.get_host_interfaces', return_value=host_interfaces):
        result = runner.invoke(cli, ["--log-level", "WARNING", "discover", "-i", "eth0", "-p", "ipv4"])

    assert result.exit_code == 0, result.output
    assert "Status: +eth0(10.0.0.5), -lo" in result.output
    assert "10.0.0.255" in result.output
    assert "fe80::1" not in result.output

def test_discover_from_config_file(runner, tmp_path, host_interfaces):
    config_file = tmp_path / "peerbind.json"
    config_file.write_text(json.dumps({
        "bindings": {
            "interfaces": ["lo"],
            "outside_address": "203.0.113.7",
            "outside_tcp_port": 4000,
            "outside_udp_port": 4001,
        },
    }))
    with patch('peerbind.bindings.get_host_interfaces', return_value=host_interfaces):
        result = runner.invoke(cli, ["-c", str(config_file), "-l", "WARNING", "discover"])

    assert result.exit_code == 0, result.output
    assert "Status: -eth0, +lo(127.0.0.1)" in result.output
    assert "203.0.113.7 tcp=4000 udp=4001" in result.output

def test_discover_enumeration_failure(runner):
    with patch('peerbind.bindings.get_host_interfaces', side_effect=EnumerationError("stack down")):
        result = runner.invoke(cli, ["-l", "CRITICAL", "discover"])
    assert result.exit_code == 1
    assert "Could not enumerate network interfaces" in result.output

def test_config_show(runner):
    result = runner.invoke(cli, ["config-show"])
    assert result.exit_code == 0
    shown = json.loads(result.output)
    assert shown["bindings"]["listen_broadcast"] is True
    assert shown["logging"]["level"] == "INFO"
