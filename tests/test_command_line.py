"""Test cases for the PropConf command line."""

from pathlib import Path

import pytest
import yaml

from propconf import PropConfParser, UnresolvablePlaceholderError
from propconf.parser import main
from tests.conftest import write_properties_file, write_yaml_file


def test_files_and_overrides(parser: PropConfParser, temp_dir: Path):
    """Test sequential files and overrides.

    Given a base file, an override file and `key=value` overrides
    When parsing them in one command line
    Then later files win over earlier ones and overrides win over files
    """
    base_path = temp_dir / "base.properties"
    write_properties_file(base_path, "server.port = 8080\nserver.timeout = 30\nserver.host = localhost\n")
    override_path = temp_dir / "override.yaml"
    write_yaml_file(override_path, {"server": {"timeout": 10, "url": "${server.host}:${server.port}"}})

    config = parser.parse_args([str(base_path), "server.port=9090", str(override_path)])

    assert config["server.port"] == "9090"  # From command line override
    assert config["server.timeout"] == "10"  # From override.yaml
    assert config["server.url"] == "localhost:9090"


def test_resolution_flags(parser: PropConfParser):
    """Test flags mapped onto the build options."""
    config = parser.parse_args(
        ["--delimiters", "((", "))", "--separator", "|", "--case-insensitive", "Name=((missing|x))-((NAME2))", "name2=y"]
    )
    assert config["name"] == "x-y"

    config = parser.parse_args(["--ignore-unresolvable", "a=${b}"])
    assert config["a"] == "${b}"

    with pytest.raises(UnresolvablePlaceholderError):
        parser.parse_args(["a=${b}"])


def test_optional_files(parser: PropConfParser, temp_dir: Path):
    """Test skipping missing files."""
    config = parser.parse_args(["--optional", str(temp_dir / "missing.yaml"), "a=1"])

    assert config.to_dict() == {"a": "1"}


def test_main_prints_yaml(temp_dir: Path, capsys):
    """Test the console entry point output.

    Given a properties file
    When running the command
    Then the resolved configuration is printed as YAML and the exit status is 0
    """
    path = temp_dir / "app.properties"
    write_properties_file(path, "name = demo\ngreeting = hello ${name}\n")

    assert main([str(path)]) == 0

    printed = yaml.safe_load(capsys.readouterr().out)
    assert printed == {"name": "demo", "greeting": "hello demo"}


def test_main_prints_properties(capsys):
    """Test the properties output format."""
    assert main(["--format", "properties", "a=1", "b=${a}2"]) == 0

    assert capsys.readouterr().out.splitlines() == ["a=1", "b=12"]


def test_main_reports_errors(capsys):
    """Test that build errors go to stderr with a failing exit status."""
    assert main(["a=${missing}", "b=${also.missing}"]) == 1

    err = capsys.readouterr().err
    assert "Key: a" in err
    assert "Key: b" in err


def test_file_name_containing_equals_sign(parser: PropConfParser, temp_dir: Path):
    """Test that a configuration file path is not mistaken for an override.

    Given a properties file whose name contains `=`
    When passing its path with an override
    Then the file is read and the override still applies
    """
    path = temp_dir / "a=b.properties"
    write_properties_file(path, "name = from-file\nport = 1\n")

    config = parser.parse_args([str(path), "port=2"])

    assert config.to_dict() == {"name": "from-file", "port": "2"}


def test_main_reports_invalid_options(capsys):
    """Test that invalid build options end with a failing exit status."""
    assert main(["--delimiters", "", "}", "a=1"]) == 1

    assert "start_delimiter must not be empty" in capsys.readouterr().err
