"""Pytest configuration and shared fixtures for PropConf tests."""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator

import pytest
import yaml
from propconf import BuildOptions, PropConfParser


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def parser() -> PropConfParser:
    """Create a basic PropConfParser instance."""
    return PropConfParser()


@pytest.fixture
def lenient_options() -> BuildOptions:
    """Build options that keep unresolvable placeholders as text."""
    return BuildOptions(ignore_unresolvable_placeholders=True)


def write_yaml_file(file_path: Path, data: Dict[str, Any]) -> None:
    """Write data to YAML file.

    Args:
        file_path: Path to write file
        data: Data to write
    """
    with open(file_path, "w") as f:
        yaml.dump(data, f, default_flow_style=False)


def write_properties_file(file_path: Path, content: str) -> None:
    """Write raw properties-file content.

    Args:
        file_path: Path to write file
        content: File content
    """
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(content)


def set_env_vars(**env_vars: str) -> None:
    """Set environment variables.

    Args:
        **env_vars: Environment variables to set
    """
    for key, value in env_vars.items():
        os.environ[key] = value


def cleanup_env_vars(*var_names: str) -> None:
    """Clean up environment variables.

    Args:
        *var_names: Variable names to remove
    """
    for var_name in var_names:
        os.environ.pop(var_name, None)
