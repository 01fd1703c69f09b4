"""
Shared pytest fixtures for ChainSim.

These fixtures expose the repository layout and parsed configuration
assets so tests can build on them without duplicating I/O logic.
"""

from __future__ import annotations

import pathlib
import sys
from typing import Any, Dict

import pytest
import yaml

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(scope="session")
def project_root() -> pathlib.Path:
    """Return repository root directory."""
    return REPO_ROOT


@pytest.fixture(scope="session")
def template_path(project_root: pathlib.Path) -> pathlib.Path:
    return project_root / "config" / "template.yaml"


@pytest.fixture(scope="session")
def config_template(template_path: pathlib.Path) -> Dict[str, Any]:
    """Parsed representation of the default simulation config template."""
    with template_path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)
