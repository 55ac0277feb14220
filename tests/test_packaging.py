from __future__ import annotations

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _project_table() -> dict:
    with (PROJECT_ROOT / "pyproject.toml").open("rb") as handle:
        return tomllib.load(handle)["project"]


def test_readme_if_declared_exists_and_is_not_a_requirements_doc() -> None:
    readme = _project_table().get("readme")

    if readme is not None:
        assert (PROJECT_ROOT / readme).is_file()
        assert readme not in {"SPEC_FULL.md", "spec.md", "DESIGN.md"}


def test_console_script_points_at_cli() -> None:
    assert _project_table()["scripts"]["estat-pull"] == "estat.cli:main"
