from __future__ import annotations

import tomllib
from pathlib import Path

from carrierbase.ui import cli

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_project_metadata_only_references_shipped_files() -> None:
    project = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))["project"]

    readme = project.get("readme")
    if readme is not None:
        assert Path(readme).name.upper().startswith("README")
        assert (PYPROJECT.parent / readme).is_file()
    assert project["scripts"]["carrierbase"] == "carrierbase.ui.cli:main"
    assert callable(cli.main)
