from __future__ import annotations

import shutil
from pathlib import Path

import pytest

RESOURCES = Path(__file__).resolve().parent / "resources"


@pytest.fixture()
def mirror(tmp_path: Path) -> Path:
    target = tmp_path / "mirror"
    target.mkdir()
    for sample_file in RESOURCES.glob("*.html"):
        shutil.copy(sample_file, target / sample_file.name)
    return target


def write_html(path: Path, *metas: tuple[str, str]) -> Path:
    tags = "\n".join(
        f'<meta name="{name}" content="{content}" />' for name, content in metas
    )
    path.write_text(
        f"<html><head>\n{tags}\n<title>{path.stem}</title></head>"
        "<body><p>body</p></body></html>",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def html_writer():
    return write_html
