"""Initial migration kept in step with the ORM models."""

import importlib.util
from pathlib import Path

from medtracker.db.base import Base
from medtracker.db import models  # noqa: F401

VERSIONS = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def _load_revision(filename: str):
    spec = importlib.util.spec_from_file_location(filename.removesuffix(".py"), VERSIONS / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_single_head_revision():
    revision = _load_revision("001_initial_schema.py")

    assert revision.revision == "001_initial"
    assert revision.down_revision is None
    assert sorted(p.name for p in VERSIONS.glob("*.py")) == ["001_initial_schema.py"]


def test_every_updated_at_table_has_trigger():
    revision = _load_revision("001_initial_schema.py")

    with_updated_at = {
        name for name, table in Base.metadata.tables.items() if "updated_at" in table.columns
    }
    assert set(revision._UPDATED_AT_TABLES) == with_updated_at
