"""
The Alembic revision chain builds the same tables the models declare
"""
import pathlib

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from evcharge.db import Base
from evcharge import models  # noqa: F401

ROOT = pathlib.Path(__file__).resolve().parents[2]


def _config(url: str) -> Config:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    cfg.attributes["url_overridden"] = True
    return cfg


def test_upgrade_creates_model_tables_and_downgrade_removes_them(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = _config(url)

    command.upgrade(cfg, "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert set(Base.metadata.tables) <= tables

        for table in Base.metadata.sorted_tables:
            migrated = {col["name"] for col in inspector.get_columns(table.name)}
            assert migrated == set(table.columns.keys()), table.name

        command.downgrade(cfg, "base")
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
