"""The migration chain builds the same schema the models describe."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parent.parent


def _config(db_path: Path) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    return cfg


def test_upgrade_and_downgrade(tmp_path: Path) -> None:
    db_path = tmp_path / "migrated.db"
    cfg = _config(db_path)

    command.upgrade(cfg, "head")

    engine = create_engine(f"sqlite:///{db_path}")
    inspector = inspect(engine)
    assert {"users", "topics", "flashcards", "study_sessions"} <= set(inspector.get_table_names())
    flashcard_columns = {c["name"] for c in inspector.get_columns("flashcards")}
    assert {"topic", "question", "answer", "difficulty", "is_ai_generated", "study_count", "correct_count"} <= (
        flashcard_columns
    )
    uniques = inspector.get_unique_constraints("topics")
    assert any(set(u["column_names"]) == {"user_id", "name"} for u in uniques)
    engine.dispose()

    command.downgrade(cfg, "base")

    engine = create_engine(f"sqlite:///{db_path}")
    assert "flashcards" not in inspect(engine).get_table_names()
    engine.dispose()
