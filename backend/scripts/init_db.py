"""Initialize the database - creates all tables and, on PostgreSQL, the reference cleanup function."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text

from docportal.database import engine, Base
import docportal.models  # noqa: F401 - registers all models

CLEANUP_FUNCTION_SQL = """
CREATE OR REPLACE FUNCTION cleanup_user_references(target_user_id varchar)
RETURNS void
LANGUAGE plpgsql
AS $$
BEGIN
    UPDATE documents SET approved_by = NULL, approved_at = NULL WHERE approved_by = target_user_id;
    UPDATE user_roles SET assigned_by = NULL WHERE assigned_by = target_user_id;
    DELETE FROM document_history WHERE changed_by = target_user_id;
END;
$$;
"""


def init_db():
    print("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    if engine.dialect.name == "postgresql":
        with engine.begin() as conn:
            conn.execute(text(CLEANUP_FUNCTION_SQL))
        print("Installed cleanup_user_references().")
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db()
