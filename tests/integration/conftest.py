import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from doccore.config.settings import Settings
from doccore.database.connection import close_pool, get_connection, init_pool
from doccore.database.repositories.cabinet_documents_repository import CabinetDocumentsRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "doccore_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute("SELECT 1")
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    CabinetDocumentsRepository().ensure_schema()
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def cabinet_cleanup(integration_pool: None) -> Generator[list[str], None, None]:
    paths: list[str] = []
    yield paths
    if not paths:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for path in paths:
                cur.execute("DELETE FROM cabinet_documents WHERE path = %s", (path,))
        conn.commit()
