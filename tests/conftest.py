"""Shared test fixtures for SpooqW tests."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from spooqw.daemon.main import create_app
from spooqw.pipeline.models import Step


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep user-level spooqw.toml and SPOOQW_* env vars out of tests."""
    monkeypatch.setenv("SPOOQW_HOME", str(tmp_path / "home"))
    for name in ("SPOOQW_DEFAULT_PIPELINE_ID", "SPOOQW_STRICT_VALIDATION", "SPOOQW_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest_asyncio.fixture(scope="function")
async def app():
    yield create_app()


@pytest_asyncio.fixture(scope="function")
async def client(app):
    """Async HTTP client pointed at the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def sample_steps() -> list[Step]:
    return [
        Step(id="input_step", kind="input", format="csv", path="/data/file.csv"),
        Step(id="transform", kind="sql", sql="SELECT * FROM input_step"),
        Step(id="output", kind="output", source="transform", format="parquet",
             path="/output/result.parquet"),
    ]


# ─── Sample configs ───

VALID_CONFIG = '''
id: test-pipeline
desc: Test description

steps:
  - id: input_step
    kind: input
    format: csv
    path: /data/file.csv

  - id: transform
    kind: sql
    sql: |
      SELECT id, name
      FROM input_step
      WHERE active = true

  - id: output
    kind: output
    source: transform
    format: parquet
    path: /output/result.parquet
'''

CYCLIC_CONFIG = '''
id: loop
steps:
  - id: a
    kind: sql
    source: b
    sql: SELECT * FROM b
  - id: b
    kind: sql
    source: a
    sql: SELECT * FROM a
'''
