import os
import tempfile

# Point the app at a throwaway SQLite file before wingplan.lib.database builds its engine
_db_dir = tempfile.mkdtemp(prefix="wingplan-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from wingplan.lib.database import Base, engine, init_models
from wingplan.main import app
from wingplan.services.floor_manager import FloorManager
from wingplan.services.structure_validator import StructureValidator


@pytest.fixture
def manager() -> FloorManager:
    return FloorManager()


@pytest.fixture
def validator() -> StructureValidator:
    return StructureValidator()


@pytest_asyncio.fixture
async def client():
    await init_models()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
