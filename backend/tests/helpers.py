import asyncio
import os
import shutil
import tempfile

from sqlalchemy.pool import NullPool

from backend.app.core.database import init_models, make_engine, make_sessionmaker


class TempDatabase:
    """SQLite file in a temp dir; NullPool so every event loop gets fresh connections."""

    def __init__(self):
        self.directory = tempfile.mkdtemp()
        path = os.path.join(self.directory, "test.db")
        self.engine = make_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
        self.sessionmaker = make_sessionmaker(self.engine)

    async def create(self):
        await init_models(self.engine)

    def create_sync(self):
        asyncio.run(self.create())

    async def dispose(self):
        await self.engine.dispose()

    def cleanup(self):
        shutil.rmtree(self.directory, ignore_errors=True)
