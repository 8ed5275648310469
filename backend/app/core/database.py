from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./connect4.db")

def get_database_url():
    """Helper to retrieve DB URL in scripts context"""
    return DATABASE_URL

def make_engine(url: str, **kwargs):
    # SQLite drivers manage their own pool; sizing only applies to server databases
    if not url.startswith("sqlite"):
        kwargs.setdefault("pool_size", 20)
        kwargs.setdefault("max_overflow", 20)
    return create_async_engine(url, echo=False, **kwargs)

def make_sessionmaker(bind):
    return sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False
    )

engine = make_engine(DATABASE_URL)
AsyncSessionLocal = make_sessionmaker(engine)

Base = declarative_base()

async def init_models(bind=None):
    """Create all tables (no-op for existing ones)."""
    # Models must be imported so they register on Base.metadata
    from backend.app.models import match_model  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

# Dependency for API routes
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
