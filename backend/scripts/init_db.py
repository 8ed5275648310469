import asyncio
from backend.app.core.database import init_models, get_database_url

async def main():
    # Safe create (only creates if missing)
    await init_models()
    print(f"Database tables ready at {get_database_url()}.")

if __name__ == "__main__":
    asyncio.run(main())
