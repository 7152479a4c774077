import argparse
import asyncio

from bitacora.app import models  # noqa: F401  registers the tables
from bitacora.app.core.config import get_settings
from bitacora.app.core.logging_config import setup_logging
from bitacora.app.db.base import Base
from bitacora.app.db.session import Database


async def init_models(reset: bool = False):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    database = Database(settings)
    await database.connect(create_tables=False)
    try:
        async with database.engine.begin() as conn:
            if reset:
                # Drops every table first - DEV MODE ONLY
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await database.disconnect()
    print(">>> Tables Created Successfully!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the database tables")
    parser.add_argument("--reset", action="store_true", help="drop existing tables first")
    args = parser.parse_args()
    asyncio.run(init_models(reset=args.reset))
