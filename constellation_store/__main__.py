"""
Create the store schema in the configured database.

    python -m constellation_store

Production deployments should run ``alembic upgrade head`` instead.
"""

import asyncio

from constellation_store.lifecycle import store_lifespan


async def main() -> None:
    async with store_lifespan():
        pass


if __name__ == "__main__":
    asyncio.run(main())
