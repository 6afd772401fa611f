"""
Load the Scryfall card catalog.

Run this job to download the oracle-cards bulk file and upsert every
playable card into the cards table. Recommendations only consider cards
the catalog knows about.
"""

import asyncio
import logging
from itertools import islice
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from deckforge.config import settings
from deckforge.db.database import async_session_factory, init_db
from deckforge.db.operations import upsert_cards
from deckforge.parsers.scryfall import download_bulk_data, iter_bulk_cards

logger = logging.getLogger(__name__)


async def load_catalog(
    session_factory: async_sessionmaker[AsyncSession],
    bulk_data_path: Path,
    batch_size: int = 500,
) -> int:
    """
    Upsert every card in a bulk file, one transaction per batch.

    Returns:
        Number of cards written
    """
    cards = iter_bulk_cards(bulk_data_path)
    total = 0
    while batch := list(islice(cards, batch_size)):
        async with session_factory() as session:
            total += await upsert_cards(session, batch)
            await session.commit()
        logger.debug("CARD_BATCH_LOADED", extra={"cards": total})

    logger.info("CARD_CATALOG_LOADED", extra={"cards": total, "path": str(bulk_data_path)})
    return total


async def run_load(download: bool = True) -> int:
    """Download the bulk file unless told not to, then load it."""
    path = Path(settings.card_data_path)
    await init_db()

    try:
        if download:
            path.parent.mkdir(parents=True, exist_ok=True)
            logger.info("Downloading Scryfall bulk data to %s", path)
            await asyncio.to_thread(download_bulk_data, path)
        return await load_catalog(async_session_factory, path, settings.card_load_batch_size)
    except Exception as e:
        logger.error("Failed to load card catalog: %s", e)
        raise


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_load())


if __name__ == "__main__":
    main()
