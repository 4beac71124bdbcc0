import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from searchgear.config import settings

logger = logging.getLogger(__name__)

# Créer le moteur de base de données asynchrone
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO_LOG,
)

# Factory de sessions asynchrones
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Empêche les objets d'expirer après commit
)

logger.info("Moteur et Session Factory SQLAlchemy Async configurés.")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dépendance FastAPI fournissant une session de base de données asynchrone."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            # Pas de commit ici : les repositories commitent leurs propres écritures.
        except Exception as e:
            logger.error(f"Erreur durant la session DB, rollback: {e}", exc_info=True)
            await session.rollback()
            raise
        finally:
            await session.close()
            logger.debug("Session DB fermée.")


async def create_tables():
    """Crée toutes les tables déclarées dans SQLModel.metadata."""
    # Importer les modèles pour enregistrer les tables dans les métadonnées
    from searchgear.users import models as _users  # noqa: F401
    from searchgear.quotes import models as _quotes  # noqa: F401
    from searchgear.audit import models as _audit  # noqa: F401
    from searchgear.bookings import models as _bookings  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

