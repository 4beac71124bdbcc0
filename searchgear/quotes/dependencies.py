import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from searchgear.audit.dependencies import AuditLogServiceDep
from searchgear.database import get_db_session
from searchgear.email.dependencies import EmailServiceDep
from searchgear.quotes.interfaces import AbstractQuoteRepository
from searchgear.quotes.repositories import SQLAlchemyQuoteRepository
from searchgear.quotes.service import QuoteService
from searchgear.users.dependencies import UserRepositoryDep

logger = logging.getLogger(__name__)


def get_quote_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> AbstractQuoteRepository:
    """
    Fournit une instance du repository des demandes de devis (implémentation SQLAlchemy).

    Args:
        session: Session de base de données asynchrone.

    Returns:
        AbstractQuoteRepository: Instance du repository.
    """
    return SQLAlchemyQuoteRepository(db_session=session)


QuoteRepositoryDep = Annotated[AbstractQuoteRepository, Depends(get_quote_repository)]


def get_quote_service(
    quote_repo: QuoteRepositoryDep,
    audit_log: AuditLogServiceDep,
    email_service: EmailServiceDep,
    user_repo: UserRepositoryDep,
) -> QuoteService:
    """Fournit le service des devis avec le journal d'audit et la passerelle email injectés."""
    logger.debug("Fourniture de QuoteService avec repositories")
    return QuoteService(
        quote_repo=quote_repo,
        audit_log=audit_log,
        email_service=email_service,
        user_repo=user_repo,
    )


QuoteServiceDep = Annotated[QuoteService, Depends(get_quote_service)]
