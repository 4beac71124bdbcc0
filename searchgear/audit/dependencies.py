from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from searchgear.audit.interfaces import AbstractQuotationHistoryRepository
from searchgear.audit.repositories import SQLAlchemyQuotationHistoryRepository
from searchgear.audit.service import AuditLogService
from searchgear.database import get_db_session


def get_history_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> AbstractQuotationHistoryRepository:
    """Fournit le repository du journal d'audit."""
    return SQLAlchemyQuotationHistoryRepository(db_session=session)


def get_audit_log_service(
    history_repo: Annotated[AbstractQuotationHistoryRepository, Depends(get_history_repository)]
) -> AuditLogService:
    """Fournit le service du journal d'audit."""
    return AuditLogService(history_repo=history_repo)


AuditLogServiceDep = Annotated[AuditLogService, Depends(get_audit_log_service)]
