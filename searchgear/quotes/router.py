import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from searchgear.audit.models import QuotationHistoryRead
from searchgear.auth.dependencies import AdminUserDep, CurrentUserDep
from searchgear.core.dependencies import RequestContextDep
from searchgear.core.exceptions import SearchGearException
from searchgear.core.schemas import ApiResponse
from searchgear.quotes.constants import (
    QUOTATION_EMAIL_WARNING,
    QUOTATION_SAVED_EMAIL_FAILED_MSG,
    QUOTATION_SENT_MSG,
    QUOTE_CREATED_MSG,
    QUOTE_DELETED_MSG,
    QUOTE_UPDATED_MSG,
)
from searchgear.quotes.dependencies import QuoteServiceDep
from searchgear.quotes.models import (
    QuoteDecision,
    QuotePricingUpdate,
    QuoteRequestCreate,
    QuoteRequestRead,
    QuoteStatus,
    QuotationSubmit,
    QuotationSubmitResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Endpoints client ---

@router.post("/", response_model=ApiResponse[QuoteRequestRead], status_code=status.HTTP_201_CREATED,
             response_model_exclude_none=True)
async def create_quote_request(
    quote_in: QuoteRequestCreate,
    current_user: CurrentUserDep,
    quote_service: QuoteServiceDep,
):
    """Crée une demande de devis pour l'utilisateur authentifié."""
    logger.info(f"API create_quote pour user ID: {current_user.id}")
    try:
        quote = await quote_service.create_quote(current_user, quote_in)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=QUOTE_CREATED_MSG, data=quote)


@router.get("/my-quotes", response_model=ApiResponse[List[QuoteRequestRead]], response_model_exclude_none=True)
async def list_my_quotes(current_user: CurrentUserDep, quote_service: QuoteServiceDep):
    """Liste les demandes de l'utilisateur authentifié, les plus récentes en premier."""
    quotes = await quote_service.list_user_quotes(current_user)
    return ApiResponse(count=len(quotes), data=quotes)


@router.get("/{quote_id}", response_model=ApiResponse[QuoteRequestRead], response_model_exclude_none=True)
async def read_quote_request(quote_id: str, current_user: CurrentUserDep, quote_service: QuoteServiceDep):
    """Récupère une demande (propriétaire ou admin)."""
    try:
        quote = await quote_service.get_quote(quote_id, current_user)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(data=quote)


@router.patch("/{quote_id}/decision", response_model=ApiResponse[QuoteRequestRead], response_model_exclude_none=True)
async def decide_quotation(
    quote_id: str,
    decision_in: QuoteDecision,
    current_user: CurrentUserDep,
    quote_service: QuoteServiceDep,
    request_context: RequestContextDep,
):
    """Approuve ou rejette une cotation envoyée."""
    logger.info(f"API decide_quotation: ID={quote_id} '{decision_in.decision}' par user {current_user.id}")
    try:
        quote = await quote_service.decide_quotation(quote_id, decision_in, current_user, request_context)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=f"Quotation {decision_in.decision} successfully", data=quote)


# --- Endpoints admin ---

@router.get("/admin/all", response_model=ApiResponse[List[QuoteRequestRead]], response_model_exclude_none=True)
async def list_all_quote_requests(
    admin_user: AdminUserDep,
    quote_service: QuoteServiceDep,
    quote_status: Optional[QuoteStatus] = Query(default=None, alias="status"),
):
    """Liste toutes les demandes, filtrées par statut (Admin requis)."""
    quotes = await quote_service.list_all_quotes(status=quote_status)
    return ApiResponse(count=len(quotes), data=quotes)


@router.patch("/admin/{quote_id}", response_model=ApiResponse[QuoteRequestRead], response_model_exclude_none=True)
async def update_quote_pricing(
    quote_id: str,
    update_in: QuotePricingUpdate,
    admin_user: AdminUserDep,
    quote_service: QuoteServiceDep,
    request_context: RequestContextDep,
):
    """Mise à jour partielle du statut, du prix ou des notes (Admin requis)."""
    try:
        quote = await quote_service.update_pricing(quote_id, update_in, admin_user, request_context)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=QUOTE_UPDATED_MSG, data=quote)


@router.post("/admin/{quote_id}/submit", response_model=ApiResponse[QuotationSubmitResult],
             response_model_exclude_none=True)
async def submit_quotation(
    quote_id: str,
    submission: QuotationSubmit,
    admin_user: AdminUserDep,
    quote_service: QuoteServiceDep,
    request_context: RequestContextDep,
):
    """
    Enregistre la cotation et l'envoie par email au client (Admin requis).

    Répond 200 même si l'email n'a pas pu être livré : le prix est conservé
    et un avertissement est ajouté à la réponse.
    """
    logger.info(f"API submit_quotation: ID={quote_id} par admin {admin_user.id}")
    try:
        result = await quote_service.submit_quotation(quote_id, submission, admin_user, request_context)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if result.email_sent:
        return ApiResponse(message=QUOTATION_SENT_MSG, data=result)
    logger.warning(f"API submit_quotation: email non livré pour devis {quote_id}: {result.email_error}")
    return ApiResponse(message=QUOTATION_SAVED_EMAIL_FAILED_MSG, data=result, warning=QUOTATION_EMAIL_WARNING)


@router.get("/admin/{quote_id}/history", response_model=ApiResponse[List[QuotationHistoryRead]])
async def read_quote_history(quote_id: str, admin_user: AdminUserDep, quote_service: QuoteServiceDep):
    """Journal d'audit d'une demande de devis (Admin requis)."""
    entries = await quote_service.list_history(quote_id)
    return ApiResponse(count=len(entries), data=entries)


@router.delete("/admin/{quote_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_quote_request(quote_id: str, admin_user: AdminUserDep, quote_service: QuoteServiceDep):
    """Supprime définitivement une demande de devis (Admin requis)."""
    try:
        await quote_service.delete_quote(quote_id, admin_user)
    except SearchGearException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message=QUOTE_DELETED_MSG)


quotes_router = router
