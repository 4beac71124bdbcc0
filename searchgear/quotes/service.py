import logging
from typing import Any, Dict, List, Optional

from searchgear.audit.models import HistoryAction, QuotationHistoryRead
from searchgear.audit.service import AuditLogService
from searchgear.email.models import EmailDeliveryResult, QuotationEmailData, QuoteEmailDetails
from searchgear.email.services import EmailService
from searchgear.quotes.exceptions import (
    InvalidQuoteTransitionException,
    QuoteAccessForbiddenException,
    QuoteNotFoundException,
)
from searchgear.quotes.interfaces import AbstractQuoteRepository
from searchgear.quotes.models import (
    BusType,
    QuoteDecision,
    QuotePricingUpdate,
    QuoteRequest,
    QuoteRequestCreate,
    QuoteRequestRead,
    QuoteStatus,
    QuotationSubmit,
    QuotationSubmitResult,
)
from searchgear.quotes.utils import (
    pricing_snapshot,
    validate_departure_date,
    validate_estimated_price,
    validate_passenger_capacity,
)
from searchgear.users.interfaces import AbstractUserRepository
from searchgear.users.models import UserRead

logger = logging.getLogger(__name__)


class QuoteService:
    """
    Cycle de vie des demandes de devis : création, cotation, décision.

    La cotation (`submit_quotation`) enregistre le prix avant toute tentative
    d'envoi d'email ; un échec de livraison ne fait jamais échouer l'opération.
    """

    def __init__(self,
                 quote_repo: AbstractQuoteRepository,
                 audit_log: AuditLogService,
                 email_service: EmailService,
                 user_repo: AbstractUserRepository):
        self.quote_repo = quote_repo
        self.audit_log = audit_log
        self.email_service = email_service
        self.user_repo = user_repo

    async def _get_quote_or_404(self, quote_id: str) -> QuoteRequest:
        quote = await self.quote_repo.get_by_id(quote_id)
        if quote is None:
            logger.warning(f"[QuoteService] Devis ID {quote_id} non trouvé.")
            raise QuoteNotFoundException(quote_id)
        return quote

    @staticmethod
    def _check_access(quote: QuoteRequest, actor: UserRead) -> None:
        if not actor.is_admin and quote.user_id != actor.id:
            logger.warning(f"[QuoteService] Accès refusé devis {quote.id} pour user {actor.id}.")
            raise QuoteAccessForbiddenException()

    async def create_quote(self, requester: UserRead, quote_in: QuoteRequestCreate) -> QuoteRequestRead:
        """Valide les règles métier puis enregistre la demande au statut 'pending'."""
        logger.info(f"[QuoteService] Création devis pour user ID: {requester.id}")
        validate_passenger_capacity(quote_in.number_of_passengers, quote_in.bus_type)
        validate_departure_date(quote_in.departure_date)

        quote = QuoteRequest(
            **quote_in.model_dump(),
            user_id=requester.id,
            status=QuoteStatus.PENDING,
        )
        created = await self.quote_repo.add(quote)
        logger.info(f"[QuoteService] Devis {created.quote_number} créé (ID: {created.id})")
        return QuoteRequestRead.model_validate(created)

    async def list_user_quotes(self, requester: UserRead) -> List[QuoteRequestRead]:
        quotes = await self.quote_repo.list_by_user(requester.id)
        return [QuoteRequestRead.model_validate(q) for q in quotes]

    async def get_quote(self, quote_id: str, actor: UserRead) -> QuoteRequestRead:
        """Récupère un devis ; seul le propriétaire ou un admin y a accès."""
        quote = await self._get_quote_or_404(quote_id)
        self._check_access(quote, actor)
        return QuoteRequestRead.model_validate(quote)

    async def list_all_quotes(self, status: Optional[QuoteStatus] = None) -> List[QuoteRequestRead]:
        logger.debug(f"[QuoteService] Listage de tous les devis (statut: {status})")
        quotes = await self.quote_repo.list_all(status=status)
        return [QuoteRequestRead.model_validate(q) for q in quotes]

    async def update_pricing(
        self,
        quote_id: str,
        update_in: QuotePricingUpdate,
        actor: UserRead,
        request_context: Optional[Dict[str, Any]] = None,
    ) -> QuoteRequestRead:
        """Mise à jour partielle (statut, prix, notes) par un admin."""
        quote = await self._get_quote_or_404(quote_id)
        previous_state = pricing_snapshot(quote)

        changes = update_in.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(quote, field, value)
        quote = await self.quote_repo.save(quote)
        logger.info(f"[QuoteService] Devis {quote_id} mis à jour par admin {actor.id}: {sorted(changes)}")

        await self.audit_log.record(
            quote_request_id=quote.id,
            performed_by=actor.id,
            action=HistoryAction.QUOTE_UPDATED,
            previous_state=previous_state,
            new_state=pricing_snapshot(quote),
            metadata={**(request_context or {}), "updatedFields": sorted(changes)},
        )
        return QuoteRequestRead.model_validate(quote)

    async def submit_quotation(
        self,
        quote_id: str,
        submission: QuotationSubmit,
        actor: UserRead,
        request_context: Optional[Dict[str, Any]] = None,
    ) -> QuotationSubmitResult:
        """
        Enregistre le prix d'une cotation puis l'envoie au client.

        Le devis passe au statut 'quoted' et est persisté avant l'envoi ;
        deux entrées d'audit sont ajoutées ('price_updated' puis 'email_sent'),
        quel que soit le résultat de l'envoi.
        """
        price = validate_estimated_price(submission.estimated_price)
        quote = await self._get_quote_or_404(quote_id)
        previous_state = pricing_snapshot(quote)

        quote.status = QuoteStatus.QUOTED
        quote.estimated_price = price
        # Notes vides ou absentes : on conserve les notes existantes
        if submission.admin_notes:
            quote.admin_notes = submission.admin_notes
        quote = await self.quote_repo.save(quote)
        logger.info(f"[QuoteService] Cotation {quote.quote_number} enregistrée à {price} par admin {actor.id}")

        context = request_context or {}
        await self.audit_log.record(
            quote_request_id=quote.id,
            performed_by=actor.id,
            action=HistoryAction.PRICE_UPDATED,
            previous_state=previous_state,
            new_state=pricing_snapshot(quote),
            metadata={**context, "comment": f"Quotation submitted with price {price}"},
        )

        delivery = await self._send_quotation(quote)

        email_metadata: Dict[str, Any] = {**context, "emailSent": delivery.delivered}
        if delivery.delivered:
            email_metadata["messageId"] = delivery.message_id
        else:
            email_metadata["error"] = delivery.error
        await self.audit_log.record(
            quote_request_id=quote.id,
            performed_by=actor.id,
            action=HistoryAction.EMAIL_SENT,
            previous_state={},
            new_state={"emailSent": delivery.delivered},
            metadata=email_metadata,
        )

        return QuotationSubmitResult(
            quote=QuoteRequestRead.model_validate(quote),
            email_sent=delivery.delivered,
            email_message_id=delivery.message_id,
            email_error=delivery.error,
        )

    async def _send_quotation(self, quote: QuoteRequest) -> EmailDeliveryResult:
        """Envoie la cotation ; toute erreur est convertie en résultat non délivré."""
        try:
            customer = await self.user_repo.get_by_id(quote.user_id)
            if customer is None:
                logger.error(f"[QuoteService] Client {quote.user_id} introuvable pour le devis {quote.id}, email non envoyé.")
                return EmailDeliveryResult.failed("Customer not found for this quote request")

            email_data = QuotationEmailData(
                to=customer.email,
                customer_name=customer.full_name,
                quote_number=quote.quote_number,
                quote_details=QuoteEmailDetails(
                    pickup_location=quote.pickup_location,
                    dropoff_location=quote.dropoff_location,
                    departure_date=quote.departure_date,
                    number_of_days=quote.number_of_days,
                    bus_type=BusType(quote.bus_type).value,
                    number_of_passengers=quote.number_of_passengers,
                ),
                price=quote.estimated_price,
                admin_notes=quote.admin_notes,
            )
            return await self.email_service.send_quotation_email(email_data)
        except Exception as e:
            logger.error(f"[QuoteService] Erreur inattendue lors de l'envoi de la cotation {quote.id}: {e}", exc_info=True)
            return EmailDeliveryResult.failed(str(e))

    async def decide_quotation(
        self,
        quote_id: str,
        decision_in: QuoteDecision,
        actor: UserRead,
        request_context: Optional[Dict[str, Any]] = None,
    ) -> QuoteRequestRead:
        """Approuve ou rejette une cotation au statut 'quoted'."""
        quote = await self._get_quote_or_404(quote_id)
        self._check_access(quote, actor)
        if quote.status != QuoteStatus.QUOTED:
            logger.warning(f"[QuoteService] Décision refusée pour devis {quote_id} au statut {quote.status}")
            raise InvalidQuoteTransitionException(QuoteStatus(quote.status).value)

        previous_state = pricing_snapshot(quote)
        new_status = QuoteStatus(decision_in.decision)
        quote.status = new_status
        quote = await self.quote_repo.save(quote)
        logger.info(f"[QuoteService] Devis {quote.quote_number} {new_status.value} par user {actor.id}")

        action = HistoryAction.QUOTE_APPROVED if new_status == QuoteStatus.APPROVED else HistoryAction.QUOTE_REJECTED
        metadata = dict(request_context or {})
        if decision_in.comment:
            metadata["comment"] = decision_in.comment
        await self.audit_log.record(
            quote_request_id=quote.id,
            performed_by=actor.id,
            action=action,
            previous_state=previous_state,
            new_state=pricing_snapshot(quote),
            metadata=metadata,
        )
        return QuoteRequestRead.model_validate(quote)

    async def list_history(self, quote_id: str) -> List[QuotationHistoryRead]:
        """Historique d'audit d'un devis, dans l'ordre chronologique."""
        return await self.audit_log.history_for_quote(quote_id)

    async def delete_quote(self, quote_id: str, actor: UserRead) -> None:
        quote = await self._get_quote_or_404(quote_id)
        await self.quote_repo.delete(quote)
        logger.info(f"[QuoteService] Devis {quote_id} supprimé par admin {actor.id}")
