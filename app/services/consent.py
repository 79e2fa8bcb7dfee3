from __future__ import annotations

import logging

from app.clients.backend import BackendClient
from app.schemas.content import ConsentRequest, ConsentResponse
from app.services.exceptions import ServiceError
from app.services.repositories import ConsentRepository, RecordStore, get_record_store

logger = logging.getLogger(__name__)


def consent_decision(consent_given: bool) -> str:
    return "accepted" if consent_given else "declined"


class ConsentService:
    def __init__(
        self,
        client: BackendClient,
        *,
        store: RecordStore | None = None,
    ) -> None:
        self._client = client
        self._consents = ConsentRepository(store or get_record_store(client))

    async def record(self, request: ConsentRequest) -> ConsentResponse:
        """Log a cookie-banner decision.

        The decision is returned even when the backend write fails; the caller
        keeps it locally so the banner does not reappear.
        """

        decision = consent_decision(request.consent_given)
        try:
            await self._consents.create(
                {
                    "user_session": request.user_session,
                    "consent_given": request.consent_given,
                    "user_agent": request.user_agent,
                }
            )
        except ServiceError:
            logger.warning(
                "Could not record consent for session %s", request.user_session, exc_info=True
            )
            return ConsentResponse(decision=decision, recorded=False)
        return ConsentResponse(decision=decision, recorded=True)
