"""
Manifest Financial payout client.

Issues scout commission payouts through the Manifest REST API.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import aiohttp
from loguru import logger

from app.config.settings import settings
from app.utils.exceptions import PaymentProcessorError

REQUEST_TIMEOUT_SECONDS = 30


class ManifestPaymentProcessor:
    """
    Payment processor backed by Manifest Financial.

    Amounts are sent in cents. Every payout carries scout and period
    metadata so it can be reconciled against the ledger.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize Manifest client.

        Args:
            api_key: API key (defaults to settings.manifest_api_key)
            base_url: API base URL (defaults to settings.manifest_base_url)
            session: Shared aiohttp session (created lazily if omitted)
        """
        self.api_key = api_key or settings.manifest_api_key
        self.base_url = (base_url or settings.manifest_base_url).rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def _request(
        self, method: str, endpoint: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        if not self.api_key:
            raise PaymentProcessorError("Manifest API key not configured")

        session = await self._get_session()
        url = f"{self.base_url}{endpoint}"

        try:
            async with session.request(
                method,
                url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT_SECONDS),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            ) as response:
                if response.status >= 400:
                    try:
                        error = await response.json()
                        message = error.get("message") or response.reason
                    except (aiohttp.ContentTypeError, ValueError):
                        message = response.reason

                    logger.error(
                        f"Manifest API error: HTTP {response.status}",
                        extra={"endpoint": endpoint, "error": message},
                    )
                    raise PaymentProcessorError(
                        f"Manifest API error: {message}",
                        status_code=response.status,
                    )

                return await response.json()
        except aiohttp.ClientError as e:
            raise PaymentProcessorError(f"Manifest request failed: {e}") from e

    async def create_scout_payout(self, scout, amount: Decimal, period: str) -> str:
        """
        Create a payout for a scout's commissions.

        Args:
            scout: Scout with payout_account_id
            amount: Payout amount in USD
            period: Settled period token

        Returns:
            Manifest payout ID

        Raises:
            PaymentProcessorError: Missing destination or API failure
        """
        if not scout.payout_account_id:
            raise PaymentProcessorError(
                f"Scout {scout.id} has no payout account"
            )

        cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

        logger.info(
            f"Creating scout payout: scout {scout.id}, {amount} for {period}"
        )

        payout = await self._request(
            "POST",
            "/payouts",
            {
                "amount": cents,
                "currency": "usd",
                "destination": scout.payout_account_id,
                "metadata": {
                    "scout_id": str(scout.id),
                    "period": period,
                    "type": "scout_commission",
                },
            },
        )

        payout_id = payout.get("id")
        if not payout_id:
            raise PaymentProcessorError("Manifest payout response missing id")

        logger.info(f"Scout payout created: {payout_id} for scout {scout.id}")
        return payout_id
