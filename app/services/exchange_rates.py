"""Currency conversion gateway: token/USD rates from a CoinMarketCap-style quotes API."""

from __future__ import annotations

import logging

import httpx

from app.config import Settings, get_settings
from app.services.errors import ExchangeRateUnavailableError

logger = logging.getLogger(__name__)

USER_AGENT = "Bountyboard/0.1 (exchange-rates)"
QUOTES_PATH = "/v1/cryptocurrency/quotes/latest"


class ExchangeRateGateway:
    """Fetch current exchange rates for token symbols.

    Rates are fetched on every call; nothing is cached between assignments.
    Any transport error, timeout, non-2xx response or API-level error raises
    ExchangeRateUnavailableError.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        quote: str = "USDC",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.quote = quote.upper()
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ExchangeRateGateway":
        settings = settings or get_settings()
        return cls(
            api_url=settings.exchange_rate_api_url,
            api_key=settings.exchange_rate_api_key,
            quote=settings.exchange_rate_quote,
            timeout=settings.exchange_rate_timeout,
        )

    def get_exchange_rates(self, tokens: list[str]) -> dict[str, float]:
        """Return {SYMBOL: rate} for the requested tokens (symbols upper-cased)."""
        symbols = sorted({t.strip().upper() for t in tokens if t and t.strip()})
        if not symbols:
            return {}

        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if self.api_key:
            headers["X-CMC_PRO_API_KEY"] = self.api_key
        params = {"symbol": ",".join(symbols), "convert": self.quote}

        try:
            with httpx.Client(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            ) as client:
                response = client.get(f"{self.api_url}{QUOTES_PATH}", params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("exchange_rate_timeout: tokens=%s %s", symbols, exc)
            raise ExchangeRateUnavailableError() from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "exchange_rate_http_error: tokens=%s status=%s",
                symbols,
                exc.response.status_code,
            )
            raise ExchangeRateUnavailableError() from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("exchange_rate_request_failed: tokens=%s %s", symbols, exc)
            raise ExchangeRateUnavailableError() from exc

        return self._parse_rates(payload)

    def _parse_rates(self, payload: dict) -> dict[str, float]:
        status = payload.get("status") or {}
        if status.get("error_code", 0) != 0:
            logger.warning("exchange_rate_api_error: %s", status.get("error_message"))
            raise ExchangeRateUnavailableError()

        rates: dict[str, float] = {}
        for symbol, token_data in (payload.get("data") or {}).items():
            # Some plans return a list of matches per symbol; take the first
            if isinstance(token_data, list):
                if not token_data:
                    continue
                token_data = token_data[0]
            price = ((token_data.get("quote") or {}).get(self.quote) or {}).get("price")
            if price is None:
                continue
            try:
                rates[symbol.upper()] = float(price)
            except (TypeError, ValueError):
                continue
        return rates


def get_exchange_rate_gateway() -> ExchangeRateGateway:
    """Dependency for FastAPI; override in tests."""
    return ExchangeRateGateway.from_settings()


def resolve_usd_rate(gateway: ExchangeRateGateway, token: str | None) -> float:
    """Return a strictly positive rate for `token` or raise ExchangeRateUnavailableError.

    A missing token short-circuits without calling the gateway. A missing key
    or non-positive value in the gateway result counts as failure.
    """
    if not token:
        raise ExchangeRateUnavailableError()
    symbol = token.strip().upper()
    try:
        rates = gateway.get_exchange_rates([symbol])
    except ExchangeRateUnavailableError:
        raise
    except Exception as exc:
        logger.warning("exchange_rate_gateway_error: token=%s %s", symbol, exc)
        raise ExchangeRateUnavailableError() from exc
    rate = rates.get(symbol)
    if rate is None or rate <= 0:
        logger.warning("exchange_rate_unusable: token=%s rate=%s", symbol, rate)
        raise ExchangeRateUnavailableError()
    return rate
