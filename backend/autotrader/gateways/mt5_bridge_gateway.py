"""
MT5 Bridge Gateway

BrokerGateway implementation for a MetaTrader 5 terminal.
Sends JSON payloads via HTTP to an MT5 EA listener (usually on a Windows VPS).

- Uses httpx.AsyncClient for HTTP
- Heartbeat check before every order
- Symbols are passed through in MetaTrader format (EURUSD)
"""

import logging
from typing import Optional

import httpx

from autotrader.exceptions import ConnectivityError, DataError, ExecutionError
from autotrader.gateways.base import (
    AccountInfo,
    BrokerGateway,
    CloseResult,
    OrderResult,
    SymbolQuote,
)

logger = logging.getLogger(__name__)


class MT5BridgeGateway(BrokerGateway):
    """
    Gateway for an MT5 EA bridge.

    Endpoints expected on the bridge:
      GET  /heartbeat          - Check EA is alive
      GET  /status             - Balance, equity, margin info
      GET  /ticker?symbol=X    - Current bid/ask
      POST /order              - Place new market order
      POST /close              - Close position by ticket
    """

    def __init__(
        self,
        bridge_url: str,
        magic_number: int = 234000,
        deviation: int = 20,
        timeout: float = 10.0,
    ):
        self._bridge_url = bridge_url.rstrip("/")
        self._magic_number = magic_number
        self._deviation = deviation
        self._timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout)
        logger.info(
            f"MT5BridgeGateway initialized "
            f"(bridge={bridge_url}, magic={magic_number})"
        )

    async def close(self):
        """Close the underlying httpx client to release connections."""
        if self._client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        """Make HTTP request to bridge.

        Raises:
            ConnectivityError: Bridge is unreachable, timed out, or
                returned a server error (5xx).
            ExecutionError: Bridge returned an HTTP client error (4xx)
                indicating bad request data.
        """
        url = f"{self._bridge_url}{path}"
        try:
            resp = await self._client.request(method, url, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except httpx.TimeoutException:
            logger.error(f"MT5 bridge timeout: {method} {path}")
            raise ConnectivityError("MT5 bridge timeout")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = e.response.text[:200]
            logger.error(f"MT5 bridge HTTP {status}: {method} {path} - {body}")
            if 400 <= status < 500:
                raise ExecutionError(f"MT5 bridge rejected request ({status}): {body}")
            raise ConnectivityError(f"MT5 bridge server error ({status}): {body}")
        except (httpx.HTTPError, OSError) as e:
            logger.error(f"MT5 bridge connection failed: {method} {path}: {e}")
            raise ConnectivityError(f"MT5 bridge unavailable: {e}")
        except ValueError as e:
            # resp.json() on a non-JSON body
            raise DataError(f"MT5 bridge returned malformed JSON for {path}: {e}")

    async def _heartbeat(self) -> bool:
        """Check if EA is alive."""
        try:
            resp = await self._request("GET", "/heartbeat")
            return bool(resp.get("alive", False))
        except (ConnectivityError, ExecutionError, DataError):
            return False

    # ==========================================================
    # ACCOUNT & MARKET DATA
    # ==========================================================

    async def is_connected(self) -> bool:
        return await self._heartbeat()

    async def get_account_info(self) -> AccountInfo:
        status = await self._request("GET", "/status")
        try:
            return AccountInfo(
                balance=float(status["balance"]),
                equity=float(status.get("equity", status["balance"])),
                margin=float(status.get("margin", 0)),
                free_margin=float(status.get("free_margin", 0)),
                currency=status.get("currency", "USD"),
                login=str(status.get("login", "")),
                server=status.get("server", ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DataError(f"Malformed MT5 account status: {e}")

    async def get_symbol_price(self, symbol: str) -> SymbolQuote:
        try:
            resp = await self._request("GET", "/ticker", params={"symbol": symbol})
        except ExecutionError as e:
            # Bridge answers 404 for symbols the terminal does not know
            raise ConnectivityError(f"Symbol {symbol} unavailable: {e.message}")

        try:
            return SymbolQuote(symbol=symbol, bid=float(resp["bid"]), ask=float(resp["ask"]))
        except (KeyError, TypeError, ValueError) as e:
            raise DataError(f"Malformed MT5 ticker for {symbol}: {e}")

    # ==========================================================
    # ORDER EXECUTION
    # ==========================================================

    async def submit_order(
        self,
        symbol: str,
        direction: str,
        volume: float,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
        comment: str = "",
    ) -> OrderResult:
        # Block orders while the EA is down
        if not await self._heartbeat():
            raise ConnectivityError("MT5 bridge not responding, order blocked")

        payload = {
            "symbol": symbol,
            "action": direction.upper(),
            "volume": volume,
            "deviation": self._deviation,
            "magic_number": self._magic_number,
            "comment": comment,
        }
        if stop_loss is not None:
            payload["sl"] = stop_loss
        if take_profit is not None:
            payload["tp"] = take_profit

        resp = await self._request("POST", "/order", json=payload)

        # Validate the bridge reported success
        if not resp.get("success", False):
            error_msg = resp.get("error", "Unknown MT5 bridge error")
            logger.error(f"MT5 order rejected: {error_msg}")
            raise ExecutionError(f"MT5 order rejected: {error_msg}")

        try:
            return OrderResult(
                ticket=str(resp["ticket"]),
                fill_price=float(resp["price"]),
                fill_volume=float(resp.get("volume", volume)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DataError(f"Malformed MT5 order response: {e}")

    async def close_position(self, ticket: str) -> CloseResult:
        resp = await self._request("POST", "/close", json={"ticket": int(ticket)})

        if not resp.get("success", False):
            error_msg = resp.get("error", "Unknown MT5 bridge error")
            raise ExecutionError(f"MT5 close rejected for ticket {ticket}: {error_msg}")

        return CloseResult(
            price=float(resp.get("price", 0) or 0),
            profit=float(resp.get("profit", 0) or 0),
        )
