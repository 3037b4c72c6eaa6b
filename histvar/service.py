"""VaR calculation service with request validation, caching and auditing."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from .audit import AuditLog
from .cache import VarCache
from .config import VarSettings
from .errors import RequestValidationError
from .validation import (
    require_identifier,
    to_pnl_array,
    validate_confidence_level,
    validate_min_data_points,
)
from .var import HISTORICAL_SIMULATION, HistoricalVarEngine

logger = logging.getLogger(__name__)

TRADE_ENDPOINT = "/api/v1/var/trade"
PORTFOLIO_ENDPOINT = "/api/v1/var/portfolio"


def _require_confidence(confidence_level: Optional[float]) -> float:
    if confidence_level is None:
        raise RequestValidationError("Confidence level is required")
    return validate_confidence_level(confidence_level)


def _validate_pnl_field(pnl: Optional[Sequence[float]], settings: VarSettings) -> None:
    if pnl is None:
        raise RequestValidationError("Historical P&L is required")
    validate_min_data_points(to_pnl_array(pnl), settings.min_data_points)


@dataclass(frozen=True)
class TradeVarRequest:
    trade_id: str
    historical_pnl: Sequence[float]
    confidence_level: float

    def validate(self, settings: VarSettings) -> str:
        """Check the request fields and return the normalized trade id."""
        trade_id = require_identifier(self.trade_id, "Trade ID")
        _validate_pnl_field(self.historical_pnl, settings)
        _require_confidence(self.confidence_level)
        return trade_id


@dataclass(frozen=True)
class TradeInput:
    trade_id: str
    historical_pnl: Sequence[float]

    def validate(self, settings: VarSettings) -> None:
        require_identifier(self.trade_id, "Trade ID")
        _validate_pnl_field(self.historical_pnl, settings)


@dataclass(frozen=True)
class PortfolioVarRequest:
    portfolio_id: str
    confidence_level: float
    trades: Sequence[TradeInput]

    def validate(self, settings: VarSettings) -> str:
        """Field checks applied before the engine runs.

        Each trade must meet ``min_data_points`` on its own here; the engine
        itself only checks the aggregated series.
        Returns the normalized portfolio id.
        """
        portfolio_id = require_identifier(self.portfolio_id, "Portfolio ID")
        _require_confidence(self.confidence_level)
        if self.trades is None:
            raise RequestValidationError("Trades are required")
        for trade in self.trades:
            trade.validate(settings)
        return portfolio_id


@dataclass(frozen=True)
class VarResponse:
    id: str
    var: float
    confidence_level: float
    calculation_method: str = HISTORICAL_SIMULATION
    trade_count: int = 1
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "var": self.var,
            "confidenceLevel": self.confidence_level,
            "calculationMethod": self.calculation_method,
            "tradeCount": self.trade_count,
            "timestamp": self.timestamp.isoformat(),
        }


class VarCalculationService:
    """Wraps `HistoricalVarEngine` with caching, auditing and logging.

    Results are cached by (identifier, confidence level): a repeated request for
    the same trade or portfolio id returns the cached response without
    recomputing or re-auditing. Every engine failure is audited and re-raised.
    """

    def __init__(
        self,
        engine: Optional[HistoricalVarEngine] = None,
        audit_log: Optional[AuditLog] = None,
        cache: Optional[VarCache] = None,
    ) -> None:
        self.engine = engine or HistoricalVarEngine()
        settings = self.engine.settings
        self.audit_log = audit_log if audit_log is not None else AuditLog()
        self.cache = (
            cache
            if cache is not None
            else VarCache(
                max_entries=settings.cache_max_entries,
                ttl_seconds=settings.cache_ttl_seconds,
            )
        )

    @classmethod
    def from_settings(cls, settings: VarSettings) -> "VarCalculationService":
        return cls(engine=HistoricalVarEngine(settings))

    @property
    def settings(self) -> VarSettings:
        return self.engine.settings

    def calculate_trade_var(
        self, request: TradeVarRequest, username: Optional[str] = None
    ) -> VarResponse:
        trade_id = request.validate(self.settings)
        key = VarCache.key("trade", trade_id, request.confidence_level)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for trade %s", trade_id)
            return cached.value

        logger.debug(
            "Calculating VaR for trade: %s by user: %s", trade_id, username
        )
        start = time.perf_counter()
        try:
            var = self.engine.calculate_trade_var(
                request.historical_pnl, request.confidence_level
            )
        except Exception as exc:
            self.audit_log.log_request(
                username, TRADE_ENDPOINT, _elapsed_ms(start), False, str(exc)
            )
            logger.error("VaR calculation failed for trade: %s", trade_id, exc_info=True)
            raise
        self.audit_log.log_request(username, TRADE_ENDPOINT, _elapsed_ms(start), True)

        response = VarResponse(
            id=trade_id,
            var=var,
            confidence_level=float(request.confidence_level),
            trade_count=1,
        )
        self.cache.set(key, response)
        return response

    def calculate_portfolio_var(
        self, request: PortfolioVarRequest, username: Optional[str] = None
    ) -> VarResponse:
        portfolio_id = request.validate(self.settings)
        key = VarCache.key("portfolio", portfolio_id, request.confidence_level)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for portfolio %s", portfolio_id)
            return cached.value

        logger.debug(
            "Calculating portfolio VaR: %s with %d trades by user: %s",
            portfolio_id,
            len(request.trades),
            username,
        )
        start = time.perf_counter()
        try:
            trades_pnl = [t.historical_pnl for t in request.trades]
            var = self.engine.calculate_portfolio_var(
                trades_pnl, request.confidence_level
            )
        except Exception as exc:
            self.audit_log.log_request(
                username, PORTFOLIO_ENDPOINT, _elapsed_ms(start), False, str(exc)
            )
            logger.error(
                "Portfolio VaR calculation failed: %s", portfolio_id, exc_info=True
            )
            raise
        self.audit_log.log_request(
            username, PORTFOLIO_ENDPOINT, _elapsed_ms(start), True
        )

        response = VarResponse(
            id=portfolio_id,
            var=var,
            confidence_level=float(request.confidence_level),
            trade_count=len(request.trades),
        )
        self.cache.set(key, response)
        return response


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
