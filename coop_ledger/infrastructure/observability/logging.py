"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from coop_ledger.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_registration(
    member_id: int,
    fiscal_year: int,
    amount: Decimal,
    receipt_number: str,
    tract_number: Optional[int] = None,
    is_full_payment: bool = False,
    request_id: Optional[str] = None,
) -> None:
    """Log structured registration outcome for reconciliation"""
    logging.getLogger("coop_ledger.registrar").info(
        "Full contribution registered" if is_full_payment else "Contribution registered",
        extra={
            "request_id": request_id,
            "member_id": member_id,
            "fiscal_year": fiscal_year,
            "step": "registration_complete",
            "payment_type": "full_payment" if is_full_payment else "single_tract",
            "tract_number": tract_number,
            "amount": str(amount),
            "receipt_number": receipt_number,
        },
    )
