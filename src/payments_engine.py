import csv
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional

from account_ledger import AccountLedger
from errors import MalformedRecordError, TransactionError
from models import (
    AccountSnapshot,
    ClientAccount,
    ProcessingStats,
    TransactionKind,
    TransactionOrder,
    build_transaction_order,
)
from operation_registry import OperationRegistry
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

MAX_ID = 2**32 - 1


class PaymentsEngine:
    """
    Reads transaction records in order and feeds them one by one to the processor.
    Malformed rows are dropped before processing; rejected orders are counted.
    Both are reported through logging only when debug is enabled.
    """

    def __init__(self, debug: bool = False):
        self._debug = debug
        self._ledger = AccountLedger()
        self._registry = OperationRegistry()
        self._processor = TransactionProcessor(self._ledger, self._registry)
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> AccountLedger:
        return self._ledger

    @property
    def registry(self) -> OperationRegistry:
        return self._registry

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", newline="") as f:
            self.process_stream(f)

        print(
            f"Processed: {self._stats.processed}, "
            f"Rejected: {self._stats.rejected}, "
            f"Dropped: {self._stats.dropped}",
            file=sys.stderr,
        )
        return self._ledger.accounts()

    def process_stream(self, lines: Iterable[str]) -> None:
        """Process CSV text (header first), strictly in input order."""
        reader = csv.DictReader(lines)
        for row in reader:
            transaction = self._parse_csv_row(row)
            if transaction is None:
                self._stats.record_dropped()
                continue
            self.process_order(transaction)

    def process_order(self, order: TransactionOrder) -> Optional[TransactionError]:
        """Apply a single order. Returns the rejection instead of raising it."""
        try:
            self._processor.process_transaction(order)
        except TransactionError as e:
            self._stats.record_rejection()
            if self._debug:
                logger.warning(f"Rejected {order!r}: {e}")
            return e

        self._stats.record_success()
        return None

    def snapshot(self) -> List[AccountSnapshot]:
        return self._ledger.snapshot()

    def _parse_csv_row(self, row: Dict[Optional[str], object]) -> Optional[TransactionOrder]:
        """Parse CSV row into a transaction order, or None if it is malformed."""
        try:
            normalized = {
                key.strip().lower(): (value or "").strip()
                for key, value in row.items()
                if key is not None and not isinstance(value, list)
            }

            transaction_kind = TransactionKind(normalized["type"].lower())
            client_id = self._parse_id(normalized["client"], "client")
            transaction_id = self._parse_id(normalized["tx"], "tx")

            amount = None
            amount_str = normalized.get("amount", "")
            if amount_str:
                amount = self._parse_amount(amount_str)

            return build_transaction_order(
                kind=transaction_kind,
                client_id=client_id,
                transaction_id=transaction_id,
                amount=amount,
            )
        except (KeyError, ValueError, InvalidOperation) as e:
            if self._debug:
                logger.warning(f"Failed to parse row {row}: {e!r}")
            return None

    @staticmethod
    def _parse_amount(value: str) -> Decimal:
        if "_" in value:
            raise MalformedRecordError(f"amount must not contain digit separators, got {value!r}")
        return Decimal(value)

    @staticmethod
    def _parse_id(value: str, field: str) -> int:
        if not (value.isascii() and value.isdigit()):
            raise MalformedRecordError(f"{field} must be an unsigned integer, got {value!r}")
        parsed = int(value)
        if parsed > MAX_ID:
            raise MalformedRecordError(f"{field} {parsed} is out of range")
        return parsed
