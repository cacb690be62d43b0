import csv
import logging
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import BinaryIO, Iterable, Iterator, List

from models import (
    AMOUNT_CONTEXT,
    AMOUNT_PRECISION,
    MAX_AMOUNT,
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

HEADER_FIRST_FIELD = "type"


class TransactionParseError(ValueError):
    """Raised when a CSV row cannot be turned into a Transaction."""


def _parse_identifier(value: str, name: str, maximum: int) -> int:
    try:
        identifier = int(value)
    except ValueError:
        raise TransactionParseError(f"invalid {name} {value!r}") from None
    if not 0 <= identifier <= maximum:
        raise TransactionParseError(f"{name} {identifier} out of range 0..{maximum}")
    return identifier


def _parse_amount(value: str) -> Decimal:
    if not value:
        raise TransactionParseError("missing amount")
    try:
        amount = Decimal(value)
        if not amount.is_finite() or amount < 0:
            raise TransactionParseError(f"invalid amount {value!r}")
        if amount > MAX_AMOUNT:
            raise TransactionParseError(f"amount {value!r} exceeds maximum {MAX_AMOUNT}")
        # Anything past four decimal places is truncated, not rounded.
        return amount.quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN, context=AMOUNT_CONTEXT)
    except InvalidOperation:
        raise TransactionParseError(f"invalid amount {value!r}") from None


def parse_row(fields: List[str]) -> Transaction:
    """
    Parse one CSV row (type, client, tx[, amount]) into a Transaction.

    Raises:
        TransactionParseError: the row is malformed.
    """
    fields = [value.strip() for value in fields]
    while len(fields) > 4 and not fields[-1]:
        fields.pop()

    if not 3 <= len(fields) <= 4:
        raise TransactionParseError(f"expected 3 or 4 fields, got {len(fields)}")

    try:
        transaction_type = TransactionType(fields[0].lower())
    except ValueError:
        raise TransactionParseError(f"unknown transaction type {fields[0]!r}") from None

    client_id = _parse_identifier(fields[1], "client", MAX_CLIENT_ID)
    transaction_id = _parse_identifier(fields[2], "tx", MAX_TRANSACTION_ID)

    amount = None
    if transaction_type.carries_amount:
        amount = _parse_amount(fields[3] if len(fields) == 4 else "")

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def decode_lines(binary: BinaryIO, encoding: str = "utf-8") -> Iterator[str]:
    """
    Decode a byte stream one line at a time.

    A bad byte sequence raises UnicodeDecodeError only when its own line is
    reached, so every line before it is still delivered.
    """
    for line in binary:
        yield line.decode(encoding)


def read_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """
    Yield transactions from CSV text in file order.

    The header row is optional and blank lines are skipped. The first line
    that cannot be decoded, split or parsed is logged and ends the stream;
    lines after it are never read.
    """
    reader = csv.reader(lines)
    first_row = True
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except UnicodeDecodeError as e:
            # The failing line was never handed to the reader, so it is not counted yet.
            logger.error(f"Failed to decode line {reader.line_num + 1}: {e}. Stopping ingestion")
            return
        except csv.Error as e:
            logger.error(f"Failed to read line {reader.line_num}: {e}. Stopping ingestion")
            return

        if not any(value.strip() for value in row):
            continue
        if first_row:
            first_row = False
            if row[0].strip().lower() == HEADER_FIRST_FIELD:
                continue

        try:
            transaction = parse_row(row)
        except TransactionParseError as e:
            logger.error(f"Failed to parse line {reader.line_num} {row}: {e}. Stopping ingestion")
            return
        yield transaction
