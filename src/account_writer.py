import csv
from decimal import Decimal
from typing import Iterable, TextIO

from models import AMOUNT_CONTEXT, AMOUNT_PRECISION, ClientAccount

FIELDNAMES = ["client", "available", "held", "total", "locked"]


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(AMOUNT_PRECISION, context=AMOUNT_CONTEXT):f}"


def write_accounts(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    """Write one CSV row per account, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(FIELDNAMES)
    for account in sorted(accounts, key=lambda a: a.client_id):
        writer.writerow([
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
