# database.py
# Read-only access to the external pledge ledger store (sqlite).
# The CRUD layer owns the schema and every write; this module only reads.
# Store columns are snake_case; camelCase keys only arrive in API payloads.
import logging
import os
import sqlite3
from pathlib import Path

import config
from ledger import PledgeLedger
from pledges import Currency, parse_enum, pledge_from_record

logger = logging.getLogger(__name__)

PLEDGE_COLUMNS = (
    'id', 'family_id', 'amount', 'currency', 'description', 'pledge_date',
    'due_date', 'donation_date', 'is_annual_pledge', 'status',
    'fulfilled_amount', 'fulfilled_date', 'connected_events',
    'is_anonymous', 'notes',
)
_SELECT_PLEDGES = f"SELECT {', '.join(PLEDGE_COLUMNS)} FROM pledges"


def get_db_connection(path=None):
    path = path or config.get_settings().LEDGER_DB
    if not os.path.exists(path):
        raise FileNotFoundError(f"Ledger store not found: {path}")
    conn = sqlite3.connect(f"{Path(path).resolve().as_uri()}?mode=ro", uri=True)
    conn.row_factory = sqlite3.Row
    return conn


def load_pledges(family_id=None, path=None):
    """All pledges, or one family's, ordered by pledge date"""
    conn = get_db_connection(path)
    try:
        if family_id is None:
            rows = conn.execute(f'{_SELECT_PLEDGES} ORDER BY pledge_date, id').fetchall()
        else:
            rows = conn.execute(
                f'{_SELECT_PLEDGES} WHERE family_id = ? ORDER BY pledge_date, id',
                (family_id,)).fetchall()
    finally:
        conn.close()

    pledges = [pledge_from_record(row) for row in rows]
    logger.info("Loaded %d pledges%s", len(pledges),
                f" for family {family_id}" if family_id is not None else "")
    return pledges


def load_ledger(path=None):
    return PledgeLedger(load_pledges(path=path))


def get_family_currency(family_id, path=None, default_currency=None):
    """The family's declared currency, or default_currency if it has none.

    default_currency falls back to the PLEDGE_DEFAULT_CURRENCY setting.
    """
    conn = get_db_connection(path)
    try:
        row = conn.execute('SELECT currency FROM families WHERE id = ?', (family_id,)).fetchone()
    finally:
        conn.close()
    if row is None or not row['currency']:
        default_currency = default_currency or config.get_settings().DEFAULT_CURRENCY
        return parse_enum(Currency, default_currency, 'currency')
    return parse_enum(Currency, row['currency'], 'currency')
