"""
Pytest fixtures for testing
"""
import json
import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from app import app as flask_app
from config import get_settings
from pledges import Pledge


@pytest.fixture
def make_pledge():
    """Factory for pledges with sensible defaults."""
    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        fields = {
            'id': f"p{counter['n']}",
            'family_id': 'fam-1',
            'amount': Decimal('100'),
            'pledge_date': date(2025, 1, 10),
        }
        fields.update(overrides)
        return Pledge(**fields)

    return _make


@pytest.fixture
def ledger_db(tmp_path):
    """A small sqlite ledger store shaped like the CRUD layer's tables."""
    path = tmp_path / 'ledger.db'
    conn = sqlite3.connect(path)
    conn.executescript('''
        CREATE TABLE families (id TEXT PRIMARY KEY, currency TEXT);
        CREATE TABLE pledges (
            id TEXT PRIMARY KEY,
            family_id TEXT NOT NULL,
            amount TEXT NOT NULL,
            currency TEXT,
            description TEXT,
            pledge_date TEXT NOT NULL,
            due_date TEXT,
            donation_date TEXT,
            is_annual_pledge INTEGER DEFAULT 0,
            status TEXT DEFAULT 'pending',
            fulfilled_amount TEXT,
            fulfilled_date TEXT,
            connected_events TEXT,
            is_anonymous INTEGER DEFAULT 0,
            notes TEXT
        );
    ''')
    conn.executemany('INSERT INTO families (id, currency) VALUES (?, ?)', [
        ('cohen', 'NIS'),
        ('levi', 'USD'),
    ])
    yahrzeit = json.dumps([{
        'type': 'yahrzeit',
        'description': 'Father',
        'dateType': 'hebrew',
        'hebrewDate': '10 Tevet 5785',
        'memberId': 'm-7',
    }])
    conn.executemany('''
        INSERT INTO pledges (id, family_id, amount, currency, description, pledge_date,
                             due_date, is_annual_pledge, status, fulfilled_amount,
                             fulfilled_date, connected_events)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ''', [
        ('c1', 'cohen', '5000', 'NIS', 'Annual membership', '2025-01-10',
         '2025-09-16', 1, 'partial', '1500', '2025-02-01', yahrzeit),
        ('c2', 'cohen', '300', 'NIS', 'Kiddush', '2025-03-01',
         None, 0, 'fulfilled', '300', '2025-03-05', None),
        ('c3', 'cohen', '180', 'NIS', 'Aliyah', '2024-09-01',
         None, 0, 'pending', None, None, None),
        ('c4', 'cohen', '250', 'NIS', 'Seats', '2025-02-15',
         '2025-04-01', 0, 'pending', None, None, '[]'),
        ('l1', 'levi', '1800', 'USD', 'Building fund', '2025-05-05',
         None, 1, 'pending', None, None, None),
    ])
    conn.commit()
    conn.close()
    return str(path)


@pytest.fixture
def client(ledger_db):
    flask_app.config['TESTING'] = True
    flask_app.config['LEDGER_DATABASE'] = ledger_db
    flask_app.config['DEFAULT_CURRENCY'] = 'NIS'
    with flask_app.test_client() as client:
        yield client


@pytest.fixture
def settings_env(monkeypatch):
    """Set PLEDGE_* variables; settings are reloaded on the next get_settings()."""
    get_settings.cache_clear()

    def _set(**values):
        for name, value in values.items():
            monkeypatch.setenv(f'PLEDGE_{name}', str(value))
        get_settings.cache_clear()

    yield _set
    get_settings.cache_clear()
