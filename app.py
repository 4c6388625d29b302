from flask import Flask, jsonify, request
from datetime import date

import config
from database import get_family_currency, load_pledges
from due_dates import default_due_date
from errors import (InconsistentFulfillmentError, InvalidArgumentError,
                    InvalidTransitionError, LedgerError)
from fiscal_year import current_window
from hebrew_dates import (erev_rosh_hashana, format_hebrew_date, is_leap_year,
                          parse_iso_date, to_hebrew, year_type)
from ledger import overdue_candidates
from pledge_totals import format_pledge_totals, pledge_breakdown, summarize

settings = config.get_settings()

app = Flask(__name__)
app.config['LEDGER_DATABASE'] = settings.LEDGER_DB
app.config['DEFAULT_CURRENCY'] = settings.DEFAULT_CURRENCY
app.config['DUE_DATE_LEAD_DAYS'] = settings.DUE_DATE_LEAD_DAYS


def get_as_of():
    # The only place that reads the clock; everything below takes as_of explicitly
    value = request.args.get('as_of')
    return parse_iso_date(value) if value else date.today()


# ─── ERRORS ───
@app.errorhandler(LedgerError)
def handle_ledger_error(e):
    if isinstance(e, (InvalidTransitionError, InconsistentFulfillmentError)):
        status = 422
    else:
        status = 400
    body = {'error': type(e).__name__, 'message': str(e)}
    if isinstance(e, InvalidTransitionError):
        body['allowed'] = list(e.allowed)
    app.logger.warning('%s %s -> %s: %s', request.method, request.path, status, e)
    return jsonify(body), status


@app.errorhandler(FileNotFoundError)
def handle_missing_store(e):
    app.logger.error('Ledger store unavailable: %s', e)
    return jsonify({'error': 'LedgerUnavailable', 'message': str(e)}), 503


# ─── HEBREW DATE OF A GREGORIAN DATE ───
@app.route('/hebrew-date')
def hebrew_date():
    value = request.args.get('date')
    if not value:
        raise InvalidArgumentError('Query parameter "date" is required')
    g = parse_iso_date(value)
    h = to_hebrew(g)
    return jsonify({
        'gregorian': g.isoformat(),
        'hebrew': format_hebrew_date(h),
        'year': h.year,
        'month': h.month,
        'day': h.day,
        'month_name': h.month_name,
        'leap_year': is_leap_year(h.year),
        'year_type': year_type(h.year).value,
    })


# ─── CURRENT HEBREW FISCAL YEAR ───
@app.route('/hebrew-year')
def hebrew_year():
    as_of = get_as_of()
    window = current_window(as_of)
    data = window.to_dict()
    data['as_of'] = as_of.isoformat()
    data['last_day'] = window.last_day.isoformat()
    data['next_erev_rosh_hashana'] = erev_rosh_hashana(window.hebrew_year + 1).isoformat()
    return jsonify(data)


# ─── DEFAULT DUE DATE FOR A NEW PLEDGE ───
@app.route('/due-date')
def due_date():
    as_of = get_as_of()
    due = default_due_date(as_of, app.config['DUE_DATE_LEAD_DAYS'])
    return jsonify({
        'as_of': as_of.isoformat(),
        'due_date': due.isoformat(),
        'hebrew_year': current_window(due).hebrew_year,
    })


# ─── FAMILY PLEDGE TOTALS FOR THE HEBREW YEAR ───
@app.route('/families/<family_id>/pledge-totals')
def family_pledge_totals(family_id):
    as_of = get_as_of()
    db_path = app.config['LEDGER_DATABASE']
    currency = request.args.get('currency') or get_family_currency(
        family_id, db_path, app.config['DEFAULT_CURRENCY'])
    pledges = load_pledges(family_id, db_path)
    totals = summarize(pledges, as_of, currency)
    return jsonify({
        'family_id': family_id,
        'as_of': as_of.isoformat(),
        'window': current_window(as_of).to_dict(),
        'totals': totals.to_dict(),
        'display': format_pledge_totals(totals),
        'breakdown': pledge_breakdown(totals),
    })


# ─── PLEDGES PAST THEIR DUE DATE ───
@app.route('/families/<family_id>/overdue')
def family_overdue(family_id):
    as_of = get_as_of()
    pledges = load_pledges(family_id, app.config['LEDGER_DATABASE'])
    return jsonify({
        'family_id': family_id,
        'as_of': as_of.isoformat(),
        'pledges': [p.to_dict() for p in overdue_candidates(pledges, as_of)],
    })


if __name__ == '__main__':
    app.run(debug=True)
