# tabsplit/app.py
import logging

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .balances import summarize_members
from .config import DefaultConfig
from .exceptions import InvalidPayloadError, TabsplitError
from .payloads import parse_group, parse_legacy_expenses
from .settlement import settle_group


def _engine_options():
    return {
        "tolerance": str(current_app.config["SETTLEMENT_TOLERANCE"]),
        "strict": bool(current_app.config["STRICT_VALIDATION"]),
    }


def _body():
    data = request.get_json(silent=True)
    if data is None:
        raise InvalidPayloadError("Request body must be JSON")
    return data


def _balance_rows(members, balances):
    return [
        {"member": m.id, "name": m.display_name, "balance": str(balances[m.id])}
        for m in members
    ]


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_object(DefaultConfig)
    app.config.from_prefixed_env("TABSPLIT")
    if config:
        app.config.update(config)

    logging.getLogger("tabsplit").setLevel(app.config["LOG_LEVEL"])
    CORS(app, origins=app.config["CORS_ORIGINS"])  # lets the frontend call us from another origin

    @app.errorhandler(TabsplitError)
    def handle_tabsplit_error(e):
        app.logger.info("Rejected request: %s", e)
        return jsonify({"error": str(e), "type": type(e).__name__}), e.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.exception("Unhandled error on %s", request.path)
        return jsonify({"error": str(e)}), 500

    # --- health check ---
    @app.route('/api', methods=['GET'])
    def health_check():
        return jsonify({"status": "healthy", "message": "Backend is running!"})

    @app.route('/api/balances', methods=['POST'])
    def balances():
        members, expenses, payments = parse_group(_body())
        summaries = summarize_members(members, expenses, payments, **_engine_options())
        return jsonify({
            "balances": [
                {"member": s.member.id, "name": s.member.display_name, "balance": str(s.balance)}
                for s in summaries
            ],
            "summaries": [s.to_dict() for s in summaries],
        })

    @app.route('/api/settlements', methods=['POST'])
    def settlements():
        members, expenses, payments = parse_group(_body())
        result = settle_group(members, expenses, payments, **_engine_options())
        names = {m.id: m.display_name for m in members}
        return jsonify({
            "balances": _balance_rows(members, result.balances),
            "settlements": [
                dict(s.to_dict(), description=s.describe(names)) for s in result.settlements
            ],
        })

    # Original GroupTab endpoint: list of {payer, amount, involved} in, sentences out
    @app.route('/api/calculate', methods=['POST'])
    def calculate():
        members, expenses = parse_legacy_expenses(_body())
        result = settle_group(members, expenses, **_engine_options())
        lines = [s.describe() for s in result.settlements]
        return jsonify(lines if len(lines) > 0 else ["No debts found!"])

    return app
