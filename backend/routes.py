"""
AUTHNOTIFY API ROUTES - FLASK BLUEPRINT

JSON endpoints behind the authenticator UI: the account list with live
codes, add / rename / delete, settings (notifications, theme) and a preview
of the periodic notification.

EXAMPLES:
curl http://localhost:5000/api/accounts
curl -X POST http://localhost:5000/api/accounts -H "Content-Type: application/json" \
     -d '{"name": "github", "secret": "JBSW Y3DP EHPK 3PXP"}'
curl -X PUT http://localhost:5000/api/settings -H "Content-Type: application/json" -d '{"enabled": true}'
"""
import logging

from flask import Blueprint, abort, current_app, jsonify, request

from core import NOTIFICATION_TITLE, format_notification, generate_codes, now, seconds_remaining
from database import db_manager

logger = logging.getLogger(__name__)

otp_bp = Blueprint('otp', __name__, url_prefix='/api')


def _db():
    return current_app.config["DATABASE_FILE"]


def _step():
    return current_app.config["TIME_STEP"]


def _provider():
    return current_app.extensions["authnotify.provider"]


def _scheduler():
    return current_app.extensions["authnotify.scheduler"]


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="JSON object body required")
    return data


@otp_bp.route('/accounts', methods=['GET'])
def list_accounts():
    """
    ACCOUNT LIST WITH CURRENT CODES

      curl http://localhost:5000/api/accounts

    Accounts whose secret fails get an "error" field instead of "code".
    """
    timestamp = now()
    step = _step()
    results = generate_codes(db_manager.list_accounts(_db()), timestamp, step, _provider())

    accounts = []
    for r in results:
        item = {"id": r.account_id, "name": r.name}
        if r.ok:
            item["code"] = r.code
        else:
            item["error"] = "Code generation error"
            logger.warning("Account %s ('%s'): %s", r.account_id, r.name, r.error)
        accounts.append(item)

    return jsonify({
        "accounts": accounts,
        "remaining": seconds_remaining(timestamp, step),
        "period": step,
    })


@otp_bp.route('/accounts', methods=['POST'])
def add_account():
    """
    ADD ACCOUNT

    Body: {"name": "github", "secret": "JBSWY3DPEHPK3PXP"}
    Whitespace inside the secret is removed; the secret must produce a code.
    """
    data = _json_body()
    ok, result = db_manager.add_account(
        data.get("name", ""), data.get("secret", ""), _db(), provider=_provider()
    )
    if not ok:
        return jsonify({"error": result}), 400

    account = db_manager.get_account(result, _db())
    return jsonify({"id": account.id, "name": account.name}), 201


@otp_bp.route('/accounts/<int:account_id>', methods=['PATCH'])
def rename_account(account_id):
    """Body: {"name": "new name"}. Empty or unchanged names are ignored."""
    data = _json_body()
    if "name" not in data:
        return jsonify({"error": "name is required"}), 400
    if not isinstance(data["name"], str):
        return jsonify({"error": "name must be a string"}), 400
    try:
        renamed = db_manager.rename_account(account_id, data["name"], _db())
    except KeyError:
        abort(404, description=f"Account {account_id} not found")

    account = db_manager.get_account(account_id, _db())
    return jsonify({"id": account.id, "name": account.name, "renamed": renamed})


@otp_bp.route('/accounts/<int:account_id>', methods=['DELETE'])
def delete_account(account_id):
    if not db_manager.delete_account(account_id, _db()):
        abort(404, description=f"Account {account_id} not found")
    return jsonify({"deleted": True, "id": account_id})


def _settings_payload(settings):
    payload = settings.to_dict()
    payload["scheduler_running"] = _scheduler().running
    return payload


@otp_bp.route('/settings', methods=['GET'])
def get_settings():
    return jsonify(_settings_payload(db_manager.get_settings(_db())))


@otp_bp.route('/settings', methods=['PUT'])
def update_settings():
    """
    UPDATE SETTINGS

    Body (any subset): {"enabled": true, "dark_mode": false, "interval": 30}
    enabled=true starts the notification scheduler, enabled=false stops it.
    """
    data = _json_body()
    try:
        settings = db_manager.update_settings(_db(), **data)
    except (TypeError, ValueError) as e:
        return jsonify({"error": str(e)}), 400

    scheduler = _scheduler()
    scheduler.interval = settings.interval
    if "enabled" in data:
        if settings.enabled:
            scheduler.start()
        else:
            scheduler.stop()
    return jsonify(_settings_payload(settings))


@otp_bp.route('/theme/toggle', methods=['POST'])
def toggle_theme():
    return jsonify({"dark_mode": db_manager.toggle_dark_mode(_db())})


@otp_bp.route('/notification', methods=['GET'])
def preview_notification():
    """The notification the scheduler would send right now (nothing is sent)."""
    results = generate_codes(db_manager.list_accounts(_db()), now(), _step(), _provider())
    return jsonify({
        "title": NOTIFICATION_TITLE,
        "message": format_notification(results),
        "failed": [r.name for r in results if not r.ok],
    })
