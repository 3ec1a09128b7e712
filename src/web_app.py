from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask.json.provider import DefaultJSONProvider
from flask_cors import CORS

from pearlwash.config import AppConfig, default_config
from pearlwash.context import AppContext, build_context
from pearlwash.domain import InvalidInput, Order
from pearlwash.lifecycle import apply_status_update, timeline
from pearlwash.services.booking_service import BookingRequest, ValidationError
from pearlwash.store import RecordNotFound, RecordStore

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)


class RecordJSONProvider(DefaultJSONProvider):
    """Money goes out as JSON numbers, as the seed file stores it."""

    @staticmethod
    def default(o):
        if isinstance(o, Decimal):
            return float(o)
        return DefaultJSONProvider.default(o)


def _ctx() -> AppContext:
    return current_app.extensions["pearlwash"]


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidInput("Request body must be a JSON object")
    return body


def _check_order_shape(body: dict) -> Order:
    try:
        return Order.from_record({**body, "id": 0})
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInput(f"Order payload is incomplete or malformed: {e}") from e


@api.errorhandler(RecordNotFound)
def handle_not_found(e: RecordNotFound):
    label = "Order" if e.collection == "orders" else e.collection.rstrip("s").capitalize()
    return jsonify({"error": f"{label} not found"}), 404


@api.errorhandler(ValidationError)
def handle_validation(e: ValidationError):
    return jsonify({"error": "Please correct the highlighted fields", "fields": e.errors}), 400


@api.errorhandler(InvalidInput)
def handle_invalid(e: InvalidInput):
    return jsonify({"error": str(e)}), 400


@api.route("/")
def home():
    return {"status": "ok", "message": "PearlWash API is running"}, 200


@api.route("/services")
def services_list():
    return jsonify([s.to_record() for s in _ctx().service_repo.list()])


@api.route("/services/<int:service_id>")
def services_get(service_id: int):
    return jsonify(_ctx().service_repo.get(service_id).to_record())


@api.route("/orders", methods=["GET"])
def orders_list():
    return jsonify(_ctx().store.list("orders"))


@api.route("/orders/<int:order_id>", methods=["GET"])
def orders_get(order_id: int):
    return jsonify(_ctx().store.get("orders", order_id))


@api.route("/orders", methods=["POST"])
def orders_create():
    # raw store create; only the record shape is checked, /bookings validates content
    body = _json_body()
    _check_order_shape(body)
    rec = _ctx().store.create("orders", body)
    logger.info("created order #%s via POST /orders", rec["id"])
    return jsonify(rec), 201


@api.route("/orders/<int:order_id>", methods=["PATCH"])
def orders_patch(order_id: int):
    ctx = _ctx()
    body = _json_body()
    current = ctx.store.get("orders", order_id)
    # the merged record must still parse as an order; status goes through the lifecycle check
    merged = _check_order_shape({**current, **{k: v for k, v in body.items() if k != "status"}})
    if "status" in body:
        apply_status_update(merged, body["status"], strict=ctx.orders.strict_transitions)
    rec = ctx.store.update("orders", order_id, body)
    logger.info("patched order #%s keys=%s", order_id, sorted(body))
    return jsonify(rec)


@api.route("/customers")
def customers_list():
    return jsonify(_ctx().customer_repo.list())


@api.route("/bookings", methods=["POST"])
def bookings_create():
    booking = BookingRequest.from_record(_json_body())
    order = _ctx().booking.submit(booking)
    return jsonify(order.to_record()), 201


@api.route("/track")
def track():
    order = _ctx().tracking.track(request.args.get("orderId", ""))
    return jsonify({"order": order.to_record(), "timeline": [s.to_record() for s in timeline(order.status)]})


@api.route("/admin/dashboard")
def admin_dashboard():
    view = _ctx().orders.dashboard(
        status=request.args.get("status", "all"),
        date_range=request.args.get("range", "all"),
        sort=request.args.get("sort", "pickupDate"),
        direction=request.args.get("direction", "desc"),
    )
    return jsonify(view.to_record())


@api.route("/admin/customers")
def admin_customers():
    return jsonify([c.to_record() for c in _ctx().orders.customers()])


@api.route("/admin/customers/<path:customer_name>")
def admin_customer_details(customer_name: str):
    summary = _ctx().orders.customer_details(customer_name)
    return jsonify(summary.to_record(include_orders=True))


def create_app(cfg: Optional[AppConfig] = None, store: Optional[RecordStore] = None) -> Flask:
    cfg = cfg or default_config()
    app = Flask(__name__)
    app.json = RecordJSONProvider(app)
    app.json.sort_keys = False
    app.config["APP_NAME"] = cfg.name

    CORS(app)
    app.extensions["pearlwash"] = build_context(cfg, store)
    app.register_blueprint(api)

    logger.info("%s API ready with %d routes", cfg.name, len(list(app.url_map.iter_rules())))
    return app
