"""
API: Pedidos
Recepción desde el bot, edición, cancelación, consulta de estado,
reimpresión y acciones del tablero de cocina
"""
import json
import logging

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from ..schemas import OrderEdit, OrderLookup, intake_adapter, validation_details
from ..services import order_store, webhooks
from ..services.order_diff import compare_orders
from ..services.order_store import OrderStoreError
from ..services.tickets import (
    CASHIER,
    KITCHEN,
    TICKET_KINDS,
    render_cancel_ticket,
    render_html_ticket,
    render_ticket,
)
from ..utils.dates import minutes_between, utcnow

logger = logging.getLogger(__name__)

bp = Blueprint("orders", __name__)

ORDER_STATUSES = ("pending", "completed")


def _read_json():
    """
    Lee el body como JSON.

    Returns:
        (data, None) o (None, respuesta de error 400)
    """
    raw_body = request.get_data(as_text=True)
    logger.debug("Raw request body: %s", raw_body)
    try:
        data = json.loads(raw_body)
    except json.JSONDecodeError as e:
        logger.warning("JSON inválido: %s", e)
        return None, (jsonify({"error": "Invalid JSON format", "details": str(e)}), 400)

    if not isinstance(data, dict):
        return None, (jsonify({"error": "Invalid JSON format", "details": "Body must be a JSON object"}), 400)
    return data, None


def _invalid(message, error):
    return jsonify({"error": message, "details": validation_details(error)}), 400


def _with_webhook_errors(body, webhook_errors):
    if webhook_errors:
        body["webhookErrors"] = webhook_errors
    return body


def _load_order(order_id):
    """(pedido, None) o (None, respuesta 404/500)"""
    try:
        order = order_store.get_order(order_id)
    except OrderStoreError as e:
        return None, (jsonify({"error": "Database error", "details": str(e)}), 500)
    if order is None:
        return None, (jsonify({"error": "Order not found"}), 404)
    return order, None


def _print_new_order(order_data):
    kitchen_ticket = render_ticket(KITCHEN, order_data)
    cashier_ticket = render_ticket(CASHIER, order_data)
    kitchen, cashier = webhooks.new_order_payloads(order_data, kitchen_ticket, cashier_ticket)
    return webhooks.dispatch(kitchen, cashier)


@bp.route("/receive", methods=["POST"])
def receive_order():
    """Recibe un pedido nuevo del bot (items estructurados o texto en `pedido`)"""
    data, error = _read_json()
    if error:
        return error

    try:
        intake = intake_adapter.validate_python(data)
    except ValidationError as e:
        return _invalid("Missing or invalid fields: nombre, items/pedido, monto", e)

    items, pedido = intake.resolve_items()

    try:
        order = order_store.create_order(
            nombre=intake.nombre,
            items=items,
            monto=intake.monto,
            telefono=intake.telefono,
            direccion_envio=intake.direccion_envio,
            metodo_pago=intake.metodo_pago,
            pedido=pedido,
            now=utcnow(),
        )
    except OrderStoreError as e:
        return jsonify({"error": "Database error", "details": str(e)}), 500

    order_data = order.to_dict()
    webhook_errors = _print_new_order(order_data)

    return jsonify(_with_webhook_errors({"success": True, "order": order_data}, webhook_errors))


@bp.route("/edit", methods=["POST"])
def edit_order():
    """
    Edita el pedido de hoy con ese order_number.

    Solo se tocan los campos enviados. Si cambiaron items se imprime en
    cocina lo que hay que quitar/agregar; caja recibe el pedido completo
    ante cualquier cambio.
    """
    data, error = _read_json()
    if error:
        return error

    try:
        payload = OrderEdit.model_validate(data)
    except ValidationError as e:
        return _invalid("order_number is required", e)

    now = utcnow()
    try:
        existing = order_store.find_today_order(payload.order_number, now)
    except OrderStoreError as e:
        return jsonify({"error": "Database error", "details": str(e)}), 500

    if existing is None:
        return jsonify({"error": "Order not found"}), 404

    before = existing.to_dict()
    updates = payload.updates()

    try:
        order = order_store.update_order(existing, updates)
    except OrderStoreError as e:
        return jsonify({"error": "Failed to update order", "details": str(e)}), 500

    order_data = order.to_dict()
    changes = compare_orders(before, updates)

    if not changes.must_notify:
        return jsonify({"success": True, "order": order_data})

    kitchen_ticket = render_ticket(KITCHEN, order_data, changes)
    cashier_ticket = render_ticket(CASHIER, order_data, changes)
    kitchen, cashier = webhooks.modification_payloads(order_data, changes, kitchen_ticket, cashier_ticket)
    webhook_errors = webhooks.dispatch(kitchen, cashier)

    body = {
        "success": True,
        "order": order_data,
        "added": changes.added,
        "removed": changes.removed,
        "isSwap": changes.is_swap,
    }
    return jsonify(_with_webhook_errors(body, webhook_errors))


@bp.route("/delete", methods=["POST"])
def delete_order():
    """Cancela un pedido de hoy, solo dentro de los primeros minutos"""
    data, error = _read_json()
    if error:
        return error

    try:
        lookup = OrderLookup.model_validate(data)
    except ValidationError as e:
        return _invalid("order_number is required", e)

    now = utcnow()
    try:
        existing = order_store.find_today_order(lookup.order_number, now)
    except OrderStoreError as e:
        return jsonify({"error": "Database error", "details": str(e)}), 500

    if existing is None:
        return jsonify({"error": "Order not found"}), 404

    grace_minutes = current_app.config["DELETE_GRACE_MINUTES"]
    if minutes_between(existing.created_at, now) > grace_minutes:
        return jsonify({
            "error": "Cannot delete order",
            "details": f"Order is older than {grace_minutes} minutes and cannot be deleted",
        }), 403

    kitchen, cashier = webhooks.cancel_payloads(
        existing.order_number,
        existing.nombre,
        render_cancel_ticket(KITCHEN, existing.order_number, existing.nombre),
        render_cancel_ticket(CASHIER, existing.order_number, existing.nombre),
    )
    webhook_errors = webhooks.dispatch(kitchen, cashier)

    try:
        order_store.delete_order(existing)
    except OrderStoreError as e:
        return jsonify({"error": "Failed to delete order", "details": str(e)}), 500

    body = {
        "success": True,
        "message": "Order deleted successfully",
        "order_number": lookup.order_number,
    }
    return jsonify(_with_webhook_errors(body, webhook_errors))


@bp.route("/status", methods=["POST"])
def get_order_status():
    """Estado del pedido de hoy (para que el bot le responda al cliente)"""
    data, error = _read_json()
    if error:
        return error

    try:
        lookup = OrderLookup.model_validate(data)
    except ValidationError as e:
        return _invalid("order_number is required", e)

    try:
        order = order_store.find_today_order(lookup.order_number, utcnow())
    except OrderStoreError as e:
        return jsonify({"error": "Database error", "details": str(e)}), 500

    if order is None:
        return jsonify({
            "found": False,
            "message": f"No se encontró el pedido #{lookup.order_number} de hoy",
        })

    if order.cadete_salio:
        message = f"El cadete ya salió con el pedido #{order.order_number}"
    else:
        state = "pendiente" if order.status == "pending" else "listo"
        message = f"El pedido #{order.order_number} está {state} pero el cadete aún no salió"

    return jsonify({
        "found": True,
        "order_number": order.order_number,
        "status": order.status,
        "cadete_salio": bool(order.cadete_salio),
        "nombre": order.nombre,
        "direccion_envio": order.direccion_envio,
        "message": message,
    })


@bp.route("/print", methods=["POST"])
def print_order():
    """
    Reimprime los tickets de un pedido.

    Con solo `order_number` usa el pedido guardado de hoy; con el pedido
    completo en el body imprime eso tal cual.
    """
    data, error = _read_json()
    if error:
        return error

    try:
        lookup = OrderLookup.model_validate(data)
    except ValidationError as e:
        return _invalid("order_number is required", e)

    if "nombre" in data:
        try:
            intake = intake_adapter.validate_python(data)
        except ValidationError as e:
            return _invalid("Missing or invalid fields: nombre, items/pedido, monto", e)
        items, pedido = intake.resolve_items()
        order_data = {
            "order_number": lookup.order_number,
            "nombre": intake.nombre,
            "telefono": intake.telefono,
            "direccion_envio": intake.direccion_envio,
            "metodo_pago": intake.metodo_pago,
            "monto": intake.monto,
            "items": items,
            "pedido": pedido,
        }
    else:
        try:
            order = order_store.find_today_order(lookup.order_number, utcnow())
        except OrderStoreError as e:
            return jsonify({"error": "Database error", "details": str(e)}), 500
        if order is None:
            return jsonify({"error": "Order not found"}), 404
        order_data = order.to_dict()

    logger.info("Reimprimiendo pedido #%s", lookup.order_number)
    webhook_errors = _print_new_order(order_data)

    return jsonify(_with_webhook_errors(
        {"success": True, "order_number": lookup.order_number},
        webhook_errors,
    ))


@bp.route("", methods=["GET"])
def get_orders():
    """Lista pedidos para los tableros (pendientes o completados)"""
    status = request.args.get("status")
    if status and status not in ORDER_STATUSES:
        return jsonify({"error": f"status debe ser uno de: {', '.join(ORDER_STATUSES)}"}), 400

    try:
        orders = order_store.list_orders(status)
    except OrderStoreError as e:
        return jsonify({"error": "Database error", "details": str(e)}), 500
    return jsonify([order.to_dict() for order in orders])


@bp.route("/<int:id>/items/<int:index>/toggle", methods=["PUT"])
def toggle_item(id, index):
    """Marca/desmarca un item como preparado en el tablero de cocina"""
    order, error = _load_order(id)
    if error:
        return error

    if index >= len(order.item_status or []):
        return jsonify({"error": "Item not found"}), 404

    try:
        item = order_store.toggle_item_status(order, index)
    except OrderStoreError as e:
        return jsonify({"error": "No se pudo actualizar el estado del item", "details": str(e)}), 500

    return jsonify({"success": True, "item": item, "order": order.to_dict()})


@bp.route("/<int:id>/complete", methods=["PUT"])
def complete_order(id):
    """Marca un pedido como completado"""
    order, error = _load_order(id)
    if error:
        return error

    try:
        order_store.mark_completed(order, utcnow())
    except OrderStoreError as e:
        return jsonify({"error": "No se pudo marcar el pedido como completado", "details": str(e)}), 500

    return jsonify(order.to_dict())


@bp.route("/<int:id>/dispatch", methods=["PUT"])
def dispatch_order(id):
    """Registra que el cadete salió con el pedido"""
    order, error = _load_order(id)
    if error:
        return error

    try:
        order_store.mark_dispatched(order)
    except OrderStoreError as e:
        return jsonify({"error": "No se pudo actualizar el pedido", "details": str(e)}), 500

    return jsonify(order.to_dict())


@bp.route("/<int:id>/ticket", methods=["GET"])
def order_ticket(id):
    """Ticket HTML para imprimir desde el navegador"""
    kind = request.args.get("kind", CASHIER)
    if kind not in TICKET_KINDS:
        return jsonify({"error": f"kind debe ser uno de: {', '.join(TICKET_KINDS)}"}), 400

    order, error = _load_order(id)
    if error:
        return error

    html = render_html_ticket(kind, order.to_dict())
    return Response(html, mimetype="text/html")
