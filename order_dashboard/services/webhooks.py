"""
Servicio: Envío de tickets a las impresoras
Postea los tickets a las automatizaciones de cocina y caja. Los errores se
juntan y se devuelven como aviso: nunca deshacen el pedido ya guardado
"""
import logging
from concurrent.futures import ThreadPoolExecutor

import requests
from flask import current_app

from .tickets import KITCHEN, CASHIER, encode_ticket

logger = logging.getLogger(__name__)

WEBHOOK_LABELS = {KITCHEN: "Kitchen", CASHIER: "Cashier"}


def get_webhook_urls():
    """URLs de cocina y caja desde la config de la app"""
    return {
        KITCHEN: current_app.config["KITCHEN_WEBHOOK_URL"],
        CASHIER: current_app.config["CASHIER_WEBHOOK_URL"],
    }


def post_ticket(kind, url, payload, timeout):
    """
    Envía un payload a un destino.

    Returns:
        None si salió bien, o {"type": kind, "error": mensaje}
    """
    label = WEBHOOK_LABELS.get(kind, kind)
    try:
        response = requests.post(url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        logger.error("❌ %s webhook error (pedido #%s): %s", label, payload.get("order_number"), e)
        return {"type": kind, "error": str(e)}

    if not response.ok:
        message = f"{label} webhook failed: {response.status_code} - {response.text}"
        logger.error("❌ %s", message)
        return {"type": kind, "error": message}

    logger.info("🖨️ %s webhook enviado (pedido #%s)", label, payload.get("order_number"))
    return None


def dispatch(kitchen_payload, cashier_payload):
    """
    Envía los tickets a cocina y caja en paralelo.

    Caja se intenta siempre; cocina solo si hay payload (el ticket de cocina
    se suprime cuando una edición no toca items). Un destino caído no
    bloquea al otro.

    Args:
        kitchen_payload: dict o None
        cashier_payload: dict

    Returns:
        Lista de errores por destino (vacía si todo salió bien)
    """
    urls = get_webhook_urls()
    timeout = current_app.config["WEBHOOK_TIMEOUT_SECONDS"]

    jobs = [(CASHIER, cashier_payload)]
    if kitchen_payload is not None:
        jobs.insert(0, (KITCHEN, kitchen_payload))
    else:
        logger.info("Se omite el webhook de cocina (pedido #%s)", cashier_payload.get("order_number"))

    with ThreadPoolExecutor(max_workers=len(jobs)) as executor:
        futures = [
            executor.submit(post_ticket, kind, urls[kind], payload, timeout)
            for kind, payload in jobs
        ]
        results = [future.result() for future in futures]

    return [error for error in results if error]


def new_order_payloads(order, kitchen_ticket, cashier_ticket):
    """Payloads de un pedido nuevo (o reimpresión)"""
    kitchen = {
        "order_number": order["order_number"],
        "ticket": encode_ticket(kitchen_ticket),
        "items": order.get("items") or [],
        "nombre": order.get("nombre"),
    }
    cashier = {
        "order_number": order["order_number"],
        "ticket": encode_ticket(cashier_ticket),
        "nombre": order.get("nombre"),
        "telefono": order.get("telefono"),
        "monto": order.get("monto"),
        "metodo_pago": order.get("metodo_pago"),
        "items": order.get("items") or [],
        "direccion_envio": order.get("direccion_envio"),
    }
    return kitchen, cashier


def modification_payloads(order, changes, kitchen_ticket, cashier_ticket):
    """Payloads de una edición. Cocina es None si su ticket se suprimió."""
    common = {
        "order_number": order["order_number"],
        "nombre": order.get("nombre"),
        "items": order.get("items") or [],
        "items_added": changes.added,
        "items_removed": changes.removed,
        "is_swap": changes.is_swap,
        "tipo": "modificacion",
        "telefono": order.get("telefono"),
        "direccion_envio": order.get("direccion_envio"),
        "monto": order.get("monto"),
        "metodo_pago": order.get("metodo_pago"),
    }

    kitchen = None
    if kitchen_ticket is not None:
        kitchen = {**common, "ticket": encode_ticket(kitchen_ticket)}

    cashier = {
        **common,
        "ticket": encode_ticket(cashier_ticket),
        "address_changed": changes.address_changed,
        "phone_changed": changes.phone_changed,
        "payment_changed": changes.payment_changed,
    }
    return kitchen, cashier


def cancel_payloads(order_number, nombre, kitchen_ticket, cashier_ticket):
    """Payloads de cancelación para ambos destinos"""
    kitchen = {
        "order_number": order_number,
        "ticket": encode_ticket(kitchen_ticket),
        "nombre": nombre,
        "type": "cancel",
    }
    cashier = {**kitchen, "ticket": encode_ticket(cashier_ticket)}
    return kitchen, cashier
