"""
Servicio: Acceso a la tabla de pedidos
Todas las lecturas y escrituras de pedidos pasan por acá. No hay cache:
cada request vuelve a leer de la base.
"""
import logging

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from ..db import db
from ..models import Order
from ..utils.dates import local_day_start, utcnow

logger = logging.getLogger(__name__)


class OrderStoreError(Exception):
    """Error de la base al leer o escribir pedidos"""


def build_item_status(items):
    """Un estado por item, en la misma posición, todos sin completar"""
    return [{**item, "completed": False} for item in items or []]


def today_start(now=None):
    return local_day_start(now or utcnow(), current_app.config["LOCAL_TIMEZONE"])


def next_daily_order_number(now=None):
    """
    Siguiente número de pedido del día (empieza en 1 cada medianoche local).

    No hay lock: dos pedidos simultáneos pueden obtener el mismo número.
    """
    start = today_start(now)
    current_max = db.session.query(func.max(Order.order_number)).filter(
        Order.created_at >= start
    ).scalar()
    return (current_max or 0) + 1


def _commit(action, order_number):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Error de base al %s el pedido #%s: %s", action, order_number, e)
        raise OrderStoreError(str(e)) from e


def create_order(nombre, items, monto, telefono=None, direccion_envio=None,
                 metodo_pago="efectivo", pedido=None, now=None):
    """Inserta un pedido pendiente con su item_status derivado"""
    now = now or utcnow()
    try:
        order_number = next_daily_order_number(now)
    except SQLAlchemyError as e:
        logger.error("Error generando número de pedido: %s", e)
        raise OrderStoreError("Error generating order number") from e

    order = Order(
        order_number=order_number,
        nombre=nombre,
        telefono=telefono,
        items=items,
        item_status=build_item_status(items),
        pedido=pedido,
        monto=monto,
        direccion_envio=direccion_envio,
        metodo_pago=metodo_pago or "efectivo",
        status="pending",
        created_at=now,
    )
    db.session.add(order)
    _commit("crear", order_number)

    logger.info("🧾 Pedido #%s creado para %s (%d items)", order.order_number, nombre, len(items))
    return order


def find_today_order(order_number, now=None):
    """El pedido más reciente con ese número creado desde la medianoche local"""
    try:
        return (
            Order.query.filter(
                Order.order_number == order_number,
                Order.created_at >= today_start(now),
            )
            .order_by(Order.created_at.desc(), Order.id.desc())
            .first()
        )
    except SQLAlchemyError as e:
        logger.error("Error buscando el pedido #%s: %s", order_number, e)
        raise OrderStoreError(str(e)) from e


def get_order(order_id):
    try:
        return db.session.get(Order, order_id)
    except SQLAlchemyError as e:
        logger.error("Error leyendo el pedido id=%s: %s", order_id, e)
        raise OrderStoreError(str(e)) from e


def list_orders(status=None):
    """Pendientes del más viejo al más nuevo; el resto del más nuevo al más viejo"""
    query = Order.query
    if status:
        query = query.filter_by(status=status)
    if status == "pending":
        query = query.order_by(Order.created_at.asc())
    else:
        query = query.order_by(Order.created_at.desc())
    try:
        return query.all()
    except SQLAlchemyError as e:
        logger.error("Error listando pedidos (status=%s): %s", status, e)
        raise OrderStoreError(str(e)) from e


def update_order(order, updates):
    """
    Aplica una edición parcial.

    Si cambian los items, item_status se vuelve a generar completo
    (todo sin completar) para mantener la correspondencia por posición.
    """
    for field_name, value in updates.items():
        if field_name == "items":
            order.items = value
            order.item_status = build_item_status(value)
        else:
            setattr(order, field_name, value)

    _commit("actualizar", order.order_number)
    logger.info("✏️ Pedido #%s actualizado (%s)", order.order_number, ", ".join(sorted(updates)) or "sin campos")
    return order


def delete_order(order):
    order_number = order.order_number
    db.session.delete(order)
    _commit("eliminar", order_number)
    logger.info("🗑️ Pedido #%s eliminado", order_number)


def toggle_item_status(order, index):
    """Marca o desmarca un item en el tablero de cocina"""
    statuses = [dict(status) for status in (order.item_status or [])]
    statuses[index]["completed"] = not statuses[index].get("completed", False)
    # reasignar la lista para que SQLAlchemy detecte el cambio en la columna JSON
    order.item_status = statuses
    _commit("actualizar", order.order_number)
    return statuses[index]


def mark_completed(order, now=None):
    order.status = "completed"
    order.completed_at = now or utcnow()
    _commit("completar", order.order_number)
    logger.info("✅ Pedido #%s completado", order.order_number)
    return order


def mark_dispatched(order):
    order.cadete_salio = True
    _commit("despachar", order.order_number)
    logger.info("🛵 Salió el cadete con el pedido #%s", order.order_number)
    return order
