"""
API: Análisis de ventas
Totales, productos más vendidos, clientes y facturación por mes/semana
"""
import logging

from flask import Blueprint, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from ..models import Order
from ..utils.dates import get_week_start, to_local_date
from ..utils.money import to_float

logger = logging.getLogger(__name__)

bp = Blueprint("analytics", __name__)

NO_PHONE = "Sin teléfono"
WEEKS_SHOWN = 8


def product_stats(orders):
    """
    Agrupa por (burger_type, patty_size, combo).

    El monto de cada pedido se reparte en partes iguales entre sus líneas:
    no hay precio por item confiable.
    """
    products = {}
    for order in orders:
        items = order.items or []
        if not items:
            continue
        share = to_float(order.monto) / len(items)
        for item in items:
            burger_type = (item.get("burger_type") or "").strip()
            if not burger_type:
                continue
            key = (burger_type, item.get("patty_size") or "simple", bool(item.get("combo")))
            current = products.setdefault(key, {
                "producto": key[0],
                "patty_size": key[1],
                "combo": key[2],
                "cantidad": 0,
                "ingresos": 0.0,
            })
            current["cantidad"] += item.get("quantity") or 1
            current["ingresos"] += share

    return sorted(products.values(), key=lambda p: p["cantidad"], reverse=True)


def customer_stats(orders):
    """Clientes agrupados por teléfono, ordenados por lo que gastaron"""
    customers = {}
    for order in orders:
        key = order.telefono or NO_PHONE
        current = customers.setdefault(key, {"cliente": key, "total_pedidos": 0, "total_gastado": 0.0})
        current["total_pedidos"] += 1
        current["total_gastado"] += to_float(order.monto)

    return sorted(customers.values(), key=lambda c: c["total_gastado"], reverse=True)


def revenue_by_period(orders, tz_name):
    """Facturación por mes (YYYY-MM) y por semana (lunes, últimas 8)"""
    monthly = {}
    weekly = {}
    for order in orders:
        if not order.created_at:
            continue
        local_date = to_local_date(order.created_at, tz_name)
        month_key = local_date.strftime("%Y-%m")
        week_key = get_week_start(local_date).isoformat()
        monthly[month_key] = monthly.get(month_key, 0.0) + to_float(order.monto)
        weekly[week_key] = weekly.get(week_key, 0.0) + to_float(order.monto)

    monthly_data = [{"period": k, "ingresos": v} for k, v in sorted(monthly.items())]
    weekly_data = [{"period": k, "ingresos": v} for k, v in sorted(weekly.items())][-WEEKS_SHOWN:]
    return monthly_data, weekly_data


def calculate_analytics(orders, tz_name):
    monthly, weekly = revenue_by_period(orders, tz_name)
    return {
        "total_orders": len(orders),
        "total_revenue": sum(to_float(order.monto) for order in orders),
        "products": product_stats(orders),
        "customers": customer_stats(orders),
        "monthly_revenue": monthly,
        "weekly_revenue": weekly,
    }


@bp.route("", methods=["GET"])
def get_analytics():
    """Métricas de ventas sobre todos los pedidos guardados"""
    try:
        orders = Order.query.order_by(Order.created_at.desc()).all()
    except SQLAlchemyError as e:
        logger.error("Error leyendo pedidos para analytics: %s", e)
        return jsonify({"error": "Database error", "details": str(e)}), 500

    return jsonify(calculate_analytics(orders, current_app.config["LOCAL_TIMEZONE"]))
