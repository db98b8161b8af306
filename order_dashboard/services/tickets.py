"""
Servicio: Tickets de cocina y caja
Genera el flujo de comandos ESC/POS para las impresoras térmicas y la
versión HTML para imprimir desde el navegador
"""
import base64
import logging

from jinja2 import Environment, PackageLoader, select_autoescape

from ..utils.money import format_currency
from .order_diff import OrderChanges

logger = logging.getLogger(__name__)

KITCHEN = "kitchen"
CASHIER = "cashier"
TICKET_KINDS = (KITCHEN, CASHIER)

HEADERS = {KITCHEN: "COCINA", CASHIER: "CAJA"}

# Comandos ESC/POS
ESC = 0x1B
GS = 0x1D
LF = 0x0A
CENTER = bytes([ESC, 0x61, 0x01])
LEFT = bytes([ESC, 0x61, 0x00])
BOLD_ON = bytes([ESC, 0x45, 0x01])
BOLD_OFF = bytes([ESC, 0x45, 0x00])
DOUBLE_SIZE = bytes([ESC, 0x21, 0x30])  # doble ancho y alto
MEDIUM_SIZE = bytes([ESC, 0x21, 0x10])  # solo doble alto
NORMAL_SIZE = bytes([ESC, 0x21, 0x00])
CUT = bytes([GS, 0x56, 0x00])

RULE = "=" * 32


class EscPosTicket:
    """Acumula texto UTF-8 y comandos de impresora"""

    def __init__(self):
        self._buffer = bytearray()

    def command(self, *commands):
        for cmd in commands:
            self._buffer.extend(cmd)
        return self

    def text(self, value):
        self._buffer.extend(str(value).encode("utf-8"))
        return self

    def newline(self, count=1):
        self._buffer.extend(bytes([LF]) * count)
        return self

    def line(self, value=""):
        return self.text(value).newline()

    def bold_line(self, value):
        return self.command(BOLD_ON).text(value).command(BOLD_OFF).newline()

    def rule(self):
        return self.line(RULE)

    def cut(self, feed=5):
        return self.newline(feed).command(CUT)

    def to_bytes(self):
        return bytes(self._buffer)


def _validate_kind(kind):
    if kind not in TICKET_KINDS:
        raise ValueError(f"Tipo de ticket desconocido: {kind}")


def _header(ticket, kind, order_number, subtitle=None):
    ticket.command(CENTER, DOUBLE_SIZE).bold_line(HEADERS[kind])
    if subtitle:
        ticket.newline().line(subtitle)
    ticket.rule()
    ticket.bold_line(f"PEDIDO #{order_number}")
    ticket.command(MEDIUM_SIZE).rule().newline()


def _write_item(ticket, item, mark="", with_price=False):
    ticket.line(f"{item.get('quantity') or 1}x {item.get('burger_type', '')}")

    size_line = f"{item.get('patty_size') or 'simple'}"
    if item.get("combo"):
        size_line += " (combo)"
    if mark:
        size_line += f" {mark}"
    ticket.line(size_line)

    if item.get("additions"):
        ticket.line(f"+ {', '.join(item['additions'])}")
    if item.get("removals"):
        ticket.line(f"- {', '.join(item['removals'])}")
    if with_price and item.get("price"):
        ticket.line(format_currency(item["price"]))
    ticket.newline()


def _write_items(ticket, order, with_price=False, changes=None):
    items = order.get("items") or []
    if not items and order.get("pedido"):
        # pedido sin estructura: se imprime el texto tal como llegó
        for raw_line in str(order["pedido"]).splitlines():
            ticket.line(raw_line.strip())
        ticket.newline()
        return
    for item in items:
        mark = changes.mark_for(item) if changes else ""
        _write_item(ticket, item, mark=mark, with_price=with_price)


def _field_mark(changed):
    return " (NUEVO)" if changed else ""


def render_new_order_ticket(kind, order):
    """
    Ticket de un pedido nuevo.

    Cocina: solo los items (qué preparar). Caja: cliente, teléfono,
    entrega, items con precio, total y método de pago.
    """
    _validate_kind(kind)
    ticket = EscPosTicket()
    _header(ticket, kind, order.get("order_number"))

    if kind == KITCHEN:
        _write_items(ticket, order)
        return ticket.cut().to_bytes()

    ticket.line(f"Cliente: {order.get('nombre', '')}")
    if order.get("telefono"):
        ticket.line(f"Tel: {order['telefono']}")
    if order.get("direccion_envio"):
        ticket.newline().line("Entrega:").line(order["direccion_envio"])
    ticket.newline().rule().newline()

    _write_items(ticket, order, with_price=True)

    ticket.rule().newline()
    ticket.bold_line(f"TOTAL: {format_currency(order.get('monto'))}")
    ticket.newline().line(f"Pago: {order.get('metodo_pago') or 'efectivo'}")
    return ticket.cut().to_bytes()


def render_modification_ticket(kind, order, changes: OrderChanges):
    """
    Ticket de modificación.

    Cocina: solo QUITAR / AGREGAR. Si la edición no tocó items devuelve
    None (a cocina no le importan cambios de dirección o pago).
    Caja: el pedido completo actualizado, con marcas en lo que cambió.
    """
    _validate_kind(kind)

    if kind == KITCHEN and not changes.has_item_changes:
        logger.info("Pedido #%s sin cambios de items: no se imprime en cocina", order.get("order_number"))
        return None

    ticket = EscPosTicket()
    _header(ticket, kind, order.get("order_number"), subtitle="MODIFICACION")

    if kind == KITCHEN:
        if changes.removed:
            ticket.bold_line("QUITAR:").newline()
            for item in changes.removed:
                _write_item(ticket, item)
        if changes.added:
            ticket.bold_line("AGREGAR:").newline()
            for item in changes.added:
                _write_item(ticket, item)
        return ticket.cut().to_bytes()

    ticket.line(f"Cliente: {order.get('nombre', '')}").newline()
    if order.get("telefono"):
        ticket.line(f"Tel: {order['telefono']}{_field_mark(changes.phone_changed)}")
    if order.get("direccion_envio"):
        ticket.newline().line("Entrega:")
        ticket.line(f"{order['direccion_envio']}{_field_mark(changes.address_changed)}")
    if order.get("metodo_pago"):
        ticket.newline().line(f"Pago: {order['metodo_pago']}{_field_mark(changes.payment_changed)}")
    ticket.newline().rule().newline()

    ticket.bold_line("PEDIDO COMPLETO:").newline()
    _write_items(ticket, order, with_price=True, changes=changes)

    ticket.rule().newline()
    ticket.bold_line(f"TOTAL: {format_currency(order.get('monto'))}")
    return ticket.cut().to_bytes()


def render_cancel_ticket(kind, order_number, nombre):
    """Ticket de cancelación: número de pedido, CANCELADO bien grande y el cliente"""
    _validate_kind(kind)
    ticket = EscPosTicket()
    ticket.command(CENTER, BOLD_ON, DOUBLE_SIZE).line(HEADERS[kind])
    ticket.command(NORMAL_SIZE, BOLD_OFF).newline()
    ticket.command(BOLD_ON, DOUBLE_SIZE).line(f"PEDIDO #{order_number}")
    ticket.command(NORMAL_SIZE, BOLD_OFF).newline()
    ticket.command(BOLD_ON, DOUBLE_SIZE).line("*** CANCELADO ***")
    ticket.command(NORMAL_SIZE, BOLD_OFF).newline()
    ticket.command(LEFT).line(f"Cliente: {nombre}")
    return ticket.cut(feed=4).to_bytes()


def render_ticket(kind, order, changes=None):
    """
    Punto de entrada único: pedido nuevo si no hay cambios, modificación si los hay.

    Returns:
        bytes ESC/POS, o None cuando el ticket de cocina se suprime
    """
    if changes is None:
        return render_new_order_ticket(kind, order)
    return render_modification_ticket(kind, order, changes)


def encode_ticket(ticket_bytes):
    """Base64 para viajar dentro del JSON del webhook"""
    if ticket_bytes is None:
        return None
    return base64.b64encode(ticket_bytes).decode("ascii")


_html_env = Environment(
    loader=PackageLoader("order_dashboard", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_html_env.filters["currency"] = format_currency


def render_html_ticket(kind, order, changes=None):
    """
    Ticket HTML para el diálogo de impresión del navegador.

    Misma regla que el ticket ESC/POS: cocina sin cambios de items -> None.
    """
    _validate_kind(kind)
    if kind == KITCHEN and changes is not None and not changes.has_item_changes:
        return None

    template = _html_env.get_template(f"tickets/{kind}.html")
    return template.render(
        title=HEADERS[kind],
        order=order,
        items=order.get("items") or [],
        changes=changes,
    )

