"""
Modelo: Pedido
Un pedido del día con sus items (JSON) y el estado de preparación de cada item
"""
from ..db import db
from ..utils.dates import utcnow


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.Integer, nullable=False, index=True)
    # único dentro del día local, no globalmente

    nombre = db.Column(db.String(120), nullable=False)
    telefono = db.Column(db.String(40), nullable=True)

    items = db.Column(db.JSON, nullable=False, default=list)
    item_status = db.Column(db.JSON, nullable=False, default=list)
    # texto libre original cuando el parser no pudo estructurar el pedido
    pedido = db.Column(db.Text, nullable=True)

    monto = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    direccion_envio = db.Column(db.String(255), nullable=True)
    metodo_pago = db.Column(db.String(20), nullable=False, default="efectivo")
    # efectivo | transferencia

    status = db.Column(db.String(20), nullable=False, default="pending")
    # pending | completed
    cadete_salio = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "order_number": self.order_number,
            "nombre": self.nombre,
            "telefono": self.telefono,
            "items": list(self.items or []),
            "item_status": list(self.item_status or []),
            "pedido": self.pedido,
            "monto": self.monto,
            "direccion_envio": self.direccion_envio,
            "metodo_pago": self.metodo_pago,
            "status": self.status,
            "cadete_salio": bool(self.cadete_salio),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
