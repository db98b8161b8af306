"""
Servicio: Comparación de pedidos
Normaliza items y calcula qué se agregó y qué se quitó al editar un pedido
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

logger = logging.getLogger(__name__)

# Campos que no son items pero igual obligan a avisar a caja
NON_ITEM_FIELDS = {
    "direccion_envio": "address_changed",
    "telefono": "phone_changed",
    "metodo_pago": "payment_changed",
}


def _text(value) -> str:
    return ("" if value is None else str(value)).strip().lower()


def _modifier_list(value) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return sorted(_text(v) for v in value)


def quantity_of(item: Dict) -> int:
    """Cantidad de la línea (1 si falta o no es numérica)"""
    try:
        return int(item.get("quantity") or 1)
    except (TypeError, ValueError):
        return 1


def normalize_item(item: Dict) -> Dict:
    """
    Forma canónica de un item para comparar.

    burger_type y patty_size sin espacios y en minúsculas, combo booleano,
    additions/removals normalizados y ordenados (el orden de los
    modificadores no cambia la línea). Los duplicados se mantienen.
    """
    item = item or {}
    return {
        "burger_type": _text(item.get("burger_type")),
        "patty_size": _text(item.get("patty_size")),
        "combo": bool(item.get("combo")),
        "additions": _modifier_list(item.get("additions")),
        "removals": _modifier_list(item.get("removals")),
    }


def same_item(a: Dict, b: Dict) -> bool:
    """True si ambos items son la misma línea del pedido (ignora cantidad)"""
    return normalize_item(a) == normalize_item(b)


def merge_lines(items: List[Dict]) -> List[Dict]:
    """Suma las cantidades de líneas repetidas, conservando el orden de aparición"""
    merged: List[Dict] = []
    for item in items or []:
        for existing in merged:
            if same_item(existing, item):
                existing["quantity"] = quantity_of(existing) + quantity_of(item)
                break
        else:
            merged.append({**item, "quantity": quantity_of(item)})
    return merged


def diff_items(old_items: List[Dict], new_items: List[Dict]) -> Dict:
    """
    Calcula la diferencia entre dos listas de items.

    - Línea nueva sin par en old_items: se agrega completa.
    - Línea con par y más cantidad: se agrega la diferencia.
    - Línea vieja sin par en new_items: se quita completa.
    - Línea con par y menos cantidad: se quita la diferencia.

    Returns:
        {"added": [...], "removed": [...], "has_changes": bool, "is_swap": bool}
    """
    old_lines = merge_lines(old_items)
    new_lines = merge_lines(new_items)

    added = []
    removed = []

    for new_item in new_lines:
        match = next((o for o in old_lines if same_item(o, new_item)), None)
        if match is None:
            added.append(new_item)
            continue
        delta = quantity_of(new_item) - quantity_of(match)
        if delta > 0:
            added.append({**new_item, "quantity": delta})

    for old_item in old_lines:
        match = next((n for n in new_lines if same_item(n, old_item)), None)
        if match is None:
            removed.append(old_item)
            continue
        delta = quantity_of(old_item) - quantity_of(match)
        if delta > 0:
            removed.append({**old_item, "quantity": delta})

    return {
        "added": added,
        "removed": removed,
        "has_changes": bool(added or removed),
        "is_swap": is_swap(added, removed),
    }


def is_swap(added: List[Dict], removed: List[Dict]) -> bool:
    """Un item reemplazado por otro con la misma cantidad"""
    return (
        len(added) == 1
        and len(removed) == 1
        and quantity_of(added[0]) == quantity_of(removed[0])
    )


def detect_field_changes(existing: Dict, updates: Dict) -> Dict:
    """
    Compara dirección, teléfono y método de pago.

    Solo cuenta como cambio un campo presente en `updates` cuyo valor
    difiere del guardado.
    """
    flags = {}
    for field_name, flag in NON_ITEM_FIELDS.items():
        flags[flag] = field_name in updates and updates[field_name] != existing.get(field_name)
    return flags


@dataclass
class OrderChanges:
    """Resultado de comparar un pedido antes y después de una edición"""

    added: List[Dict] = field(default_factory=list)
    removed: List[Dict] = field(default_factory=list)
    is_swap: bool = False
    address_changed: bool = False
    phone_changed: bool = False
    payment_changed: bool = False

    @property
    def has_item_changes(self) -> bool:
        return bool(self.added or self.removed)

    @property
    def has_field_changes(self) -> bool:
        return self.address_changed or self.phone_changed or self.payment_changed

    @property
    def must_notify(self) -> bool:
        return self.has_item_changes or self.has_field_changes

    def mark_for(self, item: Dict) -> str:
        """
        Marca del item en el ticket de caja.

        "(NUEVA)" si la línea no existía, "(AGREGADA)" si subió la cantidad,
        "(CANCELADA)" si bajó. Vacío si la línea no cambió.
        """
        for added in self.added:
            if same_item(added, item):
                return "(NUEVA)" if quantity_of(added) >= quantity_of(item) else "(AGREGADA)"
        for removed in self.removed:
            if same_item(removed, item):
                return "(CANCELADA)"
        return ""


def compare_orders(existing: Dict, updates: Dict) -> OrderChanges:
    """
    Compara el pedido guardado con los campos de la edición.

    Args:
        existing: pedido antes de la edición (to_dict)
        updates: solo los campos enviados en la edición
    """
    if "items" in updates:
        item_diff = diff_items(existing.get("items") or [], updates.get("items") or [])
    else:
        item_diff = {"added": [], "removed": [], "is_swap": False}

    changes = OrderChanges(
        added=item_diff["added"],
        removed=item_diff["removed"],
        is_swap=item_diff["is_swap"],
        **detect_field_changes(existing, updates),
    )

    logger.info(
        "Cambios en pedido #%s: +%d -%d swap=%s dirección=%s teléfono=%s pago=%s",
        existing.get("order_number"),
        len(changes.added),
        len(changes.removed),
        changes.is_swap,
        changes.address_changed,
        changes.phone_changed,
        changes.payment_changed,
    )
    return changes
