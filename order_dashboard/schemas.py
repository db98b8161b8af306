"""
Schemas de entrada (Pydantic)
Validan el JSON que llega del bot y lo llevan al formato canónico de items
"""
from typing import Annotated, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
)

from .services.order_parser import parse_order_text

PattySize = Literal["simple", "doble", "triple"]
PaymentMethod = Literal["efectivo", "transferencia"]


def _lower(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _optional_text(value):
    """Texto opcional: números pasan a string y un string vacío a None"""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class OrderItemIn(BaseModel):
    """Una línea del pedido tal como llega estructurada"""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    burger_type: str = Field(min_length=1)
    patty_size: PattySize = "simple"
    combo: bool = False
    additions: Optional[List[str]] = None
    removals: Optional[List[str]] = None
    quantity: int = Field(default=1, ge=1)
    price: Optional[float] = None

    @field_validator("patty_size", mode="before")
    @classmethod
    def normalize_patty_size(cls, value):
        if value is None or value == "":
            return "simple"
        return _lower(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, value):
        return 1 if value is None else value

    def to_item(self):
        item = self.model_dump(exclude={"price"})
        if self.price is not None:
            item["price"] = self.price
        return item


class _OrderFields(BaseModel):
    """Campos de cliente y cobro comunes a las dos formas de recibir un pedido"""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    nombre: str = Field(min_length=1)
    monto: float = Field(validation_alias=AliasChoices("monto", "total"))
    telefono: Optional[str] = None
    direccion_envio: Optional[str] = None
    metodo_pago: PaymentMethod = "efectivo"

    @field_validator("metodo_pago", mode="before")
    @classmethod
    def normalize_payment(cls, value):
        if value is None or value == "":
            return "efectivo"
        return _lower(value)

    @field_validator("telefono", "direccion_envio", mode="before")
    @classmethod
    def empty_to_none(cls, value):
        return _optional_text(value)


class StructuredIntake(_OrderFields):
    """Pedido con items ya estructurados"""

    items: List[OrderItemIn] = Field(min_length=1)

    def resolve_items(self):
        return [item.to_item() for item in self.items], None


class TextIntake(_OrderFields):
    """Pedido legado: texto libre en `pedido`"""

    pedido: Union[str, List[str]]

    def resolve_items(self):
        """
        Returns:
            (items, texto_original). Si el parser no encuentra items se
            guarda el texto para mostrarlo tal cual.
        """
        raw_text = self.pedido if isinstance(self.pedido, str) else "\n".join(self.pedido)
        parsed = parse_order_text(self.pedido)
        if parsed is None:
            return [], raw_text
        return parsed, raw_text


def _intake_kind(data):
    if isinstance(data, dict):
        if data.get("items") is not None:
            return "items"
        if data.get("pedido") is not None:
            return "pedido"
        return None
    if isinstance(data, StructuredIntake):
        return "items"
    if isinstance(data, TextIntake):
        return "pedido"
    return None


OrderIntake = Annotated[
    Union[
        Annotated[StructuredIntake, Tag("items")],
        Annotated[TextIntake, Tag("pedido")],
    ],
    Discriminator(
        _intake_kind,
        custom_error_type="missing_fields",
        custom_error_message="Missing required fields: nombre, items, monto",
    ),
]

intake_adapter = TypeAdapter(OrderIntake)


class OrderEdit(BaseModel):
    """
    Edición parcial de un pedido del día.

    Solo se aplican los campos presentes en el JSON (model_fields_set).
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    order_number: int
    nombre: Optional[str] = None
    items: Optional[List[OrderItemIn]] = None
    pedido: Optional[Union[str, List[str]]] = None
    monto: Optional[float] = Field(default=None, validation_alias=AliasChoices("monto", "total"))
    telefono: Optional[str] = None
    direccion_envio: Optional[str] = None
    metodo_pago: Optional[PaymentMethod] = None

    @field_validator("metodo_pago", mode="before")
    @classmethod
    def normalize_payment(cls, value):
        return _lower(value)

    @field_validator("telefono", "direccion_envio", mode="before")
    @classmethod
    def empty_to_none(cls, value):
        return _optional_text(value)

    def updates(self):
        """Dict con solo los campos enviados, con items ya resueltos"""
        sent = self.model_fields_set - {"order_number"}
        updates = {}

        # estos no se pueden vaciar; un null se ignora
        for name in ("nombre", "monto", "metodo_pago"):
            if name in sent and getattr(self, name) is not None:
                updates[name] = getattr(self, name)
        # teléfono y dirección sí se pueden borrar mandando null
        for name in ("telefono", "direccion_envio"):
            if name in sent:
                updates[name] = getattr(self, name) or None

        if "items" in sent and self.items is not None:
            updates["items"] = [item.to_item() for item in self.items]
            # el texto libre guardado ya no describe el pedido
            updates["pedido"] = None
        elif "pedido" in sent and self.pedido is not None:
            parsed = parse_order_text(self.pedido)
            raw_text = self.pedido if isinstance(self.pedido, str) else "\n".join(self.pedido)
            updates["items"] = parsed or []
            updates["pedido"] = raw_text if parsed is None else None

        return updates


class OrderLookup(BaseModel):
    """Body de delete / status / print: solo el número de pedido"""

    model_config = ConfigDict(extra="ignore")

    order_number: int


def validation_details(error):
    """Errores de Pydantic en un formato que jsonify puede serializar"""
    return [
        {"loc": ".".join(str(part) for part in err.get("loc", ())), "msg": err.get("msg")}
        for err in error.errors()
    ]
