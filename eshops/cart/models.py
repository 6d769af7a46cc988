"""Order models with Decimal-based pricing.

Attribute names are English; `to_dict`/`from_dict` use the field names of
the stored snapshot, which are also the names the EShops API expects.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from eshops.services.money import multiply, subtract, to_decimal, to_float, to_money


@dataclass
class LineItem:
    """One product and quantity in the cart."""
    product_id: int
    title: str
    image_url: str
    unit_price: Decimal
    quantity: int

    def __post_init__(self):
        # ValueError for non-numbers, NaN and infinities
        self.unit_price = to_money(self.unit_price)

    @property
    def line_total(self) -> Decimal:
        """Always derived from price and quantity, never rounded."""
        return multiply(self.unit_price, self.quantity)

    def to_dict(self) -> dict:
        return {
            "productoId": self.product_id,
            "titulo": self.title,
            "imageUrl": self.image_url,
            "unitario": to_float(self.unit_price),
            "cantidad": self.quantity,
            "monto": to_float(self.line_total),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        # "monto" is recomputed, never trusted
        return cls(
            product_id=data["productoId"],
            title=data.get("titulo") or "",
            image_url=data.get("imageUrl") or "",
            unit_price=to_decimal(data.get("unitario")),
            quantity=int(data["cantidad"]),
        )


@dataclass
class Customer:
    """Buyer identity and shipping address. Zero ids mean "unset"."""
    document_type: int = 0
    document_number: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address_line1: str = ""
    address_line2: str = ""  # optional
    reference: str = ""  # optional landmark
    city_id: int = 0
    municipality_id: int = 0
    region_id: int = 0
    country_id: int = 0

    @property
    def is_complete(self) -> bool:
        """Enough data to ship an order."""
        required_text = (
            self.document_number,
            self.first_name,
            self.last_name,
            self.email,
            self.phone,
            self.address_line1,
        )
        location = (self.city_id, self.municipality_id, self.region_id, self.country_id)
        return (
            self.document_type > 0
            and all(value != "" for value in required_text)
            and all(value > 0 for value in location)
        )

    def to_dict(self) -> dict:
        return {
            "tipoDocumento": self.document_type,
            "identidad": self.document_number,
            "nombres": self.first_name,
            "apellidos": self.last_name,
            "correo": self.email,
            "telefono": self.phone,
            "direccion1": self.address_line1,
            "direccion2": self.address_line2,
            "referencia": self.reference,
            "ciudad": self.city_id,
            "municipio": self.municipality_id,
            "estado": self.region_id,
            "pais": self.country_id,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Customer":
        data = data or {}
        return cls(
            document_type=int(data.get("tipoDocumento") or 0),
            document_number=data.get("identidad") or "",
            first_name=data.get("nombres") or "",
            last_name=data.get("apellidos") or "",
            email=data.get("correo") or "",
            phone=data.get("telefono") or "",
            address_line1=data.get("direccion1") or "",
            address_line2=data.get("direccion2") or "",
            reference=data.get("referencia") or "",
            city_id=int(data.get("ciudad") or 0),
            municipality_id=int(data.get("municipio") or 0),
            region_id=int(data.get("estado") or 0),
            country_id=int(data.get("pais") or 0),
        )


@dataclass
class OrderSummary:
    """Totals of the order. Only `notes` and the discount fields are inputs."""
    notes: str = ""
    item_count: int = 0
    subtotal: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    discount_reason: str = ""
    total: Decimal = Decimal("0")

    def __post_init__(self):
        self.subtotal = to_decimal(self.subtotal)
        self.discount = to_decimal(self.discount)
        self.total = to_decimal(self.total)

    def to_dict(self) -> dict:
        return {
            "observaciones": self.notes,
            "items": self.item_count,
            "subtotal": to_float(self.subtotal),
            "descuento": to_float(self.discount),
            "descuentoMotivo": self.discount_reason,
            "total": to_float(self.total),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "OrderSummary":
        data = data or {}
        return cls(
            notes=data.get("observaciones") or "",
            item_count=int(data.get("items") or 0),
            subtotal=to_decimal(data.get("subtotal")),
            discount=to_decimal(data.get("descuento")),
            discount_reason=data.get("descuentoMotivo") or "",
            total=to_decimal(data.get("total")),
        )


@dataclass
class Order:
    """Customer, line items and summary, persisted as one unit."""
    customer: Customer = field(default_factory=Customer)
    items: List[LineItem] = field(default_factory=list)
    summary: OrderSummary = field(default_factory=OrderSummary)

    def find_item(self, product_id) -> Optional[LineItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    def recompute(self) -> None:
        """Rebuild item count, subtotal and total from the line items.

        Totals are never adjusted incrementally. The discount is not
        clamped, so the total goes negative when it exceeds the subtotal.
        """
        self.summary.item_count = len(self.items)
        self.summary.subtotal = sum((item.line_total for item in self.items), Decimal("0"))
        self.summary.total = subtract(self.summary.subtotal, self.summary.discount)

    def to_dict(self) -> dict:
        """Convert to the session storage / API representation."""
        return {
            "cliente": self.customer.to_dict(),
            "items": [item.to_dict() for item in self.items],
            "resumen": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        return cls(
            customer=Customer.from_dict(data.get("cliente")),
            items=[LineItem.from_dict(item) for item in data.get("items", [])],
            summary=OrderSummary.from_dict(data.get("resumen")),
        )
