"""
Typed request structures.

Routes turn raw JSON into these before anything reaches a service, so services
never see free-form dicts for products, sizes or carts.

Product attributes are a tagged union on product_type:

    'tire'        -> TireAttributes
    'alloy_wheel' -> WheelAttributes
    'general'     -> None
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from .models import Product, TireSize, WheelSize, InvoiceItem, Invoice, PRODUCT_TYPES
from .sizing import tire_size_display, wheel_size_display
from .validation import (
    ModelValidationPolicy,
    ValidationError,
    validate_payload,
    require_amount_cents,
    require_non_negative,
    require_positive,
)

TIRE_COLUMNS = {
    "width": "tire_width",
    "aspect_ratio": "tire_aspect_ratio",
    "diameter": "tire_diameter",
    "load_index": "tire_load_index",
    "speed_rating": "tire_speed_rating",
}

WHEEL_COLUMNS = {
    "diameter": "wheel_diameter",
    "width": "wheel_width",
    "pcd": "wheel_pcd",
    "offset": "wheel_offset",
    "center_bore": "wheel_center_bore",
    "stud_count": "wheel_stud_count",
    "stud_type": "wheel_stud_type",
}

COMMON_PRODUCT_FIELDS = (
    "sku",
    "name",
    "description",
    "category",
    "price_cents",
    "cost_price_cents",
    "stock_quantity",
    "low_stock_threshold",
)

ATTRIBUTE_FIELDS = frozenset(TIRE_COLUMNS.values()) | frozenset(WHEEL_COLUMNS.values())

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields=set(COMMON_PRODUCT_FIELDS) | set(ATTRIBUTE_FIELDS) | {"product_type", "size_display"},
    required_on_create={"name", "price_cents", "stock_quantity"},
)

TIRE_SIZE_POLICY = ModelValidationPolicy(
    writable_fields={"width", "aspect_ratio", "diameter", "load_index", "speed_rating", "size_display"},
    required_on_create={"width", "aspect_ratio", "diameter"},
)

WHEEL_SIZE_POLICY = ModelValidationPolicy(
    writable_fields={
        "diameter", "width", "pcd", "offset", "center_bore", "stud_count", "stud_type", "size_display",
    },
    required_on_create={"diameter", "width", "stud_count", "stud_type"},
)

CART_LINE_POLICY = ModelValidationPolicy(
    writable_fields={"product_id", "product_name", "quantity", "unit_price_cents", "total_price_cents"},
    required_on_create={"product_id", "product_name", "quantity", "unit_price_cents"},
)

INVOICE_POLICY = ModelValidationPolicy(
    writable_fields={
        "customer_name",
        "customer_phone",
        "customer_email",
        "payment_method",
        "tax_amount_cents",
        "discount_amount_cents",
    },
    required_on_create=set(),
)


@dataclass(frozen=True)
class TireAttributes:
    width: Optional[int] = None
    aspect_ratio: Optional[int] = None
    diameter: Optional[int] = None
    load_index: Optional[str] = None
    speed_rating: Optional[str] = None

    @classmethod
    def from_product_values(cls, values: Mapping[str, Any]) -> "TireAttributes":
        return cls(**{attr: values.get(col) for attr, col in TIRE_COLUMNS.items()})

    def product_columns(self) -> dict[str, Any]:
        return {col: getattr(self, attr) for attr, col in TIRE_COLUMNS.items()}

    def catalog_columns(self) -> dict[str, Any]:
        return {attr: getattr(self, attr) for attr in TIRE_COLUMNS}

    def size_display(self) -> Optional[str]:
        return tire_size_display(
            self.width, self.aspect_ratio, self.diameter, self.load_index, self.speed_rating
        )


@dataclass(frozen=True)
class WheelAttributes:
    diameter: Optional[int] = None
    width: Optional[float] = None
    pcd: Optional[str] = None
    offset: Optional[str] = None
    center_bore: Optional[str] = None
    stud_count: Optional[int] = None
    stud_type: Optional[str] = None

    @classmethod
    def from_product_values(cls, values: Mapping[str, Any]) -> "WheelAttributes":
        return cls(**{attr: values.get(col) for attr, col in WHEEL_COLUMNS.items()})

    def product_columns(self) -> dict[str, Any]:
        return {col: getattr(self, attr) for attr, col in WHEEL_COLUMNS.items()}

    def catalog_columns(self) -> dict[str, Any]:
        return {attr: getattr(self, attr) for attr in WHEEL_COLUMNS}

    def size_display(self) -> Optional[str]:
        return wheel_size_display(
            self.diameter, self.width, self.pcd, self.stud_count, self.stud_type
        )


ProductAttributes = Union[TireAttributes, WheelAttributes, None]


def attributes_for(product_type: str, values: Mapping[str, Any]) -> ProductAttributes:
    if product_type == "tire":
        return TireAttributes.from_product_values(values)
    if product_type == "alloy_wheel":
        return WheelAttributes.from_product_values(values)
    return None


@dataclass(frozen=True)
class ProductSpec:
    """
    A fully validated product write.

    size_display is the caller's explicit label, if any. When absent the label is
    derived from the attributes; general products never carry one.
    """
    product_type: str
    fields: dict[str, Any]
    attributes: ProductAttributes = None
    size_display: Optional[str] = None

    def resolved_size_display(self) -> Optional[str]:
        if self.attributes is None:
            return None
        if self.size_display:
            return self.size_display
        return self.attributes.size_display()

    def to_columns(self) -> dict[str, Any]:
        columns = dict(self.fields)
        # Columns belonging to the other product types stay NULL
        columns.update({col: None for col in ATTRIBUTE_FIELDS})
        if self.attributes is not None:
            columns.update(self.attributes.product_columns())
        columns["product_type"] = self.product_type
        columns["size_display"] = self.resolved_size_display()
        return columns


def _require_product_type(value: Any) -> str:
    product_type = value or "general"
    if product_type not in PRODUCT_TYPES:
        raise ValidationError(f"product_type must be one of: {', '.join(PRODUCT_TYPES)}")
    return product_type


def enforce_rules_product(patch: dict, *, creating: bool) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    # New products must have a real selling price; edits may set 0 (giveaways)
    require_amount_cents(patch, "price_cents", allow_zero=not creating)
    require_amount_cents(patch, "cost_price_cents")
    require_non_negative(patch, "stock_quantity")
    require_non_negative(patch, "low_stock_threshold")
    for key in ("tire_width", "tire_aspect_ratio", "tire_diameter", "wheel_diameter", "wheel_width", "wheel_stud_count"):
        require_positive(patch, key)
    if "product_type" in patch:
        _require_product_type(patch["product_type"])


def parse_product_payload(payload: dict) -> ProductSpec:
    """Create semantics: required fields enforced, missing optionals defaulted."""
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    enforce_rules_product(patch, creating=True)
    return product_spec_from_values(patch)


def parse_product_patch(payload: dict) -> dict:
    """Update semantics: only provided keys are validated and returned."""
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
    enforce_rules_product(patch, creating=False)
    return patch


def product_spec_from_values(values: Mapping[str, Any]) -> ProductSpec:
    product_type = _require_product_type(values.get("product_type"))
    fields = {k: values[k] for k in COMMON_PRODUCT_FIELDS if k in values}
    return ProductSpec(
        product_type=product_type,
        fields=fields,
        attributes=attributes_for(product_type, values),
        size_display=values.get("size_display"),
    )


def parse_tire_size_payload(payload: dict) -> tuple[TireAttributes, Optional[str]]:
    patch = validate_payload(model=TireSize, payload=payload, policy=TIRE_SIZE_POLICY, partial=False)
    for key in ("width", "aspect_ratio", "diameter"):
        require_positive(patch, key)
    attrs = TireAttributes(**{k: patch.get(k) for k in TIRE_COLUMNS})
    return attrs, patch.get("size_display")


def parse_wheel_size_payload(payload: dict) -> tuple[WheelAttributes, Optional[str]]:
    """Stud count and stud type are mandatory for new wheel sizes."""
    patch = validate_payload(model=WheelSize, payload=payload, policy=WHEEL_SIZE_POLICY, partial=False)
    for key in ("diameter", "width", "stud_count"):
        require_positive(patch, key)
    if not patch.get("stud_count") or not patch.get("stud_type"):
        raise ValidationError("Number of Studs and Stud Type are required for wheel sizes")
    attrs = WheelAttributes(**{k: patch.get(k) for k in WHEEL_COLUMNS})
    return attrs, patch.get("size_display")


@dataclass(frozen=True)
class CartLine:
    """One priced cart line, as the till captured it when the item was added."""
    product_id: int
    product_name: str
    quantity: int
    unit_price_cents: int

    @property
    def total_price_cents(self) -> int:
        return self.quantity * self.unit_price_cents


@dataclass(frozen=True)
class CustomerInfo:
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class InvoiceRequest:
    lines: list[CartLine]
    customer: CustomerInfo = field(default_factory=CustomerInfo)
    payment_method: str = "cash"
    tax_amount_cents: int = 0
    discount_amount_cents: int = 0


def parse_cart_line(payload: dict) -> CartLine:
    patch = validate_payload(model=InvoiceItem, payload=payload, policy=CART_LINE_POLICY, partial=False)
    if patch.get("product_id") is None:
        raise ValidationError("product_id cannot be null")
    if patch["quantity"] < 1:
        raise ValidationError("quantity must be >= 1")
    require_amount_cents(patch, "unit_price_cents")
    # total_price_cents from the client is informational; the server recomputes it
    return CartLine(
        product_id=patch["product_id"],
        product_name=patch["product_name"],
        quantity=patch["quantity"],
        unit_price_cents=patch["unit_price_cents"],
    )


def parse_invoice_payload(payload: dict) -> InvoiceRequest:
    if payload is None or not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    body = dict(payload)
    raw_items = body.pop("items", None)
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError("items must be a non-empty list")

    patch = validate_payload(model=Invoice, payload=body, policy=INVOICE_POLICY, partial=True)
    require_amount_cents(patch, "tax_amount_cents")
    require_amount_cents(patch, "discount_amount_cents")

    return InvoiceRequest(
        lines=[parse_cart_line(item) for item in raw_items],
        customer=CustomerInfo(
            name=patch.get("customer_name"),
            phone=patch.get("customer_phone"),
            email=patch.get("customer_email"),
        ),
        payment_method=patch.get("payment_method") or "cash",
        tax_amount_cents=patch.get("tax_amount_cents") or 0,
        discount_amount_cents=patch.get("discount_amount_cents") or 0,
    )
