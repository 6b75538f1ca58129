"""Pydantic request/response schemas for the POS API.

These are external contracts, kept separate from the internal Protean
commands.
"""

from pydantic import BaseModel, Field, model_validator


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class RegisterProductRequest(BaseModel):
    name: str
    price: float = Field(ge=0)
    category: str | None = None
    stock: int = Field(ge=0, default=0)
    barcode: str | None = None
    image_url: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Aviator Frame",
                    "price": 100.0,
                    "category": "frames",
                    "stock": 5,
                }
            ]
        }
    }


class UpdateStockRequest(BaseModel):
    stock_quantity: int = Field(ge=0)


class ProductResponse(BaseModel):
    product_id: str
    name: str
    barcode: str
    price: float
    category: str
    stock: int
    image_url: str | None = None


class ProductListResponse(BaseModel):
    products: list[ProductResponse]


class CategoryListResponse(BaseModel):
    categories: list[str]


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
class RegisterCustomerRequest(BaseModel):
    name: str
    email: str | None = None
    phone: str | None = None


class EyeSchema(BaseModel):
    sphere: float
    cylinder: float | None = None
    axis: int | None = Field(default=None, ge=0, le=180)
    add: float | None = None
    pd: float | None = None


class RecordPrescriptionRequest(BaseModel):
    right_eye: EyeSchema
    left_eye: EyeSchema
    prescribed_on: str | None = None  # YYYY-MM-DD
    expires_on: str | None = None
    doctor: str | None = None
    notes: str | None = None


class PrescriptionResponse(BaseModel):
    prescription_id: str
    right_eye: EyeSchema
    left_eye: EyeSchema
    prescribed_on: str | None = None
    expires_on: str | None = None
    doctor: str | None = None
    notes: str | None = None


class CustomerResponse(BaseModel):
    customer_id: str
    name: str
    email: str | None = None
    phone: str | None = None
    prescriptions: list[PrescriptionResponse] = []
    latest_prescription_id: str | None = None


class CustomerListResponse(BaseModel):
    customers: list[CustomerResponse]


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class OpenSessionRequest(BaseModel):
    terminal: str | None = None


class SelectCustomerRequest(BaseModel):
    customer_id: str | None = None


class AddItemRequest(BaseModel):
    """Either a product id (picked from the grid) or a scanned barcode."""

    product_id: str | None = None
    barcode: str | None = None

    @model_validator(mode="after")
    def exactly_one_lookup(self):
        if bool(self.product_id) == bool(self.barcode):
            raise ValueError("Provide either product_id or barcode")
        return self


class UpdateQuantityRequest(BaseModel):
    quantity: int


class PaymentMethodRequest(BaseModel):
    payment_method: str = "cash"


class CheckoutRequest(BaseModel):
    payment_method: str | None = None


class CartItemSchema(BaseModel):
    product_id: str
    name: str
    barcode: str | None = None
    price: float
    category: str | None = None
    stock: int
    image_url: str | None = None
    quantity: int
    total: float


class InvoiceSchema(BaseModel):
    invoice_number: str
    date: str


class SessionResponse(BaseModel):
    session_id: str
    status: str
    customer_id: str | None = None
    payment_method: str
    items: list[CartItemSchema]
    subtotal: float
    tax: float
    total: float
    invoice: InvoiceSchema | None = None


class CustomerSummary(BaseModel):
    customer_id: str
    name: str
    email: str = ""


class InvoiceLineSchema(BaseModel):
    product_id: str
    name: str
    barcode: str | None = None
    quantity: int
    price: float
    total: float


class InvoiceResponse(BaseModel):
    invoice_number: str
    date: str
    customer: CustomerSummary | None = None
    payment_method: str
    items: list[InvoiceLineSchema]
    subtotal: float
    tax: float
    total: float


class CancellationResponse(BaseModel):
    invoice_number: str
    date: str
    items: list[InvoiceLineSchema]
    total_amount: float
    customer: CustomerSummary | None = None
    status: str


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------
class SaleResponse(BaseModel):
    sale_id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    unit_price: float
    total_amount: float
    customer_id: str | None = None
    payment_method: str | None = None
    invoice_number: str
    status: str
    recorded_at: str | None = None


class SaleListResponse(BaseModel):
    sales: list[SaleResponse]


class DailySalesResponse(BaseModel):
    date: str
    invoices_completed: int
    invoices_cancelled: int
    sales_refunded: int
    total_revenue: float
    total_refunds: float


# ---------------------------------------------------------------------------
# Generic responses
# ---------------------------------------------------------------------------
class ProductIdResponse(BaseModel):
    product_id: str


class CustomerIdResponse(BaseModel):
    customer_id: str


class SessionIdResponse(BaseModel):
    session_id: str


class SaleIdsResponse(BaseModel):
    sale_ids: list[str]


class StatusResponse(BaseModel):
    status: str = "ok"
