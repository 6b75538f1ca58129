"""FastAPI routes for the POS counter.

Thin adapters that translate HTTP requests into domain commands and read the
repositories for listings. No business logic lives here.
"""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from pos.api.schemas import (
    AddItemRequest,
    CancellationResponse,
    CartItemSchema,
    CategoryListResponse,
    CheckoutRequest,
    CustomerIdResponse,
    CustomerListResponse,
    CustomerResponse,
    DailySalesResponse,
    InvoiceResponse,
    InvoiceSchema,
    OpenSessionRequest,
    PaymentMethodRequest,
    PrescriptionResponse,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    RecordPrescriptionRequest,
    RegisterCustomerRequest,
    RegisterProductRequest,
    SaleIdsResponse,
    SaleListResponse,
    SaleResponse,
    SelectCustomerRequest,
    SessionIdResponse,
    SessionResponse,
    StatusResponse,
    UpdateQuantityRequest,
    UpdateStockRequest,
)
from pos.catalogue.catalog import ALL_CATEGORIES, ProductCatalog, SortOption
from pos.catalogue.registration import RegisterProduct, UpdateProductStock
from pos.checkout.invoicing import Checkout
from pos.checkout.items import AddToCart, AddToCartByBarcode, ClearCart, RemoveFromCart, UpdateCartQuantity
from pos.checkout.management import OpenCheckoutSession, SelectCustomer, SetPaymentMethod
from pos.checkout.pricing import line_total, round2
from pos.checkout.session import CheckoutSession
from pos.customer.customer import Customer
from pos.customer.registration import RecordPrescription, RegisterCustomer
from pos.projections.daily_sales import DailySales
from pos.sales.cancellation import CancelSale
from pos.sales.finalization import CompleteSale
from pos.sales.refund import RefundSale
from pos.sales.sale import Sale


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        name=product.name,
        barcode=product.barcode,
        price=product.price,
        category=product.category,
        stock=product.stock or 0,
        image_url=product.image_url,
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    search: str | None = None,
    category: str = ALL_CATEGORIES,
    sort: SortOption = SortOption.NAME_ASC,
) -> ProductListResponse:
    products = ProductCatalog().list_products(search=search, category=category, sort=sort)
    return ProductListResponse(products=[_product_response(p) for p in products])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def register_product(body: RegisterProductRequest) -> ProductIdResponse:
    command = RegisterProduct(
        name=body.name,
        price=body.price,
        category=body.category,
        stock=body.stock,
        barcode=body.barcode,
        image_url=body.image_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/categories", response_model=CategoryListResponse)
async def list_categories() -> CategoryListResponse:
    return CategoryListResponse(categories=ProductCatalog().categories())


@product_router.get("/barcode/{barcode}", response_model=ProductResponse)
async def lookup_by_barcode(barcode: str) -> ProductResponse:
    return _product_response(ProductCatalog().find_by_barcode(barcode))


@product_router.patch("/{product_id}/stock", response_model=ProductResponse)
async def update_stock(product_id: str, body: UpdateStockRequest) -> ProductResponse:
    command = UpdateProductStock(product_id=product_id, stock_quantity=body.stock_quantity)
    current_domain.process(command, asynchronous=False)
    return _product_response(ProductCatalog().get(product_id))


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


def _customer_response(customer) -> CustomerResponse:
    latest = customer.latest_prescription()
    return CustomerResponse(
        customer_id=str(customer.id),
        name=customer.name,
        email=customer.email,
        phone=customer.phone,
        prescriptions=[
            PrescriptionResponse(
                prescription_id=str(p.id),
                right_eye=p.right_eye.to_dict(),
                left_eye=p.left_eye.to_dict(),
                prescribed_on=p.prescribed_on.isoformat() if p.prescribed_on else None,
                expires_on=p.expires_on.isoformat() if p.expires_on else None,
                doctor=p.doctor,
                notes=p.notes,
            )
            for p in sorted(customer.prescriptions, key=lambda p: p.prescribed_on, reverse=True)
        ],
        latest_prescription_id=str(latest.id) if latest else None,
    )


@customer_router.get("", response_model=CustomerListResponse)
async def list_customers() -> CustomerListResponse:
    customers = current_domain.repository_for(Customer)._dao.query.order_by("name").all().items
    return CustomerListResponse(customers=[_customer_response(c) for c in customers])


@customer_router.post("", status_code=201, response_model=CustomerIdResponse)
async def register_customer(body: RegisterCustomerRequest) -> CustomerIdResponse:
    command = RegisterCustomer(name=body.name, email=body.email, phone=body.phone)
    result = current_domain.process(command, asynchronous=False)
    return CustomerIdResponse(customer_id=result)


@customer_router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str) -> CustomerResponse:
    return _customer_response(current_domain.repository_for(Customer).get(customer_id))


@customer_router.post("/{customer_id}/prescriptions", status_code=201, response_model=StatusResponse)
async def record_prescription(customer_id: str, body: RecordPrescriptionRequest) -> StatusResponse:
    command = RecordPrescription(
        customer_id=customer_id,
        right_eye=json.dumps(body.right_eye.model_dump(exclude_none=True)),
        left_eye=json.dumps(body.left_eye.model_dump(exclude_none=True)),
        prescribed_on=body.prescribed_on,
        expires_on=body.expires_on,
        doctor=body.doctor,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


def _session_response(session) -> SessionResponse:
    totals = session.totals()
    return SessionResponse(
        session_id=str(session.id),
        status=session.status,
        customer_id=str(session.customer_id) if session.customer_id else None,
        payment_method=session.payment_method,
        items=[
            CartItemSchema(
                product_id=str(item.product_id),
                name=item.name,
                barcode=item.barcode,
                price=item.price,
                category=item.category,
                stock=item.stock or 0,
                image_url=item.image_url,
                quantity=item.quantity,
                total=round2(line_total(item.price, item.quantity)),
            )
            for item in session.line_items()
        ],
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        invoice=(
            InvoiceSchema(invoice_number=session.invoice.invoice_number, date=session.invoice.date)
            if session.invoice
            else None
        ),
    )


@checkout_router.post("", status_code=201, response_model=SessionIdResponse)
async def open_session(body: OpenSessionRequest | None = None) -> SessionIdResponse:
    command = OpenCheckoutSession(terminal=body.terminal if body else None)
    result = current_domain.process(command, asynchronous=False)
    return SessionIdResponse(session_id=result)


@checkout_router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    return _session_response(current_domain.repository_for(CheckoutSession).get(session_id))


@checkout_router.put("/{session_id}/customer", response_model=StatusResponse)
async def select_customer(session_id: str, body: SelectCustomerRequest) -> StatusResponse:
    command = SelectCustomer(session_id=session_id, customer_id=body.customer_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.put("/{session_id}/payment-method", response_model=StatusResponse)
async def set_payment_method(session_id: str, body: PaymentMethodRequest) -> StatusResponse:
    command = SetPaymentMethod(session_id=session_id, payment_method=body.payment_method)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.post("/{session_id}/items", response_model=StatusResponse)
async def add_item(session_id: str, body: AddItemRequest) -> StatusResponse:
    if body.barcode:
        command = AddToCartByBarcode(session_id=session_id, barcode=body.barcode)
    else:
        command = AddToCart(session_id=session_id, product_id=body.product_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.put("/{session_id}/items/{product_id}", response_model=StatusResponse)
async def update_quantity(session_id: str, product_id: str, body: UpdateQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(session_id=session_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.delete("/{session_id}/items/{product_id}", response_model=StatusResponse)
async def remove_item(session_id: str, product_id: str) -> StatusResponse:
    command = RemoveFromCart(session_id=session_id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@checkout_router.delete("/{session_id}/items", response_model=StatusResponse)
async def clear_cart(session_id: str) -> StatusResponse:
    current_domain.process(ClearCart(session_id=session_id), asynchronous=False)
    return StatusResponse()


@checkout_router.post("/{session_id}/invoice", response_model=InvoiceResponse)
async def checkout(session_id: str, body: CheckoutRequest | None = None) -> InvoiceResponse:
    command = Checkout(session_id=session_id, payment_method=body.payment_method if body else None)
    snapshot = current_domain.process(command, asynchronous=False)
    return InvoiceResponse(**snapshot)


@checkout_router.post("/{session_id}/complete", response_model=SaleIdsResponse)
async def complete_sale(session_id: str) -> SaleIdsResponse:
    sale_ids = current_domain.process(CompleteSale(session_id=session_id), asynchronous=False)
    return SaleIdsResponse(sale_ids=sale_ids)


@checkout_router.post("/{session_id}/cancel", response_model=CancellationResponse)
async def cancel_sale(session_id: str) -> CancellationResponse:
    details = current_domain.process(CancelSale(session_id=session_id), asynchronous=False)
    return CancellationResponse(**details)


# ---------------------------------------------------------------------------
# Sales Router
# ---------------------------------------------------------------------------
sales_router = APIRouter(prefix="/sales", tags=["sales"])


@sales_router.get("", response_model=SaleListResponse)
async def list_sales(status: str | None = None) -> SaleListResponse:
    query = current_domain.repository_for(Sale)._dao.query
    if status:
        query = query.filter(status=status.upper())
    sales = query.order_by("-recorded_at").all().items
    return SaleListResponse(
        sales=[
            SaleResponse(
                sale_id=str(s.id),
                product_id=str(s.product_id),
                product_name=s.product_name,
                quantity=s.quantity,
                unit_price=s.unit_price,
                total_amount=s.total_amount,
                customer_id=str(s.customer_id) if s.customer_id else None,
                payment_method=s.payment_method,
                invoice_number=s.invoice_number,
                status=s.status,
                recorded_at=s.recorded_at.isoformat() if s.recorded_at else None,
            )
            for s in sales
        ]
    )


@sales_router.get("/daily/{date}", response_model=DailySalesResponse)
async def daily_sales(date: str) -> DailySalesResponse:
    record = current_domain.repository_for(DailySales).get(date)
    return DailySalesResponse(
        date=record.date,
        invoices_completed=record.invoices_completed or 0,
        invoices_cancelled=record.invoices_cancelled or 0,
        sales_refunded=record.sales_refunded or 0,
        total_revenue=record.total_revenue or 0.0,
        total_refunds=record.total_refunds or 0.0,
    )


@sales_router.put("/{sale_id}/refund", response_model=StatusResponse)
async def refund_sale(sale_id: str) -> StatusResponse:
    status = current_domain.process(RefundSale(sale_id=sale_id), asynchronous=False)
    return StatusResponse(status=status)
