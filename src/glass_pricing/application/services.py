from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal

import structlog

from glass_pricing.application.pricing import InvoicePricingService
from glass_pricing.application.rates import RateCatalogCache
from glass_pricing.application.reconciliation import BalanceReconciliationService
from glass_pricing.application.unit_of_work import UnitOfWork
from glass_pricing.domain.cutting import FarmaType, ShatafType
from glass_pricing.domain.exceptions import (
    CashPaymentShortfallError,
    CustomerNotFoundError,
    GlassTypeNotFoundError,
    InvalidAmountError,
    InvoiceNotFoundError,
    OverpaymentError,
    ValidationError,
)
from glass_pricing.domain.models import (
    Customer,
    CustomerType,
    GlassType,
    Invoice,
    LineCalculation,
    Payment,
    PaymentMethod,
)
from glass_pricing.domain.values import DimensionUnit, Dimensions, Money
from glass_pricing.infrastructure.metrics import PAYMENTS_APPLIED_TOTAL


logger = structlog.get_logger()


@dataclass
class InvoiceLineRequest:
    glass_type_id: str
    width: Decimal
    height: Decimal
    shataf_type: ShatafType
    farma_type: FarmaType
    unit: DimensionUnit = DimensionUnit.MM
    diameter: Decimal | None = None
    manual_cutting_price: Decimal | None = None
    quantity: int = 1


@dataclass
class CreateInvoiceCommand:
    customer_id: str
    lines: list[InvoiceLineRequest] = field(default_factory=list)
    initial_payment: Decimal = Decimal(0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = None
    created_by: str | None = None


@dataclass
class RecordPaymentCommand:
    customer_id: str
    amount: Decimal
    invoice_id: str | None = None
    method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = None
    created_by: str | None = None


def allocate_payment(invoices: list[Invoice], amount: Money) -> list[tuple[Invoice, Money]]:
    """Split a general payment across open invoices, oldest first.

    Raises OverpaymentError before any allocation when ``amount`` exceeds the
    combined remaining balance.
    """
    open_invoices = sorted(
        (invoice for invoice in invoices if invoice.remaining_balance.is_positive()),
        key=lambda invoice: (invoice.issue_date, invoice.id),
    )
    outstanding = Money.zero()
    for invoice in open_invoices:
        outstanding = outstanding.add(invoice.remaining_balance)
    if amount > outstanding:
        raise OverpaymentError(amount.amount, outstanding.amount)

    allocations: list[tuple[Invoice, Money]] = []
    left = amount
    for invoice in open_invoices:
        if left.is_zero():
            break
        share = min(invoice.remaining_balance, left)
        allocations.append((invoice, share))
        left = left.subtract(share)
    return allocations


class InvoiceService:
    def __init__(self, uow: UnitOfWork, rate_cache: RateCatalogCache) -> None:
        self.uow = uow
        self.rate_cache = rate_cache
        self.reconciliation = BalanceReconciliationService(uow)

    async def create_invoice(self, cmd: CreateInvoiceCommand) -> Invoice:
        log = logger.bind(customer_id=cmd.customer_id, lines=len(cmd.lines))
        if not cmd.lines:
            raise ValidationError("Invoice requires at least one line")

        async with self.uow:
            customer = await self._get_customer(cmd.customer_id)
            pricing = InvoicePricingService(await self.rate_cache.get(self.uow))

            invoice = Invoice.create(customer.id, notes=cmd.notes)
            for request in cmd.lines:
                glass_type = await self._get_glass_type(request.glass_type_id)
                self._add_priced_line(invoice, pricing, glass_type, request)

            initial_payment = Money.of(cmd.initial_payment)
            if customer.customer_type is CustomerType.CASH and initial_payment < invoice.total_price:
                raise CashPaymentShortfallError(customer.id, invoice.total_price.amount, initial_payment.amount)

            payment: Payment | None = None
            if initial_payment.is_positive():
                invoice.apply_payment(initial_payment, at=invoice.issue_date)
                payment = Payment.create(
                    customer_id=customer.id,
                    amount=initial_payment,
                    method=cmd.payment_method,
                    invoice_id=invoice.id,
                    notes=cmd.notes,
                    created_by=cmd.created_by,
                    paid_at=invoice.issue_date,
                )

            await self.uow.invoices.add(invoice)
            if payment is not None:
                await self.uow.payments.add(payment)
            await self._refresh_customer_balance(customer)
            await self.uow.commit()

        log.info(
            "invoice_created",
            invoice_id=invoice.id,
            total_price=invoice.total_price,
            amount_paid=invoice.amount_paid,
            status=invoice.status,
        )
        return invoice

    async def preview_line(self, request: InvoiceLineRequest) -> LineCalculation:
        async with self.uow:
            glass_type = await self._get_glass_type(request.glass_type_id)
            pricing = InvoicePricingService(await self.rate_cache.get(self.uow))
            return pricing.calculate_line_price(
                dimensions=Dimensions(request.width, request.height, request.unit),
                glass_type=glass_type,
                shataf_type=request.shataf_type,
                farma_type=request.farma_type,
                diameter=request.diameter,
                manual_cutting_price=self._manual_price(request),
            )

    async def record_payment(self, cmd: RecordPaymentCommand) -> Payment:
        amount = Money.of(cmd.amount)
        if not amount.is_positive():
            raise InvalidAmountError(amount.amount, "Amount must be positive")
        log = logger.bind(customer_id=cmd.customer_id, invoice_id=cmd.invoice_id, amount=amount)
        paid_at = datetime.now(UTC)

        async with self.uow:
            customer = await self._get_customer(cmd.customer_id)

            if cmd.invoice_id is not None:
                invoice = await self._get_invoice(cmd.invoice_id)
                if invoice.customer_id != customer.id:
                    raise ValidationError(f"Invoice {invoice.id} does not belong to customer {customer.id}")
                invoice.apply_payment(amount, at=paid_at)
                await self.uow.invoices.update_payment_state(invoice)
                kind = "invoice"
            else:
                invoices = await self.uow.invoices.get_by_customer_id(customer.id)
                for invoice, share in allocate_payment(invoices, amount):
                    invoice.apply_payment(share, at=paid_at)
                    await self.uow.invoices.update_payment_state(invoice)
                    log.info("payment_allocated", allocated_to=invoice.id, share=share)
                kind = "general"

            payment = Payment.create(
                customer_id=customer.id,
                amount=amount,
                method=cmd.method,
                invoice_id=cmd.invoice_id,
                paid_at=paid_at,
                notes=cmd.notes,
                created_by=cmd.created_by,
            )
            await self.uow.payments.add(payment)
            await self._refresh_customer_balance(customer)
            await self.uow.commit()

        PAYMENTS_APPLIED_TOTAL.labels(kind=kind).inc()
        log.info("payment_applied", payment_id=payment.id, kind=kind, customer_balance=customer.balance)
        return payment

    async def get_invoice(self, invoice_id: str) -> Invoice:
        return await self._get_invoice(invoice_id)

    async def invoices_between(self, start: date, end: date) -> list[Invoice]:
        return await self.uow.invoices.get_by_date_range(start, end)

    async def customer_payments(self, customer_id: str) -> list[Payment]:
        return await self.uow.payments.get_by_customer_id(customer_id)

    async def invoice_payments(self, invoice_id: str) -> list[Payment]:
        if not await self.uow.invoices.exists(invoice_id):
            raise InvoiceNotFoundError(invoice_id)
        return await self.uow.payments.get_by_invoice_id(invoice_id)

    def _add_priced_line(
        self,
        invoice: Invoice,
        pricing: InvoicePricingService,
        glass_type: GlassType,
        request: InvoiceLineRequest,
    ) -> None:
        dimensions = Dimensions(request.width, request.height, request.unit)
        manual_price = self._manual_price(request)
        calculation = pricing.calculate_line_price(
            dimensions=dimensions,
            glass_type=glass_type,
            shataf_type=request.shataf_type,
            farma_type=request.farma_type,
            diameter=request.diameter,
            manual_cutting_price=manual_price,
        )
        invoice.add_line(
            calculation,
            glass_type_id=glass_type.id,
            dimensions=dimensions,
            shataf_type=request.shataf_type,
            farma_type=request.farma_type,
            diameter=request.diameter,
            manual_cutting_price=manual_price,
            quantity=request.quantity,
        )

    @staticmethod
    def _manual_price(request: InvoiceLineRequest) -> Money | None:
        if request.manual_cutting_price is None:
            return None
        return Money.of(request.manual_cutting_price)

    async def _refresh_customer_balance(self, customer: Customer) -> None:
        reconciled = await self.reconciliation.get_reconciled_balance(customer.id)
        customer.refresh_balance(reconciled)
        await self.uow.customers.update_balance(customer.id, reconciled)

    async def _get_customer(self, customer_id: str) -> Customer:
        # Locks the customer row so payments and invoices for one customer serialize
        customer = await self.uow.customers.get_for_update(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer

    async def _get_glass_type(self, glass_type_id: str) -> GlassType:
        glass_type = await self.uow.glass_types.get(glass_type_id)
        if glass_type is None:
            raise GlassTypeNotFoundError(glass_type_id)
        if not glass_type.active:
            raise ValidationError(f"Glass type {glass_type.name} is inactive")
        return glass_type

    async def _get_invoice(self, invoice_id: str) -> Invoice:
        invoice = await self.uow.invoices.get(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice
