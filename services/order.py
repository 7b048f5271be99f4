import json
import logging

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_commit, session_rollback
from enums.order_status import OrderStatus, PaymentStatus
from exceptions.order import OrderPersistenceException, OrderValidationException
from models.cart import PreparedCartDTO
from models.order import CreateOrderRequestDTO, OrderCreatedDTO, OrderDTO
from models.orderItem import OrderItemDTO
from repositories.order import OrderRepository

# Attempts at allocating an order number before giving up on a unique clash
ORDER_NUMBER_ATTEMPTS = 2


class OrderService:

    @staticmethod
    async def create_order(
        prepared: PreparedCartDTO,
        session: AsyncSession | Session,
        customer_email: str | None = None
    ) -> OrderCreatedDTO:
        """
        Persist a prepared cart as a new order.

        Flow:
        1. Validate the payload (CreateOrderRequestDTO limits)
        2. Allocate the day's next order number for the organization
        3. Insert order + items (modifiers stored as JSON), commit

        A concurrent order taking the same number trips the unique
        (organization_id, order_number) constraint; the transaction is rolled
        back and a fresh number is allocated once more.

        Prices are taken from the payload as-is: they were locked in the cart
        when each line was added.

        Args:
            prepared: Payload from CartService.prepare_for_submission()
            session: Database session
            customer_email: Optional e-mail collected outside the cart

        Returns:
            OrderCreatedDTO with id, order number and status

        Raises:
            OrderValidationException: If the payload violates an order limit
            OrderPersistenceException: If the order cannot be written
        """
        request = OrderService._validate(prepared, customer_email)
        item_dtos = [
            OrderItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                product_description=item.product_description,
                product_image_url=item.product_image_url,
                quantity=item.quantity,
                unit_price=item.unit_price,
                modifier_total=item.modifier_total,
                item_total=item.item_total,
                currency=item.currency,
                price_ledger_id=item.price_ledger_id,
                selected_modifiers=json.dumps(
                    [modifier.model_dump(mode="json") for modifier in item.selected_modifiers]
                ),
                special_instructions=item.special_instructions
            )
            for item in request.items
        ]

        for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
            try:
                order_number = await OrderRepository.next_order_number(request.organization_id, session)
                order_id = await OrderRepository.create(
                    OrderService._build_order(request, order_number), item_dtos, session
                )
                await session_commit(session)
                break
            except IntegrityError as e:
                await session_rollback(session)
                if attempt < ORDER_NUMBER_ATTEMPTS:
                    logging.warning(
                        f"⚠️ Order number clash for organization {request.organization_id}, allocating a new one"
                    )
                    continue
                logging.error(f"❌ Order for organization {request.organization_id} not saved: {e.orig!r}")
                raise OrderPersistenceException(request.organization_id, "order number already taken") from e
            except SQLAlchemyError as e:
                await session_rollback(session)
                logging.error(f"❌ Order for organization {request.organization_id} not saved: {e!r}")
                raise OrderPersistenceException(request.organization_id, type(e).__name__) from e

        logging.info(
            f"✅ Order {order_number} ({order_id}) created for organization {request.organization_id}: "
            f"{len(item_dtos)} lines, total {request.total_amount} {request.currency}, type {request.order_type.value}"
        )
        return OrderCreatedDTO(order_id=order_id, order_number=order_number, status=OrderStatus.PENDING)

    @staticmethod
    def _build_order(request: CreateOrderRequestDTO, order_number: str) -> OrderDTO:
        return OrderDTO(
            organization_id=request.organization_id,
            order_number=order_number,
            table_id=request.table_id,
            table_name=request.table_name,
            customer_name=request.customer_name,
            customer_phone=request.customer_phone,
            customer_email=request.customer_email,
            customer_notes=request.customer_notes,
            order_type=request.order_type,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            subtotal=request.subtotal,
            total_amount=request.total_amount,
            currency=request.currency,
            source="qr_menu"
        )

    @staticmethod
    def _validate(prepared: PreparedCartDTO, customer_email: str | None) -> CreateOrderRequestDTO:
        data = prepared.model_dump()
        # Empty customer fields are stored as NULL
        for field in ("customer_name", "customer_phone", "customer_notes"):
            data[field] = data[field] or None
        data["customer_email"] = customer_email or None
        for item in data["items"]:
            item["special_instructions"] = item["special_instructions"] or None

        try:
            return CreateOrderRequestDTO.model_validate(data)
        except ValidationError as e:
            first_error = e.errors()[0]
            field = ".".join(str(part) for part in first_error["loc"])
            logging.warning(f"Order payload rejected for organization {prepared.organization_id}: {field}: {first_error['msg']}")
            raise OrderValidationException(field, first_error["msg"]) from e
