# services/checkout.py
import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import Order, OrderItem, Product, User
from schemas import CheckoutIn, OrderStatus
from utils.code_generator import new_order_number
from utils.orm import payload_to_columns

logger = logging.getLogger(__name__)


def _lock_product(db: Session, product_id: int) -> Product | None:
    # PostgreSQL: SELECT ... FOR UPDATE กัน checkout พร้อมกันตัดสต็อกซ้ำ
    # SQLite ไม่มี FOR UPDATE (SQLAlchemy ตัดทิ้งให้เอง)
    stmt = select(Product).where(Product.id == product_id).with_for_update()
    return db.scalars(stmt).first()


def checkout(db: Session, user: User, payload: CheckoutIn) -> Order:
    """
    ตัดสต็อก + สร้าง Order + สร้าง OrderItem ใน transaction เดียว
    (สำเร็จทั้งหมด หรือ rollback ทั้งหมด)
    """
    try:
        product = _lock_product(db, payload.product_id)
        if product is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

        if product.stock < payload.quantity:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Insufficient stock available")

        # 1) stock
        product.stock = product.stock - payload.quantity
        if product.stock == 0:
            product.status = "out_of_stock"

        # 2) order (มีหลักฐานการโอน = paid)
        data = payload_to_columns(payload)
        transfer_id = (payload.payment_transfer_id or "").strip() or None
        order = Order(
            order_number=new_order_number(),
            user_id=user.id,
            total_amount=payload.total_amount,
            items_count=payload.quantity,
            status=(OrderStatus.paid if transfer_id else OrderStatus.pending).value,
            payment_method=data.get("payment_method"),
            payment_amount=payload.payment_amount,
            payment_transfer_id=transfer_id,
            payment_transfer_date=payload.payment_transfer_date,
            customer_info=data.get("customer_info"),
        )
        db.add(order)
        db.flush()

        # 3) order item: ราคา ณ เวลาซื้อ
        db.add(
            OrderItem(
                order_id=order.id,
                product_id=product.id,
                quantity=payload.quantity,
                price=product.price,
            )
        )

        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        logger.exception("Checkout conflict for product %s", payload.product_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Checkout conflict, please retry")
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info(
        "Checkout %s: user=%s product=%s qty=%s stock_left=%s status=%s",
        order.order_number, user.id, product.id, payload.quantity, product.stock, order.status,
    )
    return order
