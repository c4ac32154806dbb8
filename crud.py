# crud.py
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from models import (
    Category,
    Order,
    OrderItem,
    Product,
    Subcategory,
    User,
)


# ---------------------------
# Users
# ---------------------------
def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.scalars(select(User).where(User.username == username)).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(func.lower(User.email) == email.lower())).first()


def get_user_by_login(db: Session, login: str) -> Optional[User]:
    """login ที่มี @ ถือเป็น email, นอกนั้นเป็น username"""
    login = login.strip()
    if "@" in login:
        return get_user_by_email(db, login)
    return get_user_by_username(db, login)


def count_users(db: Session) -> int:
    return db.scalar(select(func.count(User.id))) or 0


def create_user(db: Session, username: str, email: str, password_hash: str, role: str = "customer") -> User:
    user = User(username=username, email=email, password_hash=password_hash, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def set_user_password(db: Session, user: User, password_hash: str) -> User:
    user.password_hash = password_hash
    db.commit()
    db.refresh(user)
    return user


# ---------------------------
# Categories / Subcategories
# ---------------------------
def categories_with_subcategories(db: Session) -> List[Category]:
    stmt = select(Category).options(selectinload(Category.subcategories)).order_by(Category.name)
    return db.scalars(stmt).all()


def list_subcategories(db: Session, category_id: Optional[int] = None) -> List[Subcategory]:
    stmt = select(Subcategory)
    if category_id is not None:
        stmt = stmt.where(Subcategory.category_id == category_id)
    return db.scalars(stmt.order_by(Subcategory.name)).all()


def delete_category(db: Session, category: Category) -> None:
    """
    ลบ category + subcategories ทั้งหมดของมัน (cascade ระดับ ORM)
    สินค้าที่อ้างถึงจะถูกล้าง category_id / subcategory_id
    """
    sub_ids = [s.id for s in category.subcategories]
    if sub_ids:
        db.execute(
            update(Product).where(Product.subcategory_id.in_(sub_ids)).values(subcategory_id=None)
        )
    db.execute(update(Product).where(Product.category_id == category.id).values(category_id=None))
    db.delete(category)
    db.commit()


def delete_subcategory(db: Session, subcategory: Subcategory) -> None:
    db.execute(
        update(Product).where(Product.subcategory_id == subcategory.id).values(subcategory_id=None)
    )
    db.delete(subcategory)
    db.commit()


# ---------------------------
# Products
# ---------------------------
def list_products(
    db: Session,
    q: Optional[str] = None,
    category_id: Optional[int] = None,
    subcategory_id: Optional[int] = None,
    status: Optional[str] = None,
) -> List[Product]:
    stmt = select(Product)
    if q and q.strip():
        like = f"%{q.strip()}%"
        stmt = stmt.where(or_(Product.name.ilike(like), Product.description.ilike(like)))
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    if subcategory_id is not None:
        stmt = stmt.where(Product.subcategory_id == subcategory_id)
    if status:
        stmt = stmt.where(Product.status == status)
    return db.scalars(stmt.order_by(Product.name)).all()


def apply_stock_status(
    data: dict, current_stock: Optional[int] = None, current_status: Optional[str] = None
) -> dict:
    """
    out_of_stock เมื่อ stock == 0 เท่านั้น (ทุกเส้นทางที่เขียน product)
    - stock 0 -> out_of_stock ไม่ว่าจะส่ง status อะไรมา
    - stock > 0 แต่ status เป็น out_of_stock -> active
    """
    stock = data.get("stock", current_stock)
    status = data.get("status", current_status)
    if stock == 0:
        data["status"] = "out_of_stock"
    elif stock is not None and status == "out_of_stock":
        data["status"] = "active"
    return data


# ---------------------------
# Orders
# ---------------------------
def list_orders(db: Session, owner_id: Optional[int] = None, limit: Optional[int] = None) -> List[Order]:
    stmt = select(Order)
    if owner_id is not None:
        stmt = stmt.where(Order.user_id == owner_id)
    stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
    if limit:
        stmt = stmt.limit(limit)
    return db.scalars(stmt).all()


def get_order_number_taken(db: Session, order_number: str) -> bool:
    return db.scalars(select(Order.id).where(Order.order_number == order_number)).first() is not None


def list_order_items(db: Session, order_id: int) -> List[OrderItem]:
    return db.scalars(
        select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
    ).all()


def delivered_orders_with_customer(db: Session) -> list:
    """order ที่ completed แล้ว + username/email ของเจ้าของ (LEFT JOIN)"""
    stmt = (
        select(
            Order.id.label("order_id"),
            Order.order_number,
            Order.total_amount,
            Order.items_count,
            Order.payment_method,
            Order.created_at,
            Order.customer_info,
            Order.user_id,
            User.username,
            User.email,
        )
        .outerjoin(User, Order.user_id == User.id)
        .where(Order.status == "completed")
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return db.execute(stmt).mappings().all()
