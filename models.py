# models.py
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from database import Base

# JSONB บน PostgreSQL, JSON ธรรมดาบน SQLite (dev/tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _in_list(column: str, values) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


# =========================================
# ================ Users ==================
# =========================================

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="customer")  # admin / customer
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    orders = relationship("Order", back_populates="user", passive_deletes=True)
    sessions = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(_in_list("role", ("admin", "customer")), name="ck_users_role"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User(username={self.username}, role={self.role})>"


class UserSession(Base):
    """Server-side session แถวละหนึ่ง cookie (sid เป็นค่าสุ่ม ไม่มีความหมาย)"""
    __tablename__ = "user_sessions"

    sid = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User", back_populates="sessions")

    def __repr__(self):
        return f"<UserSession(user_id={self.user_id}, expires_at={self.expires_at})>"


# =========================================
# ============== Catalog ==================
# =========================================

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # ลบ category แล้วลบ subcategories ตาม (ระดับ application)
    subcategories = relationship(
        "Subcategory",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="Subcategory.name",
    )
    products = relationship("Product", back_populates="category_ref")

    def __repr__(self):
        return f"<Category(name={self.name})>"


class Subcategory(Base):
    __tablename__ = "subcategories"

    id = Column(Integer, primary_key=True)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    category = relationship("Category", back_populates="subcategories")
    products = relationship("Product", back_populates="subcategory_ref")

    def __repr__(self):
        return f"<Subcategory(category_id={self.category_id}, name={self.name})>"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=True)  # label อิสระ (ข้อมูลเก่า)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    subcategory_id = Column(Integer, ForeignKey("subcategories.id", ondelete="SET NULL"), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    specifications = Column(JSONType, nullable=True)
    status = Column(String, nullable=False, default="active")  # active / inactive / out_of_stock
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category_ref = relationship("Category", back_populates="products")
    subcategory_ref = relationship("Subcategory", back_populates="products")

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_nonneg"),
        CheckConstraint(
            _in_list("status", ("active", "inactive", "out_of_stock")), name="ck_products_status"
        ),
        Index("ix_products_category", "category_id", "subcategory_id"),
    )

    def __repr__(self):
        return f"<Product(name={self.name}, stock={self.stock}, status={self.status})>"


# =========================================
# ================ Orders =================
# =========================================

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    items_count = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default="pending")

    payment_method = Column(String, nullable=True)  # bank_transfer / cashapp / venmo / western_union
    payment_amount = Column(Numeric(10, 2), nullable=True)
    payment_transfer_id = Column(String, nullable=True)  # หลักฐานการโอน
    payment_transfer_date = Column(DateTime(timezone=True), nullable=True)
    customer_info = Column(JSONType, nullable=True)

    # assembly เป็น state machine แยกจาก status ของ order
    assembly_scheduled_date = Column(DateTime(timezone=True), nullable=True)
    assembly_status = Column(String, nullable=True)  # NULL / scheduled / completed
    assembly_completed_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    __table_args__ = (
        CheckConstraint(
            _in_list("status", ("pending", "paid", "processing", "completed", "failed", "cancelled")),
            name="ck_orders_status",
        ),
        CheckConstraint(
            "assembly_status IS NULL OR " + _in_list("assembly_status", ("scheduled", "completed")),
            name="ck_orders_assembly_status",
        ),
        Index("ix_orders_status", "status"),
    )

    def __repr__(self):
        return f"<Order(order_number={self.order_number}, status={self.status})>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # ราคาต่อหน่วย ณ เวลาซื้อ
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    def __repr__(self):
        return f"<OrderItem(order_id={self.order_id}, product_id={self.product_id}, qty={self.quantity})>"


# =========================================
# ============== Operations ===============
# =========================================

class Delivery(Base):
    __tablename__ = "deliveries"

    id = Column(Integer, primary_key=True)
    delivery_number = Column(String, unique=True, index=True, nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending / in_transit / delivered / cancelled
    delivery_date = Column(DateTime(timezone=True), nullable=True)
    items = Column(JSONType, nullable=False)
    notes = Column(Text, nullable=True)
    driver_name = Column(String, nullable=True)
    tracking_info = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            _in_list("status", ("pending", "in_transit", "delivered", "cancelled")),
            name="ck_deliveries_status",
        ),
    )

    def __repr__(self):
        return f"<Delivery(delivery_number={self.delivery_number}, status={self.status})>"


class Assembly(Base):
    __tablename__ = "assemblies"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # component / kit / full_machine
    components = Column(JSONType, nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending / in_progress / completed / cancelled
    priority = Column(String, nullable=False, default="normal")  # low / normal / high / urgent
    assigned_to = Column(String, nullable=True)
    estimated_time = Column(Integer, nullable=True)  # นาที
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (Index("ix_assemblies_status", "status"),)

    def __repr__(self):
        return f"<Assembly(name={self.name}, status={self.status})>"


class MaintenanceRecord(Base):
    __tablename__ = "maintenance_records"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False)  # routine / repair / inspection / cleaning
    priority = Column(String, nullable=False, default="normal")
    status = Column(String, nullable=False, default="scheduled")  # scheduled / in_progress / completed / cancelled
    scheduled_date = Column(DateTime(timezone=True), nullable=False)
    completed_date = Column(DateTime(timezone=True), nullable=True)
    technician = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    cost = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (Index("ix_maintenance_scheduled", "scheduled_date"),)

    def __repr__(self):
        return f"<MaintenanceRecord(type={self.type}, status={self.status})>"
