from __future__ import annotations

from typing import Optional, List, Dict, Annotated, Any
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)

# =========================
# ===== Base (Pydantic v2)
# =========================
class APIBase(BaseModel):
    """
    Base สำหรับ schema ขาออก:
    - from_attributes=True: รองรับแปลงจาก ORM (SQLAlchemy)
    """
    model_config = ConfigDict(from_attributes=True)


# Decimal -> float ตอนส่ง JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
# ขาเข้า: Numeric(10, 2)
MoneyIn = Annotated[Money, Field(max_digits=10, decimal_places=2)]
NonNegMoney = Annotated[MoneyIn, Field(ge=0)]


def _blank_to_none(v: Any) -> Any:
    # ฟอร์มฝั่ง client ส่ง "" มาแทน null บ่อย
    if isinstance(v, str) and not v.strip():
        return None
    return v


# =========================================
# ================ Enums ==================
# =========================================
class Role(str, Enum):
    admin = "admin"
    customer = "customer"

class ProductStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    out_of_stock = "out_of_stock"

class OrderStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    cancelled = "cancelled"

class AssemblyStatus(str, Enum):
    """สถานะการประกอบของ order (แยกจาก OrderStatus)"""
    scheduled = "scheduled"
    completed = "completed"

class PaymentMethod(str, Enum):
    bank_transfer = "bank_transfer"
    cashapp = "cashapp"
    venmo = "venmo"
    western_union = "western_union"

class DeliveryStatus(str, Enum):
    pending = "pending"
    in_transit = "in_transit"
    delivered = "delivered"
    cancelled = "cancelled"

class AssemblyType(str, Enum):
    component = "component"
    kit = "kit"
    full_machine = "full_machine"

class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"

class Priority(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"
    urgent = "urgent"

class MaintenanceType(str, Enum):
    routine = "routine"
    repair = "repair"
    inspection = "inspection"
    cleaning = "cleaning"

class MaintenanceStatus(str, Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


# =========================================
# ======== Structured JSON payloads =======
# =========================================
class Address(BaseModel):
    model_config = ConfigDict(extra="ignore")

    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None

class CustomerInfo(BaseModel):
    """ข้อมูลลูกค้าที่แนบมากับ order (เก็บเป็น JSON)"""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    notes: Optional[str] = None

class DeliveryItem(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)

class TrackingInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    location: Optional[str] = None
    started_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    notes: Optional[str] = None


def _normalize_delivery_items(v: Any) -> Any:
    # รูปแบบเก่า {"Coke": 10, "Chips": 5} -> [{"name": "Coke", "quantity": 10}, ...]
    if isinstance(v, dict):
        return [{"name": k, "quantity": q} for k, q in v.items()]
    return v


Specifications = Dict[str, str]
Components = Dict[str, Annotated[int, Field(ge=0)]]


# =========================================
# ================= Users =================
# =========================================
class UserOut(APIBase):
    id: int
    username: str
    email: str
    role: Role
    created_at: Optional[datetime] = None

class RegisterIn(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role = Role.customer

    @field_validator("username")
    @classmethod
    def _strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

class LoginIn(BaseModel):
    username: str = Field(..., min_length=1, description="username หรือ email")
    password: str = Field(..., min_length=1)

class ForgotPasswordIn(BaseModel):
    email: EmailStr

class ResetPasswordIn(BaseModel):
    # client เดิมส่ง camelCase (currentPassword / newPassword)
    token: Optional[str] = None
    current_password: Optional[str] = Field(
        None, validation_alias=AliasChoices("current_password", "currentPassword")
    )
    new_password: str = Field(
        ..., min_length=6, validation_alias=AliasChoices("new_password", "newPassword")
    )

class MessageOut(BaseModel):
    message: str


# =========================================
# =============== Categories ==============
# =========================================
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None

class CategoryOut(APIBase):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

class SubcategoryCreate(BaseModel):
    category_id: int
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

class SubcategoryUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None

class SubcategoryOut(APIBase):
    id: int
    category_id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

class CategoryWithSubcategories(CategoryOut):
    subcategories: List[SubcategoryOut] = []


# =========================================
# ================ Products ===============
# =========================================
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    price: NonNegMoney
    description: Optional[str] = None
    image: Optional[str] = None
    stock: int = Field(0, ge=0)
    specifications: Optional[Specifications] = None
    status: ProductStatus = ProductStatus.active

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    price: Optional[NonNegMoney] = None
    description: Optional[str] = None
    image: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    specifications: Optional[Specifications] = None
    status: Optional[ProductStatus] = None

class ProductOut(APIBase):
    id: int
    name: str
    category: Optional[str] = None
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    price: Money
    description: Optional[str] = None
    image: Optional[str] = None
    stock: int
    specifications: Optional[Specifications] = None
    status: ProductStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =========================================
# ================= Orders ================
# =========================================
class OrderCreate(BaseModel):
    order_number: Optional[str] = None  # ว่าง/"AUTO" = สร้างให้
    user_id: Optional[int] = None
    total_amount: NonNegMoney
    items_count: int = Field(..., ge=1)
    status: OrderStatus = OrderStatus.pending
    payment_method: Optional[PaymentMethod] = None
    payment_amount: Optional[NonNegMoney] = None
    payment_transfer_id: Optional[str] = None
    payment_transfer_date: Optional[datetime] = None
    customer_info: Optional[CustomerInfo] = None

    blanks_to_none = field_validator(
        "payment_method", "payment_amount", "payment_transfer_id", "payment_transfer_date",
        mode="before",
    )(_blank_to_none)

class OrderUpdate(BaseModel):
    """แก้ไขข้อมูล order; status/assembly ต้องผ่าน endpoint เฉพาะ"""
    user_id: Optional[int] = None
    total_amount: Optional[NonNegMoney] = None
    items_count: Optional[int] = Field(None, ge=1)
    payment_method: Optional[PaymentMethod] = None
    payment_amount: Optional[NonNegMoney] = None
    payment_transfer_id: Optional[str] = None
    payment_transfer_date: Optional[datetime] = None
    customer_info: Optional[CustomerInfo] = None

    blanks_to_none = field_validator(
        "payment_method", "payment_amount", "payment_transfer_id", "payment_transfer_date",
        mode="before",
    )(_blank_to_none)

class OrderOut(APIBase):
    id: int
    order_number: str
    user_id: Optional[int] = None
    total_amount: Money
    items_count: int
    status: OrderStatus
    payment_method: Optional[str] = None
    payment_amount: Optional[Money] = None
    payment_transfer_id: Optional[str] = None
    payment_transfer_date: Optional[datetime] = None
    customer_info: Optional[CustomerInfo] = None
    assembly_scheduled_date: Optional[datetime] = None
    assembly_status: Optional[AssemblyStatus] = None
    assembly_completed_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class OrderItemOut(APIBase):
    id: int
    order_id: int
    product_id: Optional[int] = None
    quantity: int
    price: Money
    created_at: Optional[datetime] = None

class OrderStatusIn(BaseModel):
    status: OrderStatus

class AssemblyScheduleIn(BaseModel):
    assembly_scheduled_date: datetime

class AssemblyStatusIn(BaseModel):
    assembly_status: AssemblyStatus

class CheckoutIn(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    total_amount: Annotated[MoneyIn, Field(gt=0)]
    payment_method: Optional[PaymentMethod] = None
    payment_amount: Optional[NonNegMoney] = None
    payment_transfer_id: Optional[str] = None
    payment_transfer_date: Optional[datetime] = None
    customer_info: Optional[CustomerInfo] = None

    blanks_to_none = field_validator(
        "payment_method", "payment_amount", "payment_transfer_id", "payment_transfer_date",
        mode="before",
    )(_blank_to_none)


# =========================================
# =============== Deliveries ==============
# =========================================
class DeliveryCreate(BaseModel):
    delivery_number: Optional[str] = None  # ว่าง/"AUTO" = DLV####
    status: DeliveryStatus = DeliveryStatus.pending
    delivery_date: Optional[datetime] = None
    items: List[DeliveryItem]
    notes: Optional[str] = None
    driver_name: Optional[str] = None
    tracking_info: Optional[TrackingInfo] = None

    normalize_items = field_validator("items", mode="before")(_normalize_delivery_items)

class DeliveryUpdate(BaseModel):
    delivery_number: Optional[str] = None
    status: Optional[DeliveryStatus] = None
    delivery_date: Optional[datetime] = None
    items: Optional[List[DeliveryItem]] = None
    notes: Optional[str] = None
    driver_name: Optional[str] = None
    tracking_info: Optional[TrackingInfo] = None

    normalize_items = field_validator("items", mode="before")(_normalize_delivery_items)

class DeliveryStatusIn(BaseModel):
    status: DeliveryStatus

class DeliveryOut(APIBase):
    id: int
    delivery_number: str
    status: DeliveryStatus
    delivery_date: Optional[datetime] = None
    items: List[DeliveryItem]
    notes: Optional[str] = None
    driver_name: Optional[str] = None
    tracking_info: Optional[TrackingInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    normalize_items = field_validator("items", mode="before")(_normalize_delivery_items)


# =========================================
# =============== Assemblies ==============
# =========================================
class AssemblyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: AssemblyType
    components: Components
    status: TaskStatus = TaskStatus.pending
    priority: Priority = Priority.normal
    assigned_to: Optional[str] = None
    estimated_time: Optional[int] = Field(None, ge=0, description="minutes")
    notes: Optional[str] = None

class AssemblyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[AssemblyType] = None
    components: Optional[Components] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    assigned_to: Optional[str] = None
    estimated_time: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

class AssemblyOut(APIBase):
    id: int
    name: str
    type: AssemblyType
    components: Components
    status: TaskStatus
    priority: Priority
    assigned_to: Optional[str] = None
    estimated_time: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =========================================
# ============== Maintenance ==============
# =========================================
class MaintenanceCreate(BaseModel):
    type: MaintenanceType
    priority: Priority = Priority.normal
    status: MaintenanceStatus = MaintenanceStatus.scheduled
    scheduled_date: datetime
    completed_date: Optional[datetime] = None
    technician: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    cost: Optional[NonNegMoney] = None

    blanks_to_none = field_validator("completed_date", "cost", mode="before")(_blank_to_none)

    @model_validator(mode="after")
    def _completed_after_scheduled(self):
        if self.completed_date and self.completed_date < self.scheduled_date:
            raise ValueError("completed_date must not be before scheduled_date")
        return self

class MaintenanceUpdate(BaseModel):
    type: Optional[MaintenanceType] = None
    priority: Optional[Priority] = None
    status: Optional[MaintenanceStatus] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    technician: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    cost: Optional[NonNegMoney] = None

    blanks_to_none = field_validator("completed_date", "cost", mode="before")(_blank_to_none)

class MaintenanceOut(APIBase):
    id: int
    type: MaintenanceType
    priority: Priority
    status: MaintenanceStatus
    scheduled_date: datetime
    completed_date: Optional[datetime] = None
    technician: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    cost: Optional[Money] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =========================================
# ========= Dashboard / Monitoring ========
# =========================================
class DashboardStats(BaseModel):
    totalProducts: int
    totalOrders: int
    pendingOrders: int
    totalRevenue: float

class DeliveredOrderOut(APIBase):
    order_id: int
    order_number: str
    total_amount: Money
    items_count: int
    payment_method: Optional[str] = None
    created_at: Optional[datetime] = None
    customer_info: Optional[CustomerInfo] = None
    user_id: Optional[int] = None
    username: Optional[str] = None
    email: Optional[str] = None

class HealthOut(BaseModel):
    status: str
    timestamp: str
    uptime: float
