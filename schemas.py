"""
Database Schemas for the printing order management service

Each Pydantic model represents a MongoDB collection. The collection name is the
lowercased class name. Example: class Order -> collection "order".

Records are validated here on the way in and on the way out of the database,
so the scheduling and lifecycle code only ever sees typed models. Field names
that drifted between versions of the old UI (``customer_name`` vs
``client_name``, ``INPUT_STAFF`` vs ``INPUTER``, camelCase task keys) are
accepted as aliases and stored under one canonical name.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def date_only(v):
    # Browsers send full ISO timestamps; only the calendar day matters.
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, str) and "T" in v:
        return v.split("T", 1)[0]
    return v


class Role(str, Enum):
    ADMIN = "ADMIN"
    INPUTER = "INPUTER"
    APPROVER = "APPROVER"


ROLE_ALIASES = {
    "INPUT_STAFF": Role.INPUTER,
    "APPROVAL_STAFF": Role.APPROVER,
}


def normalize_role(value) -> Role:
    if isinstance(value, Role):
        return value
    key = str(value).strip().upper()
    if key in ROLE_ALIASES:
        return ROLE_ALIASES[key]
    return Role(key)


class OrderStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


STATUS_ALIASES = {"PENDING": OrderStatus.PENDING_APPROVAL}


def normalize_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    key = str(value).strip().upper()
    if key in STATUS_ALIASES:
        return STATUS_ALIASES[key]
    return OrderStatus(key)


class Priority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class StepType(str, Enum):
    FIXED = "FIXED"
    RATE = "RATE"


class Record(BaseModel):
    """Base for collection documents; ``id`` is stored as Mongo's ``_id``."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id, validation_alias=_alias("id", "_id"))

    def to_document(self) -> dict:
        doc = self.model_dump(mode="json", exclude={"id"})
        doc["_id"] = self.id
        return doc


class User(Record):
    """Login identity (credentials only)"""
    email: str = Field(..., description="Email address")
    hashed_password: str = Field(..., description="Password hash")
    is_active: bool = Field(True, description="Whether the login is enabled")


class Profile(Record):
    """Profile linked 1:1 to a user; carries the role"""
    name: str = Field(..., description="Display name")
    role: Role = Field(Role.INPUTER, description="ADMIN | INPUTER | APPROVER")
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v):
        return normalize_role(v)


class Pic(Record):
    """Person In Charge that tasks can be assigned to"""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Category(Record):
    name: str
    slug: str = ""
    description: Optional[str] = None
    is_active: bool = True


class TemplateStep(BaseModel):
    """One reusable process step; RATE steps scale with quantity"""
    id: str = Field(default_factory=new_id)
    name: str
    type: StepType = StepType.FIXED
    order_index: int = 0
    base_duration_minutes: int = Field(0, ge=0)
    rate_per_unit_minutes: float = Field(0, ge=0)
    unit: str = "pcs"


class Template(Record):
    category_id: Optional[str] = None
    code: str
    name: str
    description: Optional[str] = None
    is_active: bool = True
    steps: List[TemplateStep] = Field(default_factory=list)


class OrderStep(BaseModel):
    """Snapshot of a template step expanded onto an order"""
    template_step_id: str
    name_snapshot: str
    type_snapshot: StepType
    unit_snapshot: str = "pcs"
    order_index: int = 0
    qty: Optional[float] = None
    duration_minutes: int = 0


class Adjustment(BaseModel):
    """Manual schedule correction in minutes on a template order"""
    id: str = Field(default_factory=new_id)
    reason: str
    minutes_delta: int
    note: Optional[str] = None
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)


class Approval(BaseModel):
    """Decision record appended on approve/reject"""
    approver_id: str
    status: OrderStatus
    note: Optional[str] = None
    decided_at: datetime


class Task(BaseModel):
    """A scheduled unit of work inside a task-based order"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    name: str
    pic: str = Field("", description="Person In Charge (free text)")
    quantity: float = 1
    unit: str = "pcs"
    target: Optional[str] = Field(None, description="Expected output of the task")
    start_date: Optional[date] = Field(None, validation_alias=_alias("start_date", "startDate"))
    end_date: Optional[date] = Field(None, validation_alias=_alias("end_date", "endDate"))
    duration: int = Field(1, ge=0, validation_alias=_alias("duration", "duration_days"),
                          description="Working days")
    progress: int = Field(0, description="0-100")
    depends_on: List[str] = Field(default_factory=list,
                                  validation_alias=_alias("depends_on", "dependsOn", "depends_on_tasks"))
    is_milestone: bool = Field(False, validation_alias=_alias("is_milestone", "isMilestone"))
    task_order: int = Field(0, validation_alias=_alias("task_order", "order_index"))
    notes: str = ""

    @field_validator("pic", "notes", mode="before")
    @classmethod
    def _blank_text(cls, v):
        return "" if v is None else v

    @field_validator("unit", mode="before")
    @classmethod
    def _unit(cls, v):
        return v or "pcs"

    @field_validator("depends_on", mode="before")
    @classmethod
    def _deps(cls, v):
        return [] if v is None else v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, v):
        return date_only(v)

    @field_validator("progress", mode="before")
    @classmethod
    def _progress(cls, v):
        if v is None:
            return 0
        return int(round(float(v)))


class Order(Record):
    """Printing order; tasks, steps, adjustments and approvals are embedded"""
    title: str
    client_name: str = Field("", validation_alias=_alias("client_name", "client", "customer_name"))
    client_contact: Optional[str] = None
    value_idr: float = Field(0, ge=0)
    category_id: Optional[str] = None
    template_id: Optional[str] = None
    is_task_based: bool = False
    status: OrderStatus = OrderStatus.DRAFT
    priority: Priority = Priority.NORMAL
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    eta_at: Optional[datetime] = None
    share_code: Optional[str] = None
    share_expires_at: Optional[datetime] = None
    tasks: List[Task] = Field(default_factory=list)
    steps: List[OrderStep] = Field(default_factory=list)
    adjustments: List[Adjustment] = Field(default_factory=list)
    approvals: List[Approval] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        return normalize_status(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        if isinstance(v, Priority):
            return v
        return Priority(str(v).strip().upper()) if v else Priority.NORMAL

    @field_validator("client_name", mode="before")
    @classmethod
    def _client(cls, v):
        return "" if v is None else v


class TaskPatch(BaseModel):
    """Partial edit of one task; only the keys sent are applied"""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    pic: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    target: Optional[str] = None
    start_date: Optional[date] = Field(None, validation_alias=_alias("start_date", "startDate"))
    duration: Optional[int] = Field(None, ge=0, validation_alias=_alias("duration", "duration_days"))
    progress: Optional[int] = None
    depends_on: Optional[List[str]] = Field(None, validation_alias=_alias("depends_on", "dependsOn", "depends_on_tasks"))
    is_milestone: Optional[bool] = Field(None, validation_alias=_alias("is_milestone", "isMilestone"))
    notes: Optional[str] = None

    @field_validator("start_date", mode="before")
    @classmethod
    def _dates(cls, v):
        return date_only(v)

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}
