import secrets
from datetime import date, timedelta
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pymongo.errors import PyMongoError

import database
import lifecycle
from app_logger import get_logger
from auth import (
    create_access_token,
    get_actor,
    get_current_profile,
    hash_password,
    require_roles,
    verify_password,
)
from config import CORS_ORIGINS, DELETE_REQUIRES_MUTABLE, LOCK_ON_SUBMIT, PORT, SHARE_TTL_DAYS
from database import (
    create_document,
    delete_document,
    get_document,
    get_documents,
    update_document,
)
from errors import InvalidTransition, OrderLocked, PermissionDenied, SchedulingError
from lifecycle import Actor, status_label
from scheduler import clamp_progress, remove_task, schedule_all, schedule_summary, update_task
from schemas import (
    Adjustment,
    Category,
    Order,
    OrderStatus,
    Pic,
    Priority,
    Profile,
    Role,
    Task,
    TaskPatch,
    Template,
    TemplateStep,
    User,
    date_only,
    normalize_role,
    normalize_status,
    utcnow,
)
from steps import build_order_steps, estimate_eta
from timeline import build_timeline

logger = get_logger("api")

app = FastAPI(title="Printing Order Management API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Error mapping ----------

@app.exception_handler(PermissionDenied)
def permission_denied_handler(request: Request, exc: PermissionDenied):
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(OrderLocked)
def order_locked_handler(request: Request, exc: OrderLocked):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(InvalidTransition)
def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(SchedulingError)
def scheduling_error_handler(request: Request, exc: SchedulingError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(PyMongoError)
def storage_error_handler(request: Request, exc: PyMongoError):
    logger.exception("storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"] if p != "body"), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Invalid request", "errors": errors})


# ---------- Helpers ----------

def load_order(order_id: str) -> Order:
    doc = get_document("order", order_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Order not found")
    return Order.model_validate(doc)


def save_order(order: Order, expected_status: Optional[OrderStatus] = None) -> Order:
    """Write the whole order in one update, guarded by its previous status."""
    expected = {"status": expected_status.value} if expected_status else None
    if not update_document("order", order.id, order, expected=expected):
        raise InvalidTransition("Order was changed by someone else; reload and try again")
    return order


def order_view(order: Order) -> dict:
    data = order.model_dump(mode="json")
    data["status_label"] = status_label(order.status)
    data["summary"] = schedule_summary(order.tasks)
    return data


def earliest_start(tasks: List[Task]) -> Optional[date]:
    starts = [t.start_date for t in tasks if t.start_date]
    return min(starts) if starts else None


def resolve_category(value: Optional[str]) -> Optional[str]:
    """Accept a category id or a category name."""
    if not value:
        return None
    if get_document("category", value):
        return value
    found = get_documents("category", {"name": value}, limit=1)
    if not found:
        raise HTTPException(status_code=400, detail=f"Unknown category: {value}")
    return found[0]["_id"]


def visible_orders_filter(actor: Actor) -> dict:
    # Input staff only see their own orders
    if actor.role == Role.INPUTER:
        return {"created_by": actor.user_id}
    return {}


# ---------- Public Routes ----------

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthPayload(BaseModel):
    email: str
    password: str
    name: Optional[str] = None


@app.get("/")
def root():
    return {"message": "Printing Order Management API running"}


@app.get("/test")
def test_database():
    try:
        db = database.db
        cols = db.list_collection_names() if db is not None else []
        return {"backend": "ok", "db": "ok" if db is not None else "not_configured", "collections": cols}
    except PyMongoError as e:
        return {"backend": "ok", "db": f"error: {str(e)}"}


@app.post("/auth/register", response_model=TokenResponse)
def register(payload: AuthPayload):
    existing = get_documents("user", {"email": payload.email}, limit=1)
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    first_user = not get_documents("profile", limit=1)
    user = User(email=payload.email, hashed_password=hash_password(payload.password))
    create_document("user", user)
    profile = Profile(
        id=user.id,
        name=payload.name or payload.email.split("@")[0],
        role=Role.ADMIN if first_user else Role.INPUTER,
    )
    create_document("profile", profile)
    logger.info("registered user %s as %s", user.id, profile.role.value)
    return TokenResponse(access_token=create_access_token({"sub": user.id}))


@app.post("/auth/login", response_model=TokenResponse)
def login(payload: AuthPayload):
    users = get_documents("user", {"email": payload.email}, limit=1)
    if not users:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    user = User.model_validate(users[0])
    if not user.is_active or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return TokenResponse(access_token=create_access_token({"sub": user.id}))


@app.get("/share/{share_code}")
def public_share(share_code: str):
    found = get_documents("order", {"share_code": share_code}, limit=1)
    if not found:
        raise HTTPException(status_code=404, detail="Share link not found")
    order = Order.model_validate(found[0])
    if order.share_expires_at and order.share_expires_at < utcnow():
        raise HTTPException(status_code=404, detail="Share link has expired")

    category = get_document("category", order.category_id) if order.category_id else None
    summary = schedule_summary(order.tasks)
    return {
        "order": {
            "title": order.title,
            "client_name": order.client_name,
            "status": order.status.value,
            "status_label": status_label(order.status),
            "priority": order.priority.value,
            "category": category["name"] if category else None,
            "eta_at": order.eta_at,
            "created_at": order.created_at,
        },
        "tasks": [
            {
                "name": t.name,
                "pic": t.pic,
                "start_date": t.start_date,
                "end_date": t.end_date,
                "duration": t.duration,
                "progress": t.progress,
                "is_milestone": t.is_milestone,
            }
            for t in order.tasks
        ],
        "steps": [
            {
                "name": s.name_snapshot,
                "type": s.type_snapshot.value,
                "duration_hours": round(s.duration_minutes / 60, 2),
                "order_index": s.order_index,
            }
            for s in order.steps
        ],
        "progress": summary["average_progress"],
        "summary": summary,
        "share_expires_at": order.share_expires_at,
    }


# ---------- Profiles ----------

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v):
        return normalize_role(v) if v is not None else None


@app.get("/me")
def me(profile: Profile = Depends(get_current_profile)):
    return profile.model_dump(mode="json")


@app.get("/users")
def list_users(actor: Actor = Depends(require_roles(Role.ADMIN))):
    return [Profile.model_validate(d).model_dump(mode="json") for d in get_documents("profile", sort=[("name", 1)])]


@app.patch("/users/{user_id}")
def update_user(user_id: str, data: ProfileUpdate, actor: Actor = Depends(require_roles(Role.ADMIN))):
    doc = get_document("profile", user_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Profile not found")
    profile = Profile.model_validate(doc).model_copy(update=data.model_dump(exclude_none=True))
    update_document("profile", user_id, profile)
    logger.info("profile %s updated by %s", user_id, actor.user_id)
    return profile.model_dump(mode="json")


# ---------- PICs ----------

class PicIn(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None


@app.get("/pics")
def list_pics(profile: Profile = Depends(get_current_profile)):
    items = get_documents("pic", {"is_active": True}, sort=[("name", 1)])
    return [Pic.model_validate(d).model_dump(mode="json") for d in items]


@app.post("/pics")
def create_pic(data: PicIn, actor: Actor = Depends(require_roles(Role.ADMIN))):
    pic = Pic(**data.model_dump(exclude_none=True), created_by=actor.user_id)
    create_document("pic", pic)
    logger.info("pic %s created by %s", pic.id, actor.user_id)
    return pic.model_dump(mode="json")


@app.patch("/pics/{pic_id}")
def update_pic(pic_id: str, data: PicIn, actor: Actor = Depends(require_roles(Role.ADMIN))):
    doc = get_document("pic", pic_id)
    if not doc:
        raise HTTPException(status_code=404, detail="PIC not found")
    pic = Pic.model_validate(doc).model_copy(update=data.model_dump(exclude_unset=True))
    update_document("pic", pic_id, pic)
    logger.info("pic %s updated by %s", pic_id, actor.user_id)
    return pic.model_dump(mode="json")


@app.delete("/pics/{pic_id}")
def delete_pic(pic_id: str, actor: Actor = Depends(require_roles(Role.ADMIN))):
    # Soft delete - just mark as inactive
    if not update_document("pic", pic_id, {"is_active": False}):
        raise HTTPException(status_code=404, detail="PIC not found")
    logger.info("pic %s deactivated by %s", pic_id, actor.user_id)
    return {"success": True}


# ---------- Categories & templates ----------

class CategoryIn(BaseModel):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None


class TemplateIn(BaseModel):
    category_id: Optional[str] = None
    code: str
    name: str
    description: Optional[str] = None
    steps: List[TemplateStep] = Field(default_factory=list)


@app.get("/categories")
def list_categories(profile: Profile = Depends(get_current_profile)):
    items = get_documents("category", {"is_active": True}, sort=[("name", 1)])
    return [Category.model_validate(d).model_dump(mode="json") for d in items]


@app.post("/categories")
def create_category(data: CategoryIn, actor: Actor = Depends(require_roles(Role.ADMIN))):
    if get_documents("category", {"name": data.name}, limit=1):
        raise HTTPException(status_code=400, detail="Category already exists")
    slug = data.slug or "-".join(data.name.lower().split())
    category = Category(name=data.name, slug=slug, description=data.description)
    create_document("category", category)
    logger.info("category %s created by %s", category.id, actor.user_id)
    return category.model_dump(mode="json")


@app.delete("/categories/{category_id}")
def delete_category(category_id: str, actor: Actor = Depends(require_roles(Role.ADMIN))):
    if not update_document("category", category_id, {"is_active": False}):
        raise HTTPException(status_code=404, detail="Category not found")
    logger.info("category %s deactivated by %s", category_id, actor.user_id)
    return {"success": True}


@app.get("/templates")
def list_templates(category_id: Optional[str] = None, profile: Profile = Depends(get_current_profile)):
    query = {"is_active": True}
    if category_id:
        query["category_id"] = category_id
    items = get_documents("template", query, sort=[("name", 1)])
    return [Template.model_validate(d).model_dump(mode="json") for d in items]


@app.post("/templates")
def create_template(data: TemplateIn, actor: Actor = Depends(require_roles(Role.ADMIN))):
    if data.category_id and not get_document("category", data.category_id):
        raise HTTPException(status_code=400, detail="Unknown category")
    template = Template(**data.model_dump())
    create_document("template", template)
    logger.info("template %s created by %s", template.code, actor.user_id)
    return template.model_dump(mode="json")


# ---------- Orders ----------

class TemplateOrderIn(BaseModel):
    title: Optional[str] = None
    client_name: str = Field("", validation_alias=AliasChoices("client_name", "client", "customer_name"))
    client_contact: Optional[str] = None
    value_idr: float = Field(0, ge=0)
    category_id: Optional[str] = None
    template_id: str
    priority: Priority = Priority.NORMAL
    quantities: Dict[str, float] = Field(default_factory=dict, description="template step id -> qty")

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return v.upper() if isinstance(v, str) and v else Priority.NORMAL


class TaskOrderIn(BaseModel):
    title: Optional[str] = None
    client_name: str = Field("", validation_alias=AliasChoices("client_name", "client", "customer_name"))
    client_contact: Optional[str] = None
    value_idr: float = Field(0, ge=0)
    category: Optional[str] = Field(None, validation_alias=AliasChoices("category", "category_id"))
    priority: Priority = Priority.NORMAL
    start_date: Optional[date] = Field(None, validation_alias=AliasChoices("start_date", "startDate"))
    tasks: List[Task] = Field(default_factory=list)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return v.upper() if isinstance(v, str) and v else Priority.NORMAL

    @field_validator("start_date", mode="before")
    @classmethod
    def _start(cls, v):
        return date_only(v)


class OrderPatch(BaseModel):
    title: Optional[str] = None
    client_name: Optional[str] = Field(None, validation_alias=AliasChoices("client_name", "client", "customer_name"))
    client_contact: Optional[str] = None
    value_idr: Optional[float] = Field(None, ge=0)
    category_id: Optional[str] = None
    template_id: Optional[str] = None
    priority: Optional[Priority] = None
    start_date: Optional[date] = Field(None, validation_alias=AliasChoices("start_date", "startDate"))
    quantities: Optional[Dict[str, float]] = None
    tasks: Optional[List[Task]] = None

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return v.upper() if isinstance(v, str) and v else None

    @field_validator("start_date", mode="before")
    @classmethod
    def _start(cls, v):
        return date_only(v)


class DecisionIn(BaseModel):
    note: Optional[str] = None


class ProgressIn(BaseModel):
    progress: float = Field(..., allow_inf_nan=False)


class AdjustmentIn(BaseModel):
    reason: str
    minutes_delta: int
    note: Optional[str] = None


def _require_title(title: Optional[str]) -> str:
    if not title or not title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    return title.strip()


@app.post("/orders")
def create_template_order(data: TemplateOrderIn, actor: Actor = Depends(get_actor)):
    lifecycle.check_create(actor)
    title = _require_title(data.title)
    doc = get_document("template", data.template_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Template not found")
    template = Template.model_validate(doc)

    order = Order(
        title=title,
        client_name=data.client_name,
        client_contact=data.client_contact,
        value_idr=data.value_idr,
        category_id=resolve_category(data.category_id) or template.category_id,
        template_id=template.id,
        priority=data.priority,
        created_by=actor.user_id,
        steps=build_order_steps(template, data.quantities),
    )
    order = order.model_copy(update={"eta_at": estimate_eta(order.created_at, order.steps)})
    create_document("order", order)
    logger.info("order %s created from template %s by %s", order.id, template.code, actor.user_id)
    return {"success": True, "order_id": order.id, "message": "Order created successfully"}


@app.post("/orders/task-based")
def create_task_based_order(data: TaskOrderIn, actor: Actor = Depends(get_actor)):
    lifecycle.check_create(actor)
    title = _require_title(data.title)
    if not data.tasks:
        raise HTTPException(status_code=400, detail="At least one task is required")

    tasks = schedule_all(data.tasks, data.start_date or date.today())
    order = Order(
        title=title,
        client_name=data.client_name,
        client_contact=data.client_contact,
        value_idr=data.value_idr,
        category_id=resolve_category(data.category),
        is_task_based=True,
        priority=data.priority,
        created_by=actor.user_id,
        tasks=tasks,
    )
    # Order and tasks are a single document, so this insert is all-or-nothing.
    create_document("order", order)
    logger.info("task-based order %s created by %s with %d tasks", order.id, actor.user_id, len(tasks))
    return {"success": True, "order_id": order.id, "message": "Task-based order created successfully"}


@app.get("/orders")
def list_orders(status: Optional[str] = None, actor: Actor = Depends(get_actor)):
    query = visible_orders_filter(actor)
    if status:
        try:
            query["status"] = normalize_status(status).value
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown status: {status}")
    items = get_documents("order", query, sort=[("created_at", -1)])
    return [order_view(Order.model_validate(d)) for d in items]


@app.get("/orders/{order_id}")
def get_order(order_id: str, actor: Actor = Depends(get_actor)):
    return order_view(load_order(order_id))


@app.patch("/orders/{order_id}")
def patch_order(order_id: str, data: OrderPatch, actor: Actor = Depends(get_actor)):
    order = load_order(order_id)
    lifecycle.check_edit(order, actor, strict=LOCK_ON_SUBMIT)

    changes = data.model_dump(exclude_unset=True, exclude={"tasks", "start_date", "quantities"})
    if "title" in changes:
        changes["title"] = _require_title(changes["title"])
    changes = {k: v for k, v in changes.items() if v is not None}
    if "category_id" in changes:
        changes["category_id"] = resolve_category(changes["category_id"])

    if data.tasks is not None:
        if order.is_task_based and not data.tasks:
            raise HTTPException(status_code=400, detail="At least one task is required")
        default_start = data.start_date or earliest_start(order.tasks) or date.today()
        # Replace-all: tasks missing from the new list are dropped.
        changes["tasks"] = schedule_all(data.tasks, default_start)

    template_changed = "template_id" in changes and changes["template_id"] != order.template_id
    if template_changed or (data.quantities is not None and not order.is_task_based and order.template_id):
        doc = get_document("template", changes.get("template_id", order.template_id))
        if not doc:
            raise HTTPException(status_code=404, detail="Template not found")
        changes["steps"] = build_order_steps(Template.model_validate(doc), data.quantities)
        changes["eta_at"] = estimate_eta(order.created_at, changes["steps"], order.adjustments)

    changes["updated_at"] = utcnow()
    updated = save_order(order.model_copy(update=changes), expected_status=order.status)
    logger.info("order %s edited by %s", order.id, actor.user_id)
    return order_view(updated)


@app.patch("/orders/{order_id}/tasks/{task_id}")
def patch_task(order_id: str, task_id: str, data: TaskPatch, actor: Actor = Depends(get_actor)):
    order = load_order(order_id)
    lifecycle.check_edit(order, actor, strict=LOCK_ON_SUBMIT)
    default_start = earliest_start(order.tasks) or date.today()
    try:
        tasks = update_task(order.tasks, task_id, data.changes(), default_start)
    except KeyError:
        raise HTTPException(status_code=404, detail="Task not found")
    updated = save_order(order.model_copy(update={"tasks": tasks, "updated_at": utcnow()}), expected_status=order.status)
    logger.info("task %s on order %s edited by %s", task_id, order.id, actor.user_id)
    return order_view(updated)


@app.delete("/orders/{order_id}/tasks/{task_id}")
def delete_task(order_id: str, task_id: str, actor: Actor = Depends(get_actor)):
    order = load_order(order_id)
    lifecycle.check_edit(order, actor, strict=LOCK_ON_SUBMIT)
    if order.is_task_based and len(order.tasks) == 1 and order.tasks[0].id == task_id:
        raise HTTPException(status_code=400, detail="At least one task is required")
    default_start = earliest_start(order.tasks) or date.today()
    try:
        tasks = remove_task(order.tasks, task_id, default_start)
    except KeyError:
        raise HTTPException(status_code=404, detail="Task not found")
    updated = save_order(order.model_copy(update={"tasks": tasks, "updated_at": utcnow()}), expected_status=order.status)
    logger.info("task %s removed from order %s by %s", task_id, order.id, actor.user_id)
    return order_view(updated)


@app.post("/orders/{order_id}/tasks/{task_id}/progress")
def record_progress(order_id: str, task_id: str, data: ProgressIn, actor: Actor = Depends(get_actor)):
    order = load_order(order_id)
    lifecycle.check_progress(order, actor)
    if not any(t.id == task_id for t in order.tasks):
        raise HTTPException(status_code=404, detail="Task not found")
    tasks = [
        t.model_copy(update={"progress": clamp_progress(data.progress)}) if t.id == task_id else t
        for t in order.tasks
    ]
    updated = save_order(order.model_copy(update={"tasks": tasks, "updated_at": utcnow()}), expected_status=order.status)
    logger.info("progress on task %s of order %s set by %s", task_id, order.id, actor.user_id)
    return order_view(updated)


@app.post("/orders/{order_id}/adjustments")
def add_adjustment(order_id: str, data: AdjustmentIn, actor: Actor = Depends(get_actor)):
    order = load_order(order_id)
    lifecycle.check_edit(order, actor, strict=LOCK_ON_SUBMIT)
    adjustments = [*order.adjustments, Adjustment(**data.model_dump(), created_by=actor.user_id)]
    changes = {"adjustments": adjustments, "updated_at": utcnow()}
    if order.steps:
        changes["eta_at"] = estimate_eta(order.created_at, order.steps, adjustments)
    updated = save_order(order.model_copy(update=changes), expected_status=order.status)
    logger.info("adjustment of %d minutes on order %s by %s", data.minutes_delta, order.id, actor.user_id)
    return order_view(updated)


def _transition(order_id: str, actor: Actor, action, **kwargs) -> dict:
    order = load_order(order_id)
    updated = action(order, actor, utcnow(), **kwargs)
    save_order(updated, expected_status=order.status)
    logger.info("order %s %s -> %s by %s", order.id, order.status.value, updated.status.value, actor.user_id)
    return order_view(updated)


@app.post("/orders/{order_id}/submit")
def submit_order(order_id: str, actor: Actor = Depends(get_actor)):
    return _transition(order_id, actor, lifecycle.submit)


@app.post("/orders/{order_id}/approve")
def approve_order(order_id: str, data: Optional[DecisionIn] = None, actor: Actor = Depends(get_actor)):
    return _transition(order_id, actor, lifecycle.approve, note=data.note if data else None)


@app.post("/orders/{order_id}/reject")
def reject_order(order_id: str, data: Optional[DecisionIn] = None, actor: Actor = Depends(get_actor)):
    return _transition(order_id, actor, lifecycle.reject, note=data.note if data else None)


@app.post("/orders/{order_id}/start")
def start_order(order_id: str, actor: Actor = Depends(get_actor)):
    return _transition(order_id, actor, lifecycle.start_production)


@app.post("/orders/{order_id}/complete")
def complete_order(order_id: str, actor: Actor = Depends(get_actor)):
    return _transition(order_id, actor, lifecycle.complete)


@app.delete("/orders/{order_id}")
def delete_order(order_id: str, actor: Actor = Depends(get_actor)):
    order = load_order(order_id)
    lifecycle.check_delete(order, actor, enforce_lock=DELETE_REQUIRES_MUTABLE)
    delete_document("order", order.id)
    logger.info("order %s deleted by %s", order.id, actor.user_id)
    return {"success": True}


@app.get("/orders/{order_id}/gantt")
def order_gantt(order_id: str, actor: Actor = Depends(get_actor)):
    order = load_order(order_id)
    return {
        "order_id": order.id,
        "title": order.title,
        "timeline": build_timeline(order.tasks),
        "summary": schedule_summary(order.tasks),
    }


@app.post("/orders/{order_id}/share")
def share_order(order_id: str, actor: Actor = Depends(get_actor)):
    order = load_order(order_id)
    lifecycle.check_share(order, actor)
    now = utcnow()
    if order.share_code and not (order.share_expires_at and order.share_expires_at < now):
        return {"share_code": order.share_code, "share_expires_at": order.share_expires_at}

    expires = now + timedelta(days=SHARE_TTL_DAYS) if SHARE_TTL_DAYS > 0 else None
    updated = order.model_copy(update={"share_code": secrets.token_urlsafe(9), "share_expires_at": expires})
    save_order(updated)
    logger.info("order %s shared by %s", order.id, actor.user_id)
    return {"share_code": updated.share_code, "share_expires_at": updated.share_expires_at}


@app.get("/dashboard/stats")
def dashboard_stats(actor: Actor = Depends(get_actor)):
    orders = [Order.model_validate(d) for d in get_documents("order", visible_orders_filter(actor))]
    counts = {status.value: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status.value] += 1
    return {
        "total_orders": len(orders),
        "draft_orders": counts[OrderStatus.DRAFT.value],
        "pending_orders": counts[OrderStatus.PENDING_APPROVAL.value],
        "approved_orders": counts[OrderStatus.APPROVED.value],
        "rejected_orders": counts[OrderStatus.REJECTED.value],
        "in_progress_orders": counts[OrderStatus.IN_PROGRESS.value],
        "completed_orders": counts[OrderStatus.COMPLETED.value],
        "total_value": sum(o.value_idr for o in orders),
    }


if __name__ == "__main__":
    import logging

    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
