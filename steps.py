"""Template-based orders: expand template steps and estimate completion."""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from schemas import Adjustment, OrderStep, StepType, Template, TemplateStep


def step_duration_minutes(step: TemplateStep, qty: Optional[float]) -> int:
    if step.type == StepType.RATE:
        return int(round(step.base_duration_minutes + step.rate_per_unit_minutes * (qty or 0)))
    return step.base_duration_minutes


def build_order_steps(template: Template, quantities: Optional[Dict[str, float]] = None) -> List[OrderStep]:
    """Snapshot a template's steps onto an order.

    ``quantities`` maps template step id -> quantity and only matters for RATE
    steps. The snapshot keeps name/type/unit so later template edits do not
    change existing orders.
    """
    quantities = quantities or {}
    steps = []
    for step in sorted(template.steps, key=lambda s: s.order_index):
        qty = quantities.get(step.id) if step.type == StepType.RATE else None
        steps.append(OrderStep(
            template_step_id=step.id,
            name_snapshot=step.name,
            type_snapshot=step.type,
            unit_snapshot=step.unit,
            order_index=step.order_index,
            qty=qty,
            duration_minutes=step_duration_minutes(step, qty),
        ))
    return steps


def total_minutes(steps: Sequence[OrderStep], adjustments: Sequence[Adjustment] = ()) -> int:
    return sum(s.duration_minutes for s in steps) + sum(a.minutes_delta for a in adjustments)


def estimate_eta(created_at: datetime, steps: Sequence[OrderStep], adjustments: Sequence[Adjustment] = ()) -> datetime:
    return created_at + timedelta(minutes=max(total_minutes(steps, adjustments), 0))
