"""
Task scheduling on the working-day calendar.

Tasks are scheduled in the order they are listed. A task may only depend on
tasks that appear before it; its start date is the working day after the
latest end date among its predecessors, and its end date is ``duration``
working days after the start. Milestones are zero-length.
"""

from collections import deque
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set

from errors import SchedulingError
from schemas import Task
from workdays import add_working_days, count_working_days, next_working_day

# Fields a caller may change on a single task through update_task.
EDITABLE_FIELDS = {
    "name", "pic", "quantity", "unit", "target", "start_date", "duration",
    "progress", "depends_on", "is_milestone", "notes",
}


def clamp_progress(value) -> int:
    return max(0, min(100, int(round(float(value)))))


def compute_start_date(depends_on: Sequence[str], scheduled: Iterable[Task], default_start: date) -> date:
    if not depends_on:
        return default_start
    by_id = {t.id: t for t in scheduled}
    missing = [dep for dep in depends_on if dep not in by_id]
    if missing:
        raise SchedulingError(f"Unknown predecessor task(s): {', '.join(missing)}")
    latest = max(by_id[dep].end_date for dep in depends_on)
    return add_working_days(latest, 1)


def compute_end_date(start: date, duration: int, is_milestone: bool) -> date:
    if is_milestone:
        return start
    return add_working_days(start, duration)


def schedule_task(task: Task, scheduled: Sequence[Task], default_start: date) -> Task:
    """Return a copy of ``task`` with concrete dates against ``scheduled``.

    A task without predecessors keeps its requested start date, falling back
    to ``default_start``; a start on a non-working day moves to the next
    working day.
    """
    if task.id in task.depends_on:
        raise SchedulingError(f"Task '{task.name}' cannot depend on itself")
    if not task.is_milestone and task.duration < 1:
        raise SchedulingError(f"Task '{task.name}' needs a duration of at least one working day")

    start = compute_start_date(task.depends_on, scheduled, next_working_day(task.start_date or default_start))
    duration = 0 if task.is_milestone else task.duration
    return task.model_copy(update={
        "start_date": start,
        "end_date": compute_end_date(start, duration, task.is_milestone),
        "duration": duration,
        "progress": clamp_progress(task.progress),
    })


def _check_references(tasks: Sequence[Task]) -> None:
    position: Dict[str, int] = {}
    for index, task in enumerate(tasks):
        if task.id in position:
            raise SchedulingError(f"Duplicate task id '{task.id}'")
        position[task.id] = index

    for index, task in enumerate(tasks):
        for dep in task.depends_on:
            if dep == task.id:
                raise SchedulingError(f"Task '{task.name}' cannot depend on itself")
            if dep not in position:
                raise SchedulingError(f"Task '{task.name}' depends on unknown task '{dep}'")
            if position[dep] > index:
                raise SchedulingError(
                    f"Task '{task.name}' depends on '{tasks[position[dep]].name}', which comes later in the list"
                )


def schedule_all(tasks: Sequence[Task], default_start: date) -> List[Task]:
    """Schedule every task in list order; ``task_order`` is renumbered from 1."""
    _check_references(tasks)
    scheduled: List[Task] = []
    for index, task in enumerate(tasks):
        task = task.model_copy(update={"task_order": index + 1})
        scheduled.append(schedule_task(task, scheduled, default_start))
    return scheduled


def transitive_dependents(tasks: Sequence[Task], task_id: str) -> Set[str]:
    """Ids of every task that depends on ``task_id``, directly or not."""
    children: Dict[str, List[str]] = {}
    for task in tasks:
        for dep in task.depends_on:
            children.setdefault(dep, []).append(task.id)

    found: Set[str] = set()
    queue = deque(children.get(task_id, []))
    while queue:
        current = queue.popleft()
        if current in found:
            continue
        found.add(current)
        queue.extend(children.get(current, []))
    return found


def _index_of(tasks: Sequence[Task], task_id: str) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    raise KeyError(task_id)


def _reschedule(tasks: Sequence[Task], affected: Set[str], default_start: date) -> List[Task]:
    result: List[Task] = []
    for task in tasks:
        if task.id in affected:
            task = schedule_task(task, result, default_start)
        result.append(task)
    return result


def update_task(tasks: Sequence[Task], task_id: str, changes: dict, default_start: date) -> List[Task]:
    """Apply ``changes`` to one task and cascade to everything downstream.

    Raises KeyError when ``task_id`` is not in the list.
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise SchedulingError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    index = _index_of(tasks, task_id)
    updated = list(tasks)
    updated[index] = tasks[index].model_copy(update=changes)
    _check_references(updated)

    affected = {task_id} | transitive_dependents(updated, task_id)
    return _reschedule(updated, affected, default_start)


def remove_task(tasks: Sequence[Task], task_id: str, default_start: date) -> List[Task]:
    """Drop a task, unlink it from its dependents and reschedule them."""
    _index_of(tasks, task_id)
    affected = transitive_dependents(tasks, task_id)

    remaining: List[Task] = []
    for task in tasks:
        if task.id == task_id:
            continue
        update = {"task_order": len(remaining) + 1}
        if task_id in task.depends_on:
            update["depends_on"] = [dep for dep in task.depends_on if dep != task_id]
        remaining.append(task.model_copy(update=update))

    return _reschedule(remaining, affected, default_start)


def average_progress(tasks: Sequence[Task]) -> float:
    if not tasks:
        return 0.0
    return sum(t.progress for t in tasks) / len(tasks)


def schedule_summary(tasks: Sequence[Task]) -> dict:
    starts = [t.start_date for t in tasks if t.start_date]
    ends = [t.end_date for t in tasks if t.end_date]
    start: Optional[date] = min(starts) if starts else None
    end: Optional[date] = max(ends) if ends else None
    return {
        "start_date": start,
        "end_date": end,
        "working_days": count_working_days(start, end) if start and end else 0,
        "task_count": len(tasks),
        "milestone_count": sum(1 for t in tasks if t.is_milestone),
        "average_progress": average_progress(tasks),
    }
