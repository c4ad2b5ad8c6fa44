"""Gantt layout for a scheduled task list."""

from datetime import date, timedelta
from typing import List, Sequence

from schemas import Task
from workdays import is_non_working_day

DEFAULT_BUFFER_DAYS = 7


def task_state(task: Task) -> str:
    if task.is_milestone:
        return "milestone"
    if task.progress >= 100:
        return "done"
    if task.progress > 0:
        return "in_progress"
    return "not_started"


def generate_weeks(start: date, end: date) -> List[dict]:
    """Monday-aligned weeks covering ``[start, end]``, labelled W1, W2, ..."""
    weeks = []
    current = start - timedelta(days=start.weekday())
    while current <= end:
        weeks.append({
            "label": f"W{len(weeks) + 1}",
            "start": current,
            "end": current + timedelta(days=6),
        })
        current += timedelta(days=7)
    return weeks


def task_position(task: Task, window_start: date, window_end: date, total_days: int) -> dict:
    """Bar offset and width as percentages of the visible window."""
    bar_start = max(task.start_date, window_start)
    bar_end = min(task.end_date, window_end)
    offset = (bar_start - window_start).days
    span = (bar_end - bar_start).days + 1
    return {
        "left": round(offset / total_days * 100, 4),
        "width": round(span / total_days * 100, 4),
    }


def build_timeline(tasks: Sequence[Task], buffer_days: int = DEFAULT_BUFFER_DAYS) -> dict:
    dated = [t for t in tasks if t.start_date and t.end_date]
    if not dated:
        return {"start": None, "end": None, "total_days": 0, "weeks": [], "holidays": [], "bars": []}

    start = min(t.start_date for t in dated) - timedelta(days=buffer_days)
    end = max(t.end_date for t in dated) + timedelta(days=buffer_days)
    total_days = max((end - start).days, 1)

    holidays = []
    current = start
    while current <= end:
        if is_non_working_day(current):
            holidays.append(current)
        current += timedelta(days=1)

    bars = []
    for task in dated:
        bars.append({
            "task_id": task.id,
            "name": task.name,
            "pic": task.pic,
            "start_date": task.start_date,
            "end_date": task.end_date,
            "duration": task.duration,
            "progress": task.progress,
            "depends_on": list(task.depends_on),
            "state": task_state(task),
            **task_position(task, start, end, total_days),
        })

    return {
        "start": start,
        "end": end,
        "total_days": total_days,
        "weeks": generate_weeks(start, end),
        "holidays": holidays,
        "bars": bars,
    }
