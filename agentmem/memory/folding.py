"""Fold memory entries into derived context views.

Each view has a handler table with one entry per MemoryCategory, so a new
category cannot be added without deciding how every view treats it.
Categories that do not contribute to a view map to `_ignore`.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from agentmem.memory.enums import MemoryCategory
from agentmem.memory.models import (
    AgentMemoryContext,
    ErrorRecord,
    Learning,
    MemoryEntry,
    TaskContext,
)
from agentmem.memory.preferences import parse_preference
from agentmem.observability.logging import get_logger
from agentmem.observability.metrics import MALFORMED_DATA

logger = get_logger(__name__)

DEFAULT_CONFIDENCE = 0.5
SUCCESS_THRESHOLD = 0.5

TaskHandler = Callable[[TaskContext, MemoryEntry], None]
AgentHandler = Callable[[AgentMemoryContext, MemoryEntry], None]


def _ignore(_context: Any, _entry: MemoryEntry) -> None:
    return None


def merge_preferences(target: dict[str, Any], entry: MemoryEntry) -> bool:
    """Merge a preference entry into target; malformed content is skipped."""
    parsed = parse_preference(entry.content)
    if not parsed.ok:
        MALFORMED_DATA.labels(kind="preference").inc()
        logger.debug(
            "preference_parse_skipped",
            entry_id=entry.id,
            reason=parsed.error.message if parsed.error else None,
        )
        return False
    target.update(parsed.value)
    return True


def _task_result(context: TaskContext, entry: MemoryEntry) -> None:
    if entry.id:
        context.intermediate_results[entry.id] = entry.content


def _task_preference(context: TaskContext, entry: MemoryEntry) -> None:
    merge_preferences(context.user_preferences, entry)


def _task_error(context: TaskContext, entry: MemoryEntry) -> None:
    # Entries hold a single text; it stands for both the error and its fix.
    context.error_history.append(
        ErrorRecord(error=entry.content, solution=entry.content, timestamp=entry.created_at)
    )


def _agent_preference(context: AgentMemoryContext, entry: MemoryEntry) -> None:
    merge_preferences(context.preferences, entry)


def _agent_learning(context: AgentMemoryContext, entry: MemoryEntry) -> None:
    importance = entry.metadata.importance
    context.learnings.append(
        Learning(
            pattern=entry.content,
            success=(importance or 0.0) > SUCCESS_THRESHOLD,
            confidence=importance if importance is not None else DEFAULT_CONFIDENCE,
        )
    )


TASK_CONTEXT_HANDLERS: Mapping[MemoryCategory, TaskHandler] = {
    MemoryCategory.TASK_RESULT: _task_result,
    MemoryCategory.USER_PREFERENCE: _task_preference,
    MemoryCategory.WORKFLOW_PATTERN: _ignore,
    MemoryCategory.SEARCH_RESULT: _ignore,
    MemoryCategory.INTERACTION_PATTERN: _ignore,
    MemoryCategory.ERROR_SOLUTION: _task_error,
    MemoryCategory.RESEARCH_DATA: _ignore,
    MemoryCategory.SUCCESSFUL_PLAN: _ignore,
    MemoryCategory.TOOL_RESULT: _ignore,
    MemoryCategory.CONTEXT_DATA: _ignore,
}

AGENT_CONTEXT_HANDLERS: Mapping[MemoryCategory, AgentHandler] = {
    MemoryCategory.TASK_RESULT: _ignore,
    MemoryCategory.USER_PREFERENCE: _agent_preference,
    MemoryCategory.WORKFLOW_PATTERN: _agent_learning,
    MemoryCategory.SEARCH_RESULT: _ignore,
    MemoryCategory.INTERACTION_PATTERN: _ignore,
    MemoryCategory.ERROR_SOLUTION: _ignore,
    MemoryCategory.RESEARCH_DATA: _ignore,
    MemoryCategory.SUCCESSFUL_PLAN: _ignore,
    MemoryCategory.TOOL_RESULT: _ignore,
    MemoryCategory.CONTEXT_DATA: _ignore,
}


def _check_exhaustive(name: str, table: Mapping[MemoryCategory, Any]) -> None:
    missing = set(MemoryCategory) - set(table)
    if missing:
        raise RuntimeError(
            f"{name} has no handler for: {sorted(c.value for c in missing)}"
        )


_check_exhaustive("TASK_CONTEXT_HANDLERS", TASK_CONTEXT_HANDLERS)
_check_exhaustive("AGENT_CONTEXT_HANDLERS", AGENT_CONTEXT_HANDLERS)


def _chronological(entries: Iterable[MemoryEntry]) -> list[MemoryEntry]:
    """Oldest first, so later preferences override earlier ones."""
    return sorted(entries, key=lambda e: e.created_at)


def fold_task_context(task_id: str, entries: Iterable[MemoryEntry]) -> TaskContext:
    """Build a TaskContext from entries sharing a task id."""
    context = TaskContext(task_id=task_id)
    for entry in _chronological(entries):
        category = entry.metadata.category
        if category is not None:
            TASK_CONTEXT_HANDLERS[category](context, entry)
    return context


def fold_agent_context(
    agent_id: str,
    session_id: str,
    entries: Iterable[MemoryEntry],
    *,
    active_task_id: str | None = None,
) -> AgentMemoryContext:
    """Build an AgentMemoryContext from an agent's recent entries."""
    context = AgentMemoryContext(
        agent_id=agent_id,
        session_id=session_id,
        active_task_id=active_task_id,
    )
    for entry in _chronological(entries):
        category = entry.metadata.category
        if category is not None:
            AGENT_CONTEXT_HANDLERS[category](context, entry)
    return context


def fold_preferences(entries: Iterable[MemoryEntry]) -> dict[str, Any]:
    """Merge every parseable preference entry, newest winning."""
    preferences: dict[str, Any] = {}
    for entry in _chronological(entries):
        merge_preferences(preferences, entry)
    return preferences
