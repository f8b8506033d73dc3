"""Memory-aware planning support.

Gathers what memory knows about a task before a plan is drafted, and
records the shape of a plan once it succeeds.
"""

import json
from typing import Any

from pydantic import BaseModel, Field

from agentmem.memory.enums import MemoryCategory
from agentmem.memory.manager import MemoryManager
from agentmem.memory.models import MemoryOperationResult
from agentmem.memory.preferences import parse_preference
from agentmem.observability.logging import get_logger

logger = get_logger(__name__)

PAST_PLAN_LIMIT = 3
PREFERENCE_LIMIT = 10
RESEARCH_LIMIT = 5
RESEARCH_NOTE_LENGTH = 200
PLAN_PATTERN_IMPORTANCE = 0.7
PLAN_TAG_WORDS = 3


class PlanningContext(BaseModel):
    """What memory contributes to planning a task."""

    task: str
    past_patterns: list[str] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=dict)
    preference_notes: list[str] = Field(default_factory=list)
    research_notes: list[str] = Field(default_factory=list)
    task_progress: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.past_patterns
            or self.preferences
            or self.preference_notes
            or self.research_notes
            or self.task_progress
        )

    def render(self) -> str:
        """Render the context block placed ahead of the planning prompt."""
        sections: list[str] = []
        if self.past_patterns:
            sections.append(
                "Past successful approaches for similar tasks:\n" + "\n".join(self.past_patterns)
            )
        for note in self.preference_notes:
            sections.append(f"User preference: {note}")
        if self.research_notes:
            sections.append(
                "Relevant context from previous research:\n"
                + "\n".join(f"- {note}" for note in self.research_notes)
            )
        if self.task_progress:
            sections.append(
                "Current task progress:\n" + "\n".join(f"- {item}" for item in self.task_progress)
            )
        if self.preferences:
            sections.append(f"User Preferences: {json.dumps(self.preferences, indent=2)}")
        return "\n\n".join(sections)


def _truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."


class MemoryAwarePlanner:
    """Collects planning context from memory and learns from completed plans."""

    def __init__(self, manager: MemoryManager | None) -> None:
        self._manager = manager

    @property
    def is_available(self) -> bool:
        return self._manager is not None and self._manager.is_enabled

    async def gather(
        self,
        task: str,
        *,
        current_task_id: str | None = None,
        learn_from_patterns: bool = True,
    ) -> PlanningContext:
        """Collect past plans, preferences, research, and progress for a task.

        Returns an empty context when memory is unavailable.
        """
        context = PlanningContext(task=task)
        manager = self._manager
        if manager is None or not manager.is_enabled:
            return context

        if learn_from_patterns:
            past_plans = await manager.search_memories(
                query=task,
                category=MemoryCategory.SUCCESSFUL_PLAN,
                limit=PAST_PLAN_LIMIT,
            )
            context.past_patterns = [entry.content for entry in past_plans.entries]

        preferences = await manager.get_memories_by_category(
            MemoryCategory.USER_PREFERENCE, PREFERENCE_LIMIT
        )
        for entry in sorted(preferences, key=lambda e: e.created_at):
            parsed = parse_preference(entry.content)
            if parsed.ok:
                context.preferences.update(parsed.value)
            elif task.lower() in entry.content.lower():
                # Free-text preference that mentions the task
                context.preference_notes.append(entry.content)

        research = await manager.search_memories(
            query=task,
            category=MemoryCategory.RESEARCH_DATA,
            limit=RESEARCH_LIMIT,
        )
        context.research_notes = [
            _truncate(entry.content, RESEARCH_NOTE_LENGTH) for entry in research.entries
        ]

        if current_task_id:
            task_context = await manager.get_task_context(current_task_id)
            if task_context is not None:
                context.task_progress = [
                    str(value) for value in task_context.intermediate_results.values()
                ]

        logger.debug(
            "planning_context_gathered",
            task=task,
            past_patterns=len(context.past_patterns),
            preferences=len(context.preferences),
            research_notes=len(context.research_notes),
        )
        return context

    async def record_plan(self, task: str, step_count: int) -> MemoryOperationResult:
        """Store the shape of a successful plan as a workflow pattern."""
        manager = self._manager
        if manager is None or not manager.is_enabled:
            return MemoryOperationResult.fail("Memory is not available")
        if not manager.config.enable_learning:
            return MemoryOperationResult.fail("Learning is disabled")

        summary = f"Task type: {task}\nSteps: {step_count}\nSuccess pattern learned"
        return await manager.add_memory(
            summary,
            {
                "category": MemoryCategory.WORKFLOW_PATTERN,
                "importance": PLAN_PATTERN_IMPORTANCE,
                "tags": task.split()[:PLAN_TAG_WORDS],
            },
        )
