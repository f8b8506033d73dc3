"""Enums for the memory domain."""

from enum import Enum


class MemoryCategory(str, Enum):
    """Closed set of entry categories.

    Drives category-filtered retrieval and context folding.
    """

    TASK_RESULT = "task_result"
    USER_PREFERENCE = "user_preference"
    WORKFLOW_PATTERN = "workflow_pattern"
    SEARCH_RESULT = "search_result"
    INTERACTION_PATTERN = "interaction_pattern"
    ERROR_SOLUTION = "error_solution"
    RESEARCH_DATA = "research_data"
    SUCCESSFUL_PLAN = "successful_plan"
    TOOL_RESULT = "tool_result"
    CONTEXT_DATA = "context_data"


class MemoryEventType(str, Enum):
    """Lifecycle markers published on the memory event bus."""

    MEMORY_ADDED = "memory_added"
    MEMORY_SEARCHED = "memory_searched"
    MEMORY_UPDATED = "memory_updated"
    MEMORY_DELETED = "memory_deleted"
    MEMORY_CLEARED = "memory_cleared"
