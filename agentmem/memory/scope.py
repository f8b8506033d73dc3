"""Mapping between agent identities and remote store scopes."""

from typing import Protocol

DEFAULT_AGENT_ID = "default"


class ScopeResolver(Protocol):
    """Derives the remote scope id for an agent and recovers it from records."""

    def scope_for(self, agent_id: str) -> str: ...

    def agent_for(self, scope_id: str) -> str: ...


class PrefixScopeResolver:
    """Scopes entries under "<prefix>_<agent_id>"."""

    def __init__(self, prefix: str = "browseros_agent") -> None:
        self.prefix = prefix

    @property
    def _marker(self) -> str:
        return f"{self.prefix}_"

    def scope_for(self, agent_id: str) -> str:
        return f"{self._marker}{agent_id}"

    def agent_for(self, scope_id: str) -> str:
        if scope_id.startswith(self._marker):
            scope_id = scope_id[len(self._marker):]
        return scope_id or DEFAULT_AGENT_ID
