"""agentmem: context memory for task-executing browser agents.

Persists small memory entries in a remote keyed memory service, mirrors them
in a bounded local cache, and folds them into task and agent context views.
"""

__version__ = "0.1.0"
