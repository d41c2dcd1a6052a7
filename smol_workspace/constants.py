from __future__ import annotations

ASSISTANT_NAME = "Smol GitHub Workspace"
ASSISTANT_INSTRUCTIONS = (
    "You are an expert programmer. You are asked to provide a solution to the "
    "given issue using the provided tools."
)
DEFAULT_MODEL = "gpt-4-turbo"

# Directories never reported by the live file listing.
IGNORED_DIRS = frozenset(
    {".git", ".hg", ".svn", "__pycache__", "node_modules", ".venv", ".mypy_cache"}
)
