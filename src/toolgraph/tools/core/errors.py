"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Exceptions raised by tool definitions and the tool registry.
"""

from __future__ import annotations


class ToolError(Exception):
    """Base class for tool-layer failures."""


class ToolAlreadyRegisteredError(ToolError):
    """Raised when registering a tool name that is already taken."""


class ToolNotFoundError(ToolError, LookupError):
    """Raised when a requested tool name is absent from the registry."""


class ToolValidationError(ToolError, ValueError):
    """Raised when tool arguments fail args-model validation."""


class ToolTimeoutError(ToolError, TimeoutError):
    """Raised when a tool call exceeds its effective timeout."""
