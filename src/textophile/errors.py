"""Exception types for textophile."""

from __future__ import annotations


class TextophileError(Exception):
    """Base exception for textophile."""


class ContractError(TextophileError, TypeError):
    """A command broke the callback contract. Always a programming error."""


class InitContractError(ContractError):
    """Raised when ``init`` returns something other than ``InitOk`` or ``InitError``."""


class VerdictContractError(ContractError):
    """Raised when ``handle_command`` returns something other than a verdict."""


class NestedRunError(TextophileError, RuntimeError):
    """Raised when the blocking ``run`` is called from inside a running event loop."""


class InputError(TextophileError):
    """Raised by readers when a line cannot be turned into text."""


class ReadTimeoutError(TextophileError):
    """Raised when no line arrives before the session timeout."""
