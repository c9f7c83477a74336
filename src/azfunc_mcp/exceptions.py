"""Custom exceptions for azfunc-mcp."""


class AzfuncMcpError(Exception):
    """Base error for azfunc-mcp."""


class InvalidInput(AzfuncMcpError, ValueError):
    """A parameter or composer input is missing or outside its allowed set."""


class CompositionError(AzfuncMcpError):
    """Two computed settings blocks disagree about the same key."""
