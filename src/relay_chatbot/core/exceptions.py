"""Domain exceptions for the relay chatbot."""


class RelayChatbotError(Exception):
    """Base exception for all relay chatbot errors."""

    def __init__(self, message: str, recoverable: bool = True):
        super().__init__(message)
        self.recoverable = recoverable


class BackendError(RelayChatbotError):
    """Completion backend unreachable, failed mid-stream, or returned a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, recoverable=False)
        self.status_code = status_code


class ToolExecutionError(RelayChatbotError):
    """Error while executing a tool invocation (bad arguments, failed capability)."""

    def __init__(self, message: str, capability: str | None = None):
        super().__init__(message)
        self.capability = capability


class UnknownCapabilityError(ToolExecutionError):
    """Backend named a capability that is not registered."""

    def __init__(self, capability: str):
        super().__init__(f"Unknown capability: {capability}", capability=capability)


class SearchError(RelayChatbotError):
    """Search aggregator returned a non-success response or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
