class BalancifyError(Exception):
    """Base class for errors raised by the analysis service."""


class NotFoundError(BalancifyError):
    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.identifier = identifier


class InsightServiceError(BalancifyError):
    """The external text-generation service failed or returned unusable output."""
