"""Error taxonomy for the creative pipeline.

Every failure a request can end with is one of these.  Each carries the
user-facing message (Portuguese, shown as-is by the UI), a stable
``category`` string and the HTTP status the API answers with.

- PipelineError: base class
- InvalidInputError: caller input that is well-formed but unusable
- SourceUnreachable: the URL could not be fetched
- InsufficientSource: extraction worked but found too little signal
- InsufficientAnalysis: the analysis could not identify the product
- CollaboratorFailure: the LLM, image generator or PDF tool failed
"""

from typing import Optional


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    category = "pipeline_error"
    status_code = 500

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class InvalidInputError(PipelineError):
    category = "validation_error"
    status_code = 400


class SourceUnreachable(PipelineError):
    """The source URL failed to load (DNS, timeout, HTTP status, blocked)."""

    category = "source_unreachable"
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause=cause)
        if status_code is not None:
            self.status_code = status_code


class InsufficientSource(PipelineError):
    """Raised before any collaborator cost is incurred."""

    category = "insufficient_source"
    status_code = 422


class InsufficientAnalysis(PipelineError):
    category = "insufficient_analysis"
    status_code = 422


class CollaboratorFailure(PipelineError):
    """An external collaborator errored, timed out or answered garbage."""

    category = "collaborator_failure"
    status_code = 502
