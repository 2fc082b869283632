"""Problem Details (RFC 9457) errors raised by the pagination core."""

from typing import Optional, Any
from pydantic import BaseModel, Field
from fastapi.responses import JSONResponse


class ProblemDetail(BaseModel):
    """Problem Details as defined in RFC 9457."""

    type: str = Field(default="about:blank", description="A URI reference that identifies the problem type")
    title: str = Field(description="A short, human-readable summary of the problem type")
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(default=None, description="A human-readable explanation specific to this occurrence")
    instance: Optional[str] = Field(default=None, description="A URI reference that identifies the specific occurrence")

    # Allow additional properties for extensions
    model_config = {"extra": "allow"}


class ProblemDetailException(Exception):
    """Base exception carrying enough detail to render a Problem Details body."""

    def __init__(
        self,
        status: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: str = "about:blank",
        instance: Optional[str] = None,
        **extensions: Any
    ):
        self.status = status
        self.title = title
        self.detail = detail
        self.type_uri = type_uri
        self.instance = instance
        self.extensions = extensions
        super().__init__(detail or title)

    def to_problem_detail(self, instance: Optional[str] = None) -> ProblemDetail:
        """Convert to ProblemDetail model."""
        problem = ProblemDetail(
            type=self.type_uri,
            title=self.title,
            status=self.status,
            detail=self.detail,
            instance=instance or self.instance
        )

        for key, value in self.extensions.items():
            setattr(problem, key, value)

        return problem

    def to_response(self, instance: Optional[str] = None) -> JSONResponse:
        """Convert to JSONResponse with Problem Details format."""
        problem = self.to_problem_detail(instance)
        return JSONResponse(
            status_code=self.status,
            content=problem.model_dump(exclude_none=True),
            headers={"Content-Type": "application/problem+json"}
        )


class BadRequestError(ProblemDetailException):
    """400 Bad Request error."""

    def __init__(self, detail: str, **extensions: Any):
        super().__init__(
            status=400,
            title="Bad Request",
            detail=detail,
            **extensions
        )


class InvalidCursor(BadRequestError):
    """A pagination cursor could not be decoded.

    Raised before any store query is issued. Callers should treat it as a
    client error and ask for the first page again.
    """

    def __init__(self, detail: str = "Invalid pagination cursor", **extensions: Any):
        super().__init__(detail, **extensions)
        self.type_uri = "urn:cursor-pager:invalid-cursor"


class InvalidParams(BadRequestError):
    """Pagination parameters could not be interpreted at all."""

    def __init__(self, detail: str = "Invalid pagination parameters", **extensions: Any):
        super().__init__(detail, **extensions)
        self.type_uri = "urn:cursor-pager:invalid-params"
