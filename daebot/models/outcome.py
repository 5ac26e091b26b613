"""Result returned by every webhook handler."""

from pydantic import BaseModel

OK_RESULT = "ok!"
FAILED_RESULT = "Ops something goes wrong."
SKIPPED_RESULT = "skipped"


class HandlerOutcome(BaseModel):
    """Outcome of one handler invocation ({result, error?})."""

    result: str
    error: str | None = None

    @classmethod
    def ok(cls) -> "HandlerOutcome":
        return cls(result=OK_RESULT)

    @classmethod
    def failed(cls, error: object) -> "HandlerOutcome":
        return cls(result=FAILED_RESULT, error=str(error))

    @classmethod
    def skipped(cls) -> "HandlerOutcome":
        return cls(result=SKIPPED_RESULT)

    @property
    def is_ok(self) -> bool:
        return self.error is None
