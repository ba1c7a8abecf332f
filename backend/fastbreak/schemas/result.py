"""
Uniform result envelope returned by every server action.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from fastbreak.core.exceptions import ActionError, ErrorCode, STATUS_BY_CODE

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[ErrorCode] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ActionError) -> "ActionResult":
        return cls(success=False, error=error.message, code=error.code)

    @property
    def status_code(self) -> int:
        if self.success:
            return 200
        return STATUS_BY_CODE.get(self.code, 500)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
