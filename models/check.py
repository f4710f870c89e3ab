from typing import Dict, List

from pydantic import BaseModel, Field

Message = str


class CheckResult(BaseModel):
    info: List[Message] = Field(default_factory=list)
    warnings: List[Message] = Field(default_factory=list)
    errors: List[Message] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    @property
    def status(self) -> str:
        if self.errors:
            return "failed"
        if self.warnings:
            return "warning"
        return "passed"


class CheckReport(BaseModel):
    name: str
    result: CheckResult


# check id -> named result, in the order the checks ran
AllCheckResults = Dict[str, CheckReport]
