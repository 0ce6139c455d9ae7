"""
External contract types for mobilespec IR.

The operation registry is built from the ``paths`` of an OpenAPI document.
Each operation carries the resolved set of top-level response property names
("root keys"), or an explanation of why they could not be resolved.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DataRefKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"


class RootKeys(BaseModel):
    """
    Outcome of response-schema root-key resolution.

    ``keys`` is None when resolution did not succeed; an unresolved shape is
    never treated as an empty key set.
    """

    keys: frozenset[str] | None = None
    reason: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def resolved(self) -> bool:
        return self.keys is not None

    @classmethod
    def of(cls, keys: set[str] | frozenset[str]) -> RootKeys:
        return cls(keys=frozenset(keys))

    @classmethod
    def unresolved(cls, reason: str) -> RootKeys:
        return cls(keys=None, reason=reason)


class Operation(BaseModel):
    """
    A single operation id and where it is declared.

    Attributes:
        operation_id: Contract-wide unique id
        occurrences: Declarations as ``"METHOD /path"`` labels
        root_keys: Resolved response root keys
    """

    operation_id: str
    occurrences: list[str] = Field(default_factory=list)
    root_keys: RootKeys = Field(default_factory=lambda: RootKeys.unresolved("not resolved"))

    model_config = ConfigDict(frozen=True)


class OperationRegistry(BaseModel):
    """Operation ids extracted from the contract, in declaration order."""

    operations: dict[str, Operation] = Field(default_factory=dict)
    missing: list[str] = Field(default_factory=list)  # labels without operationId

    model_config = ConfigDict(frozen=True)

    def __contains__(self, operation_id: object) -> bool:
        return operation_id in self.operations

    def get(self, operation_id: str) -> Operation | None:
        return self.operations.get(operation_id)

    @property
    def ids(self) -> list[str]:
        return list(self.operations)

    @property
    def duplicates(self) -> dict[str, list[str]]:
        return {
            op_id: op.occurrences
            for op_id, op in self.operations.items()
            if len(op.occurrences) > 1
        }


class DataReference(BaseModel):
    """A state-layer query or mutation bound to an operation id."""

    screen: str
    kind: DataRefKind
    name: str
    operation_id: str
    select_root: str | None = None
    path: str = ""

    model_config = ConfigDict(frozen=True)
