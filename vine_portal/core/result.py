"""
Explicit result values for external collaborators (auth provider, role store).

A collaborator either returns Ok(value) or Err(reason); callers branch with
isinstance instead of probing nullable fields.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    reason: str


Result = Union[Ok[T], Err]
