"""Abstract base class for all FormGuard field validators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


class BaseValidator(ABC):
    """Every validator must subclass this and implement ``validate``.

    Validators never raise for bad input; every rejection comes back as a
    verdict carrying a non-empty reason.
    """

    name: str = "base"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config: dict[str, Any] = config or {}

    @abstractmethod
    def validate(self, text: str) -> BaseModel:
        """Run the validator against *text* and return a verdict."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
