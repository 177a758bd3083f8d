"""Generic models used for the API communication."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mashumaro import DataClassDictMixin

from sonos_nowplaying.common.helpers.json import get_serializable_value
from sonos_nowplaying.common.models.errors import GroupNotFoundError


@dataclass
class CommandMessage(DataClassDictMixin):
    """Model for a Message holding a command from a client."""

    command: str
    args: dict[str, Any] | None = None


@dataclass
class SuccessResultMessage(DataClassDictMixin):
    """Message sent when a Command has been successfully executed."""

    command: str
    result: Any = field(default=None, metadata={"serialize": lambda v: get_serializable_value(v)})


@dataclass
class ErrorResultMessage(DataClassDictMixin):
    """Message sent when a command did not execute successfully."""

    command: str
    error_code: int
    details: str | None = None

    @property
    def not_found(self) -> bool:
        """Return if this error is a 'not found' error."""
        return self.error_code == GroupNotFoundError.error_code


ResultMessage = SuccessResultMessage | ErrorResultMessage
