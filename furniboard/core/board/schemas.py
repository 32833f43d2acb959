import enum
import uuid
from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class BoardDefinition:
    """Everything the engine needs to know about one status-partitioned entity."""

    name: str
    resource: str
    model: type
    history_model: type
    status_enum: type[enum.Enum]
    initial_status: enum.Enum

    @property
    def statuses(self) -> list[str]:
        return [s.value for s in self.status_enum]


class ColumnEntry(BaseModel):
    item_id: uuid.UUID
    position: int


class PositionUpdate(BaseModel):
    item_id: uuid.UUID
    status: str
    old_position: int
    new_position: int


class MovePlan(BaseModel):
    item_id: uuid.UUID
    old_status: str
    old_position: int
    new_status: str
    new_position: int
    updates: list[PositionUpdate] = []

    @property
    def status_changed(self) -> bool:
        return self.old_status != self.new_status

    @property
    def changed(self) -> bool:
        return self.status_changed or self.old_position != self.new_position or bool(self.updates)


class BoardStats(BaseModel):
    total: int
    recent: int
    by_status: dict[str, int]
