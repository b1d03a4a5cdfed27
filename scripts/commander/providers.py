"""
Data providers for the TUI.

Protocols define the interface; implementations can be swapped
for testing or alternative data sources.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class InstanceStatus(str, Enum):
    """Lifecycle status of an instance, as far as the TUI cares."""

    RUNNING = "running"
    OFFLINE = "offline"
    BOOTING = "booting"
    SHUTTING_DOWN = "shutting_down"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> "InstanceStatus":
        """Map an API status string, folding unknown values into OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Styling class per status, shared by list rows and the detail status row.
STATUS_CLASSES = {
    InstanceStatus.RUNNING: "normal",
    InstanceStatus.OFFLINE: "alert",
    InstanceStatus.BOOTING: "warning",
    InstanceStatus.SHUTTING_DOWN: "warning",
    InstanceStatus.OTHER: "muted",
}


def status_class(status: InstanceStatus) -> str:
    return STATUS_CLASSES.get(status, "muted")


@dataclass(frozen=True)
class ResourceInstance:
    """Immutable snapshot of a compute instance."""

    id: int
    label: str
    status: InstanceStatus
    type: str
    region: str
    ipv4: tuple[str, ...] = ()


@dataclass(frozen=True)
class Notification:
    """Immutable account notification."""

    label: str
    message: str = ""


@dataclass(frozen=True)
class AccountSummary:
    """Account owner details shown on the instance list."""

    first_name: str
    last_name: str
    email: str

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ResourceProvider(Protocol):
    """Protocol for accessing and controlling remote instances.

    Calls block; failures raise TransportError.
    """

    def list_instances(self) -> list[ResourceInstance]:
        """List all instances on the account."""
        ...

    def get_instance(self, instance_id: int) -> ResourceInstance:
        """Get a fresh snapshot of one instance."""
        ...

    def list_notifications(self) -> list[Notification]:
        """List active account notifications."""
        ...

    def get_account(self) -> AccountSummary:
        """Get account owner details."""
        ...

    def boot_instance(self, instance_id: int) -> None:
        """Request an instance boot."""
        ...

    def shutdown_instance(self, instance_id: int) -> None:
        """Request an instance shutdown."""
        ...
