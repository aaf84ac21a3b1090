"""Confirmable actions.

A ``PendingAction`` is created when the operator asks for a mutating
operation and lives only while its confirmation dialog is open. It carries
everything needed to run the operation later, so nothing is read back from
the (possibly changed) selection at confirmation time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from brewdeck.models import PackageRef


class ActionKind(Enum):
    """Each kind is also the unit of duplicate suppression."""

    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPGRADE = "upgrade"
    UPGRADE_ALL = "upgrade_all"
    DOCTOR = "doctor"
    CLEANUP = "cleanup"
    AUTOREMOVE = "autoremove"
    PIN = "pin"
    UNPIN = "unpin"


CONFIRM = "Confirm"
CANCEL = "Cancel"
DIALOG_OPTIONS: tuple[str, ...] = (CONFIRM, CANCEL)

# Initially focused dialog option. Destructive or sweeping operations start
# on Cancel so a reflexive Enter does nothing.
DEFAULT_OPTION: dict[ActionKind, str] = {
    ActionKind.INSTALL: CONFIRM,
    ActionKind.UNINSTALL: CANCEL,
    ActionKind.UPGRADE: CONFIRM,
    ActionKind.UPGRADE_ALL: CANCEL,
    ActionKind.DOCTOR: CONFIRM,
    ActionKind.CLEANUP: CANCEL,
    ActionKind.AUTOREMOVE: CANCEL,
    ActionKind.PIN: CONFIRM,
    ActionKind.UNPIN: CONFIRM,
}

DIALOG_TITLES: dict[ActionKind, str] = {
    ActionKind.INSTALL: "Install",
    ActionKind.UNINSTALL: "Uninstall",
    ActionKind.UPGRADE: "Upgrade",
    ActionKind.UPGRADE_ALL: "Upgrade All",
    ActionKind.DOCTOR: "Doctor",
    ActionKind.CLEANUP: "Cleanup",
    ActionKind.AUTOREMOVE: "Autoremove",
    ActionKind.PIN: "Pin",
    ActionKind.UNPIN: "Unpin",
}

# Operations whose success changes what is installed
REFRESHING_KINDS = frozenset(
    {
        ActionKind.INSTALL,
        ActionKind.UNINSTALL,
        ActionKind.UPGRADE,
        ActionKind.UPGRADE_ALL,
        ActionKind.CLEANUP,
        ActionKind.AUTOREMOVE,
        ActionKind.PIN,
        ActionKind.UNPIN,
    }
)


@dataclass(frozen=True)
class PendingAction:
    """A requested, not yet confirmed, operation."""

    kind: ActionKind
    prompt: str
    package: PackageRef | None = None
    count: int = 0  # Outdated packages, for UPGRADE_ALL

    @property
    def name(self) -> str:
        return self.package.name if self.package else ""

    @property
    def title(self) -> str:
        return DIALOG_TITLES[self.kind]

    @property
    def default_option(self) -> str:
        return DEFAULT_OPTION[self.kind]

    @property
    def refreshes(self) -> bool:
        return self.kind in REFRESHING_KINDS

    def progress_message(self) -> str:
        """Shown in the status bar while the operation runs."""
        return {
            ActionKind.INSTALL: f"Installing {self.name}...",
            ActionKind.UNINSTALL: f"Uninstalling {self.name}...",
            ActionKind.UPGRADE: f"Upgrading {self.name}...",
            ActionKind.UPGRADE_ALL: "Upgrading all packages...",
            ActionKind.DOCTOR: "Running brew doctor...",
            ActionKind.CLEANUP: "Running brew cleanup...",
            ActionKind.AUTOREMOVE: "Running brew autoremove...",
            ActionKind.PIN: f"Pinning {self.name}...",
            ActionKind.UNPIN: f"Unpinning {self.name}...",
        }[self.kind]

    def success_message(self) -> str:
        return {
            ActionKind.INSTALL: f"Installed {self.name}",
            ActionKind.UNINSTALL: f"Uninstalled {self.name}",
            ActionKind.UPGRADE: f"Upgraded {self.name}",
            ActionKind.UPGRADE_ALL: "Upgraded all packages",
            ActionKind.DOCTOR: "Doctor completed",
            ActionKind.CLEANUP: "Cleanup completed",
            ActionKind.AUTOREMOVE: "Autoremove completed",
            ActionKind.PIN: f"Pinned {self.name}",
            ActionKind.UNPIN: f"Unpinned {self.name}",
        }[self.kind]


# =============================================================================
# Constructors
# =============================================================================


def install(ref: PackageRef) -> PendingAction:
    return PendingAction(ActionKind.INSTALL, f"Install {ref.name}?", ref)


def uninstall(ref: PackageRef) -> PendingAction:
    return PendingAction(ActionKind.UNINSTALL, f"Uninstall {ref.name}?", ref)


def upgrade(ref: PackageRef) -> PendingAction:
    return PendingAction(ActionKind.UPGRADE, f"Upgrade {ref.name}?", ref)


def upgrade_all(count: int) -> PendingAction:
    return PendingAction(
        ActionKind.UPGRADE_ALL,
        f"Upgrade all {count} outdated packages?",
        count=count,
    )


def doctor() -> PendingAction:
    return PendingAction(ActionKind.DOCTOR, "Run brew doctor to check for problems?")


def cleanup() -> PendingAction:
    return PendingAction(ActionKind.CLEANUP, "Run brew cleanup to remove old versions?")


def autoremove() -> PendingAction:
    return PendingAction(
        ActionKind.AUTOREMOVE,
        "Run brew autoremove to uninstall unused dependencies?",
    )


def pin(ref: PackageRef) -> PendingAction:
    return PendingAction(ActionKind.PIN, f"Pin {ref.name}?", ref)


def unpin(ref: PackageRef) -> PendingAction:
    return PendingAction(ActionKind.UNPIN, f"Unpin {ref.name}?", ref)
