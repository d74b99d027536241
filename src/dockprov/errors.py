# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/errors.py

from __future__ import annotations


# Substrings package managers print when another process holds their lock.
LOCK_SIGNATURES = (
    "Could not get lock",
    "cannot acquire lock",
    "failed to acquire lock",
    "Lock file",
)


class DockprovError(RuntimeError):
    """Base class for provisioning failures."""


class ConfigError(DockprovError):
    """Raised when the provisioning config cannot be located or read."""


class TransportError(DockprovError):
    """Raised when a command could not be delivered to / completed on the host."""


class RemoteCommandError(DockprovError):
    """
    A remote command ran but exited non-zero.
    """

    def __init__(
        self,
        command: str,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        detail = (stderr or stdout).strip()
        super().__init__(
            f"command {command!r} failed (rc={exit_code})" + (f": {detail}" if detail else "")
        )


class LockContentionError(RemoteCommandError):
    """The remote package manager's lock is held by another process."""


class TemplateError(DockprovError):
    """The shipped engine config template is broken."""


class RenderError(DockprovError):
    """The render context is missing something the template needs."""


class VersionParseError(DockprovError, ValueError):
    pass


class SequenceStepError(DockprovError):
    """Base class for provisioning step failures that are not transport errors."""


class PackageActionError(SequenceStepError):
    pass


class UnsupportedPackageAction(PackageActionError):
    """
    The package manager has no verb for the requested action.
    Swupd has no mapping for Remove; see PackageManager.legacy_empty_verb.
    """


class CertificateError(SequenceStepError):
    pass


class SwarmConfigurationError(SequenceStepError):
    pass


class DaemonUnavailableError(SequenceStepError):
    pass


class RegistryError(DockprovError):
    pass


class DuplicateProvisionerError(RegistryError):
    pass


class UnknownProvisionerError(RegistryError):
    pass


def is_lock_contention(stdout: str, stderr: str) -> bool:
    text = f"{stdout}\n{stderr}"
    return any(sig in text for sig in LOCK_SIGNATURES)


def classify_failure(
    command: str,
    exit_code: int,
    stdout: str = "",
    stderr: str = "",
) -> RemoteCommandError:
    """
    Build the error for a failed remote command, separating lock contention
    from every other non-zero exit.
    """
    cls = LockContentionError if is_lock_contention(stdout, stderr) else RemoteCommandError
    return cls(command, exit_code, stdout, stderr)

