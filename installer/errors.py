# installer/errors.py
# -*- coding: utf-8 -*-
"""
Exception taxonomy for the installer.

Every stage failure is fatal. Each error carries an operator-facing
message and an optional remediation hint that the orchestrator prints
before exiting with a non-zero status.
"""

from typing import Optional

RERUN_NOTICE = (
    "The installer is idempotent: once the problem above is resolved, "
    "re-run it and it will pick up where it left off."
)


class InstallError(Exception):
    """Base class for all fatal installer errors."""

    kind = "InstallError"

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def report(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        if self.hint:
            lines.append("")
            lines.append(self.hint)
        lines.append("")
        lines.append(RERUN_NOTICE)
        return "\n".join(lines)


class ConfigurationError(InstallError):
    """Incoherent options or settings (bad flag combination, bad env value)."""

    kind = "ConfigurationError"


class ResourceError(InstallError):
    """The host lacks a resource the install needs (memory)."""

    kind = "ResourceError"


class DependencyError(InstallError):
    """A required host utility is absent and cannot be installed."""

    kind = "DependencyError"


class MissingArtifactError(InstallError):
    """A file the install expects to exist (certificate, asset bundle) is absent."""

    kind = "MissingArtifactError"


class DependencyHealthError(InstallError):
    """A service installed by the manifests is unhealthy or misconfigured."""

    kind = "DependencyHealthError"


class ExternalToolError(InstallError):
    """A delegated helper or system tool exited non-zero."""

    kind = "ExternalToolError"

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        returncode: Optional[int] = None,
    ) -> None:
        super().__init__(message, hint)
        self.returncode = returncode
