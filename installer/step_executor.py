# installer/step_executor.py
# -*- coding: utf-8 -*-
"""
Provides functionality to execute installer stages.

A stage pairs a tag and description with an applicability guard and the
function doing the work. Stages run strictly in order; the first failure
stops the pipeline and is returned unchanged to the caller. There are no
retries and no completion checkpoints: re-running the installer relies on
every stage being idempotent.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from common.command_utils import get_symbols, log_installer
from installer.errors import ExternalToolError, InstallError

if TYPE_CHECKING:
    from installer.main_installer import InstallContext

module_logger = logging.getLogger(__name__)

StageGuard = Callable[["InstallContext"], bool]
StageFunction = Callable[["InstallContext"], None]


def always(_ctx: "InstallContext") -> bool:
    return True


@dataclass(frozen=True)
class Stage:
    tag: str
    description: str
    run: StageFunction
    applies: StageGuard = always


@dataclass(frozen=True)
class StepResult:
    tag: str
    description: str
    ran: bool
    error: Optional[InstallError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class PipelineResult:
    ran_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    failure: Optional[StepResult] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _as_install_error(stage: Stage, exc: Exception) -> InstallError:
    if isinstance(exc, InstallError):
        return exc
    if isinstance(exc, subprocess.CalledProcessError):
        cmd = exc.cmd if isinstance(exc.cmd, str) else subprocess.list2cmdline(exc.cmd)
        return ExternalToolError(
            f"{stage.description} failed: `{cmd}` exited with status {exc.returncode}.",
            hint="The command's output is shown above and in the install log.",
            returncode=exc.returncode,
        )
    if isinstance(exc, FileNotFoundError) and exc.filename:
        return ExternalToolError(
            f"{stage.description} failed: {exc.filename} was not found.",
            hint="Check that the release tree is complete and the command is installed.",
        )
    return ExternalToolError(f"{stage.description} failed: {exc}")


def execute_step(
    stage: Stage,
    ctx: "InstallContext",
    current_logger: Optional[logging.Logger] = None,
) -> StepResult:
    """
    Execute a single installer stage.

    The guard is evaluated first; an inapplicable stage is reported as not
    run. Installer errors, failing commands and missing executables are
    converted into a failed StepResult rather than propagated.

    Args:
        stage: The stage to run.
        ctx: The run context handed to the guard and the stage function.
        current_logger: The logger instance to use.

    Returns:
        A StepResult; ``error`` is set when the stage failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    settings = ctx.settings
    symbols = get_symbols(settings)

    if not stage.applies(ctx):
        log_installer(
            f"{symbols.get('info', 'ℹ️')} Skipping: {stage.description} ({stage.tag}) does not apply to this host.",
            "info",
            logger_to_use,
            settings,
        )
        return StepResult(stage.tag, stage.description, ran=False)

    log_installer(
        f"--- {symbols.get('step', '➡️')} Executing: {stage.description} ({stage.tag}) ---",
        "info",
        logger_to_use,
        settings,
    )
    try:
        stage.run(ctx)
    except (InstallError, subprocess.CalledProcessError, OSError) as e:
        error = _as_install_error(stage, e)
        log_installer(
            f"{symbols.get('error', '❌')} FAILED: {stage.description} ({stage.tag}): {error.message}",
            "error",
            logger_to_use,
            settings,
            exc_info=not isinstance(e, InstallError),
        )
        return StepResult(stage.tag, stage.description, ran=True, error=error)

    log_installer(
        f"--- {symbols.get('success', '✅')} Successfully completed: {stage.description} ({stage.tag}) ---",
        "success",
        logger_to_use,
        settings,
    )
    return StepResult(stage.tag, stage.description, ran=True)


def run_pipeline(
    stages: Sequence[Stage],
    ctx: "InstallContext",
    current_logger: Optional[logging.Logger] = None,
) -> PipelineResult:
    """Run stages in order, stopping at the first failure."""
    result = PipelineResult()
    for stage in stages:
        step_result = execute_step(stage, ctx, current_logger=current_logger)
        if not step_result.ran:
            result.skipped_steps.append(stage.tag)
            continue
        result.ran_steps.append(stage.tag)
        if not step_result.ok:
            result.failure = step_result
            break
    return result
