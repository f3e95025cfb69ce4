#!/usr/bin/env python3
"""
Unified error handling for komodo-deploy.

Provides a small error hierarchy with categories, structured context and
recovery suggestions, plus a Rich-based handler used by the CLI to render
failures consistently.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel


class ErrorCategory(Enum):
    """Error category enumeration."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    REMOTE = "remote"
    TIMEOUT = "timeout"
    RUNTIME = "runtime"


@dataclass
class ErrorContext:
    """Context information attached to an error."""

    operation: str
    phase: Optional[str] = None
    component: Optional[str] = None
    target: Optional[str] = None
    file_path: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


class KomodoDeployError(Exception):
    """Base class for all komodo-deploy errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        context: Optional[ErrorContext] = None,
        recoverable: bool = False,
        suggestions: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.context = context
        self.recoverable = recoverable
        self.suggestions = suggestions or []
        self.cause = cause


class ConfigurationError(KomodoDeployError):
    """Missing or inconsistent configuration (credentials, URL)."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, ErrorCategory.CONFIGURATION, recoverable=True, **kwargs)


class ValidationError(KomodoDeployError):
    """Malformed workflow input."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, ErrorCategory.VALIDATION, recoverable=True, **kwargs)


class UnsupportedKindError(ValidationError):
    """Operation kind outside the supported set."""

    def __init__(self, kind: Any, **kwargs):
        super().__init__(f"Unsupported kind: {kind}", **kwargs)
        self.kind = kind


class RemoteOperationError(KomodoDeployError):
    """Failure reported by the Komodo API or the transport underneath it."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, ErrorCategory.REMOTE, recoverable=False, **kwargs)
        self.status_code = status_code


class PollTimeoutError(RemoteOperationError):
    """An update did not complete within the configured poll timeout."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.category = ErrorCategory.TIMEOUT
        self.recoverable = True


_CATEGORY_STYLE = {
    ErrorCategory.CONFIGURATION: ("⚙️", "Configuration Error"),
    ErrorCategory.VALIDATION: ("⚠️", "Validation Error"),
    ErrorCategory.REMOTE: ("🔌", "Remote Operation Error"),
    ErrorCategory.TIMEOUT: ("⏱️", "Timeout Error"),
    ErrorCategory.RUNTIME: ("💥", "Runtime Error"),
}


class ErrorHandler:
    """Renders errors to a Rich console and logs them."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)

    def handle_error(
        self,
        error: BaseException,
        context: Optional[ErrorContext] = None,
        show_traceback: bool = False,
    ) -> None:
        """Display an error panel, with suggestions and context if present."""
        if isinstance(error, KomodoDeployError):
            emoji, label = _CATEGORY_STYLE.get(error.category, ("❌", "Error"))
            title = f"{emoji} {label}"
            context = context or error.context
            suggestions = error.suggestions
        else:
            title = f"❌ {type(error).__name__}"
            suggestions = []

        lines = [f"[bold red]{escape(str(error))}[/bold red]"]
        if context:
            details = {
                key: value
                for key, value in context.__dict__.items()
                if value is not None
            }
            for key, value in details.items():
                lines.append(f"[dim]{key}:[/dim] {escape(str(value))}")
        if suggestions:
            lines.append("")
            lines.append("💡 [cyan]Suggestions:[/cyan]")
            lines.extend(f"  • {escape(str(suggestion))}" for suggestion in suggestions)

        self.console.print(Panel("\n".join(lines), title=title, border_style="red"))
        self.logger.debug("Handled error: %s", error, exc_info=self.verbose)

        cause = getattr(error, "cause", None)
        if self.verbose and show_traceback:
            if cause is not None:
                self.console.print(f"[dim]Caused by: {escape(repr(cause))}[/dim]")
            self.console.print_exception()


_error_handler: Optional[ErrorHandler] = None


def set_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Install the process-wide error handler."""
    global _error_handler
    _error_handler = handler


def get_error_handler() -> Optional[ErrorHandler]:
    """Return the process-wide error handler, if any."""
    return _error_handler


def handle_error(
    error: BaseException,
    context: Optional[ErrorContext] = None,
    show_traceback: bool = False,
) -> None:
    """Handle an error with the global handler, or log it when none is set."""
    if _error_handler is not None:
        _error_handler.handle_error(error, context=context, show_traceback=show_traceback)
    else:
        logging.error("Error: %s", error)


def create_error_context(operation: str, **kwargs) -> ErrorContext:
    """Convenience constructor for ErrorContext."""
    return ErrorContext(operation=operation, **kwargs)
