"""
Supervisor around a render step: a failing render is replaced with a
fallback view instead of propagating.

Usage:
    boundary = ErrorBoundary(render_page, on_reload=reload_page)
    view = boundary.render()        # page output, or a FallbackView
    if boundary.has_error:
        view = boundary.reset()     # try the render again
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FallbackView:
    title: str = "Jejda, něco se pokazilo!"
    message: str = "Nastala neočekávaná chyba. Zkuste prosím obnovit stránku."
    details: str = ""
    details_label: str = "Technické detaily"
    actions: tuple[str, ...] = field(default=("Domů", "Obnovit stránku"))


class ErrorBoundary:
    def __init__(
        self,
        render: Callable[[], Any],
        on_reload: Optional[Callable[[], None]] = None,
        on_home: Optional[Callable[[], None]] = None,
    ):
        self._render = render
        self._on_reload = on_reload
        self._on_home = on_home
        self.error: Optional[Exception] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def render(self) -> Any:
        """Run the child render, or return the fallback while an error is held."""
        if self.error is not None:
            return self.fallback()
        try:
            return self._render()
        except Exception as exc:
            logger.exception("Uncaught error during render")
            self.error = exc
            return self.fallback()

    def fallback(self) -> FallbackView:
        details = f"{type(self.error).__name__}: {self.error}" if self.error else ""
        return FallbackView(details=details)

    def reset(self) -> Any:
        self.error = None
        return self.render()

    def reload(self) -> Any:
        """Clear the error, run the reload action if one is wired, and render again."""
        if self._on_reload is not None:
            self._on_reload()
        return self.reset()

    def go_home(self) -> None:
        self.error = None
        if self._on_home is not None:
            self._on_home()
