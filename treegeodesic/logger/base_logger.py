"""Base logging functionality for tracing the geodesic search."""

import html
import logging
from pathlib import Path
from typing import Any, cast, Callable, TypeVar, Union
from functools import wraps

from treegeodesic.logger.html_content import CSS_LOG

F = TypeVar("F", bound=Callable[..., Any])


class AlgorithmLogger:
    """Base logger class for algorithm tracing and debugging."""

    def __init__(self, name: str):
        self.name = name
        self.disabled = False
        self._html_content = ['<div class="content">']
        self._css_content: list[str] = [CSS_LOG]
        self._section_open = False

        self.logger = logging.getLogger(name)

        # Only add a default StreamHandler if no handlers exist, so that two
        # instances sharing a name do not duplicate every line.
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)
        elif self.logger.level == logging.NOTSET:
            self.logger.setLevel(logging.INFO)
        self.logger.propagate = False

    def section(self, title: str):
        """Create a new section in the log."""
        if self.disabled:
            return
        if self._section_open:
            self._html_content.append("</section>")
            self._section_open = False

        self.logger.info(f"\n{'=' * 20} {title} {'=' * 20}\n")
        self._html_content.append(
            f'<section class="section"><h3>{html.escape(title)}</h3>'
        )
        self._section_open = True

    def subsection(self, title: str):
        """Create a new subsection in the log."""
        if self.disabled:
            return
        self.logger.info(f"\n{'-' * 15} {title} {'-' * 15}\n")
        self._html_content.append(
            f'<div class="subsection"><h4>{html.escape(title)}</h4></div>'
        )

    def info(self, message: str):
        if self.disabled:
            return
        self.logger.info(message)
        self._html_content.append(f'<p class="info">{html.escape(message)}</p>')

    def warning(self, message: str):
        if self.disabled:
            return
        self.logger.warning(message)
        self._html_content.append(f'<p class="warning">{html.escape(message)}</p>')

    def error(self, message: str):
        if self.disabled:
            return
        self.logger.error(message)
        self._html_content.append(f'<p class="error">{html.escape(message)}</p>')

    def debug(self, message: str):
        if self.disabled:
            return
        self.logger.debug(message)
        self._html_content.append(f'<p class="debug">{html.escape(message)}</p>')

    def result(self, label: str, value: Any):
        """Log a result with a label."""
        if self.disabled:
            return
        self.logger.info(f"{label}: {value}")
        self._html_content.append(
            f'<div class="result"><strong>{html.escape(label)}:</strong> '
            f"{html.escape(str(value))}</div>"
        )

    def raw_html(self, html_content: str):
        """Add raw HTML content to the debug output."""
        if self.disabled:
            return
        self._html_content.append(html_content)

    def end_section(self):
        if self.disabled:
            return
        if self._section_open:
            self._html_content.append("</section>")
            self._section_open = False

    def clear(self):
        """Clear all accumulated content."""
        self._html_content = ['<div class="content">']
        self._css_content = [CSS_LOG]
        self._section_open = False

    def get_html_content(self) -> str:
        """Get the accumulated HTML content without closing the live buffer."""
        parts = list(self._html_content)
        if self._section_open:
            parts.append("</section>")
        parts.append("</div>")
        return "\n".join(parts)

    def get_css_content(self) -> str:
        return "\n".join(self._css_content)

    def write_html(self, path: Union[str, Path]) -> Path:
        """Write the accumulated trace as a standalone HTML page."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            "<html><head><meta charset='utf-8'><style>"
            + self.get_css_content()
            + "</style></head><body>"
            + self.get_html_content()
            + "</body></html>",
            encoding="utf-8",
        )
        return target

    def log_execution(self, func: F) -> F:
        """Decorator for logging function execution with type safety."""

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.section(f"Executing {func.__name__}")
            try:
                result = func(*args, **kwargs)
                self.info(f"{func.__name__} completed successfully")
                return result
            except Exception as e:
                self.info(f"Error in {func.__name__}: {str(e)}")
                raise

        return cast(F, wrapper)
