"""Markdown + LaTeX rendering helpers shared by Qt and web clients.

Question text, options and explanations are authored in markdown with
``$...$`` math. The renderer produces HTML and leaves the math for MathJax
to typeset at display time, so the Qt view and any browser client render
the same source identically.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt

from exam_app.constants.quiz_constants import OPTION_LETTERS

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str | None) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line (an option label) without a wrapping paragraph."""

        return self._markdown.renderInline(markdown_text.strip())

    def wrap_with_mathjax(self, body_html: str, title: str = "ExamQt", font_size: int = 14) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; }}
      .question-html {{ font-size: {font_size}pt; line-height: 1.5; }}
      .explanation {{ font-style: italic; color: #555; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""

    def render_full_document(self, markdown_text: str, title: str = "ExamQt", font_size: int = 14) -> str:
        """Convenience wrapper to render markdown and embed MathJax."""

        fragment = self.render_fragment(markdown_text)
        return self.wrap_with_mathjax(fragment, title=title, font_size=font_size)

    def render_question_document(
        self,
        question_text: str,
        options: Sequence[str],
        font_size: int = 14,
        explanation: str | None = None,
    ) -> str:
        """Render a question with lettered options (and an optional explanation)."""

        parts = [self.render_fragment(question_text or "(No question text)")]
        option_items = "".join(
            f"<li><strong>{letter}.</strong> {self.render_inline(option or '(empty)')}</li>"
            for letter, option in zip(OPTION_LETTERS, options)
        )
        parts.append(f"<ul style=\"list-style: none; padding-left: 0;\">{option_items}</ul>")
        if explanation:
            parts.append(f"<div class=\"explanation\">{self.render_fragment(explanation)}</div>")
        return self.wrap_with_mathjax("\n".join(parts), font_size=font_size)


# Shared by the Qt thread and the API worker.
renderer = MarkdownMathRenderer()
