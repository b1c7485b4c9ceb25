"""Render service implementation.

Turns topics plus their outline into a single document (HTML, markdown
or plain text) or a paginated HTML site. Markdown is converted with the
markdown library and pymdown-extensions, with Pygments highlighting for
code blocks.
"""

import html
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

import markdown
from markdown.extensions.tables import TableExtension
from markdown.extensions.toc import TocExtension

from ..config import GuideConfig
from ..domain.content import CodeBlock, OutlineEntry, TopicEntry
from ..repositories.interfaces import IFileRepository
from .toc_service import slugify

logger = logging.getLogger(__name__)


# Mermaid.js CDN URL
MERMAID_CDN = "https://cdn.jsdelivr.net/npm/mermaid/dist/mermaid.esm.min.mjs"

# HTML template for rendered guides
HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            max-width: 800px;
            margin: 0 auto;
            padding: 2rem;
            color: #333;
        }}
        h1, h2, h3, h4 {{ color: #2c3e50; }}
        pre {{ background: #f5f5f5; padding: 1rem; overflow-x: auto; border-radius: 4px; }}
        code {{ background: #f5f5f5; padding: 0.2em 0.4em; border-radius: 3px; }}
        pre code {{ background: none; padding: 0; }}
        table {{ border-collapse: collapse; width: 100%; margin: 1rem 0; }}
        th, td {{ border: 1px solid #ddd; padding: 0.75rem; text-align: left; }}
        th {{ background: #f5f5f5; }}
        blockquote {{ border-left: 4px solid #ddd; margin: 0; padding-left: 1rem; color: #666; }}
        .mermaid {{ background: #fff; padding: 1rem; margin: 1rem 0; }}
        nav {{ margin-bottom: 2rem; padding-bottom: 1rem; border-bottom: 1px solid #eee; }}
        nav a {{ margin-right: 1rem; }}
        .toc {{ background: #f9f9f9; padding: 1rem; border-radius: 4px; margin-bottom: 2rem; }}
        .toc ul {{ margin: 0.5rem 0; padding-left: 1.5rem; }}
        section.topic {{ margin-bottom: 3rem; }}
        img {{ max-width: 100%; height: auto; }}
    </style>
    {extra_head}
</head>
<body>
    {nav}
    <article>
        {content}
    </article>
    {scripts}
</body>
</html>"""

# Mermaid initialization script
MERMAID_SCRIPT = """
<script type="module">
    import mermaid from '{mermaid_cdn}';
    mermaid.initialize({{ startOnLoad: true, theme: 'default' }});
</script>
"""


class RenderService:
    """Service for rendering a guide.

    Supports three single-document formats:
    - html: complete HTML5 document with an outline nav
    - markdown: one markdown file with explicit anchors
    - text: plain text with indented code

    and a paginated HTML site via ``render_pages``.
    """

    def __init__(
        self,
        file_repo: IFileRepository,
        language: str = "en",
    ) -> None:
        """Initialize the render service with required dependencies.

        Args:
            file_repo: Repository for file system operations.
            language: Value of the HTML ``lang`` attribute.
        """
        self._file_repo = file_repo
        self._language = language

    def render(
        self,
        topics: Sequence[TopicEntry],
        outline: Sequence[OutlineEntry],
        fmt: Optional[str] = None,
        title: Optional[str] = None,
    ) -> str:
        """Render the outline followed by every topic body, in order.

        Args:
            topics: Topics in guide order.
            outline: Outline built from ``topics``.
            fmt: One of ``html``, ``markdown`` or ``text``.
            title: Guide title.

        Returns:
            The rendered document.

        Raises:
            ValueError: If the format is unknown or outline and topics
                do not correspond.
        """
        fmt = (fmt or GuideConfig.get_output_format()).lower()
        title = title or GuideConfig.DEFAULT_TITLE
        self._check_alignment(topics, outline)

        if fmt == "html":
            result = self._render_html(topics, outline, title)
        elif fmt == "markdown":
            result = self._render_markdown(topics, outline, title)
        elif fmt == "text":
            result = self._render_text(topics, outline, title)
        else:
            raise ValueError(
                f"Unknown output format {fmt!r}; expected one of "
                f"{', '.join(GuideConfig.OUTPUT_FORMATS)}"
            )

        logger.info("Rendered %d topic(s) as %s", len(topics), fmt)
        return result

    def render_pages(
        self,
        topics: Sequence[TopicEntry],
        outline: Sequence[OutlineEntry],
        output_dir: Path,
        title: Optional[str] = None,
    ) -> list[Path]:
        """Render the guide as one HTML page per topic plus an index.

        Args:
            topics: Topics in guide order.
            outline: Outline built from ``topics``.
            output_dir: Directory to write HTML files to.
            title: Guide title.

        Returns:
            List of paths to generated HTML files, index first.
        """
        title = title or GuideConfig.DEFAULT_TITLE
        self._check_alignment(topics, outline)
        self._file_repo.mkdir(output_dir, parents=True, exist_ok=True)

        generated_files: list[Path] = []

        index_path = output_dir / "index.html"
        self._file_repo.write_file(index_path, self._render_index_page(outline, title))
        generated_files.append(index_path)

        for idx, (entry, topic) in enumerate(zip(outline, topics)):
            page = HTML_TEMPLATE.format(
                lang=self._language,
                title=html.escape(f"{topic.title} - {title}"),
                extra_head="",
                nav=self._build_nav(outline, idx),
                content=self._render_topic_html(entry, topic, heading_tag="h1"),
                scripts=self._scripts_for([topic]),
            )
            page_path = output_dir / _page_filename(entry)
            self._file_repo.write_file(page_path, page)
            generated_files.append(page_path)

        logger.info("Wrote %d page(s) to %s", len(generated_files), output_dir)
        return generated_files

    def write(self, artifact: str, path: Path) -> Path:
        """Write a rendered document to ``path``, creating parent directories."""
        self._file_repo.mkdir(path.parent, parents=True, exist_ok=True)
        self._file_repo.write_file(path, artifact)
        logger.info("Wrote %s", path)
        return path

    # HTML

    def _render_html(
        self,
        topics: Sequence[TopicEntry],
        outline: Sequence[OutlineEntry],
        title: str,
    ) -> str:
        sections = [
            self._render_topic_html(entry, topic)
            for entry, topic in zip(outline, topics)
        ]
        content = f"<h1>{html.escape(title)}</h1>\n" + "\n".join(sections)

        return HTML_TEMPLATE.format(
            lang=self._language,
            title=html.escape(title),
            extra_head="",
            nav=self._render_outline_html(outline, lambda entry: entry.href),
            content=content,
            scripts=self._scripts_for(topics),
        )

    def _render_outline_html(self, outline: Sequence[OutlineEntry], href) -> str:
        """Build the outline nav, with ``href`` mapping an entry to its link."""
        items = [
            f'<li><a href="{href(entry)}">{html.escape(entry.title)}</a></li>'
            for entry in outline
        ]
        return (
            f'<nav class="toc">\n<h2>{GuideConfig.OUTLINE_HEADING}</h2>\n'
            "<ul>\n" + "\n".join(items) + "\n</ul>\n</nav>"
        )

    def _render_topic_html(
        self, entry: OutlineEntry, topic: TopicEntry, heading_tag: str = "h2"
    ) -> str:
        body_html = self._convert_markdown(topic.to_markdown(), entry.anchor)
        return (
            f'<section class="topic" id="{entry.anchor}">\n'
            f"<{heading_tag}>{html.escape(topic.title)}</{heading_tag}>\n"
            f"{body_html}\n"
            "</section>"
        )

    def _convert_markdown(self, source: str, anchor: str) -> str:
        """Convert one topic body; heading and footnote ids are scoped to the topic anchor."""
        md = self._create_markdown_processor(anchor)
        return md.convert(source)

    def _create_markdown_processor(self, anchor: str) -> markdown.Markdown:
        """Create configured markdown processor with extensions."""

        # Topic anchors never contain a doubled separator or a colon
        def prefixed_slugify(value: str, separator: str) -> str:
            return f"{anchor}{separator * 2}{slugify(value, separator)}"

        extensions = [
            TableExtension(),
            TocExtension(slugify=prefixed_slugify),
            "pymdownx.highlight",
            "pymdownx.superfences",
            "pymdownx.tasklist",
            *GuideConfig.MARKDOWN_EXTENSIONS,
        ]
        extension_configs = {
            "pymdownx.highlight": {"css_class": "highlight", "guess_lang": False},
            "pymdownx.tasklist": {"custom_checkbox": True},
            "pymdownx.superfences": {
                "custom_fences": [
                    {
                        "name": "mermaid",
                        "class": "mermaid",
                        "format": self._mermaid_format,
                    }
                ]
            },
            "footnotes": {"SEPARATOR": f":{anchor}-"},
        }

        return markdown.Markdown(
            extensions=extensions,
            extension_configs=extension_configs,
            output_format="html5",
        )

    def _mermaid_format(
        self,
        source: str,
        language: str,
        css_class: str,
        options: dict,
        md: markdown.Markdown,
        **kwargs,
    ) -> str:
        """Custom formatter for mermaid code blocks."""
        return f'<div class="mermaid">\n{html.escape(source)}\n</div>'

    def _scripts_for(self, topics: Sequence[TopicEntry]) -> str:
        if any(self._has_mermaid(topic) for topic in topics):
            return MERMAID_SCRIPT.format(mermaid_cdn=MERMAID_CDN)
        return ""

    def _has_mermaid(self, topic: TopicEntry) -> bool:
        """Check if a topic contains mermaid blocks."""
        return any(block.language == "mermaid" for block in topic.code_blocks)

    def _build_nav(self, outline: Sequence[OutlineEntry], idx: int) -> str:
        """Build previous/contents/next navigation for page ``idx``."""
        nav_items = []

        if idx > 0:
            prev_entry = outline[idx - 1]
            nav_items.append(
                f'<a href="{_page_filename(prev_entry)}">&larr; '
                f"{html.escape(prev_entry.title)}</a>"
            )

        nav_items.append(f'<a href="index.html">{GuideConfig.OUTLINE_HEADING}</a>')

        if idx < len(outline) - 1:
            next_entry = outline[idx + 1]
            nav_items.append(
                f'<a href="{_page_filename(next_entry)}">'
                f"{html.escape(next_entry.title)} &rarr;</a>"
            )

        return f'<nav>{"".join(nav_items)}</nav>'

    def _render_index_page(self, outline: Sequence[OutlineEntry], title: str) -> str:
        """Generate index page listing all topics."""
        content = f"<h1>{html.escape(title)}</h1>\n" + self._render_outline_html(
            outline, _page_filename
        )
        return HTML_TEMPLATE.format(
            lang=self._language,
            title=html.escape(title),
            extra_head="",
            nav="",
            content=content,
            scripts="",
        )

    # Markdown

    def _render_markdown(
        self,
        topics: Sequence[TopicEntry],
        outline: Sequence[OutlineEntry],
        title: str,
    ) -> str:
        lines = [f"# {title}", "", f"## {GuideConfig.OUTLINE_HEADING}", ""]
        for entry in outline:
            link_text = entry.title.replace("[", r"\[").replace("]", r"\]")
            lines.append(f"- [{link_text}]({entry.href})")

        for entry, topic in zip(outline, topics):
            lines.extend(["", f'<a id="{entry.anchor}"></a>', "", f"## {topic.title}"])
            body = topic.to_markdown()
            if body:
                lines.extend(["", body])

        return "\n".join(lines) + "\n"

    # Plain text

    def _render_text(
        self,
        topics: Sequence[TopicEntry],
        outline: Sequence[OutlineEntry],
        title: str,
    ) -> str:
        lines = [title, "=" * len(title), "", GuideConfig.OUTLINE_HEADING]
        lines.append("-" * len(GuideConfig.OUTLINE_HEADING))
        width = len(str(len(outline)))
        for number, entry in enumerate(outline, start=1):
            lines.append(f"  {number:>{width}}. {entry.title}")

        for number, topic in enumerate(topics, start=1):
            heading = f"{number}. {topic.title}"
            lines.extend(["", "", heading, "-" * len(heading)])
            for block in topic.body:
                lines.append("")
                if isinstance(block, CodeBlock):
                    lines.extend(
                        f"    {line}" if line else "" for line in block.code.split("\n")
                    )
                else:
                    lines.append(block.text)

        return "\n".join(lines) + "\n"

    def _check_alignment(
        self, topics: Sequence[TopicEntry], outline: Sequence[OutlineEntry]
    ) -> None:
        """Ensure the outline corresponds one-to-one with the topics."""
        if len(topics) != len(outline) or any(
            entry.title != topic.title for entry, topic in zip(outline, topics)
        ):
            raise ValueError("Outline does not match topics; rebuild it first")


def _page_filename(entry: OutlineEntry) -> str:
    """File name of the page holding a topic in a paginated site."""
    return f"{entry.anchor}.html"
