from __future__ import annotations

import re
import shutil
from pathlib import Path

import markdown
from pygments.formatters import HtmlFormatter

from .errors import MissingTemplate

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc", "codehilite"]
CODEHILITE_CLASS = "codehilite"
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
BASE_TEMPLATE = "base.html"
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def render_markdown(text: str) -> str:
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs={"codehilite": {"css_class": CODEHILITE_CLASS, "guess_lang": False}},
    )
    return md.convert(text)


def pygments_css(style: str) -> str:
    return HtmlFormatter(style=style).get_style_defs(f".{CODEHILITE_CLASS}")


def render_template(template: str, **context: str) -> str:
    """Fill ``{{key}}`` placeholders in a single pass.

    Substituted values are never scanned again, so a title or post body
    containing ``{{year}}`` comes out literally. Unknown keys are left as is.
    """

    def repl(match: re.Match) -> str:
        return context.get(match.group(1), match.group(0))

    return PLACEHOLDER_RE.sub(repl, template)


def load_base_template(templates_dir: Path = TEMPLATES_DIR) -> str:
    path = templates_dir / BASE_TEMPLATE
    if not path.is_file():
        raise MissingTemplate(path, "template not found")
    return path.read_text(encoding="utf-8")


def write_output(output_dir: Path, name: str, text: str) -> Path:
    """Write one generated file below ``output_dir`` and return its path."""
    path = output_dir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def copy_static(static_dir: Path, output_dir: Path) -> None:
    # Pages are written after this, so a generated file replaces an asset of the same name.
    shutil.copytree(static_dir, output_dir, dirs_exist_ok=True)
