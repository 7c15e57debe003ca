import pytest

from kaperys.errors import MissingTemplate
from kaperys.render import (
    TEMPLATES_DIR,
    copy_static,
    load_base_template,
    pygments_css,
    render_markdown,
    render_template,
    write_output,
)


def test_render_markdown_basic_html():
    html = render_markdown("# Title\n\nSome *emphasis*.")

    assert '<h1 id="title">Title</h1>' in html
    assert "<em>emphasis</em>" in html


def test_render_markdown_highlights_fenced_code():
    html = render_markdown("```python\nprint('hi')\n```")

    assert 'class="codehilite"' in html
    assert "print" in html


def test_render_markdown_tables():
    html = render_markdown("| a | b |\n| - | - |\n| 1 | 2 |")

    assert "<table>" in html


def test_pygments_css_is_scoped_to_codehilite():
    css = pygments_css("default")

    assert ".codehilite" in css


def test_render_template_leaves_placeholders_in_values_alone():
    template = "<title>{{title}}</title><main>{{content}}</main><footer>{{year}}</footer>"

    output = render_template(
        template, title="Notes on {{year}}", content="literal {{title}}", year="2024"
    )

    assert output == "<title>Notes on {{year}}</title><main>literal {{title}}</main><footer>2024</footer>"


def test_render_template_keeps_unknown_keys():
    assert render_template("{{missing}} {{title}}", title="Hi") == "{{missing}} Hi"


def test_load_base_template_bundled():
    assert "{{content}}" in load_base_template(TEMPLATES_DIR)


def test_load_base_template_missing(tmp_path):
    with pytest.raises(MissingTemplate) as excinfo:
        load_base_template(tmp_path)

    assert excinfo.value.path == tmp_path / "base.html"


def test_write_output_creates_parent_directories(tmp_path):
    path = write_output(tmp_path, "css/pygments.css", "body {}")

    assert path == tmp_path / "css" / "pygments.css"
    assert path.read_text(encoding="utf-8") == "body {}"


def test_copy_static_merges_into_output(tmp_path):
    static = tmp_path / "public"
    (static / "js").mkdir(parents=True)
    (static / "js" / "app.js").write_text("new", encoding="utf-8")
    (static / "favicon.ico").write_bytes(b"icon")
    out = tmp_path / "out"
    (out / "js").mkdir(parents=True)
    (out / "js" / "app.js").write_text("old", encoding="utf-8")

    copy_static(static, out)

    assert (out / "js" / "app.js").read_text(encoding="utf-8") == "new"
    assert (out / "favicon.ico").read_bytes() == b"icon"
