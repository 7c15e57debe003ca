import textwrap

import pytest


def post_text(title="Hello", summary="S1", date="2023-01-01", body="Hello body.", **extra):
    lines = ["---"]
    for key, value in (("title", title), ("summary", summary), ("date", date)):
        if value is not None:
            lines.append(f"{key}: {value}")
    for key, value in extra.items():
        lines.append(f"{key}: {value}")
    lines.append("---")
    lines.append("")
    lines.append(textwrap.dedent(body))
    return "\n".join(lines)


@pytest.fixture
def posts_dir(tmp_path):
    path = tmp_path / "posts"
    path.mkdir()
    return path


@pytest.fixture
def write_post(posts_dir):
    """Write ``<slug>.md`` into the posts directory and return its path."""

    def _write(slug, text=None, **fields):
        path = posts_dir / f"{slug}.md"
        path.write_text(text if text is not None else post_text(**fields), encoding="utf-8")
        return path

    return _write
