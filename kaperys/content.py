from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import frontmatter
import yaml
from frontmatter import YAMLHandler

from .errors import InvalidDate, IOFailure, MalformedContent, NotFound

POSTS_DIR = Path("posts")
POST_SUFFIX = ".md"
REQUIRED_FIELDS = ("title", "summary", "date")
TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class TextDateLoader(yaml.SafeLoader):
    """SafeLoader that leaves YAML timestamps as plain strings."""


TextDateLoader.yaml_implicit_resolvers = {
    key: [(tag, regexp) for tag, regexp in resolvers if tag != TIMESTAMP_TAG]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class PostYAMLHandler(YAMLHandler):
    def load(self, fm, **kwargs):
        return yaml.load(fm, Loader=TextDateLoader)


FRONT_MATTER = PostYAMLHandler()


@dataclass(frozen=True)
class PostMeta:
    description: Optional[str] = None
    keywords: Optional[str] = None


@dataclass(frozen=True)
class Post:
    slug: str
    title: str
    summary: str
    date: str
    published: dt.date
    meta: PostMeta
    content: str


def format_long_date(value: dt.date) -> str:
    """Render a date the way post pages show it: ``Monday, 1 January 2024``."""
    return f"{value:%A}, {value.day} {value:%B %Y}"


def parse_post_date(value: object, path: Path) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(path, f"field 'date' is not a calendar date: {value!r}")
    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(text).date()
    except ValueError:
        raise InvalidDate(path, f"field 'date' is not a calendar date: {text!r}") from None


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError):
        raise NotFound(path, "no such file") from None
    except UnicodeDecodeError:
        raise MalformedContent(path, "file is not valid UTF-8") from None
    except OSError as exc:
        raise IOFailure(path, f"cannot read file ({exc.strerror or exc})") from exc


def split_front_matter(text: str, path: Path, required: bool = True) -> tuple[dict, str]:
    """Split a markdown file into its metadata mapping and body.

    Posts must open with a metadata block; standalone pages pass
    ``required=False`` and get an empty mapping when there is none. YAML
    errors and non-mapping blocks are reported as MalformedContent against
    ``path``.
    """
    clean_text = text.lstrip("\ufeff")
    if not FRONT_MATTER.detect(clean_text.lstrip()):
        if not required:
            return {}, clean_text.strip()
        raise MalformedContent(path, "missing front matter block")
    try:
        fm, body = FRONT_MATTER.split(clean_text.strip())
    except ValueError:
        raise MalformedContent(path, "front matter block is not closed") from None
    try:
        meta = FRONT_MATTER.load(fm)
    except yaml.YAMLError as exc:
        raise MalformedContent(path, f"front matter is not valid YAML ({exc})") from None
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise MalformedContent(path, "front matter must be a mapping")
    return meta, body.strip()


def _text_field(meta: dict, key: str) -> Optional[str]:
    value = meta.get(key)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item).strip() for item in value if str(item).strip())
    return str(value).strip()


def _required(meta: dict, key: str, path: Path) -> str:
    value = _text_field(meta, key)
    if not value:
        raise MalformedContent(path, f"missing required field '{key}'")
    return value


def post_path(slug: str, content_dir: Path = POSTS_DIR) -> Path:
    return Path(content_dir) / f"{slug}{POST_SUFFIX}"


def get_post(slug: str, content_dir: Path = POSTS_DIR) -> Post:
    path = post_path(slug, content_dir)
    if not slug or slug in {".", ".."} or Path(slug).name != slug:
        raise NotFound(path, f"invalid post slug {slug!r}")
    if not path.is_file():
        raise NotFound(path, f"no post with slug {slug!r}")
    text = read_source(path)

    meta, body = split_front_matter(text, path)
    title, summary, _ = (_required(meta, key, path) for key in REQUIRED_FIELDS)
    published = parse_post_date(meta["date"], path)

    return Post(
        slug=slug,
        title=title,
        summary=summary,
        date=format_long_date(published),
        published=published,
        meta=PostMeta(
            description=_text_field(meta, "metaDescription"),
            keywords=_text_field(meta, "metaKeywords"),
        ),
        content=body,
    )


def list_slugs(content_dir: Path = POSTS_DIR) -> list[str]:
    """Post slugs in filename order.

    Hidden files, subdirectories and non-markdown files are ignored.
    """
    content_dir = Path(content_dir)
    try:
        names = sorted(os.listdir(content_dir))
    except OSError as exc:
        raise IOFailure(
            content_dir, f"cannot read content directory ({exc.strerror or exc})"
        ) from exc
    slugs = []
    for name in names:
        if name.startswith(".") or not name.endswith(POST_SUFFIX):
            continue
        if not (content_dir / name).is_file():
            continue
        slugs.append(name[: -len(POST_SUFFIX)])
    return slugs


def get_all_posts(content_dir: Path = POSTS_DIR) -> list[Post]:
    """Load every post, newest first.

    "Newest" means reverse filename order, so authors prefix filenames with
    the publish date (``2023-01-01-hello.md``). Any bad post fails the call.
    """
    posts = [get_post(slug, content_dir) for slug in list_slugs(content_dir)]
    posts.reverse()
    return posts


def find_order_mismatch(posts: list[Post]) -> Optional[tuple[Post, Post]]:
    for newer, older in zip(posts, posts[1:]):
        if newer.published < older.published:
            return newer, older
    return None


def extract_title(meta: dict, body: str) -> tuple[str, str]:
    if meta.get("title"):
        return str(meta["title"]), body
    lines = body.splitlines()
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("# "):
            title = stripped[2:].strip() or "Untitled"
            new_body = "\n".join(lines[i + 1 :]).lstrip()
            return title, new_body
        if stripped:
            break
    return "Untitled", body
