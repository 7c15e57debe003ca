from __future__ import annotations

import datetime as dt
import html
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .content import Post, extract_title, read_source, split_front_matter
from .render import pygments_css, render_markdown, render_template, write_output
from .utils import site_link

ROOT = "."


def build_nav(pages: list[dict], root: str = ROOT) -> str:
    links = [f'<a href="{root}/index.html">Home</a>']
    for page in pages:
        links.append(f'<a href="{root}/{page["name"]}.html">{html.escape(page["title"])}</a>')
    return "".join(links)


def render_page(
    base_template: str,
    args: object,
    nav: str,
    *,
    title: str,
    content: str,
    description: str = "",
    keywords: str = "",
    extra_head: str = "",
) -> str:
    return render_template(
        base_template,
        title=html.escape(title),
        description=html.escape(description or args.site_description),
        keywords=html.escape(keywords or getattr(args, "site_keywords", "")),
        root=ROOT,
        nav=nav,
        content=content,
        site_name=html.escape(args.site_name),
        year=str(dt.datetime.now().year),
        extra_head=extra_head,
    )


def build_post_list(posts: list[Post], root: str = ROOT) -> str:
    if not posts:
        return '<p class="post-empty">No posts yet.</p>'
    items = []
    for post in posts:
        url = f"{root}/{post.slug}.html"
        items.append(
            '<li class="post-item">'
            f'<time class="post-date" datetime="{post.published.isoformat()}">{post.date}</time>'
            f'<h2 class="post-title"><a href="{url}">{html.escape(post.title)}</a></h2>'
            f'<p class="post-summary">{html.escape(post.summary)}</p>'
            "</li>"
        )
    return f'<ul class="post-list">{"".join(items)}</ul>'


def build_index(base_template: str, output_dir: Path, posts: list[Post], nav: str, args: object) -> None:
    intro = (getattr(args, "intro", "") or "").strip()
    intro_html = f'<p class="intro">{html.escape(intro)}</p>' if intro else ""
    content = (
        '<div class="section-head">'
        f"<h1>{html.escape(args.site_name)}</h1>"
        f"{intro_html}"
        "</div>"
        f"{build_post_list(posts)}"
    )
    html_doc = render_page(base_template, args, nav, title=args.site_name, content=content)
    write_output(output_dir, "index.html", html_doc)


def build_posts(
    base_template: str,
    output_dir: Path,
    posts: list[Post],
    nav: str,
    args: object,
    workers: int = 1,
) -> None:
    site_url = (getattr(args, "site_url", "") or "").strip()

    def render_post(post: Post) -> None:
        extra_head = ""
        if site_url:
            extra_head = f'<link rel="canonical" href="{html.escape(site_link(site_url, post.slug))}">'
        content = (
            '<article class="post">'
            f'<time class="post-date" datetime="{post.published.isoformat()}">{post.date}</time>'
            f'<h1 class="post-title">{html.escape(post.title)}</h1>'
            f'<p class="post-summary">{html.escape(post.summary)}</p>'
            f'<div class="post-body">{render_markdown(post.content)}</div>'
            "</article>"
        )
        html_doc = render_page(
            base_template,
            args,
            nav,
            title=f"{post.title} · {args.site_name}",
            content=content,
            description=post.meta.description or "",
            keywords=post.meta.keywords or "",
            extra_head=extra_head,
        )
        write_output(output_dir, f"{post.slug}.html", html_doc)

    workers = max(1, int(workers or 1))
    if workers <= 1 or len(posts) <= 1:
        for post in posts:
            render_post(post)
    else:
        with ThreadPoolExecutor(max_workers=min(workers, len(posts))) as executor:
            list(executor.map(render_post, posts))


def load_pages(pages_dir: Path) -> list[dict]:
    """Standalone markdown pages (``trust.md`` becomes ``trust.html``)."""
    if not pages_dir.exists():
        return []
    pages = []
    for path in sorted(pages_dir.glob("*.md"), key=lambda p: p.name):
        meta, body = split_front_matter(read_source(path), path, required=False)
        title, body = extract_title(meta, body)
        pages.append(
            {
                "name": path.stem,
                "title": title,
                "description": str(meta.get("metaDescription") or ""),
                "content": render_markdown(body),
            }
        )
    return pages


def build_pages(base_template: str, output_dir: Path, pages: list[dict], nav: str, args: object) -> None:
    for page in pages:
        content = (
            '<article class="page">'
            f'<h1 class="page-title">{html.escape(page["title"])}</h1>'
            f'<div class="page-body">{page["content"]}</div>'
            "</article>"
        )
        html_doc = render_page(
            base_template,
            args,
            nav,
            title=f"{page['title']} · {args.site_name}",
            content=content,
            description=page["description"],
        )
        write_output(output_dir, f"{page['name']}.html", html_doc)


def build_404(base_template: str, output_dir: Path, nav: str, args: object) -> None:
    older_posts_url = (getattr(args, "older_posts_url", "") or "").strip()
    hint = ""
    if older_posts_url:
        hint = (
            "<p>If you landed here you might be looking for an older post, "
            f'which live on <a href="{html.escape(older_posts_url)}">{html.escape(older_posts_url)}</a>.</p>'
        )
    content = (
        '<div class="section-head">'
        "<h2>Page Not Found</h2>"
        f"{hint}"
        f'<p><a href="{ROOT}/index.html">Back to home</a></p>'
        "</div>"
    )
    html_doc = render_page(
        base_template, args, nav, title=f"Page Not Found · {args.site_name}", content=content
    )
    write_output(output_dir, "404.html", html_doc)


def build_sitemap(output_dir: Path, posts: list[Post], page_names: list[str], site_url: str) -> bool:
    if not site_url:
        return False
    urls = [(site_link(site_url), None)]
    for name in page_names:
        urls.append((site_link(site_url, name), None))
    for post in posts:
        urls.append((site_link(site_url, post.slug), post.published))
    items = []
    for url, lastmod in urls:
        lines = ["<url>", f"<loc>{html.escape(url)}</loc>"]
        if lastmod:
            lines.append(f"<lastmod>{lastmod.isoformat()}</lastmod>")
        lines.append("</url>")
        items.append("\n".join(lines))
    sitemap = "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            "\n".join(items),
            "</urlset>",
        ]
    )
    write_output(output_dir, "sitemap.xml", sitemap)
    return True


def write_pygments_css(output_dir: Path, style: str) -> None:
    write_output(output_dir, "css/pygments.css", pygments_css(style))
