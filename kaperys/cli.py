from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import Optional

from .config import load_config
from .content import find_order_mismatch, get_all_posts
from .errors import BuildError
from .pages import (
    build_404,
    build_index,
    build_nav,
    build_pages,
    build_posts,
    build_sitemap,
    load_pages,
    write_pygments_css,
)
from .render import TEMPLATES_DIR, copy_static, load_base_template
from .utils import clean_output_dir, config_flag, write_host_files


def build_site(args: argparse.Namespace) -> int:
    """Run one generation pass and return the number of posts written."""
    posts_dir = Path(args.posts)
    pages_dir = Path(args.pages)
    static_dir = Path(args.static)
    output_dir = Path(args.output)
    templates_dir = Path(args.templates) if args.templates else TEMPLATES_DIR
    project_root = Path.cwd()

    build_workers = int(getattr(args, "build_workers", 0) or 0)
    if build_workers <= 0:
        build_workers = os.cpu_count() or 1
    build_workers = max(1, min(build_workers, 32))

    base_template = load_base_template(templates_dir)

    posts = get_all_posts(posts_dir)
    mismatch = find_order_mismatch(posts)
    if mismatch:
        newer, older = mismatch
        print(
            f"Warning: '{newer.slug}' is listed before '{older.slug}' but is older; "
            "prefix post filenames with their date to keep the newest first.",
            file=sys.stderr,
        )
    pages = load_pages(pages_dir)

    if args.clean:
        clean_output_dir(output_dir, project_root)
    output_dir.mkdir(parents=True, exist_ok=True)

    if static_dir.exists():
        copy_static(static_dir, output_dir)

    custom_domain = (args.custom_domain or "").strip()
    write_host_files(output_dir, custom_domain, args.write_nojekyll)

    site_url = (args.site_url or "").strip()
    if not site_url and custom_domain:
        site_url = f"https://{custom_domain}"
    args.site_url = site_url

    nav = build_nav(pages)
    write_pygments_css(output_dir, args.pygments_style)
    build_index(base_template, output_dir, posts, nav, args)
    build_posts(base_template, output_dir, posts, nav, args, workers=build_workers)
    build_pages(base_template, output_dir, pages, nav, args)
    if args.enable_404:
        build_404(base_template, output_dir, nav, args)
    if args.enable_sitemap:
        if not build_sitemap(output_dir, posts, [page["name"] for page in pages], site_url):
            print("Warning: no site URL configured, sitemap.xml skipped.", file=sys.stderr)
    return len(posts)


def main(argv: Optional[list[str]] = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return config_flag(config.get(key), default)

    parser = argparse.ArgumentParser(description="Build the kaperys.io static site.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--posts", default=cfg_str("posts", "posts"), help="Directory containing Markdown posts.")
    parser.add_argument("--pages", default=cfg_str("pages", "pages"), help="Directory containing standalone Markdown pages.")
    parser.add_argument("--static", default=cfg_str("static", "public"), help="Directory containing static assets.")
    parser.add_argument("--templates", default=cfg_str("templates", ""), help="Directory containing base.html (default: bundled).")
    parser.add_argument("--output", default=cfg_str("output", "out"), help="Output directory for the site.")
    parser.add_argument("--site-name", default=cfg_str("site_name", "Mike Kaperys"), help="Site title.")
    parser.add_argument(
        "--site-description",
        default=cfg_str("site_description", "Engineering leadership, software and the occasional side project."),
        help="Default meta description.",
    )
    parser.add_argument("--site-keywords", default=cfg_str("site_keywords", ""), help="Default meta keywords.")
    parser.add_argument("--intro", default=cfg_str("intro", ""), help="Intro paragraph on the home page.")
    parser.add_argument(
        "--site-url",
        default=cfg_str("site_url", ""),
        help="Public site URL used for canonical links and the sitemap.",
    )
    parser.add_argument(
        "--custom-domain",
        default=cfg_str("custom_domain", ""),
        help="Custom domain to write into CNAME.",
    )
    parser.add_argument(
        "--older-posts-url",
        default=cfg_str("older_posts_url", ""),
        help="Where older posts live, linked from the 404 page.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", True),
        help="Clean output directory before build.",
    )
    parser.add_argument(
        "--build-workers",
        default=cfg_value("build_workers", 0),
        type=int,
        help="Number of worker threads for rendering (0 = auto).",
    )
    parser.add_argument(
        "--pygments-style",
        default=cfg_str("pygments_style", "default"),
        help="Pygments style for highlighted code blocks.",
    )
    parser.add_argument(
        "--enable-sitemap",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("enable_sitemap", True),
        help="Generate sitemap.xml.",
    )
    parser.add_argument(
        "--enable-404",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("enable_404", True),
        help="Generate 404.html.",
    )
    parser.add_argument(
        "--write-nojekyll",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("write_nojekyll", True),
        help="Write .nojekyll in the output directory.",
    )
    args = parser.parse_args(argv)
    start = time.perf_counter()
    try:
        count = build_site(args)
    except BuildError as exc:
        print(f"{exc.label}: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Built {count} posts in {elapsed:.2f}s.")
    print(f"Site generated in: {args.output}")


if __name__ == "__main__":
    main()
