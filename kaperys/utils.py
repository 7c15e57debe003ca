from __future__ import annotations

import shutil
from pathlib import Path

from .errors import UnsafeOutputDir

TRUE_WORDS = {"1", "true", "yes", "y", "on"}


def config_flag(value: object, default: bool) -> bool:
    """Read an on/off setting from the config file.

    TOML and YAML hand over real booleans; JSON and hand-edited files may
    use strings or numbers instead.
    """
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in TRUE_WORDS
    return bool(value)


def site_link(site_url: str, route: str = "") -> str:
    """Absolute URL of a route, without the ``.html`` suffix (``/trust``)."""
    base = site_url.rstrip("/")
    route = route.strip("/")
    return f"{base}/{route}" if route else f"{base}/"


def write_host_files(output_dir: Path, custom_domain: str, nojekyll: bool) -> None:
    """GitHub Pages housekeeping: CNAME for the custom domain and .nojekyll."""
    if custom_domain:
        (output_dir / "CNAME").write_text(f"{custom_domain}\n", encoding="utf-8")
    if nojekyll:
        (output_dir / ".nojekyll").write_text("", encoding="utf-8")


def clean_output_dir(output_dir: Path, project_root: Path) -> None:
    if not output_dir.exists():
        return
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved:
        raise UnsafeOutputDir(output_dir, "refusing to clean the project root")
    if not output_resolved.is_relative_to(root_resolved):
        raise UnsafeOutputDir(output_dir, "refusing to clean a directory outside the project root")
    shutil.rmtree(output_dir)
