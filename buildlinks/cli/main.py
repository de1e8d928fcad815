"""buildlinks CLI: entry-point for checking a build output directory.

Usage:
    buildlinks --help

Commands:
    check      → validate every link in a build directory
    redirects  → show which redirect rule a path resolves through
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from buildlinks.checker import run
from buildlinks.config import CheckerOptions, settings
from buildlinks.cli.rendering import render_broken_links, render_summary

app = typer.Typer(
    name="buildlinks",
    help="Find dead links in static site build output.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------
@app.command("check")
def check(
    build_dir: Path = typer.Argument(..., help="Build output directory to check."),
    external: bool = typer.Option(False, "--external/--no-external", help="Probe external URLs."),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", help="Skip links whose href contains this substring."
    ),
    include: Optional[List[str]] = typer.Option(
        None, "--include", help="Glob of documents to check (default: **/*.html)."
    ),
    timeout: int = typer.Option(
        settings.external_timeout_ms, "--timeout", help="External probe timeout in milliseconds."
    ),
    redirects: Optional[str] = typer.Option(
        None, "--redirects", help="Redirects file, relative to the build directory unless absolute."
    ),
    base: Optional[str] = typer.Option(None, "--base", help="Base URL of the deployed site."),
    fail: bool = typer.Option(True, "--fail/--no-fail", help="Exit non-zero on broken links."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show per-file progress."),
) -> None:
    """Check every link in BUILD_DIR."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = CheckerOptions(
        check_external=external,
        fail_on_broken_links=fail,
        exclude=list(exclude or []),
        external_timeout=timeout,
        verbose=verbose,
        base=base,
        redirects_file=redirects,
    )
    if include:
        options.include = list(include)

    typer.echo("🔗 Checking links...")
    try:
        result = run(build_dir, options)
    except OSError as exc:
        typer.echo(f"💥 Link checking failed: {exc}")
        raise typer.Exit(code=1 if options.fail_on_broken_links else 0)

    for line in render_summary(result, verbose=verbose):
        typer.echo(line)

    if not result.has_broken_links:
        typer.echo("🎉 No broken links found!")
        return

    typer.echo(f"❌ Found {len(result.broken_links)} broken links:")
    typer.echo(render_broken_links(result, build_dir))

    if options.fail_on_broken_links:
        raise typer.Exit(code=1)
    typer.echo(f"⚠️  Continuing with {len(result.broken_links)} broken links")


# ---------------------------------------------------------------------------
# redirects
# ---------------------------------------------------------------------------
@app.command("redirects")
def redirects_cmd(
    path: str = typer.Argument(..., help="Root-relative path, e.g. /blog/hello."),
    file: Path = typer.Option(..., "--file", help="Redirects file to load."),
) -> None:
    """Show which redirect rule PATH matches and where it leads."""
    from buildlinks.redirects import apply_redirect_rule, find_redirect_rule, load_redirects

    rules = load_redirects(file.parent, file.name)
    typer.echo(f"[redirects] Loaded {len(rules)} rule(s) from {file}")

    rule = find_redirect_rule(path, rules)
    if rule is None:
        typer.echo(f"[redirects] No rule matches {path!r}.")
        raise typer.Exit(code=1)

    destination = apply_redirect_rule(path, rule)
    typer.echo(f"[redirects] Rule   : {rule.source} {rule.destination} {rule.status}")
    typer.echo(f"[redirects] Target : {destination}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
