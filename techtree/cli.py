"""CLI entrypoint for techtree."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .errors import TechTreeError
from .loader import find_topics
from .models import Direction, SizeVariant
from .workspace import Workspace


class TechTreeGroup(click.Group):
    """Turns engine errors into clean CLI failures."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except TechTreeError as e:
            raise click.ClickException(str(e)) from e
        except FileNotFoundError as e:
            raise click.ClickException(f"File not found: {e.filename or e}") from e


@click.group(cls=TechTreeGroup)
@click.version_option(__version__, prog_name="techtree")
@click.option(
    "--topics",
    "-t",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Topics file or notes directory (defaults to auto-detected topics.yml / topics/)",
)
@click.option(
    "--progress",
    "-p",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Progress file (defaults to .techtree/progress.json next to the topics)",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Engine config (defaults to techtree.toml next to the topics)",
)
@click.option("--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    topics: Path | None,
    progress: Path | None,
    config: Path | None,
    verbose: bool,
) -> None:
    """techtree - Unlock, path and layout engine for a skill tech tree."""
    ctx.ensure_object(dict)

    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )

    if topics is None:
        topics = find_topics(Path.cwd())
        if topics is None:
            raise click.ClickException("Topics not found. Pass --topics /path/to/topics.yml or run from inside the tree.")

    if not topics.exists():
        raise click.BadParameter(f"Path '{topics}' does not exist.", param_hint="--topics / -t")

    ctx.obj["workspace"] = Workspace.resolve(topics, progress, config)


@cli.command()
@click.option("--cluster", type=str, default=None, help="Only show one cluster")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "md", "json"]),
    default="rich",
    show_default=True,
    help="Output format",
)
@click.pass_context
def status(ctx: click.Context, cluster: str | None, fmt: str) -> None:
    """Show topic statuses and cluster completion."""
    from .commands.status_cmd import run_status

    sys.exit(run_status(ctx.obj["workspace"], cluster=cluster, fmt=fmt))


@cli.command()
@click.argument("topic_id")
@click.pass_context
def complete(ctx: click.Context, topic_id: str) -> None:
    """Toggle completion of a topic (awards or removes its XP)."""
    from .commands.progress_cmd import run_complete

    sys.exit(run_complete(ctx.obj["workspace"], topic_id))


@cli.command()
@click.argument("topic_id")
@click.pass_context
def review(ctx: click.Context, topic_id: str) -> None:
    """Toggle the review flag of a topic."""
    from .commands.progress_cmd import run_review

    sys.exit(run_review(ctx.obj["workspace"], topic_id))


@cli.command()
@click.argument("topic_id")
@click.argument("text")
@click.pass_context
def note(ctx: click.Context, topic_id: str, text: str) -> None:
    """Attach a note to a topic."""
    from .commands.progress_cmd import run_note

    sys.exit(run_note(ctx.obj["workspace"], topic_id, text))


@cli.command()
@click.argument("goal_id")
@click.option("--format", "fmt", type=click.Choice(["rich", "json"]), default="rich", show_default=True)
@click.pass_context
def goal(ctx: click.Context, goal_id: str, fmt: str) -> None:
    """Show everything required to reach a goal topic."""
    from .commands.goal_cmd import run_goal

    sys.exit(run_goal(ctx.obj["workspace"], goal_id, fmt=fmt))


@cli.command()
@click.argument("from_id")
@click.argument("to_id")
@click.pass_context
def path(ctx: click.Context, from_id: str, to_id: str) -> None:
    """Shortest dependency route from one topic to another."""
    from .commands.goal_cmd import run_path

    sys.exit(run_path(ctx.obj["workspace"], from_id, to_id))


@cli.command()
@click.option(
    "--direction",
    type=click.Choice([d.value for d in Direction]),
    default=None,
    help="Rank direction (defaults to config)",
)
@click.option(
    "--size",
    "size_variant",
    type=click.Choice([s.value for s in SizeVariant]),
    default=None,
    help="Box size variant (defaults to config)",
)
@click.option("--focus-cluster", type=str, default=None, help="Lay out one cluster and its direct neighbours")
@click.option("--highlight", type=str, default=None, help="Highlight edges around this topic")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "svg", "html", "dot"]),
    default="json",
    show_default=True,
    help="Output format",
)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
@click.pass_context
def layout(
    ctx: click.Context,
    direction: str | None,
    size_variant: str | None,
    focus_cluster: str | None,
    highlight: str | None,
    fmt: str,
    out: Path | None,
) -> None:
    """Compute node positions and cluster boundaries."""
    from .commands.layout_cmd import run_layout

    exit_code = run_layout(
        ctx.obj["workspace"],
        direction=direction,
        size_variant=size_variant,
        focus_cluster=focus_cluster,
        highlight=highlight,
        fmt=fmt,
        out=out,
    )
    sys.exit(exit_code)


@cli.command("export")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
@click.pass_context
def export_cmd(ctx: click.Context, out: Path | None) -> None:
    """Export topics as a versioned JSON panel."""
    from .commands.panel_cmd import run_export

    sys.exit(run_export(ctx.obj["workspace"], out=out))


@cli.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Topics file to write")
@click.option("--dry-run", is_flag=True, help="Validate only")
@click.pass_context
def import_cmd(ctx: click.Context, source: Path, out: Path | None, dry_run: bool) -> None:
    """Validate a JSON panel and write it as the topics file."""
    from .commands.panel_cmd import run_import

    sys.exit(run_import(ctx.obj["workspace"], source, out=out, dry_run=dry_run))


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["rich", "json"]), default="rich", show_default=True)
@click.pass_context
def cycles(ctx: click.Context, fmt: str) -> None:
    """Report dependency cycles and unknown dependencies."""
    from .commands.cycles_cmd import run_cycles

    sys.exit(run_cycles(ctx.obj["workspace"], fmt=fmt))


@cli.command()
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("techtree.html"),
    show_default=True,
    help="File rewritten after each change",
)
@click.option("--format", "fmt", type=click.Choice(["json", "svg", "html", "dot"]), default="html", show_default=True)
@click.option("--debounce", type=float, default=0.3, show_default=True, help="Quiet period in seconds")
@click.pass_context
def watch(ctx: click.Context, out: Path, fmt: str, debounce: float) -> None:
    """Re-render the layout whenever the topics change.

    Runs until interrupted (Ctrl+C).
    """
    from .commands.watch_cmd import run_watch

    run_watch(ctx.obj["workspace"], out, fmt=fmt, debounce=debounce)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
