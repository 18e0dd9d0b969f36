#!/usr/bin/env python3
"""
trackie - a simple, private time tracking utility.
"""

from __future__ import annotations

from typing import Optional

__version__ = "0.1.0"


def build_app():
    """
    Build the Typer app lazily to keep fast-path imports light.

    Returns
    -------
    typer.Typer
        Configured Typer application for the trackie CLI.
    """
    import typer

    app = typer.Typer(
        help="A simple, private, time tracking utility.",
        no_args_is_help=True,
        add_completion=False,
    )

    @app.command("start")
    def start_cmd(
        project_name: str = typer.Argument(..., help="The name of the project."),
    ):
        """
        Starts the time tracking for a project.
        """
        from . import commands

        raise typer.Exit(code=commands.run_start(project_name))

    @app.command("stop")
    def stop_cmd():
        """
        Stops the time tracking for the current project.
        """
        from . import commands

        raise typer.Exit(code=commands.run_stop())

    @app.command("resume")
    def resume_cmd():
        """
        Resumes tracking for the most recently tracked project.
        """
        from . import commands

        raise typer.Exit(code=commands.run_resume())

    @app.command("status")
    def status_cmd(
        template: Optional[str] = typer.Option(
            None,
            "--format",
            "-f",
            help="Status format: %p project, %d start date, %t start time, %D duration.",
        ),
        fallback: Optional[str] = typer.Option(
            None,
            "--fallback",
            help="Message printed when no time is tracked.",
        ),
    ):
        """
        Shows the currently tracked project.
        """
        from . import commands

        raise typer.Exit(code=commands.run_status(template=template, fallback=fallback))

    @app.command("report")
    def report_cmd(
        days: Optional[int] = typer.Option(
            None,
            "--days",
            "-d",
            min=0,
            help="The amount of days to include in the report.",
        ),
        include_empty_days: bool = typer.Option(
            False,
            "--include-empty-days",
            "-i",
            help="Include days without logged work in the report.",
        ),
        as_json: bool = typer.Option(
            False,
            "--json",
            help="Print the report as JSON.",
        ),
        color: bool = typer.Option(
            True,
            "--color/--no-color",
            help="Colourize text output.",
        ),
    ):
        """
        Creates a report for the logged times.
        """
        from . import commands

        raise typer.Exit(
            code=commands.run_report(
                days=days,
                include_empty_days=True if include_empty_days else None,
                as_json=as_json,
                color=color,
            )
        )

    return app


def main():
    """
    Entry point for the trackie command.
    """
    app = build_app()
    app()


if __name__ == "__main__":
    main()
