#!/usr/bin/env python3
"""
CLI for CrewCost.

Usage:
    python cli.py init-db
    python cli.py serve --port 8000
    python cli.py report --project-id 1 --window 14

Commands:
    init-db   Create database tables
    serve     Start the API server
    report    Print a project's spending and budget report
"""
import click
import logging
import os

from crewcost.config import CONFIG_ENV_VAR, configure_logging, get_config, reload_config

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version='1.0.0')
@click.option('--config', 'config_path', envvar=CONFIG_ENV_VAR, help='Path to crewcost_config.yaml')
def cli(config_path):
    """CrewCost CLI.

    Manage the database, run the API server and print project reports.
    """
    # Models and services call get_config() with no argument
    if config_path:
        os.environ[CONFIG_ENV_VAR] = config_path
        reload_config()
    configure_logging(get_config())


@cli.command('init-db')
def init_db_command():
    """Create all database tables."""
    from crewcost.models import init_db

    init_db()
    click.echo(click.style('Database initialized', fg='green'))


@cli.command()
@click.option('--port', type=int, default=8000, help='Server port')
@click.option('--host', default='0.0.0.0', help='Server host')
@click.option('--reload', is_flag=True, help='Enable auto-reload')
def serve(port: int, host: str, reload: bool):
    """Start the API server.

    Example:
        python cli.py serve --port 8000 --reload
    """
    import uvicorn

    click.echo(click.style('CrewCost - API Server', fg='cyan', bold=True))
    click.echo(f"Starting server at http://{host}:{port}")
    click.echo("Press CTRL+C to stop\n")

    uvicorn.run(
        "crewcost.main:app",
        host=host,
        port=port,
        reload=reload
    )


@cli.command()
@click.option('--project-id', type=int, required=True, help='Project to report on')
@click.option('--window', type=int, default=None, help='Days in the daily series')
@click.option('--top', type=int, default=None, help='Number of categories to show')
def report(project_id: int, window, top):
    """Print a project's spending and budget report.

    Example:
        python cli.py report --project-id 1 --window 14
    """
    from crewcost.models import SessionLocal, Project
    from crewcost.domain.exceptions import DomainError
    from crewcost.domain.money import format_money
    from crewcost.domain.services import ReportService

    db = SessionLocal()
    try:
        project = db.get(Project, project_id)
        if project is None:
            raise click.ClickException(f"Project {project_id} not found")

        try:
            data = ReportService(db).project_report(project.owner_id, project_id, window, top)
        except DomainError as e:
            raise click.ClickException(e.message)

        click.echo(click.style(f'Report: {project.name}', fg='cyan', bold=True))
        click.echo(f"{'=' * 50}")
        click.echo(f"Costs recorded:     {data['cost_count']:>15}")
        click.echo(f"Total (final):      {format_money(data['total_final']):>15}")
        click.echo(f"Total (tentative):  {format_money(data['total_tentative']):>15}")
        click.echo(f"Total (all):        {format_money(data['total_all']):>15}")
        click.echo(f"Average per day:    {format_money(data['summary'].average_daily):>15}")
        click.echo(f"{'=' * 50}")

        variance = data['variance']
        click.echo("\nBudget:")
        if variance.budget is None:
            click.echo("  No budget set")
        else:
            click.echo(f"  Budget:       {format_money(variance.budget):>15}")
            click.echo(f"  Allocated:    {format_money(variance.allocated):>15}")
            click.echo(f"  Remaining:    {format_money(variance.remaining):>15}")
            if variance.percent_used is not None:
                click.echo(f"  Used:         {str(variance.percent_used) + '%':>15}")
            if variance.over_budget:
                click.echo(click.style("  Over budget!", fg='red'))

        click.echo("\nTop categories:")
        for name, amount in data['categories']:
            click.echo(f"  {name:<20} {format_money(amount):>15}")

        click.echo("\nDaily totals:")
        for day in data['daily']:
            click.echo(f"  {day.day.isoformat()}  final {format_money(day.final):>12}  "
                       f"tentative {format_money(day.tentative):>12}")
    finally:
        db.close()


if __name__ == '__main__':
    cli()
