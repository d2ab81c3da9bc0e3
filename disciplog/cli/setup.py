"""Setup command for disciplog CLI.

Creates the configuration file and the local database.
"""

import click
from rich.panel import Panel

from disciplog.cli.common import console, get_data_store


@click.command()
@click.option("--name", default="", help="Your display name.")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
def init(name: str, force: bool) -> None:
    """Create the configuration file and database.

    \b
    Examples:
      disciplog init
      disciplog init --name Alex
    """
    from disciplog.config import create_template_config, get_config_path, get_db_path

    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
    else:
        create_template_config(config_path, user_name=name)
        console.print(f"[green]✓ Created config at {config_path}[/green]")

    store = get_data_store()
    console.print(Panel(
        f"Database: [cyan]{get_db_path()}[/cyan]\n"
        f"Tables: {', '.join(store.get_tables())}",
        title="[bold cyan]disciplog[/bold cyan]",
        border_style="cyan",
    ))
