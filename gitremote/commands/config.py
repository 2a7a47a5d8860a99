import json

import click

from ..config import load_config, save_config, get_config_path, get_default_config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        print(json.dumps({"config_path": str(get_config_path())}))
        return

    config = load_config()

    if pretty:
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(config, ensure_ascii=False))


@config_cmd.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
@click.option("--local", "use_local", is_flag=True,
              help="Default to the host git instead of a container")
def init_config(force, use_local):
    """Write a configuration file with the default settings."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        raise click.ClickException(
            f"Configuration already exists at {config_path} (use --force to overwrite)"
        )

    config = get_default_config()
    if use_local:
        config["base"]["kind"] = "local"

    written = save_config(config, config_path)
    click.echo(f"Configuration written to {written}")
