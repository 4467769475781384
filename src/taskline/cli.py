"""Command-line interface for Taskline."""

import logging
from pathlib import Path

import click
from rich.logging import RichHandler

from .config import get_config, load_config
from .engine import Engine
from .theme import get_themed_console, print_reply, show_startup_banner


def setup_logging(level: str, no_color: bool = False) -> None:
    """Send Taskline logs to stderr through rich."""
    package_logger = logging.getLogger("taskline")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = RichHandler(
        console=get_themed_console(no_color=no_color, stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


@click.group(invoke_without_command=True)
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to config file")
@click.option("--data-file", "-f", type=click.Path(dir_okay=False, path_type=Path),
              help="Task file to use instead of the configured one")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config_path, data_file, verbose):
    """Taskline - a line-oriented task list with deadlines and events."""
    ctx.ensure_object(dict)

    config = load_config(config_path) if config_path else get_config()
    setup_logging("DEBUG" if verbose else config.log_level, no_color=config.no_color)

    ctx.obj["engine"] = Engine.from_config(config, data_file)
    ctx.obj["console"] = get_themed_console(no_color=config.no_color)

    # If no command provided, start the interactive shell
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@main.command()
@click.pass_context
def shell(ctx):
    """Read commands line by line until 'bye'."""
    engine: Engine = ctx.obj["engine"]
    console = ctx.obj["console"]

    show_startup_banner(console, engine.get_greeting())
    while True:
        try:
            line = console.input("[prompt]> [/prompt]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            print_reply(console, engine.respond("bye"))
            break

        if not line.strip():
            continue

        reply = engine.respond(line)
        print_reply(console, reply)
        if reply.is_exit:
            break


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("words", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def run(ctx, words):
    """Run a single command, e.g. 'taskline run todo read book'."""
    engine: Engine = ctx.obj["engine"]
    reply = engine.respond(" ".join(words))
    print_reply(ctx.obj["console"], reply)
    if reply.is_error:
        ctx.exit(1)


if __name__ == "__main__":
    main()
