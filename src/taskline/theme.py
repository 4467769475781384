"""Console styling for the Taskline shell.

Replies are printed as plain text: task lines such as ``[T][ ] read book``
would otherwise be read as rich markup.
"""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

from .engine import Reply


CITY_LIGHTS_COLORS = {
    'primary': '#68D5F3',
    'success': '#8BD649',
    'warning': '#FFD93D',
    'error': '#F78C6C',
    'text_primary': '#B7C5D3',
    'text_muted': '#4F5B66',
}

TASKLINE_THEME = Theme({
    'reply': CITY_LIGHTS_COLORS['text_primary'],
    'muted': CITY_LIGHTS_COLORS['text_muted'],
    'success': f"{CITY_LIGHTS_COLORS['success']} bold",
    'warning': f"{CITY_LIGHTS_COLORS['warning']} bold",
    'error': f"{CITY_LIGHTS_COLORS['error']} bold",
    'banner': f"{CITY_LIGHTS_COLORS['primary']} bold",
    'prompt': CITY_LIGHTS_COLORS['primary'],
})


def get_themed_console(no_color: bool = False, stderr: bool = False) -> Console:
    """Create a console using the Taskline theme."""
    return Console(theme=TASKLINE_THEME, no_color=no_color, stderr=stderr, highlight=False)


def show_startup_banner(console: Console, greeting: str) -> None:
    """Show the greeting in a panel."""
    console.print(Panel(Text(greeting, style="banner"), border_style="muted", expand=False))


def reply_style(reply: Reply) -> str:
    if reply.is_error:
        return "error"
    if reply.is_exit:
        return "success"
    if "\nWarning:" in reply.text:
        return "warning"
    return "reply"


def print_reply(console: Console, reply: Reply) -> None:
    """Print a reply without interpreting markup in task text."""
    console.print(Text(reply.text, style=reply_style(reply)), soft_wrap=True)
