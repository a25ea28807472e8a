"""Rich renderables for the chat CLI.

Hides how messages, sources and the welcome screen are laid out.
"""

from rich.console import Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..llm.models import ChatMessage, GroundingSource
from ..translations import TranslationStrings


def render_welcome(strings: TranslationStrings) -> Panel:
    """Render the greeting with the list of capabilities."""
    lines = Text()
    lines.append(f"{strings.welcome}\n\n", style="bold")
    lines.append(f"{strings.what_i_can_do}\n", style="cyan")
    for capability in strings.capabilities:
        lines.append(f"  • {capability}\n")
    lines.append(f"\n{strings.legal_notice}", style="dim")
    return Panel(lines, title=f"Sofia · {strings.header}", border_style="cyan")


def render_sources(sources: list[GroundingSource], strings: TranslationStrings) -> Table:
    """Render grounding sources as a numbered table of links."""
    table = Table(title=strings.sources, show_header=False, box=None, title_justify="left")
    table.add_column("#", style="dim", width=3)
    table.add_column("Source")

    for i, source in enumerate(sources, 1):
        table.add_row(str(i), Text(source.title, style=f"link {source.uri} cyan"))
    return table


def render_answer(message: ChatMessage, strings: TranslationStrings) -> Panel:
    """Render an assistant message as Markdown, with its sources if any."""
    body = Markdown(message.content)
    if message.sources:
        body = Group(body, Text(""), render_sources(message.sources, strings))
    return Panel(body, title=strings.answer, title_align="left", border_style="green")


def render_user(message: ChatMessage) -> Text:
    """Render a user message, noting its attachment."""
    text = Text()
    text.append("You: ", style="bold yellow")
    text.append(message.content)
    if message.file is not None:
        text.append(f"  [{message.file.name}]", style="dim")
    return text
