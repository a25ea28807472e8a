"""Client factory functions for CLI.

Centralizes creation of settings and remote clients from environment variables.
Hides configuration details from command implementations.
"""

from google import genai
from rich.console import Console

from ..config import Settings, load_settings
from ..exceptions import ConfigurationError
from ..llm import ChatClient, SpeechClient, create_chat_client, create_speech_client
from ..log import configure_logging

# Default console for output
_console = Console()


def get_settings(console: Console | None = None) -> Settings:
    """Load settings and configure logging.

    Args:
        console: Optional Rich console for output

    Returns:
        Resolved settings

    Raises:
        SystemExit: If the configuration is missing or invalid
    """
    import typer

    con = console or _console
    try:
        settings = load_settings()
    except ConfigurationError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    configure_logging(settings.log_level)
    return settings


def get_clients(settings: Settings) -> tuple[ChatClient, SpeechClient]:
    """Create chat and speech clients sharing one GenAI client.

    Args:
        settings: Resolved settings

    Returns:
        Tuple of (chat_client, speech_client)
    """
    client = genai.Client(api_key=settings.api_key)
    chat_client = create_chat_client(
        "gemini",
        api_key=settings.api_key,
        model=settings.chat_model,
        client=client
    )
    speech_client = create_speech_client(
        "gemini",
        api_key=settings.api_key,
        model=settings.tts_model,
        voice=settings.voice,
        client=client
    )
    return chat_client, speech_client
