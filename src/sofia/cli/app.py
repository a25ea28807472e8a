"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from ..audio import AudioBuffer, VoiceRecorder, decode_pcm16, save_wav
from ..exceptions import CaptureError
from ..files import load_attachment
from ..llm import Language, SpeechClient
from ..session import ChatSession
from ..translations import get_strings
from .providers import get_clients, get_settings
from .rendering import render_answer, render_user, render_welcome

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="sofia",
    help="Polish accounting and business-law assistant (PL/RU) with spoken replies",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

CHAT_HELP = """[dim]Commands:
  /attach PATH   attach a document to the next message
  /detach        drop the pending attachment
  /record        record a voice message (Enter to stop)
  /lang pl|ru    switch answer language
  /listen        read the last answer aloud
  /help          show this help
  exit, quit, q  leave[/dim]"""


async def _synthesize(speech_client: SpeechClient, text: str) -> AudioBuffer | None:
    pcm = await speech_client.synthesize(text)
    if pcm is None:
        return None
    return decode_pcm16(pcm, speech_client.sample_rate, speech_client.channels)


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Question for the assistant"),
    lang: Language | None = typer.Option(
        None,
        "--lang",
        "-l",
        case_sensitive=False,
        help="Answer language (default: SOFIA_LANGUAGE)"
    ),
    file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="Document to attach"
    ),
    speak: bool = typer.Option(
        False,
        "--speak",
        "-s",
        help="Read the answer aloud"
    ),
    save_audio: Path | None = typer.Option(
        None,
        "--save-audio",
        help="Write the spoken answer to a WAV file (instead of --speak)"
    )
):
    """Ask a single question, optionally with an attached document."""
    if speak and save_audio is not None:
        raise typer.BadParameter("cannot be combined with --save-audio", param_hint="'--speak'")

    async def _ask():
        settings = get_settings(console)
        chat_client, speech_client = get_clients(settings)
        session = ChatSession(chat_client, speech_client, language=lang or settings.language)

        async with chat_client, speech_client:
            if file is not None:
                session.attach(load_attachment(file))

            with console.status(f"[dim]{session.strings.summarizing}[/dim]"):
                answer = await session.submit(prompt)

            if answer is None:
                console.print("[yellow]Nothing to send[/yellow]")
                raise typer.Exit(code=1)
            console.print(render_user(session.messages[0]))
            console.print(render_answer(answer, session.strings))

            if save_audio is not None:
                buffer = await _synthesize(speech_client, answer.content)
                if buffer is not None:
                    save_wav(buffer, save_audio)
                    console.print(f"[green]Saved audio to {save_audio}[/green]")
            elif speak:
                await session.speak(answer.content)

    asyncio.run(_ask())


@app.command()
def speak(
    text: str = typer.Argument(..., help="Text to read aloud"),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write a WAV file instead of playing"
    )
):
    """Synthesize speech for a piece of text."""
    async def _speak():
        settings = get_settings(console)
        chat_client, speech_client = get_clients(settings)

        async with chat_client, speech_client:
            if output is None:
                session = ChatSession(chat_client, speech_client, language=settings.language)
                buffer = await session.speak(text)
            else:
                buffer = await _synthesize(speech_client, text)
                if buffer is not None:
                    save_wav(buffer, output)

        if buffer is None:
            console.print("[yellow]No audio was produced[/yellow]")
            raise typer.Exit(code=1)
        if output is not None:
            console.print(f"[green]Saved {buffer.duration:.1f}s of audio to {output}[/green]")

    asyncio.run(_speak())


async def _record(session: ChatSession) -> str | None:
    """Record a voice message and attach it without sending.

    Returns:
        Draft text for the next message, or None if nothing was recorded
    """
    recorder = VoiceRecorder()
    try:
        recorder.open()
    except CaptureError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        return None

    task = asyncio.create_task(session.record_voice(recorder))
    await asyncio.to_thread(console.input, f"[red]● {session.strings.recording}[/red] ")
    recorder.stop()

    recording = await task
    if recording is None:
        console.print("[yellow]No recording captured[/yellow]")
        return None

    draft = session.strings.voice_message
    console.print(
        f"[dim]Attached {recording.name}. "
        f"Press Enter to send \"{escape(draft)}\" or type a message[/dim]"
    )
    return draft


async def _submit(session: ChatSession, text: str):
    with console.status(f"[dim]{session.strings.summarizing}[/dim]"):
        return await session.submit(text)


async def _handle_command(session: ChatSession, command: str, arg: str) -> str | None:
    """Run a slash command. Returns draft text when the command produces one."""
    if command == "/help":
        console.print(CHAT_HELP)
    elif command == "/attach":
        if not arg:
            console.print("[yellow]Usage: /attach PATH[/yellow]")
            return
        try:
            session.attach(load_attachment(Path(arg).expanduser()))
        except OSError as e:
            console.print(f"[red]Cannot attach {arg}: {e}[/red]")
            return
        console.print(f"[dim]Attached {session.attached_file.name} ({session.attached_file.mime_type})[/dim]")
    elif command == "/detach":
        session.detach()
        console.print("[dim]Attachment removed[/dim]")
    elif command == "/lang":
        try:
            session.set_language(Language(arg.upper()))
        except ValueError:
            console.print("[yellow]Usage: /lang pl|ru[/yellow]")
            return
        console.print(render_welcome(session.strings))
    elif command == "/listen":
        answer = session.last_answer
        if answer is None:
            return
        console.print(f"[dim]{session.strings.listen}...[/dim]")
        await session.speak(answer.content)
    elif command == "/record":
        return await _record(session)
    else:
        console.print(f"[yellow]Unknown command: {command}. Type /help[/yellow]")
    return None


@app.command()
def chat(
    lang: Language | None = typer.Option(
        None,
        "--lang",
        "-l",
        case_sensitive=False,
        help="Answer language (default: SOFIA_LANGUAGE)"
    )
):
    """Interactive chat with the assistant."""
    async def _chat():
        settings = get_settings(console)
        chat_client, speech_client = get_clients(settings)
        session = ChatSession(chat_client, speech_client, language=lang or settings.language)

        async with chat_client, speech_client:
            console.print(render_welcome(session.strings))
            console.print(CHAT_HELP + "\n")

            draft: str | None = None
            while True:
                try:
                    prompt = f"[bold yellow]You{' 📎' if session.attached_file else ''}:[/bold yellow] "
                    if draft:
                        prompt += f"[dim]({escape(draft)})[/dim] "
                    user_input = console.input(prompt).strip()

                    if user_input.lower() in ('exit', 'quit', 'q'):
                        console.print("[dim]Goodbye![/dim]")
                        break

                    if user_input.startswith("/"):
                        command, _, arg = user_input.partition(" ")
                        new_draft = await _handle_command(session, command.lower(), arg.strip())
                        if new_draft is not None:
                            draft = new_draft
                        if session.attached_file is None:
                            draft = None
                        continue

                    text = user_input or draft or ""
                    draft = None
                    answer = await _submit(session, text)
                    if answer is not None:
                        console.print(render_answer(answer, session.strings))

                except KeyboardInterrupt:
                    console.print("\n[dim]Goodbye![/dim]")
                    break
                except EOFError:
                    console.print("\n[dim]Goodbye![/dim]")
                    break

    asyncio.run(_chat())


@app.command()
def welcome(
    lang: Language = typer.Option(
        Language.PL,
        "--lang",
        "-l",
        case_sensitive=False,
        help="Interface language"
    )
):
    """Show the assistant's greeting and capabilities."""
    strings = get_strings(lang)
    console.print(render_welcome(strings))
    console.print(f"[dim]{strings.consultation}[/dim]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
