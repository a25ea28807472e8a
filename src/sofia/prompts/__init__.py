"""Persona prompt templates.

Templates are plain text files with ``str.format`` placeholders. A file of
the same name in ``$SOFIA_PROMPTS_DIR`` or ``./prompts`` replaces the
packaged one, so the persona can be tuned without reinstalling.
"""

import os
from functools import lru_cache
from pathlib import Path

from loguru import logger

from ..translations import Language

PACKAGE_DIR = Path(__file__).parent
PROMPTS_DIR_ENV = "SOFIA_PROMPTS_DIR"


def search_path() -> list[Path]:
    """Directories searched for templates, highest priority first."""
    dirs = []
    override = os.getenv(PROMPTS_DIR_ENV)
    if override:
        dirs.append(Path(override).expanduser())
    dirs.append(Path.cwd() / "prompts")
    dirs.append(PACKAGE_DIR)
    return dirs


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Read the template ``name``.txt from the first directory holding it.

    Raises:
        FileNotFoundError: Listing every location tried
    """
    candidates = [directory / f"{name}.txt" for directory in search_path()]
    for path in candidates:
        if path.is_file():
            logger.debug(f"Using prompt template {path}")
            return path.read_text(encoding="utf-8")

    tried = ", ".join(str(path) for path in candidates)
    raise FileNotFoundError(f"Prompt template '{name}.txt' not found (tried {tried})")


def get_system_instruction(language: Language) -> str:
    """Sofia persona, told to answer in ``language``."""
    return load_prompt("system").format(language=language.display_name)


def clear_cache() -> None:
    load_prompt.cache_clear()


__all__ = [
    "PROMPTS_DIR_ENV",
    "clear_cache",
    "get_system_instruction",
    "load_prompt",
    "search_path",
]
