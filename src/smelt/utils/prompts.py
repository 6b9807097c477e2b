"""
Prompt loading utilities.

Predefined prompts are markdown files in the ``smelt/prompts`` package
directory, cached in memory after the first read.
"""

from collections.abc import Sequence
from pathlib import Path

from smelt.models.synthesis import PromptSpec
from smelt.utils.errors import PromptNotFoundError
from smelt.utils.logging import get_logger

logger = get_logger(__name__)

# Prompts directory within the package
PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

PROMPT_DISPLAY_NAMES: dict[str, str] = {
    "summarize": "Summary",
    "action_items": "Action Items",
    "detailed_notes": "Detailed Notes",
    "qa_format": "Q&A Format",
    "table_of_contents": "Table of Contents",
}

CUSTOM_PROMPT_NAME = "Custom Prompt"

_prompt_cache: dict[str, str] = {}


def get_predefined_prompt(name: str) -> str:
    """
    Load a predefined prompt body by name.

    Args:
        name: Prompt identifier, e.g. ``summarize``

    Returns:
        Prompt body

    Raises:
        PromptNotFoundError: If the name is unknown or its file is missing
    """
    cached = _prompt_cache.get(name)
    if cached is not None:
        return cached

    if name not in PROMPT_DISPLAY_NAMES:
        raise PromptNotFoundError(f"PREDEFINED PROMPT NOT FOUND: {name}")

    prompt_file = PROMPTS_DIR / f"{name}.md"
    try:
        body = prompt_file.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        logger.error(f"Prompt file {prompt_file} not found")
        raise PromptNotFoundError(f"PREDEFINED PROMPT NOT FOUND: {name}") from None

    logger.info(f"Loaded prompt {name} from {prompt_file}")
    _prompt_cache[name] = body
    return body


def load_prompts(names: Sequence[str], custom_prompt: str | None = None) -> list[PromptSpec]:
    """
    Resolve the prompts selected for a smelt, in application order.

    Predefined prompts come first in the order given, then the custom prompt.
    """
    prompts: list[PromptSpec] = []
    for name in names:
        body = get_predefined_prompt(name)
        prompts.append(PromptSpec(name=PROMPT_DISPLAY_NAMES[name], content=body))
    if custom_prompt and custom_prompt.strip():
        prompts.append(PromptSpec(name=CUSTOM_PROMPT_NAME, content=custom_prompt.strip()))
    return prompts
