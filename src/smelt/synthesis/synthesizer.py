"""
Synthesizer: applies named prompts to a transcript.

Prompts are applied strictly one after another, each as an independent
gateway call, to stay inside provider rate limits and keep cost predictable.
The first failing prompt aborts the whole run.
"""

from collections.abc import Sequence

from smelt.llm.gateway import CompletionGateway
from smelt.models.llm import CompletionOptions, Message
from smelt.models.synthesis import (
    MultiPromptSynthesis,
    PromptSpec,
    SynthesisResult,
    TranscriptSection,
)
from smelt.utils.errors import SynthesisError
from smelt.utils.logging import get_logger

logger = get_logger(__name__)

SECTION_DIVIDER = "\n\n---\n\n"
SYNTHESIS_TEMPERATURE = 0.3
SYNTHESIS_MAX_TOKENS = 8192


def format_combined_results(results: Sequence[SynthesisResult]) -> str:
    """
    Join synthesis results into one document.

    A single result is returned verbatim; several are separated by a horizontal
    rule in application order.
    """
    if not results:
        return ""
    if len(results) == 1:
        return results[0].content
    return SECTION_DIVIDER.join(result.content for result in results)


def combine_transcripts(sections: Sequence[TranscriptSection]) -> str:
    """
    Combine per-file transcripts for combined mode.

    Each section gets a filename heading when there is more than one file.
    """
    if not sections:
        return ""
    if len(sections) == 1:
        return sections[0].transcript
    return SECTION_DIVIDER.join(
        f"## {section.filename}\n\n{section.transcript}" for section in sections
    )


def create_basic_output(transcript: str, filename: str) -> str:
    """Wrap a transcript with a heading when no prompts were selected."""
    return f"# Transcript: {filename}\n\n{transcript}"


class Synthesizer:
    """
    Applies prompts to transcripts through the completion gateway.

    Never lets a raw gateway error escape: every failure is re-attributed to the
    prompt that caused it.
    """

    def __init__(self, gateway: CompletionGateway) -> None:
        self.gateway = gateway

    async def synthesize_with_prompt(
        self,
        transcript: str,
        prompt_body: str,
        prompt_name: str,
        options: CompletionOptions | None = None,
    ) -> SynthesisResult:
        """
        Apply one prompt to the transcript.

        Args:
            transcript: Content to process
            prompt_body: Instruction body sent as the system message
            prompt_name: Display name used for attribution
            options: Optional model and credential overrides

        Returns:
            SynthesisResult for this prompt

        Raises:
            SynthesisError: If the underlying completion fails for any reason
        """
        messages = [
            Message(role="system", content=prompt_body),
            Message(role="user", content=f"Here is the content to process:\n\n{transcript}"),
        ]
        call_options = (options or CompletionOptions()).model_copy(
            update={"temperature": SYNTHESIS_TEMPERATURE, "max_tokens": SYNTHESIS_MAX_TOKENS}
        )

        try:
            result = await self.gateway.create_completion(messages, call_options)
        except Exception as exc:
            logger.error(
                f'Error applying prompt "{prompt_name}"',
                extra={
                    "prompt_name": prompt_name,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            raise SynthesisError(prompt_name) from exc

        return SynthesisResult(prompt_name=prompt_name, content=result.content, model=result.model)

    async def synthesize_with_multiple_prompts(
        self,
        transcript: str,
        prompts: Sequence[PromptSpec],
        options: CompletionOptions | None = None,
    ) -> MultiPromptSynthesis:
        """
        Apply prompts in input order and combine their outputs.

        With no prompts the transcript is returned unchanged and no call is made.
        Prompt i+1 starts only after prompt i's result has been captured.

        Raises:
            SynthesisError: For the first prompt that fails; no partial document
        """
        if not prompts:
            return MultiPromptSynthesis(combined=transcript, results=[])

        logger.info(
            "Synthesizing transcript",
            extra={"prompt_count": len(prompts), "transcript_chars": len(transcript)},
        )

        results: list[SynthesisResult] = []
        for prompt in prompts:
            result = await self.synthesize_with_prompt(transcript, prompt.content, prompt.name, options)
            results.append(result)

        return MultiPromptSynthesis(combined=format_combined_results(results), results=results)
