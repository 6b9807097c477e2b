"""
Smelt processing pipeline with real-time progress broadcasting.

Drives one submission through validation, transcription and synthesis, and
publishes progress, completed and failed events on the smelt's channel.

Stage percentages:
- validating: 0-10
- transcribing: 20-70
- synthesizing: 70-100
"""

from smelt.audio.validation import validate_audio_file, validate_duration
from smelt.llm.gateway import CompletionGateway
from smelt.llm.transcription import process_text_input, transcribe_audio_bytes
from smelt.models.llm import CompletionOptions
from smelt.models.smelt import (
    SmeltCompletedEvent,
    SmeltFailedEvent,
    SmeltFileProgress,
    SmeltFileStatus,
    SmeltInput,
    SmeltResult,
    SmeltSubmission,
)
from smelt.models.synthesis import PromptSpec, TranscriptSection
from smelt.realtime.broadcast import SmeltBroadcaster
from smelt.realtime.channel import ProgressPublisher
from smelt.synthesis.synthesizer import Synthesizer, combine_transcripts, create_basic_output
from smelt.utils.errors import to_smelt_error
from smelt.utils.logging import get_logger
from smelt.utils.prompts import load_prompts
from smelt.utils.request_context import reset_smelt_id, set_smelt_id

logger = get_logger(__name__)

COMBINED_RESULT_NAME = "combined"

_STATUS_PROGRESS: dict[str, int] = {
    "pending": 0,
    "processing": 50,
    "completed": 100,
    "failed": 0,
}


class FileTracker:
    """Per-input status as reported in progress events."""

    def __init__(self, inputs: list[SmeltInput]) -> None:
        self._statuses: dict[str, SmeltFileStatus] = {item.id: "pending" for item in inputs}

    def mark(self, file_id: str, status: SmeltFileStatus) -> None:
        self._statuses[file_id] = status

    def snapshot(self) -> list[SmeltFileProgress]:
        return [
            SmeltFileProgress(id=file_id, status=status, progress=_STATUS_PROGRESS[status])
            for file_id, status in self._statuses.items()
        ]


def validate_inputs(inputs: list[SmeltInput]) -> dict[str, str]:
    """
    Run the audio checks on every audio input. Text inputs need none.

    Returns:
        Normalized MIME type per audio input ID
    """
    mime_types: dict[str, str] = {}
    for item in inputs:
        if item.input_type != "audio":
            continue
        validation = validate_audio_file(
            item.mime_type or "application/octet-stream", item.filename, item.size_bytes
        )
        if item.duration_seconds is not None:
            validate_duration(item.duration_seconds)
        mime_types[item.id] = validation.mime_type
    return mime_types


class SmeltProcessor:
    """
    Runs submissions through the full pipeline.

    Holds only shared, stateless collaborators, so one processor can serve many
    smelts concurrently.
    """

    def __init__(self, gateway: CompletionGateway, publisher: ProgressPublisher) -> None:
        self.gateway = gateway
        self.publisher = publisher
        self.synthesizer = Synthesizer(gateway)

    async def _transcribe(
        self, item: SmeltInput, mime_type: str | None, options: CompletionOptions | None
    ) -> str:
        if item.input_type == "text" or mime_type is None:
            return process_text_input(item.text or "").transcript

        result = await transcribe_audio_bytes(self.gateway, item.data or b"", mime_type, options)
        return result.transcript

    async def _synthesize(
        self,
        transcript: str,
        prompts: list[PromptSpec],
        options: CompletionOptions | None,
    ) -> str:
        synthesis = await self.synthesizer.synthesize_with_multiple_prompts(transcript, prompts, options)
        return synthesis.combined

    async def process(
        self,
        submission: SmeltSubmission,
        options: CompletionOptions | None = None,
    ) -> SmeltCompletedEvent | SmeltFailedEvent:
        """
        Process one smelt end to end.

        Every outcome is published on the channel. The returned event is the
        same terminal event subscribers receive.

        Args:
            submission: Inputs, mode and prompt selection
            options: Optional model and credential overrides for LLM calls

        Returns:
            The terminal completed or failed event
        """
        token = set_smelt_id(submission.smelt_id)
        broadcaster = SmeltBroadcaster(self.publisher, submission.smelt_id)
        tracker = FileTracker(submission.inputs)
        inputs = submission.inputs
        logger.info(
            "Started processing smelt",
            extra={"mode": submission.mode, "input_count": len(inputs)},
        )

        try:
            # Stage 1: validating
            await broadcaster.progress("validating", 5, "Validating files...", tracker.snapshot())
            prompts = load_prompts(submission.default_prompt_names, submission.custom_prompt)
            mime_types = validate_inputs(inputs)
            await broadcaster.progress("validating", 10, "Files validated", tracker.snapshot())

            # Stage 2: transcribing
            sections: list[TranscriptSection] = []
            for index, item in enumerate(inputs):
                tracker.mark(item.id, "processing")
                await broadcaster.progress(
                    "transcribing",
                    20 + (index * 50) // len(inputs),
                    "Transcribing audio...",
                    tracker.snapshot(),
                )
                try:
                    transcript = await self._transcribe(item, mime_types.get(item.id), options)
                except Exception:
                    tracker.mark(item.id, "failed")
                    raise
                sections.append(TranscriptSection(filename=item.filename, transcript=transcript))
                tracker.mark(item.id, "completed")
            await broadcaster.progress("transcribing", 70, "Transcription complete", tracker.snapshot())

            # Stage 3: synthesizing
            await broadcaster.progress("synthesizing", 85, "Generating output...", tracker.snapshot())
            results: list[SmeltResult] = []
            if submission.mode == "combined":
                combined = combine_transcripts(sections)
                content = await self._synthesize(combined, prompts, options)
                results.append(SmeltResult(filename=COMBINED_RESULT_NAME, content=content))
            else:
                for item, section in zip(inputs, sections, strict=True):
                    if prompts:
                        content = await self._synthesize(section.transcript, prompts, options)
                    else:
                        content = create_basic_output(section.transcript, section.filename)
                    results.append(SmeltResult(file_id=item.id, filename=section.filename, content=content))
            await broadcaster.progress("synthesizing", 95, "Finalizing...", tracker.snapshot())

            await broadcaster.completed(results)
            logger.info("Completed smelt", extra={"result_count": len(results)})
            return SmeltCompletedEvent(smelt_id=submission.smelt_id, results=results)

        except Exception as exc:
            error = to_smelt_error(exc)
            logger.error(
                f"Error processing smelt: {error.message}",
                extra={"error_code": error.error_code, "error_type": type(exc).__name__},
                exc_info=error is not exc,
            )
            await broadcaster.failed(error.error_code, error.message)
            return SmeltFailedEvent(
                smelt_id=submission.smelt_id,
                error_code=error.error_code,
                error_message=error.message,
            )
        finally:
            broadcaster.close()
            reset_smelt_id(token)


async def process_smelt(
    submission: SmeltSubmission,
    gateway: CompletionGateway,
    publisher: ProgressPublisher,
    options: CompletionOptions | None = None,
) -> SmeltCompletedEvent | SmeltFailedEvent:
    """Process one smelt with a throwaway SmeltProcessor."""
    return await SmeltProcessor(gateway, publisher).process(submission, options)
