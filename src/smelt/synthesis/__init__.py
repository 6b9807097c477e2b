"""
Prompt synthesis over transcripts.
"""

from smelt.synthesis.synthesizer import (
    Synthesizer,
    combine_transcripts,
    create_basic_output,
    format_combined_results,
)

__all__ = [
    "Synthesizer",
    "combine_transcripts",
    "create_basic_output",
    "format_combined_results",
]
