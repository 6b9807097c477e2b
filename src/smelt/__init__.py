"""
smelt: audio and text transcription with prompt-driven synthesis
"""

__version__ = "0.1.0"

from smelt.config import Settings
from smelt.llm.gateway import CompletionGateway
from smelt.pipeline.processing import SmeltProcessor, process_smelt
from smelt.realtime.job import SmeltJob
from smelt.synthesis.synthesizer import Synthesizer

__all__ = [
    "CompletionGateway",
    "Settings",
    "SmeltJob",
    "SmeltProcessor",
    "Synthesizer",
    "process_smelt",
    "__version__",
]
