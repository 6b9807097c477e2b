"""
End-to-end smelt processing.
"""

from smelt.pipeline.processing import SmeltProcessor, process_smelt

__all__ = ["SmeltProcessor", "process_smelt"]
