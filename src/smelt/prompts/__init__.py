"""
Predefined prompt bodies.

Each ``<name>.md`` file in this directory is one predefined prompt, loaded via
``smelt.utils.prompts``.
"""
