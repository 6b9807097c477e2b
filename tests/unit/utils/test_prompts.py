"""
Unit tests for prompt loading.
"""

import pytest

from smelt.utils.errors import PromptNotFoundError
from smelt.utils.prompts import (
    CUSTOM_PROMPT_NAME,
    PROMPT_DISPLAY_NAMES,
    get_predefined_prompt,
    load_prompts,
)


class TestGetPredefinedPrompt:
    @pytest.mark.parametrize("name", sorted(PROMPT_DISPLAY_NAMES))
    def test_every_predefined_prompt_loads(self, name):
        assert get_predefined_prompt(name)

    def test_unknown_prompt(self):
        with pytest.raises(PromptNotFoundError) as exc_info:
            get_predefined_prompt("haiku")

        assert exc_info.value.message == "PREDEFINED PROMPT NOT FOUND: haiku"
        assert exc_info.value.error_code == "prompt_not_found"


class TestLoadPrompts:
    def test_display_names_in_given_order(self):
        prompts = load_prompts(["action_items", "summarize"])

        assert [p.name for p in prompts] == ["Action Items", "Summary"]

    def test_custom_prompt_comes_last(self):
        prompts = load_prompts(["qa_format"], custom_prompt="  List every date mentioned.  ")

        assert prompts[-1].name == CUSTOM_PROMPT_NAME
        assert prompts[-1].content == "List every date mentioned."

    def test_blank_custom_prompt_is_ignored(self):
        assert load_prompts([], custom_prompt="   ") == []

    def test_unknown_name_is_prompt_not_found(self):
        with pytest.raises(PromptNotFoundError) as exc_info:
            load_prompts(["summarize", "haiku"])

        assert exc_info.value.error_code == "prompt_not_found"
        assert exc_info.value.message == "PREDEFINED PROMPT NOT FOUND: haiku"
