import json

from prompts import build_prompt, IDEA_EXAMPLE


def test_build_prompt_is_deterministic():
    assert build_prompt("hard") == build_prompt("hard")


def test_difficulty_is_interpolated_verbatim():
    prompt = build_prompt("{weird} level")
    assert "difficulty level: {weird} level." in prompt


def test_empty_difficulty_defaults_to_easy():
    assert build_prompt("") == build_prompt("easy")
    assert "difficulty level: easy." in build_prompt()


def test_prompt_embeds_example_shape():
    prompt = build_prompt("medium")
    assert prompt.startswith("You are BuildBoard")
    assert prompt.endswith(IDEA_EXAMPLE)
    example = json.loads(IDEA_EXAMPLE)
    assert set(example["idea"]) == {"title", "description", "tags"}
