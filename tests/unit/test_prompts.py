import pytest

from indigo_ai.core.errors import TemplateError
from indigo_ai.core.prompts import render_prompt


def test_substitutes_question_and_input(prompt_files):
    text = render_prompt(
        '- Kitchen Lights (/devices/kitchen-lights),- Porch "Front" (/devices/porch)',
        "Are the kitchen lights on?",
        "prompt3.txt",
        prompt_dir=str(prompt_files),
    )
    assert text == (
        'DEVICES: - Kitchen Lights (/devices/kitchen-lights),- Porch "Front" (/devices/porch)\n'
        "QUESTION: Are the kitchen lights on?\n"
    )


def test_literal_json_braces_survive(tmp_path):
    template = tmp_path / "select.txt"
    template.write_text('Q: {{&user_prompt}}\nAnswer like {"devicePaths": ["/devices/x"]}', encoding="utf-8")

    text = render_prompt("", "hi", str(template))

    assert text == 'Q: hi\nAnswer like {"devicePaths": ["/devices/x"]}'


def test_template_reread_every_call(tmp_path):
    template = tmp_path / "t.txt"
    template.write_text("one {{&input}}", encoding="utf-8")
    assert render_prompt("x", "q", "t.txt", prompt_dir=str(tmp_path)) == "one x"

    template.write_text("two {{&input}}", encoding="utf-8")
    assert render_prompt("x", "q", "t.txt", prompt_dir=str(tmp_path)) == "two x"


def test_missing_file(tmp_path):
    with pytest.raises(TemplateError, match="Could not read"):
        render_prompt("x", "q", "nope.txt", prompt_dir=str(tmp_path))


def test_unclosed_tag(tmp_path):
    (tmp_path / "broken.txt").write_text("Question: {{&user_prompt", encoding="utf-8")
    with pytest.raises(TemplateError, match="Invalid prompt template"):
        render_prompt("x", "q", "broken.txt", prompt_dir=str(tmp_path))


def test_misspelled_placeholder_is_rejected(tmp_path):
    (tmp_path / "camel.txt").write_text("Q {{&userPrompt}} {{&input}}", encoding="utf-8")
    with pytest.raises(TemplateError, match="userPrompt"):
        render_prompt("inventory", "Are the lights on?", "camel.txt", prompt_dir=str(tmp_path))


def test_go_style_placeholders_are_rejected(tmp_path):
    (tmp_path / "go.txt").write_text("Q {{.UserPrompt}} I {{.Input}}", encoding="utf-8")
    with pytest.raises(TemplateError, match="unknown placeholder"):
        render_prompt("inventory", "Are the lights on?", "go.txt", prompt_dir=str(tmp_path))


def test_template_without_placeholders_is_rejected(tmp_path):
    (tmp_path / "static.txt").write_text('Reply with {"devicePaths": []}', encoding="utf-8")
    with pytest.raises(TemplateError, match="placeholder"):
        render_prompt("inventory", "q", "static.txt", prompt_dir=str(tmp_path))
