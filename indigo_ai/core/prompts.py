# indigo_ai/core/prompts.py
import logging
from pathlib import Path
from typing import Optional

from langchain_core.prompts import PromptTemplate
from langchain_core.utils.mustache import ChevronError

from indigo_ai.core.errors import TemplateError

logger = logging.getLogger(__name__)

TEMPLATE_VARIABLES = {"user_prompt", "input"}


def render_prompt(input_text: str, user_prompt: str, template_file: str, prompt_dir: Optional[str] = None) -> str:
    """
    Fills a mustache template with the user's question and the context text.

    The template is read from disk on every call so edits apply immediately.
    Use {{&user_prompt}} and {{&input}} for unescaped substitution.
    """
    path = Path(template_file)
    if prompt_dir and not path.is_absolute():
        path = Path(prompt_dir) / path

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Error reading template %s: %s", path, e)
        raise TemplateError(f"Could not read prompt template {path}: {e}") from e

    try:
        template = PromptTemplate.from_template(raw, template_format="mustache")
    except (ChevronError, ValueError, KeyError) as e:
        logger.error("Error parsing template %s: %s", path, e)
        raise TemplateError(f"Invalid prompt template {path}: {e}") from e

    # Unknown names would otherwise render as empty text
    names = set(template.input_variables)
    unknown = names - TEMPLATE_VARIABLES
    if unknown:
        logger.error("Unknown placeholders in template %s: %s", path, sorted(unknown))
        raise TemplateError(
            f"Invalid prompt template {path}: unknown placeholder(s) {sorted(unknown)}; "
            "use {{&user_prompt}} and {{&input}}"
        )
    if not names:
        raise TemplateError(
            f"Invalid prompt template {path}: "
            "no {{&user_prompt}} or {{&input}} placeholder"
        )

    try:
        return template.format(user_prompt=user_prompt, input=input_text)
    except (ChevronError, ValueError, KeyError) as e:
        logger.error("Error rendering template %s: %s", path, e)
        raise TemplateError(f"Invalid prompt template {path}: {e}") from e
