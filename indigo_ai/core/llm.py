# indigo_ai/core/llm.py
import logging
from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from indigo_ai.core.config import Settings, settings as default_settings
from indigo_ai.core.errors import CompletionError

logger = logging.getLogger(__name__)


def get_llm(settings: Optional[Settings] = None) -> ChatOpenAI:
    """
    Returns the configured Chat Model.

    Points at any OpenAI-compatible server (LLM_BASE_URL). Sampling
    parameters are fixed by configuration and retries are disabled.
    """
    settings = settings or default_settings
    return ChatOpenAI(
        model=settings.LLM_MODEL,
        base_url=settings.LLM_BASE_URL,
        api_key=settings.LLM_API_KEY,
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
        max_retries=0,
    )


def complete(prompt_text: str, llm: Optional[BaseChatModel] = None) -> str:
    """Sends one user message and returns the text of the first choice."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Prompt sent to LLM: ``` %s ```", prompt_text)
    else:
        tail = " ".join(prompt_text.split()[-10:])
        logger.info("Truncated prompt sent to LLM: ``` %s ```", tail)

    llm = llm or get_llm()
    try:
        response = llm.invoke([HumanMessage(content=prompt_text)])
    except Exception as e:
        raise CompletionError(f"ChatCompletion error: {e}") from e

    content = response.content
    if not isinstance(content, str):
        # Content blocks; keep only the text parts
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return content
