"""
Shared LLM utilities.

Provides:
- Vision-capable chat model selection from configured API keys
- Invocation with token tracking and cost calculation
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional

from planner.core.config import get_settings

logger = logging.getLogger(__name__)


# Cost per 1M tokens (as of Jan 2025)
COST_PER_1M_TOKENS = {
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "claude-3-haiku-20240307": {"input": 0.25, "output": 1.25},
    "claude-3-5-sonnet-20241022": {"input": 3.00, "output": 15.00},
}


@dataclass
class LLMMetrics:
    """Metrics from LLM invocation."""
    model_name: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    estimated_cost_usd: float = 0.0
    execution_time_seconds: float = 0.0
    error_message: Optional[str] = None


@dataclass
class LLMResponse:
    """Response from LLM invocation with metrics."""
    content: Optional[str] = None
    metrics: LLMMetrics = field(default_factory=LLMMetrics)
    success: bool = False


def get_vision_llm():
    """
    Get a multimodal chat model based on available API keys.

    Returns:
        Tuple of (llm_instance, model_name) or (None, None) if no keys available
    """
    settings = get_settings()

    if settings.openai_api_key:
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(
            model=settings.vision_openai_model,
            api_key=settings.openai_api_key,
            temperature=0,  # transcription, not generation
            max_tokens=settings.vision_max_tokens,
        ), settings.vision_openai_model
    elif settings.anthropic_api_key:
        from langchain_anthropic import ChatAnthropic
        return ChatAnthropic(
            model=settings.vision_anthropic_model,
            api_key=settings.anthropic_api_key,
            temperature=0,
            max_tokens=settings.vision_max_tokens,
        ), settings.vision_anthropic_model
    else:
        return None, None


def calculate_cost(model_name: str, prompt_tokens: int, completion_tokens: int) -> float:
    """Calculate estimated cost in USD for token usage."""
    if model_name not in COST_PER_1M_TOKENS:
        # Default to gpt-4o pricing if unknown
        model_name = "gpt-4o"

    costs = COST_PER_1M_TOKENS[model_name]
    input_cost = (prompt_tokens / 1_000_000) * costs["input"]
    output_cost = (completion_tokens / 1_000_000) * costs["output"]
    return round(input_cost + output_cost, 6)


def estimate_tokens(text: str) -> int:
    """
    Estimate token count for text.
    Rough estimate: ~4 characters per token for English text.
    """
    if not text:
        return 0
    return len(text) // 4


def _message_text(messages: List[Any]) -> str:
    """Concatenate the text parts of chat messages, skipping images."""
    parts = []
    for message in messages:
        content = getattr(message, "content", message)
        if isinstance(content, str):
            parts.append(content)
        elif isinstance(content, list):
            for part in content:
                if isinstance(part, dict) and part.get("type") == "text":
                    parts.append(part.get("text", ""))
    return "\n".join(parts)


def invoke_llm_with_metrics(llm, messages: List[Any], model_name: str) -> LLMResponse:
    """
    Invoke LLM and return response with metrics.

    Args:
        llm: LangChain chat model instance
        messages: Chat messages to send
        model_name: Name of the model for cost calculation

    Returns:
        LLMResponse with content and metrics
    """
    metrics = LLMMetrics(model_name=model_name)
    start_time = time.time()

    try:
        response = llm.invoke(messages)
        metrics.execution_time_seconds = round(time.time() - start_time, 3)

        # Extract token usage if available
        if hasattr(response, 'response_metadata'):
            metadata = response.response_metadata or {}
            # OpenAI format
            if 'token_usage' in metadata:
                usage = metadata['token_usage']
                metrics.prompt_tokens = usage.get('prompt_tokens', 0)
                metrics.completion_tokens = usage.get('completion_tokens', 0)
                metrics.total_tokens = usage.get('total_tokens', 0)
            # Anthropic format
            elif 'usage' in metadata:
                usage = metadata['usage']
                metrics.prompt_tokens = usage.get('input_tokens', 0)
                metrics.completion_tokens = usage.get('output_tokens', 0)
                metrics.total_tokens = metrics.prompt_tokens + metrics.completion_tokens

        content = response.content
        if isinstance(content, list):
            # Anthropic may answer with a list of content blocks
            content = _message_text([response])

        # If no token info from API, estimate (text parts only)
        if metrics.total_tokens == 0:
            metrics.prompt_tokens = estimate_tokens(_message_text(messages))
            metrics.completion_tokens = estimate_tokens(content) if content else 0
            metrics.total_tokens = metrics.prompt_tokens + metrics.completion_tokens

        metrics.estimated_cost_usd = calculate_cost(
            model_name, metrics.prompt_tokens, metrics.completion_tokens
        )
        logger.info(
            f"LLM call to {model_name}: {metrics.total_tokens} tokens, "
            f"${metrics.estimated_cost_usd} in {metrics.execution_time_seconds}s"
        )

        return LLMResponse(
            content=content,
            metrics=metrics,
            success=True
        )

    except Exception as e:
        metrics.execution_time_seconds = round(time.time() - start_time, 3)
        metrics.error_message = str(e)
        logger.exception(f"LLM invocation failed: {e}")
        return LLMResponse(
            content=None,
            metrics=metrics,
            success=False
        )
