import json
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from packages.aic_core.config import AICConfig
from packages.aic_core.errors import ConfigurationError


def build_async_client(config: AICConfig) -> AsyncOpenAI:
    if not config.OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY is missing. Please set it in .env file.")
    return AsyncOpenAI(api_key=config.OPENAI_API_KEY)


def clean_json_string(json_str: str) -> str:
    """
    Cleans markdown code blocks from JSON string.
    """
    if "```json" in json_str:
        json_str = json_str.split("```json")[1].split("```")[0]
    elif "```" in json_str:
        json_str = json_str.split("```")[1].split("```")[0]
    return json_str.strip()


async def chat_json(
    client: AsyncOpenAI,
    model: str,
    system_prompt: str,
    user_prompt: str,
    temperature: Optional[float] = None
) -> Dict[str, Any]:
    """Single chat completion in JSON mode, parsed into a dict."""
    kwargs = {}
    if temperature is not None:
        kwargs["temperature"] = temperature

    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ],
        response_format={"type": "json_object"},
        **kwargs
    )
    content = response.choices[0].message.content or ""
    return json.loads(clean_json_string(content))
