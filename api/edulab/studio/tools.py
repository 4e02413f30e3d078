from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from edulab.core.gemini import LLMClient
from edulab.studio.bilingual import wrap_bilingual
from edulab.studio.prompts import MODE_TEMPERATURE, Mode, build_prompt

logger = logging.getLogger("studio")


async def run_feature(
    client: LLMClient,
    mode: Mode,
    content: str = "",
    options: Optional[Mapping[str, Any]] = None,
    language: Optional[str] = None,
) -> str:
    """
    Build the prompt for ``mode``, ask the model once, then append the
    translation directive when a target language was asked for.
    """
    prompt = build_prompt(mode, content, options)
    temperature = MODE_TEMPERATURE[mode]
    logger.info("run mode=%s content_chars=%s temperature=%s", mode.value, len(content), temperature)
    answer = await client.generate(prompt, temperature)
    return wrap_bilingual(answer, language)
