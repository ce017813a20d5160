# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================
"""Detects and translates user-generated text (job captions, chat) with Gemini."""

import logging
import time
from typing import Optional, Protocol

from models import api_config, gemini, prompts
from shared.api import CachedTranslation, TranslationResult
from shared.constants import TRANSLATION_MAX_OUTPUT_TOKENS

logger = logging.getLogger(__name__)


class Cache(Protocol):
    def get(self, key: str) -> Optional[CachedTranslation]:
        ...

    def set(self, key: str, value: CachedTranslation) -> None:
        ...


def make_cache_key(text: str, target_language: str) -> str:
    return f"{text}:{target_language}"


def detect_language(
    text: str,
    api_key: str | None = None,
    model: str = api_config.TRANSLATION_MODEL,
) -> str:
    """Returns the English name of the language `text` is written in."""
    prompt = prompts.LANGUAGE_DETECTION_PROMPT.format(text=text)
    return gemini.call_predict(
        prompt,
        model=model,
        api_key=api_key,
        max_output_tokens=TRANSLATION_MAX_OUTPUT_TOKENS,
    )


def translate_text(
    text: str,
    target_language: str,
    cache: Cache,
    api_key: str | None = None,
    model: str = api_config.TRANSLATION_MODEL,
) -> TranslationResult:
    """
    Translates `text` into `target_language`.

    The source language is detected first so it can be named in the
    translation prompt, making a cache miss cost two model calls.

    Args:
        text (str): The text to translate.
        target_language (str): Target language name, e.g. "Hindi".
        cache (Cache): Cache keyed by `text:target_language`.
        api_key (str | None): Gemini API key.
        model (str): The model to call with.

    Returns:
        TranslationResult: The translation, with `cached` set on a cache hit.
    """
    cache_key = make_cache_key(text, target_language)
    cached = cache.get(cache_key)
    if cached:
        return TranslationResult(
            translated_text=cached.translated_text,
            detected_language=cached.detected_language,
            target_language=target_language,
            cached=True,
        )

    detected_language = detect_language(text, api_key=api_key, model=model)
    prompt = prompts.TRANSLATION_PROMPT.format(
        source_language=detected_language,
        target_language=target_language,
        text=text,
    )
    translated_text = gemini.call_predict(
        prompt,
        model=model,
        api_key=api_key,
        max_output_tokens=TRANSLATION_MAX_OUTPUT_TOKENS,
    )
    logger.info("Translated %d chars %s -> %s", len(text), detected_language, target_language)

    cache.set(
        cache_key,
        CachedTranslation(
            translated_text=translated_text,
            detected_language=detected_language,
            timestamp=time.time(),
        ),
    )
    return TranslationResult(
        translated_text=translated_text,
        detected_language=detected_language,
        target_language=target_language,
        cached=False,
    )
