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

import logging
import time

from google import genai
from google.genai import types

from models import api_config

logger = logging.getLogger(__name__)

API_KEY_LOGGING_MESSAGE = "Ran with user-specified API key"
QUERY_RESPONSE_MAX_OUTPUT_TOKENS = 4000


class GeminiInvalidResponseException(Exception):
    pass


def call_predict(
    query="The opposite of happy is",
    model="gemini-2.5-flash",
    api_key: str | None = None,
    max_output_tokens: int = QUERY_RESPONSE_MAX_OUTPUT_TOKENS,
) -> str:
    """
    Calls Gemini with a plain text prompt.

    Args:
        query (str): The prompt.
        model (str): The model to call with.
        api_key (str | None): Overrides the configured key when set.
        max_output_tokens (int): Response token limit.

    Returns:
        str: The response text, stripped of surrounding whitespace.

    Raises:
        GeminiInvalidResponseException: If the response has no text.
    """
    if not api_key:
        api_key = api_config.DEFAULT_API_KEY
    else:
        logger.info(API_KEY_LOGGING_MESSAGE)

    client = genai.Client(api_key=api_key)

    start_time = time.time()
    response = client.models.generate_content(
        model=model,
        contents=query,
        config=types.GenerateContentConfig(max_output_tokens=max_output_tokens),
    )
    logger.debug("Gemini call took %.2fs", time.time() - start_time)

    if not response.text:
        raise GeminiInvalidResponseException()
    return response.text.strip()
