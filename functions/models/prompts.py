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

LANGUAGE_DETECTION_PROMPT = """Detect the language of the following text and respond with ONLY the language name in English (e.g., "English", "Hindi", "Spanish"). Do not include any other text or explanation.

Text: "{text}\""""

TRANSLATION_PROMPT = """Translate the following text from {source_language} to {target_language}. Provide ONLY the translated text without any explanations, notes, or additional commentary. Maintain the original tone and context.

Text to translate: "{text}\""""
