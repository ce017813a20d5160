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
"""Key conversion between Firestore (camelCase) and Python (snake_case)."""

import re
from dataclasses import asdict
from enum import Enum
from typing import Any, Literal, Type, TypeVar

from dacite import Config, from_dict

T = TypeVar("T")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def camel_to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def convert_keys(
    data: Any, direction: Literal["snake_to_camel", "camel_to_snake"]
) -> Any:
    """
    Recursively converts dictionary keys.

    Args:
        data: A dict, list or scalar value.
        direction: "snake_to_camel" or "camel_to_snake".

    Returns:
        A copy of the data with converted keys. Values are left untouched.
    """
    converter = snake_to_camel if direction == "snake_to_camel" else camel_to_snake
    if isinstance(data, dict):
        return {
            converter(key) if isinstance(key, str) else key: convert_keys(
                value, direction
            )
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [convert_keys(item, direction) for item in data]
    return data


def to_document(obj: Any, drop_none: bool = False) -> dict:
    """Serializes a dataclass into a camelCase Firestore document."""
    doc = convert_keys(asdict(obj), "snake_to_camel")
    if drop_none:
        doc = {key: value for key, value in doc.items() if value is not None}
    return doc


def from_document(data_class: Type[T], doc: dict) -> T:
    """Builds a dataclass from a camelCase Firestore document."""
    return from_dict(
        data_class=data_class,
        data=convert_keys(doc, "camel_to_snake"),
        config=Config(check_types=False, cast=[Enum, float]),
    )
