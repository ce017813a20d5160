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

from dataclasses import dataclass
from typing import Optional


@dataclass
class CachedTranslation:
    """A translation as stored in the translation cache."""

    translated_text: str
    detected_language: str
    timestamp: float


@dataclass
class TranslationResult:
    translated_text: str
    detected_language: str
    target_language: str
    cached: bool


@dataclass
class PaymentOrder:
    """A Razorpay order created for the ₹1 UPI verification payment."""

    order_id: str
    amount: int
    currency: str


@dataclass
class PaymentDetails:
    """Subset of a captured Razorpay payment returned to the client."""

    vpa: Optional[str]
    customer_name: Optional[str]
    email: Optional[str]
    contact: Optional[str]
    status: Optional[str]
    method: Optional[str]


@dataclass
class VpaValidation:
    success: bool
    vpa: str
    customer_name: Optional[str] = None
    error: Optional[str] = None


@dataclass
class UploadedMedia:
    """Result of an upload to the media CDN."""

    public_id: str
    secure_url: str
    resource_type: str
    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[float] = None
    thumbnail_url: Optional[str] = None
