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

import time
import uuid


def now_ms() -> int:
    """Epoch milliseconds, the timestamp format stored by the web client."""
    return int(time.time() * 1000)


def get_unique_id(prefix: str = "") -> str:
    unique = f"{now_ms()}_{uuid.uuid4().hex[:9]}"
    return f"{prefix}_{unique}" if prefix else unique


def format_amount(amount: float) -> str:
    """Formats a rupee amount with thousands separators, e.g. 1,500 or 99.50."""
    amount = float(amount)
    if amount.is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"
