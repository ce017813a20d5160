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

# Firestore collections
USERS_COLLECTION = "users"
JOBS_COLLECTION = "jobs"
JOB_APPLICATIONS_COLLECTION = "job_applications"
NOTIFICATIONS_COLLECTION = "notifications"
WITHDRAWAL_REQUESTS_COLLECTION = "withdrawalRequests"
ACCOUNTANTS_COLLECTION = "accountants"

# Firestore allows at most 500 writes in one batch.
FIRESTORE_BATCH_LIMIT = 500

# Distances are in kilometers.
EARTH_RADIUS_KM = 6371
NEARBY_JOB_RADIUS_KM = 20

# Push notifications
FCM_CHANNEL_ID = "needyou_notifications"
FCM_CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"

# Wallet
DEFAULT_PLATFORM_FEE_PERCENT = 10.0
DEFAULT_MIN_WITHDRAWAL_AMOUNT = 100.0
DEFAULT_COUNTRY_CODE = "+91"

# Razorpay amounts are in paise.
UPI_VERIFICATION_AMOUNT_PAISE = 100
UPI_VERIFICATION_CURRENCY = "INR"

# Translation
TRANSLATION_CACHE_TTL_SECONDS = 60 * 60 * 24
TRANSLATION_CACHE_MAX_ENTRIES = 1000
TRANSLATION_MAX_OUTPUT_TOKENS = 8192

# Request limits
MAX_TRANSLATION_TEXT_LENGTH = 20000
MAX_REVIEW_COMMENT_LENGTH = 1000
MAX_NEGOTIATION_MESSAGE_LENGTH = 500
MIN_PASSWORD_LENGTH = 8
MIN_ACCOUNT_NUMBER_LENGTH = 9
