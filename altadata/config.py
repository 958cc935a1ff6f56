"""Shared AltaData endpoint constants.

Centralizes base URLs and transport defaults so the client and the
transport layer agree on them. Every value can be overridden per client.
"""

from __future__ import annotations

DATA_API_URL = "https://www.altadata.io/data/api/"
SUBSCRIPTION_API_URL = "https://www.altadata.io/subscription/api/subscriptions"

# Fixed on every request; the API answers JSON for this header only
ACCEPT_HEADER = {"Accept": "application/json"}
RESPONSE_FORMAT = "json"

DEFAULT_TIMEOUT = 30.0

# Limit sentinel meaning "walk every page"
UNBOUNDED = -1
