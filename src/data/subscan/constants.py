"""Constants for the Subscan reward crawler."""

SUBSCAN_URL_TEMPLATE = "https://{network}.api.subscan.io"

ENDPOINTS = {
    "reward_slash": "/api/scan/account/reward_slash",
}

# Subscan caps `row` at 100
PAGE_SIZE = 100

API_KEY_HEADER = "X-API-Key"

# reward_slash mixes payouts with slashes; only these event ids are payouts
REWARD_EVENT_IDS = frozenset({"Reward", "Rewarded"})
