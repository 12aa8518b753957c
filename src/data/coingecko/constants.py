"""Constants for the CoinGecko price feed."""

COINGECKO_URL = "https://api.coingecko.com/api/v3"

ENDPOINTS = {
    "history": "/coins/{coin_id}/history",
}

# CoinGecko coin ids per network
COIN_IDS = {
    "polkadot": "polkadot",
    "kusama": "kusama",
}

HISTORY_DATE_FORMAT = "%d-%m-%Y"

API_KEY_HEADER = "x-cg-demo-api-key"
