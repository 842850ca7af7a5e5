"""Configuration for the Bellman-Ford Arbitrage Detector"""

# ============================================================
# CURRENCIES
# ============================================================
# Currencies that can be added to the exchange-rate graph
CURRENCIES = ["USD", "EUR", "JPY", "GBP", "AUD", "CAD", "CHF", "CNY"]

# Selection used when a request does not name any currencies
DEFAULT_SELECTED_CURRENCIES = ["USD", "EUR", "GBP", "JPY"]

# A graph needs at least two currencies to hold an edge
MIN_SELECTED_CURRENCIES = 2

# ============================================================
# RATE SIMULATION
# ============================================================
# Units of each currency per 1 USD
BASE_RATES = {
    "USD": 1.0,
    "EUR": 0.92,
    "JPY": 149.50,
    "GBP": 0.79,
    "AUD": 1.53,
    "CAD": 1.36,
    "CHF": 0.88,
    "CNY": 7.24,
}

# Simulated cross rates are jittered by up to +/- 2%
RATE_VARIATION = 0.02

# Injected whenever USD, EUR and GBP are all selected so the demo always
# has a profitable loop: 1.10 * 0.91 * 1.27 ~= 1.271
DEMO_ARBITRAGE_RATES = {
    ("USD", "EUR"): 1.10,
    ("EUR", "GBP"): 0.91,
    ("GBP", "USD"): 1.27,
}

# Latency of the simulated rate fetch (seconds)
SIMULATED_FETCH_DELAY = 0.5

# ============================================================
# PLAYBACK
# ============================================================
DEFAULT_PLAYBACK_SPEED = 1.0
MIN_PLAYBACK_SPEED = 0.5
MAX_PLAYBACK_SPEED = 3.0
STEP_INTERVAL_SECONDS = 1.0  # Time between steps at 1x

# ============================================================
# WEB SERVER
# ============================================================
WEB_HOST = "0.0.0.0"
WEB_PORT = 8000

# Upper bound for steps returned by one /api/run call
MAX_STEPS_PER_RUN = 100000

# ============================================================
# LOGGING
# ============================================================
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
