"""
Engine Constants

Fixed limits used by the per-account decision loop. These are not user
configurable; per-account tuning lives in BotSettings.
"""

# Price history
PRICE_HISTORY_CAP = 200
MIN_PRICES_FOR_SIGNAL = 50

# Admission control
SIGNAL_COOLDOWN_SECONDS = 5 * 60
MIN_SIGNAL_CONFIDENCE = 0.5

# Position sizing
UNITS_PER_LOT = 100000  # One standard lot
MAX_LOT_SIZE = 1.0
DEFAULT_STOP_DISTANCE_PCT = 0.005  # 0.5% of price when the signal carries no stop-loss

# Signal confidences
MA_CROSSOVER_CONFIDENCE = 0.7
RSI_THRESHOLD_CONFIDENCE = 0.6

# Strategy identifiers
STRATEGY_MA_CROSSOVER = "ma_crossover"
STRATEGY_RSI = "rsi_strategy"
DEFAULT_STRATEGY = STRATEGY_MA_CROSSOVER

# Default strategy parameters (used for any key missing from strategy_params)
DEFAULT_STRATEGY_PARAMS = {
    "fast_ma": 10,
    "slow_ma": 20,
    "rsi_period": 14,
    "rsi_overbought": 70.0,
    "rsi_oversold": 30.0,
}

# Lifecycle states
BOT_STATUS_STOPPED = "stopped"
BOT_STATUS_RUNNING = "running"
BOT_STATUS_ERROR = "error"

# Trade status values
TRADE_STATUS_OPEN = "open"
TRADE_STATUS_CLOSED = "closed"
TRADE_STATUS_PENDING = "pending"

# Economic calendar impact tiers
IMPACT_HIGH = "high"
IMPACT_MEDIUM = "medium"
IMPACT_LOW = "low"

# Calendar country names -> ISO currency codes
COUNTRY_CURRENCY_MAP = {
    "United States": "USD",
    "Eurozone": "EUR",
    "Germany": "EUR",
    "France": "EUR",
    "Italy": "EUR",
    "Spain": "EUR",
    "United Kingdom": "GBP",
    "Japan": "JPY",
    "Canada": "CAD",
    "Australia": "AUD",
    "New Zealand": "NZD",
    "Switzerland": "CHF",
}
