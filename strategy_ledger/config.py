"""
config.py
---------
Centralized column aliases and import constants for every broker parser.

Alias tuples are ordered: the first column holding a non-empty value wins.
"""
# --- Trade history columns ---
TRADE_SYMBOL_COLUMNS = ("Symbol",)
TRADE_DATE_COLUMNS = ("Date", "Time")
TRADE_ACTION_COLUMNS = ("Action",)
TRADE_QUANTITY_COLUMNS = ("Quantity",)
TRADE_PRICE_COLUMNS = ("Average Price", "Price")
TRADE_AMOUNT_COLUMNS = ("Value", "Amount")
TRADE_FEES_COLUMNS = ("Fees", "Commission")
TRADE_MULTIPLIER_COLUMNS = ("Multiplier",)

# --- Open position columns ---
POSITION_SYMBOL_COLUMNS = ("Symbol",)
POSITION_TYPE_COLUMNS = ("Type",)
POSITION_QUANTITY_COLUMNS = ("Quantity", "Qty")
POSITION_MARK_COLUMNS = ("Mark", "Market Value", "Current Price", "Price")
POSITION_PNL_COLUMNS = ("P/L Open", "Profit/Loss", "Unrealized P&L", "P&L")

# Broker spellings of the position type column → canonical type
POSITION_TYPE_ALIASES = {
    "STOCK": "STOCK",
    "EQUITY": "STOCK",
    "ETF": "STOCK",
    "OPTION": "OPTION",
    "EQUITY OPTION": "OPTION",
    "EQUITY_OPTION": "OPTION",
    "FUTURES_OPTION": "FUTURES_OPTION",
    "FUTURES OPTION": "FUTURES_OPTION",
    "FUTURE_OPTION": "FUTURES_OPTION",
    "FUTURE OPTION": "FUTURES_OPTION",
}
DEFAULT_POSITION_TYPE = "STOCK"

# --- Contract multipliers ---
STOCK_MULTIPLIER = 1
OPTION_MULTIPLIER = 100
# Symbols longer than this are assumed to be option contracts
OPTION_SYMBOL_MIN_LENGTH = 5

# --- OCC option code: yyMMdd + C/P + strike*1000 ---
OCC_DATE_LENGTH = 6
OCC_CODE_MIN_LENGTH = 15
OCC_STRIKE_SCALE = 1000

# --- Import hashing ---
HASH_FIELDS = ("symbol", "date", "action", "qty", "price", "amount")
HASH_PLACEHOLDER = None  # serialized as JSON null

DEFAULT_ACTION = "UNKNOWN"

# --- Strategies ---
DEFAULT_STRATEGY_STATUS = "active"

# --- Logging ---
LOG_LEVEL_ENV = "STRATEGY_LEDGER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
