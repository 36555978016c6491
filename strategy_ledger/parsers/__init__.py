# strategy_ledger.parsers package
from .base import BaseCSVNormalizer, first_value, read_csv_rows
from .currency import sanitize_currency, parse_quantity, parse_mixed_date
from .hashing import generate_import_hash
from .symbols import canonicalize_symbol, describe_option
from .actions import classify_action
from .trades import TradeCSVNormalizer, parse_trade_csv, resolve_multiplier
from .positions import PositionCSVNormalizer, parse_positions_csv
