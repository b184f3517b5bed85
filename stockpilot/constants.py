APP_NAME = "StockPilot"

DATA_DIR = "data"
DB_FILE_NAME = "stockpilot.db"
TABLE_COLLECTIONS = "collections"
SCHEMA_VERSION = "1"

# ---- Collection names ----
COL_PRODUCTS = "products"
COL_CLIENTS = "clients"
COL_SUPPLIERS = "suppliers"
COL_BRANDS = "brands"
COL_SALES = "sales"
COL_PURCHASES = "purchases"
COL_RECEIVABLES = "receivables"
COL_CASH_ADJUSTMENTS = "cashAdjustments"
COL_SETTINGS = "settings"

RECORD_COLLECTIONS = (
    COL_PRODUCTS,
    COL_CLIENTS,
    COL_SUPPLIERS,
    COL_BRANDS,
    COL_SALES,
    COL_PURCHASES,
    COL_RECEIVABLES,
    COL_CASH_ADJUSTMENTS,
)
ALL_COLLECTIONS = RECORD_COLLECTIONS + (COL_SETTINGS,)

# Keys used by the browser build of the app
LEGACY_COLLECTION_KEYS = {
    "cash-adjustments": COL_CASH_ADJUSTMENTS,
    "app-settings": COL_SETTINGS,
}

# ---- Payment methods (stored codes) ----
PAYMENT_CASH = "dinheiro"
PAYMENT_DEBIT = "cartao_debito"
PAYMENT_CREDIT = "cartao_credito"
PAYMENT_PIX = "pix"
PAYMENT_CREDIT_TERM = "a_prazo"

PAYMENT_METHODS = (
    PAYMENT_CASH,
    PAYMENT_DEBIT,
    PAYMENT_CREDIT,
    PAYMENT_PIX,
    PAYMENT_CREDIT_TERM,
)
PAYMENT_LABELS = {
    PAYMENT_CASH: "Cash",
    PAYMENT_DEBIT: "Debit",
    PAYMENT_CREDIT: "Credit",
    PAYMENT_PIX: "PIX",
    PAYMENT_CREDIT_TERM: "On credit",
}

# ---- Receivables ----
RECEIVABLE_PENDING = "pending"
RECEIVABLE_PAID = "paid"
CREDIT_TERM_DAYS = 30

# ---- Cash adjustments / derived transactions ----
ADJUSTMENT_ADD = "add"
ADJUSTMENT_REMOVE = "remove"
TXN_INCOME = "income"
TXN_EXPENSE = "expense"

DEFAULT_REPORT_DAYS = 30
DASHBOARD_RECENT_LIMIT = 10
