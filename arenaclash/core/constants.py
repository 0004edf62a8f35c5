"""Global constants for the Arena Clash application."""

# Collection names
USERS_COLLECTION = "users"
GAMES_COLLECTION = "games"
TOURNAMENTS_COLLECTION = "tournaments"
PARTICIPANTS_COLLECTION = "participants"
TRANSACTIONS_COLLECTION = "transactions"
NOTIFICATIONS_COLLECTION = "notifications"

# User roles
ROLE_USER = "user"
ROLE_ADMIN = "admin"

# Tournament status and types
TOURNAMENT_UPCOMING = "upcoming"
TOURNAMENT_LIVE = "live"
TOURNAMENT_COMPLETED = "completed"
TOURNAMENT_STATUSES = (TOURNAMENT_UPCOMING, TOURNAMENT_LIVE, TOURNAMENT_COMPLETED)

TOURNAMENT_SCRIM = "scrim"
TOURNAMENT_CHAMPIONSHIP = "championship"
TOURNAMENT_TYPES = (TOURNAMENT_SCRIM, TOURNAMENT_CHAMPIONSHIP)

# Ledger transaction types and status
TXN_DEPOSIT = "deposit"
TXN_WITHDRAWAL = "withdrawal"
TXN_ENTRY = "entry"
TXN_PRIZE = "prize"

TXN_PENDING = "pending"
TXN_SUCCESS = "success"
TXN_FAILED = "failed"

# Dashboard limits
RECENT_TRANSACTIONS_LIMIT = 5
TRANSACTION_HISTORY_LIMIT = 50
NOTIFICATIONS_LIMIT = 10
MIN_USERNAME_LENGTH = 3

# Payment gateway
ZAPUPI_BASE_URL = "https://zapupi.com/api"
ZAPUPI_TIMEOUT_SECONDS = 15
TOPUP_REMARK = "Wallet Topup"
DEFAULT_CUSTOMER_MOBILE = "9999999999"
WEBHOOK_SIGNATURE_HEADER = "X-Webhook-Signature"
WEBHOOK_PORT = 8080
