"""Global constants for the rushx application."""

# Collection names
USERS_COLLECTION = "users"
TOURNAMENTS_COLLECTION = "tournaments"
ENROLLMENTS_COLLECTION = "tournament_enrollments"
TEAMS_COLLECTION = "tournament_teams"
TEAM_MEMBERS_COLLECTION = "team_members"
REFERRAL_CODES_COLLECTION = "referral_codes"
REFERRAL_USAGE_COLLECTION = "referral_usage"
REFERRAL_EARNINGS_COLLECTION = "referral_earnings"
NOTIFICATIONS_COLLECTION = "notifications"

# Tournament lifecycle
TOURNAMENT_UPCOMING = "upcoming"
TOURNAMENT_ONGOING = "ongoing"
TOURNAMENT_COMPLETED = "completed"

# Enrollment payment review
PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_REJECTED = "rejected"

# Team membership
ROLE_OWNER = "owner"
ROLE_MEMBER = "member"
MEMBER_PENDING = "pending"
MEMBER_ACCEPTED = "accepted"
PRIVACY_OPEN = "open"
PRIVACY_CLOSED = "closed"
TEAM_PRIVACY_CHOICES = (PRIVACY_OPEN, PRIVACY_CLOSED)

TEAM_NAME_MAX_LENGTH = 50
TEAM_TAG_MAX_LENGTH = 4
TEAM_DESCRIPTION_MAX_LENGTH = 500
TEAM_FILTERS = ("all", "open", "closed", "full", "available")

# Referral program
REFERRAL_CODE_LENGTH = 8
REFERRAL_CODE_MIN_LOOKUP_LENGTH = 3
REFERRAL_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
REFERRAL_DISCOUNT_PERCENTAGE = 10
REFERRAL_COMMISSION_PERCENTAGE = 10
REFERRAL_MAX_USES = 1000
EARNING_PENDING = "pending"
EARNING_SETTLED = "settled"

# Notification types
NOTIFY_INFO = "info"
NOTIFY_SUCCESS = "success"
NOTIFY_WARNING = "warning"
