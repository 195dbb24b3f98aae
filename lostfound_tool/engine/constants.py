"""
Constants for the lost-and-found matching engine.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

# Default table name
DEFAULT_TABLE_NAME = "lostfound-items"

# Matching
MATCH_DISTANCE_KM = 1.0
EARTH_RADIUS_KM = 6371.0

# Retention
RETENTION_DAYS = 90
SECONDS_PER_DAY = 86400

# DynamoDB limits
TRANSACTION_MAX_ITEMS = 100  # TransactWriteItems hard limit

# Fanout
FANOUT_MAX_WORKERS = 16

# Namespace prefixes for DynamoDB keys
PREFIX_ITEM = "item"
PREFIX_USER = "user"
PREFIX_MATCH = "match"
PREFIX_RESOLUTION = "resolution"

# DynamoDB attribute names
ATTR_PK = "PK"
ATTR_SK = "SK"
ATTR_RECORD_TYPE = "record_type"
ATTR_MATCH_KEY = "match_key"
ATTR_CREATED_AT = "created_at"
ATTR_UPDATED_AT = "updated_at"
ATTR_DEVICE_TOKENS = "device_tokens"

# Secondary index serving the candidate query (match_key, created_at)
GSI_MATCH = "GSI-1"

# Notification payloads
CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"
TITLE_MATCH_FOR_LOST = "Potential match for your lost item"
TITLE_MATCH_FOR_FOUND = "Someone may have lost what you found"
TITLE_RESOLVED = "Your item has been matched!"
