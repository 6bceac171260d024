"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# API
API_V1_PREFIX = "/api/v1"

# Permission matching
WILDCARD = "*"
MANAGE_ACTION = "manage"
TAB_ACTION_PREFIX = "tab:"
RESOURCE_SEPARATORS = (".", ":")
DEFAULT_PAGE_ACTION = "view"

# Role parsing
ROLE_DELIMITER_PATTERN = r"[,|]"
ADMIN_ROLE_NAMES = ("ADMIN", "ADMINISTRATOR")

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_AUTH_ID_LENGTH = 255
MAX_ROLE_STRING_LENGTH = 500
MAX_ROLE_NAME_LENGTH = 100
MAX_PERMISSION_RESOURCE_LENGTH = 100
MAX_PERMISSION_ACTION_LENGTH = 50
MAX_PERMISSION_CATEGORY_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255

# Pagination defaults
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
