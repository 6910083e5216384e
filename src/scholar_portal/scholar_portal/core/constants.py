"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import timedelta

DEFAULT_SESSION_DAYS = 7

PASSWORD_MIN_LENGTH = 8
PASSWORD_HASH_METHOD = "scrypt:32768:8:1"

RESET_TOKEN_BYTES = 32
RESET_TOKEN_TTL = timedelta(hours=1)
INITIALIZATION_CODE_BYTES = 12

CONTACT_NUMBER_MIN_LENGTH = 5

MAX_IMAGE_BYTES = 5 * 1024 * 1024

# School years run July -> June.
SCHOOL_YEAR_START_MONTH = 7

RESET_ACKNOWLEDGEMENT = "If an account with that email exists, a password reset link has been sent."
SYSTEM_ERROR_MESSAGE = "A system error occurred. Please try again later."
