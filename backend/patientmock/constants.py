"""Shared constants for the patient and user resources."""

# Pagination defaults
DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100
LEGACY_MAX_PAGE_SIZE = 25

# Enumerations accepted on write
GENDERS = ("MALE", "FEMALE", "OTHER")
STATUSES = ("ACTIVE", "DISCHARGED", "PENDING")
DEFAULT_STATUS = "ACTIVE"

# Priority labels exposed by the list-item shape
PRIORITY_PINNED = "Pinned"
PRIORITY_NORMAL = "Normal"

# Placeholders kept for backward compatibility of the primaryPayer shape
UNKNOWN_PAYER_ID = "payer-unknown"
LEGACY_PAYER_ID = "payer-legacy"
DEFAULT_PAYER_TYPE = "Insurance"
DEFAULT_PAYER_TYPE_NAME = "Private Insurance/Self Pay"

# Bulk delete result statuses
DELETE_SUCCESS = "SUCCESS"
DELETE_NOT_FOUND = "NOT_FOUND"

# Mock data generator bounds
MIN_GENERATE_COUNT = 1
MAX_GENERATE_COUNT = 1000
DEFAULT_GENERATE_COUNT = 10
GENERATOR_IDENTITY = "admin-generator"

# Users resource pagination
USERS_DEFAULT_LIMIT = 25
USERS_MAX_LIMIT = 100
