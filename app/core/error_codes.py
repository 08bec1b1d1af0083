# Machine-readable error codes returned alongside HTTP error details.

# Generic
VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND_ERROR = "NOT_FOUND"
FORBIDDEN_ERROR = "FORBIDDEN"
INTERNAL_ERROR = "INTERNAL_ERROR"

# Relationships
SELF_REFERENCE = "SELF_REFERENCE"
DUPLICATE_REQUEST = "DUPLICATE_REQUEST"

# Auth
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
ACCOUNT_DEACTIVATION = "ACCOUNT_DEACTIVATED"
