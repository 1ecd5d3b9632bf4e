"""Domain constants shared by every resource."""

# List pagination
DEFAULT_LIST_LIMIT = 10
MAX_LIST_LIMIT = 100

# Field lengths
NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 1024
