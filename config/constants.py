"""Global constants used across the application"""

# Permission levels. These are conventions only; comparisons elsewhere rely on
# ordering, never on a specific value.
PERMISSION_LEVEL_NONMEMBER = 0
PERMISSION_LEVEL_BLACKLISTED = 1
PERMISSION_LEVEL_STANDARD_USER = 2
PERMISSION_LEVEL_TRUSTED_USER = 3
PERMISSION_LEVEL_OPERATOR = 63
PERMISSION_LEVEL_ADMINISTRATOR = 127
PERMISSION_LEVEL_SERVER_OWNER = 254
PERMISSION_LEVEL_BACKEND_CONSOLE = 255

MIN_PERMISSION_LEVEL = 0
MAX_PERMISSION_LEVEL = 255

# Marker for inline colour formatting codes, e.g. "§a".
COLOR_CODE_SYM = '§'

GLOBAL_STORAGE_NAME = "GlobalStorageContext"
