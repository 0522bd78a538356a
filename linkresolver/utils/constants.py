# Default shortcode length (URL-safe alphabet, 64 symbols => 60 bits of entropy)
DEFAULT_SHORTCODE_LENGTH = 10

# Retries for generated shortcodes colliding with existing records
DEFAULT_MAX_RETRIES = 5

# TTL in seconds of cache entries populated on a read miss (60 minutes)
DEFAULT_CACHE_TTL = 60 * 60

# Existence filter sizing
DEFAULT_FILTER_NAME = 'shortcodes'
DEFAULT_FILTER_CAPACITY = 1_000_000
DEFAULT_FILTER_ERROR_RATE = 0.01

# Redis client timeouts in seconds (applies to store, cache and filter clients)
DEFAULT_SOCKET_TIMEOUT = 2
DEFAULT_SOCKET_CONNECT_TIMEOUT = 2

# Application environment
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AppConfig: identifiers of the application, environment and configuration profile
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'

# AppConfig: local agent (SAM only)
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
