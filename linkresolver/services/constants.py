# Log event codes of the resolution service
LINK_CREATED = 'LINK_CREATED'
LINK_RESOLVED = 'LINK_RESOLVED'
LINK_UPDATED = 'LINK_UPDATED'
LINK_DELETED = 'LINK_DELETED'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
SHORTCODE_RETRIES_EXHAUSTED = 'SHORTCODE_RETRIES_EXHAUSTED'
FILTER_REJECTED = 'FILTER_REJECTED'
FILTER_UNAVAILABLE = 'FILTER_UNAVAILABLE'
CACHE_HIT = 'CACHE_HIT'
CACHE_MISS = 'CACHE_MISS'
CACHE_UNAVAILABLE = 'CACHE_UNAVAILABLE'
STORE_UNAVAILABLE = 'STORE_UNAVAILABLE'

# Custom shortcodes: URL-safe alphabet, 1-64 characters
CUSTOM_SHORTCODE_PATTERN = r'[A-Za-z0-9_-]{1,64}'

# Longest accepted link lifetime: 100 years (365.25-day years), in seconds
MAX_LINK_TTL = 100 * 36525 * 24 * 60 * 60
