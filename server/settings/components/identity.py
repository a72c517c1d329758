"""Bearer token authentication settings."""

from server.settings.components import config

# Absolute token lifetime in seconds (24 hours)
TOKEN_TTL = config('TOKEN_TTL', cast=int, default=86400)

# Maximum idle time between two uses of a token in seconds (1 hour)
TOKEN_ROLLING_TTL = config('TOKEN_ROLLING_TTL', cast=int, default=3600)

# Least recently used tokens are evicted past this limit
MAX_TOKENS_PER_USER = config('MAX_TOKENS_PER_USER', cast=int, default=3)

# Random bytes in a generated token (256 bits)
TOKEN_SIZE_BYTES = config('TOKEN_SIZE_BYTES', cast=int, default=32)

# Cookie read as a fallback when no Authorization header is sent
TOKEN_COOKIE_NAME = config('TOKEN_COOKIE_NAME', default='token')
