"""Constants for HTTP status messages and wizard response headers."""

# 5xx Server Errors
HTTP_500_INTERNAL_SERVER_ERROR_MESSAGE = "Internal Server Error"

# Headers written by the envelope
HTML_CONTENT_TYPE = "text/html; charset=utf-8"
FRAME_OPTIONS_HEADER = "X-Frame-Options"
FRAME_OPTIONS_DENY = "DENY"
