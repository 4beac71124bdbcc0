"""Constantes du module d'authentification."""

# --- Messages d'erreur ---
ERROR_CREDENTIALS_INVALID = "Invalid email or password"
ERROR_TOKEN_INVALID = "Not authorized, token failed"
ERROR_TOKEN_MISSING = "Not authorized, no token"
ERROR_PERMISSION_DENIED = "User role is not authorized to access this route"

# --- En-têtes HTTP ---
HEADER_WWW_AUTHENTICATE = "WWW-Authenticate"
HEADER_WWW_AUTHENTICATE_VALUE = "Bearer"
