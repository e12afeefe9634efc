"""Authentication glue: Bearer token validation and current-user resolution."""
