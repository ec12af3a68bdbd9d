# tabsplit/config.py
# Defaults for the Flask app. Override with a mapping passed to create_app()
# or with TABSPLIT_* environment variables, e.g. TABSPLIT_STRICT_VALIDATION=false


class DefaultConfig:
    SETTLEMENT_TOLERANCE = "0.01"
    # False reproduces the legacy behavior of accepting splits that don't add up
    STRICT_VALIDATION = True
    CORS_ORIGINS = "*"
    LOG_LEVEL = "INFO"
