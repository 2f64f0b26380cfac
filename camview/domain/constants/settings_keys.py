"""Keys of the persisted application settings store"""


class SettingsKeys:
    """Setting key constants"""
    KEEP_STREAMS_OPEN = "keep_streams_open"
    OLLAMA_HOST = "ollamaHost"
    OLLAMA_MODEL = "ollamaModel"

    # Document field names in the settings collection
    FIELD_KEY = "key"
    FIELD_VALUE = "value"

    # Keys returned by GET /settings
    PUBLIC_KEYS = (KEEP_STREAMS_OPEN, OLLAMA_HOST, OLLAMA_MODEL)

    # Seeded at startup when absent
    DEFAULTS = {KEEP_STREAMS_OPEN: "false"}


TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


def parse_bool_setting(value) -> bool:
    """Interpret a stored setting string as a boolean (missing -> False)."""
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES
