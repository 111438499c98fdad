"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

DEFAULT_SESSION_TTL = 14 * 86400


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, secret_key="s3cr3t")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 1
    request_timeout: float = 10.0
    keep_alive_timeout: float = 5.0

    # Sessions
    secret_key: str = ""  # Required once a handler touches the session
    session_name: str = "_session"
    session_ttl: int = DEFAULT_SESSION_TTL

    # Logging
    log_hits: bool = True
