from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    # WebSocket server settings
    WS_LISTEN_ADDR: str
    WS_PATH: str = "/ws"
    WS_PUBLIC_URL: str | None = None
    WS_SEND_TIMEOUT_SECONDS: float = 5.0

    # Logging settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = "logs/errors.log"
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]

    # Loki settings
    LOKI_ENABLED: bool = False
    LOKI_URL: str = "http://loki:3100"
    LOKI_VERSION: str = "1"

    @field_validator("WS_LISTEN_ADDR")
    @classmethod
    def validate_listen_addr(cls, value: str) -> str:
        """
        Ensure the listen address has the ``host:port`` form.

        Raises:
            ValueError: If the port part is missing or not a valid port.
        """
        host, sep, port = value.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(
                f"WS_LISTEN_ADDR must look like 'host:port', got {value!r}"
            )
        if not 0 < int(port) < 65536:
            raise ValueError(f"WS_LISTEN_ADDR port out of range: {port}")
        return value

    @property
    def listen_host(self) -> str:
        return self.WS_LISTEN_ADDR.rpartition(":")[0].strip("[]")

    @property
    def listen_port(self) -> int:
        return int(self.WS_LISTEN_ADDR.rpartition(":")[2])


app_settings = Settings()
