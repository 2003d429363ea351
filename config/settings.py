from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Concordium wallet-proxy (transaction history source)
    wallet_proxy_url: str = "https://wallet-proxy.mainnet.concordium.software"
    wallet_proxy_max_rps: float = 5.0
    wallet_proxy_timeout_sec: float = 15.0

    # Pagination
    page_limit: int = 100  # transactions per request
    fetch_concurrency: int = 4  # accounts drained in parallel

    # Export
    export_currency: str = "CCD"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


settings = Settings()
