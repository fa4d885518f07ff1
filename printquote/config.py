from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./printquote.db"
    APP_NAME: str = "PrintQuote"
    CURRENCY_SYMBOL: str = "€"

    # Quoting defaults. Editable per project, these only prefill forms
    DEFAULT_MARGIN_PCT: float = 30.0
    ELECTRICITY_PRICE_DEFAULT: float = 0.15  # €/kWh
    MAINTENANCE_COST_DEFAULT: float = 2.0    # € per print
    PRINTER_POWER_KW: float = 0.2

    class Config:
        env_file = ".env"


settings = Settings()
