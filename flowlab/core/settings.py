# flowlab/core/settings.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Флаг debug-режима: цветной консольный вывод логов и уровень DEBUG
    app_debug: bool = True

    # Префикс имён потоков, которые выдаёт StreamCounter ("s1", "s2", ...)
    stream_prefix: str = "s"

    # Допуск при проверке массового баланса
    mass_balance_tolerance: float = 0.01

    # Настройки pydantic-settings (v2)
    model_config = SettingsConfigDict(
        env_file=".env",              # читаем переменные из .env
        env_file_encoding="utf-8",
        extra="ignore",               # игнорируем любые лишние переменные
    )


settings = Settings()
