from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv

DEFAULT_PORT = 3978


@dataclass(slots=True)
class Settings:
    """Central configuration loaded from environment variables."""

    luis_model_url: str
    azure_search_account: str
    azure_search_index: str
    azure_search_key: str
    port: int = DEFAULT_PORT
    ticket_submission_url: str = f"http://localhost:{DEFAULT_PORT}"
    microsoft_app_id: str = ""
    microsoft_app_password: str = ""
    http_timeout_seconds: float = 20.0
    conversation_ttl_seconds: float = 3600.0

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        env = os.environ
        missing: list[str] = []
        values: dict[str, Any] = {}

        required = {
            "luis_model_url": "LUIS_MODEL_URL",
            "azure_search_account": "AZURE_SEARCH_ACCOUNT",
            "azure_search_index": "AZURE_SEARCH_INDEX",
            "azure_search_key": "AZURE_SEARCH_KEY",
        }
        optional = {
            "microsoft_app_id": "MICROSOFT_APP_ID",
            "microsoft_app_password": "MICROSOFT_APP_PASSWORD",
        }
        numeric = {
            "http_timeout_seconds": "HTTP_TIMEOUT_SECONDS",
            "conversation_ttl_seconds": "CONVERSATION_TTL_SECONDS",
        }

        for attr, env_key in required.items():
            value = env.get(env_key)
            if value:
                values[attr] = value.strip()
            else:
                missing.append(env_key)

        if missing:
            raise RuntimeError(
                "Missing required environment variables: " + ", ".join(missing)
            )

        for attr, env_key in optional.items():
            values[attr] = env.get(env_key, "").strip()

        for attr, env_key in numeric.items():
            value = env.get(env_key)
            if value:
                try:
                    values[attr] = float(value)
                except ValueError as exc:
                    raise RuntimeError(f"{env_key} must be a number, got {value!r}") from exc

        # Same lookup order as the hosting platforms: lower-case "port" first.
        port_value = env.get("port") or env.get("PORT")
        port = int(port_value) if port_value else DEFAULT_PORT
        values["port"] = port
        values["ticket_submission_url"] = (
            env.get("TICKET_SUBMISSION_URL") or f"http://localhost:{port}"
        ).strip().rstrip("/")

        return cls(**values)


settings = Settings.from_env()
