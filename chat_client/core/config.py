# chat_client/core/config.py
# -*- coding: utf-8 -*-
"""
Assistant Chat Client — Configuration
-------------------------------------
Central configuration for the chat client, including:

- app metadata
- assistant service endpoint (base URL, paths, timeout)
- where the session state file lives
- the fixed texts the client writes into the transcript
- quick prompts / capability tags shown by the dev console

"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

# This file is: <root>/chat_client/core/config.py
PACKAGE_DIR: Path = Path(__file__).resolve().parents[1]   # .../chat_client
ROOT_DIR: Path = PACKAGE_DIR.parent                       # .../<root>

STATE_DIR: Path = ROOT_DIR / "state"


DEFAULT_GREETING = (
    "Hi! I'm the seg.bio assistant. Tell me what you want to train, infer, "
    "or QC and I'll run the workflow for you."
)


# ---------------------------------------------------------------------------
# Settings model
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """
    Global configuration for the chat client.

    Instantiated once at import time as `settings`. Components take their
    values as constructor arguments, so tests never need to touch it.
    """

    model_config = SettingsConfigDict(
        env_file=ROOT_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- App basics ---------------------------------------------------------
    app_name: str = "seg.bio Assistant Chat Client"
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False

    # --- Assistant service --------------------------------------------------
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the assistant service (env: API_BASE_URL).",
    )
    query_path: str = "/chat/query"
    clear_path: str = "/chat/clear"

    # Timeout (seconds) for every HTTP call. A timeout is just another
    # transport failure for the controller.
    request_timeout_s: float = 30.0

    # --- Persistence --------------------------------------------------------
    state_path: Path = Field(
        default=STATE_DIR / "chat_state.json",
        description="JSON file holding chatMessages / chatThreadId (env: STATE_PATH).",
    )

    # --- Transcript texts ---------------------------------------------------
    greeting_text: str = DEFAULT_GREETING
    fallback_reply_text: str = "Sorry, I could not generate a response."
    error_reply_text: str = "Error contacting chatbot."
    error_banner_text: str = "Error contacting the agent. Please try again."

    # --- Dev console --------------------------------------------------------
    quick_prompts: list[str] = [
        "Train mitochondria model on my Lucchi++ data for 50 epochs and show ETA.",
        "Run inference with the latest checkpoint on slices 120-180 and send me the viewer link.",
        "Use my last QC corrections to retrain and report expected Dice improvement.",
        "Do a coarse segmentation on the uploaded H5 to check contrast before full training.",
    ]
    capability_tags: list[str] = [
        "Train",
        "Inference",
        "QC loop",
        "SLURM status",
        "Data validation",
    ]


# Single global settings instance used by the rest of the client.
settings = Settings()


if __name__ == "__main__":
    print("Assistant Chat Client — Settings self-test")
    print(f"ROOT_DIR      : {ROOT_DIR}")
    print(f"PACKAGE_DIR   : {PACKAGE_DIR}")
    print(f"Environment   : {settings.environment}")
    print(f"API base URL  : {settings.api_base_url}")
    print(f"Query / clear : {settings.query_path} / {settings.clear_path}")
    print(f"Timeout       : {settings.request_timeout_s} s")
    print(f"State path    : {settings.state_path}")
    print(f"Quick prompts : {len(settings.quick_prompts)}")
