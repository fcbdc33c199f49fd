"""
ClientSettings: connection settings threaded through NotebookClient.
"""

import os
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_HOST = "http://localhost:1234"


class ClientSettings(BaseModel):
    """Where the notebook server lives and how to talk to it."""

    model_config = {"frozen": True}

    host: str = DEFAULT_HOST
    timeout: Optional[float] = Field(default=None, gt=0)
    codec: Literal["dill", "json"] = "dill"

    @field_validator("host")
    @classmethod
    def _strip_host(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("host must not be empty")
        return value.removesuffix("/")

    @classmethod
    def from_env(cls, **overrides) -> "ClientSettings":
        """
        Build settings from NOTEBOOK_RPC_* environment variables.

        Args:
            **overrides: Values that win over the environment (None values are ignored)

        Returns:
            Validated settings
        """
        data = {}
        if os.environ.get("NOTEBOOK_RPC_HOST"):
            data["host"] = os.environ["NOTEBOOK_RPC_HOST"]
        if os.environ.get("NOTEBOOK_RPC_TIMEOUT"):
            data["timeout"] = float(os.environ["NOTEBOOK_RPC_TIMEOUT"])
        if os.environ.get("NOTEBOOK_RPC_CODEC"):
            data["codec"] = os.environ["NOTEBOOK_RPC_CODEC"]
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)
