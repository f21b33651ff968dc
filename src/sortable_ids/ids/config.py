import os
import logging
from typing import Any
from pydantic import BaseModel, Field, model_validator

from .types import MAX_SEED

logger = logging.getLogger(__name__)


class GeneratorConfig(BaseModel):
    """
    Construction settings for a Generator.

    The seed only drives the random payload; it is not a secret and the
    payload is not meant to be unpredictable.
    """

    seed: int | None = Field(
        default=None,
        ge=0,
        le=MAX_SEED,
        description="Seed for the payload PRNG (unsigned 64-bit)",
    )

    @model_validator(mode="before")
    @classmethod
    def check_env_vars(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("seed") is None:
            env_val = os.getenv("SORTABLE_IDS_SEED")
            if env_val is not None:
                try:
                    data["seed"] = int(env_val, 0)
                except ValueError:
                    logger.warning(f"Ignoring non-integer SORTABLE_IDS_SEED: {env_val!r}")
        return data

    @model_validator(mode="after")
    def complete_config(self) -> "GeneratorConfig":
        if self.seed is None:
            self.seed = int.from_bytes(os.urandom(8), byteorder="big")
            logger.debug("No seed configured; drew one from os.urandom")
        return self
