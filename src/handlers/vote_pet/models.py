"""Pydantic models for pet votes."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class VotePetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vote_type: Literal["up", "down"] = Field(..., alias="voteType", description='"up" or "down"')
