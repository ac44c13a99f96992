"""
Pydantic schemas for API request validation.
"""

from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field


class StartHandRequest(BaseModel):
    """
    Request to start a hand.

    Omit ``roster`` to keep the current seats and move the button.
    """
    roster: Optional[List[str]] = Field(default=None, min_length=2, max_length=10)
    stacks: Optional[Union[List[int], Dict[str, int]]] = None
    small_blind: Optional[int] = Field(default=None, gt=0)
    big_blind: Optional[int] = Field(default=None, gt=0)
    advisory: Optional[Dict[str, Optional[str]]] = Field(
        default=None,
        description="Advisory seat ids mapped to a personality (or null)",
    )


class ActionRequest(BaseModel):
    """Request to take a game action."""
    player_id: Optional[str] = Field(default=None, description="Defaults to the participant to act")
    action_type: str = Field(..., description="Action type: FOLD, CHECK, CALL, RAISE, ALL_IN")
    amount: Optional[int] = Field(default=None, ge=0, description="Raise target for RAISE")


class AdvisoryRequest(BaseModel):
    """Request to let an advisory seat act."""
    timeout: Optional[float] = Field(default=None, gt=0, description="Seconds to wait for the decision")
