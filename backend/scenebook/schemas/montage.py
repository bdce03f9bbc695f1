"""
Request and response schemas for montage sequence endpoints
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SequenceFields(BaseModel):
    ie_flag: Optional[str] = None
    sl_flag: Optional[str] = None
    location: Optional[str] = None
    sub_location: Optional[str] = None
    weather: Optional[str] = None
    time: Optional[str] = None
    description: Optional[str] = None
    exp_length: Optional[int] = Field(None, description="Expected length in seconds")
    num_extras: Optional[int] = None
    notes: Optional[str] = None


class SequenceCreate(SequenceFields):
    scene_id: str
    seq_number: int = Field(..., description="Position in the scene; later sequences shift up")


class SequenceUpdate(SequenceFields):
    seq_number: Optional[int] = None


class SequenceResponse(BaseModel):
    id: str
    scene_id: str
    seq_number: int
    ie_flag: Optional[str] = None
    sl_flag: Optional[str] = None
    location: Optional[str] = None
    sub_location: Optional[str] = None
    weather: Optional[str] = None
    time: Optional[str] = None
    description: Optional[str] = None
    exp_length: Optional[int] = None
    num_extras: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MontageScene(BaseModel):
    """A montage-type scene with its sequences in order"""
    scene_id: str
    number: int
    description: Optional[str] = None
    location: Optional[str] = None
    sub_location: Optional[str] = None
    montages: List[SequenceResponse] = []
