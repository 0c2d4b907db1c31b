from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SequenceRequest(BaseModel):
    sequence: Optional[str] = Field(default=None, description="Space separated swaras, e.g. \"Sa Re Ga Ma' Pa\"")


class MatchRequest(SequenceRequest):
    top_n: int = Field(default=5, description="Number of ranked matches to return (>= 0)")


class ClassifyRequest(SequenceRequest):
    tonic: Optional[str] = Field(default=None, description="Optional tonic for pitch placement (e.g. C#)")


class TokenInfo(BaseModel):
    token: str
    pitch_class: str
    midi: Optional[int] = None
    hz: Optional[float] = None


class ClassifyResponse(BaseModel):
    tokens: List[TokenInfo]
    counts: Dict[str, int]


class MatchInfo(BaseModel):
    rank: int
    entry_name: str
    combined_score: float
    exact_partial_score: float
    edit_distance_score: float
    set_overlap_score: float


class MatchResponse(BaseModel):
    sequence: Optional[str] = None
    matches: List[MatchInfo] = Field(default_factory=list)
    prefix_matches: List[str] = Field(default_factory=list)


class PrefixLabelInfo(BaseModel):
    entry_name: str
    direction: str
    label: str


class PrefixResponse(BaseModel):
    labels: List[PrefixLabelInfo] = Field(default_factory=list)


class RagaInfo(BaseModel):
    name: str
    arohana: str
    avarohana: str
    description: str = ""
    swara_types: str = ""
    thaat: str = ""
    aliases: List[str] = Field(default_factory=list)
