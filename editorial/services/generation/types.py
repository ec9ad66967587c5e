from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from editorial.core.errors import ErrorKind, is_retryable

ReferenceMode = Literal["visual-only", "brands-only", "both"]


class Preferences(BaseModel):
    occasion: str = "casual"
    priceRange: str = "misturar"
    region: str = "brasil"
    fragranceIntensity: str = "medio"


class BrandInfo(BaseModel):
    name: str = ""
    category: str = ""
    objective: str = ""


class GenerationRequest(BaseModel):
    """Which references steer one generation, plus context that only feeds the prompt."""

    variant: str = "editorial"
    visual: List[str] = Field(default_factory=list)
    is_urls: bool = False
    brand_names: List[str] = Field(default_factory=list)
    category: str = "fashion"
    tone: Optional[str] = None
    note: str = ""
    preferences: Preferences = Field(default_factory=Preferences)
    brand_info: Optional[BrandInfo] = None
    # capsule variant: owned pieces after normalization stand in for references
    items: List[str] = Field(default_factory=list)
    aesthetic_id: Optional[str] = None
    budget: Optional[str] = None

    @property
    def mode(self) -> Optional[ReferenceMode]:
        if self.visual and self.brand_names:
            return "both"
        if self.visual:
            return "visual-only"
        if self.brand_names:
            return "brands-only"
        return None


class Success(BaseModel):
    ok: Literal[True] = True
    payload: Dict[str, Any]


class Failure(BaseModel):
    ok: Literal[False] = False
    kind: ErrorKind
    message: str
    debug_id: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def retryable(self) -> bool:
        return is_retryable(self.kind)


GenerationOutcome = Union[Success, Failure]
