from pydantic import BaseModel, Field
from typing import Optional, List, Any, Dict


class GenerateIn(BaseModel):
    images: List[str] = Field(default_factory=list)
    isUrls: bool = False
    brandRefs: List[str] = Field(default_factory=list)
    category: Optional[str] = "fashion"
    note: Optional[str] = ""
    tone: Optional[str] = None
    # unknown values fall back to defaults during pre-flight
    preferences: Optional[Dict[str, Any]] = None
    brandInfo: Optional[Dict[str, Any]] = None


class CapsuleIn(BaseModel):
    aesthetic_id: Optional[str] = None
    owned_items_text: str = ""
    budget: Optional[str] = None


class ErrorOut(BaseModel):
    error: str
    message: str
    debug_id: Optional[str] = None
    retry_after: Optional[int] = None
