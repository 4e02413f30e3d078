from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class StudioRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    language: Optional[str] = Field(default=None, max_length=64)  # translation target


class SummarizeTextRequest(StudioRequest):
    text: Optional[str] = None
    summary_language: Optional[str] = Field(default=None, alias="summaryLanguage", max_length=64)


class CountedTextRequest(StudioRequest):
    text: Optional[str] = None
    count: Any = None  # parsed and clamped per feature


class MindmapRequest(StudioRequest):
    text: Optional[str] = None


class StudyPlanRequest(StudioRequest):
    subjects: List[str] = Field(default_factory=list)
    exam_date: Optional[str] = Field(default=None, alias="examDate")
    hours_per_day: Any = Field(default=None, alias="hoursPerDay")


class MotivationRequest(StudioRequest):
    context: Optional[str] = None


class AskRequest(StudioRequest):
    mode: Optional[str] = None
    text: Optional[str] = None
    question: Optional[str] = None
    count: Any = None


class SummaryResponse(BaseModel):
    summary: str


class QuizResponse(BaseModel):
    quiz: str


class FlashcardsResponse(BaseModel):
    cards: str


class MindmapResponse(BaseModel):
    mermaid: str


class StudyPlanResponse(BaseModel):
    plan: str


class MotivationResponse(BaseModel):
    message: str


class AskResponse(BaseModel):
    answer: str
