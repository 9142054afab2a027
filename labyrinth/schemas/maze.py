"""Maze schemas for request/response validation."""

from pydantic import BaseModel, Field

from labyrinth.core import Survey


class SurveyModel(BaseModel):
    """Schema for the walls around a room. True means wall."""

    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    @classmethod
    def from_survey(cls, survey: Survey) -> "SurveyModel":
        return cls(**survey.to_dict())

    def to_survey(self) -> Survey:
        return Survey(top=self.top, right=self.right, bottom=self.bottom, left=self.left)


class Reply(BaseModel):
    """Schema for every awake/move/discover response."""

    survey: SurveyModel = Field(default_factory=SurveyModel)
    victory: bool = False
    message: str = ""
    error: bool = False


class SessionStats(BaseModel):
    """Schema for the aggregate result returned by /done."""

    session_count: int
    average_steps: int

