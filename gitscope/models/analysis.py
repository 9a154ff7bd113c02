from typing import List
from pydantic import BaseModel, Field

class ImprovementSuggestions(BaseModel):
    suggestions: str = Field(..., description="Actionable suggestions to improve the user's GitHub profile, code quality and projects (Markdown)")

class ProjectSuggestions(BaseModel):
    project_suggestions: List[str] = Field(default_factory=list, description="Exactly 3 project ideas tailored to the user's skills and interests")

class MentorAnswer(BaseModel):
    answer: str = Field(..., description="Answer to the user's question about their profile, coding practices or career path (Markdown)")
