from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional, Union

# --- Shared Enums ---

class Importance(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class QuestionType(str, Enum):
    """Origin collection of a question, attached when the table is compiled."""
    GENERAL = "general"
    ROLE = "role"
    RESUME = "resume"

# --- Agent/LLM Extraction Models ---

class ResumeProfile(BaseModel):
    """Schema for the structured data extracted from a resume."""
    model_config = ConfigDict(frozen=True)

    technologies: str = Field(
        ...,
        description="Technologies, languages and frameworks the candidate has used."
    )
    strengths: str = Field(
        default="",
        description="Notable strengths of the candidate."
    )
    domain: str = Field(
        ...,
        description="Domain experience, e.g. frontend, backend, data."
    )
    summary: str = Field(
        ...,
        description="Short summary of the candidate's profile and projects."
    )

    @field_validator("technologies", "strengths", "domain", "summary", mode="before")
    @classmethod
    def _join_lists(cls, value: Any) -> Any:
        # Models regularly answer with arrays even when a string is declared
        if isinstance(value, (list, tuple)):
            return ", ".join(str(item) for item in value)
        return value


class MismatchNote(BaseModel):
    """Schema for the resume-to-job-description fit assessment."""
    model_config = ConfigDict(populate_by_name=True)

    mismatch_note: str = Field(
        ...,
        alias="mismatchNote",
        description="Summary of mismatch if any."
    )


class Question(BaseModel):
    """A single interview question with its scoring hints."""
    question: str = Field(..., description="The interview question text.")
    importance: Importance = Field(..., description="High, Medium or Low.")
    weightage: Union[int, float] = Field(
        ...,
        description="Relative weight of the question, intended range 1-10 (not enforced)."
    )
    type: Optional[QuestionType] = Field(
        default=None,
        description="Origin collection; absent until the table is compiled."
    )

    @field_validator("importance", mode="before")
    @classmethod
    def _normalize_importance(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class QuestionSet(BaseModel):
    """Collection wrapper for the questions produced by one agent."""
    questions: list[Question] = Field(
        ...,
        description="Generated interview questions, in the order the model returned them."
    )

# --- Final Artifact ---

class InterviewTable(BaseModel):
    """
    The terminal artifact of a pipeline run.

    Questions are the general, role and resume sets concatenated in that order,
    each tagged with the collection it came from.
    """
    role: str = Field(..., description="Job role title the table was built for.")
    note: str = Field(
        default="",
        description="Mismatch note; empty when no note is available (check failed or skipped)."
    )
    questions: list[Question] = Field(default_factory=list)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent)

# --- Completion Request Models ---

class ToolSpec(BaseModel):
    """A single named function the model may call, with JSON-Schema parameters."""
    name: str
    description: str
    parameters: dict[str, Any]

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class ChatMessage(BaseModel):
    role: str = "user"
    content: str


class CompletionRequest(BaseModel):
    """Everything needed for one round trip to the completion endpoint."""
    model: str
    messages: list[ChatMessage]
    tool: Optional[ToolSpec] = None
    seed: Optional[int] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [m.model_dump() for m in self.messages],
        }
        if self.tool is not None:
            payload["tools"] = [self.tool.to_payload()]
            payload["tool_choice"] = "auto"
        if self.seed is not None:
            payload["seed"] = self.seed
        return payload
