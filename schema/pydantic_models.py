from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any


# Pydantic models for API requests
class QueryRequest(BaseModel):
    question: str

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question should not be empty")
        return value


class QueryResponse(BaseModel):
    answer: str
    sources: List[str]


class RetrievedDocument(BaseModel):
    content: str
    metadata: Dict[str, Any]
    similarity: Optional[float] = None


class RetrieveResponse(BaseModel):
    question: str
    documents: List[RetrievedDocument]
    count: int
