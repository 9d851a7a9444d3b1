"""Typed schema for the generateContent request and response bodies.

Only the fields the advisory relay reads are modelled; anything else the
service returns is ignored. A body that does not fit this shape is treated
as a failed retrieval.
"""

from pydantic import BaseModel, Field
from typing import List


class Part(BaseModel):
    text: str


class Content(BaseModel):
    parts: List[Part] = Field(..., min_length=1)


class Candidate(BaseModel):
    content: Content


class GenerateContentRequest(BaseModel):
    contents: List[Content]

    @classmethod
    def from_prompt(cls, prompt: str) -> "GenerateContentRequest":
        return cls(contents=[Content(parts=[Part(text=prompt)])])


class GenerateContentResponse(BaseModel):
    candidates: List[Candidate] = Field(..., min_length=1)

    @property
    def text(self) -> str:
        """Text of the first candidate's first content part."""
        return self.candidates[0].content.parts[0].text
