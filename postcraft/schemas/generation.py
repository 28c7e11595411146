from pydantic import BaseModel
from typing import Any, Dict, List
from datetime import datetime

TONES = (
    "professional",
    "casual",
    "humorous",
    "inspirational",
    "educational",
    "persuasive",
)

PROMPT_MIN_LENGTH = 10
PROMPT_MAX_LENGTH = 1000
AUDIENCE_MIN_LENGTH = 3
AUDIENCE_MAX_LENGTH = 200

# Top-level sections the model must return; see services/prompts.py for the full shape
CONTENT_SECTIONS = (
    "blogPost",
    "twitterThread",
    "instagramCaption",
    "linkedinPost",
    "facebookAd",
    "googleAd",
)


class GenerateRequest(BaseModel):
    # Validated by the generation workflow, after the quota check
    prompt: Any = ""
    tone: Any = ""
    audience: Any = ""


class GenerationRecord(BaseModel):
    id: str
    user_id: str
    prompt: str
    tone: str
    audience: str
    content: Dict[str, Any]
    created_at: datetime


class GenerationSummary(BaseModel):
    id: str
    prompt: str
    tone: str
    audience: str
    blog_title: str
    created_at: datetime


class GenerationResponse(BaseModel):
    generation: GenerationRecord


class GenerationListResponse(BaseModel):
    generations: List[GenerationSummary]
