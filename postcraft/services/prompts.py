"""
Prompt templates for the content synthesizer.

The JSON skeleton in CONTENT_SCHEMA_TEMPLATE is the wire contract with the
model. Length hints inside it ("max 40 chars") are instructions to the model
only; replies are not checked against them.
"""

SYSTEM_PROMPT = (
    "You are a senior content strategist and copywriter with more than fifteen years of "
    "experience writing for blogs, social networks and paid advertising. You write copy "
    "that fits each platform's audience and conventions, earns engagement and converts. "
    "You always answer with a single JSON object and nothing else."
)

CONTENT_SCHEMA_TEMPLATE = """{
  "blogPost": {
    "title": "SEO-friendly headline for the article",
    "metaDescription": "Meta description of about 155 characters containing the main keywords",
    "intro": "Three-paragraph introduction that hooks the reader and frames the topic",
    "sections": [
      {"heading": "Section heading", "content": "Two or three substantial paragraphs"},
      {"heading": "Section heading", "content": "Two or three substantial paragraphs"},
      {"heading": "Section heading", "content": "Two or three substantial paragraphs"}
    ],
    "conclusion": "Two-paragraph conclusion ending with a clear call to action",
    "tags": ["tag1", "tag2", "tag3", "tag4", "tag5"]
  },
  "twitterThread": {
    "tweets": [
      "Tweet 1: scroll-stopping hook (max 270 chars)",
      "Tweet 2: key insight or story beat (max 270 chars)",
      "Tweet 3: example or data point (max 270 chars)",
      "Tweet 4: actionable tip (max 270 chars)",
      "Tweet 5: deeper insight (max 270 chars)",
      "Tweet 6: summary and call to action (max 270 chars)"
    ]
  },
  "instagramCaption": {
    "caption": "Multi-paragraph caption with a story hook, useful value, tasteful emoji and a clear call to action",
    "hashtags": ["hashtag1", "hashtag2", "hashtag3", "hashtag4", "hashtag5", "hashtag6", "hashtag7", "hashtag8", "hashtag9", "hashtag10", "hashtag11", "hashtag12"]
  },
  "linkedinPost": {
    "content": "Four-paragraph professional post: strong opening line, valuable body, a personal insight or statistic, and a question that invites comments"
  },
  "facebookAd": {
    "headline": "Attention-grabbing headline (max 40 chars)",
    "primaryText": "Two or three sentences of ad copy with emotional appeal, a clear benefit and social proof",
    "cta": "Button text such as Learn More, Shop Now or Get Started"
  },
  "googleAd": {
    "headlines": [
      "Headline 1 (max 30 chars)",
      "Headline 2 (max 30 chars)",
      "Headline 3 (max 30 chars)"
    ],
    "descriptions": [
      "Description 1 stating the key benefit (max 90 chars)",
      "Description 2 with a call to action (max 90 chars)"
    ]
  }
}"""


def build_user_prompt(prompt: str, tone: str, audience: str) -> str:
    return (
        "Write high-quality content for several digital platforms from one brief.\n\n"
        f"Topic/Prompt: {prompt}\n"
        f"Tone: {tone}\n"
        f"Target Audience: {audience}\n\n"
        "Reply with ONLY a valid JSON object that has exactly this structure. "
        "Do not wrap it in markdown code fences and do not add any explanation "
        "before or after it:\n\n"
        f"{CONTENT_SCHEMA_TEMPLATE}"
    )


def build_messages(prompt: str, tone: str, audience: str) -> list:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_prompt(prompt, tone, audience)},
    ]
