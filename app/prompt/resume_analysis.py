from __future__ import annotations

import copy
from typing import Any

REPORT_FIELD_ORDER = (
    "atsScore",
    "summary",
    "atsFeedback",
    "strengths",
    "weaknesses",
    "jobDescriptionMatch",
)

_STRING_LIST = {"type": "ARRAY", "items": {"type": "STRING"}}

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "atsScore": {"type": "NUMBER"},
        "summary": {"type": "STRING"},
        "atsFeedback": _STRING_LIST,
        "strengths": _STRING_LIST,
        "weaknesses": _STRING_LIST,
        "jobDescriptionMatch": _STRING_LIST,
    },
    "required": list(REPORT_FIELD_ORDER),
    "propertyOrdering": list(REPORT_FIELD_ORDER),
}

PROMPT_TEMPLATE = """You are an expert career coach and resume analyst. Analyze the following resume text based on the provided job description.
Provide a detailed and actionable feedback report in JSON format.
The JSON object should have the following structure:
{{
  "atsScore": number, // A score from 0-100 indicating how well the resume would pass an ATS.
  "summary": string, // A brief, overall summary of the resume.
  "atsFeedback": string[], // Specific feedback points for improving ATS compatibility (e.g., keywords, formatting).
  "strengths": string[], // The resume's key strengths.
  "weaknesses": string[], // The resume's key weaknesses.
  "jobDescriptionMatch": string[] // Feedback on how well the resume matches the job description (e.g., keywords, skills, experience).
}}
If the job description is empty, give a general analysis and return an empty jobDescriptionMatch list.

Resume text to analyze:
{resume_text}

Job description to match against:
{job_description}
"""


def response_schema() -> dict[str, Any]:
    return copy.deepcopy(RESPONSE_SCHEMA)


def build_analysis_prompt(resume_text: str, job_description: str) -> tuple[str, dict[str, Any]]:
    # Inputs are embedded verbatim; callers reject an empty resume beforehand.
    prompt = PROMPT_TEMPLATE.format(
        resume_text=resume_text,
        job_description=job_description or "",
    )
    return prompt, response_schema()
