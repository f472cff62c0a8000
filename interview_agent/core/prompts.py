"""
Prompt builders for the five interview agents.

Each builder returns the user message for one agent. ``structured=True`` is
used when the answer comes back through a tool call, so the prompt does not
have to describe the output format; in text mode the prompt spells out the
JSON shape so the answer can still be parsed.
"""

NO_MISMATCH_ANSWER = "No mismatch detected."

_QUESTION_JSON_SHAPE = (
    "Return ONLY a JSON object with this structure:\n"
    "{\"questions\": [{\"question\": \"...\", \"importance\": \"High|Medium|Low\", \"weightage\": 1-10}]}"
)


def resume_extraction_prompt(resume_text: str, structured: bool = True) -> str:
    """
    Generate the prompt for structured resume extraction.

    Args:
        resume_text: The full text content of the resume.
        structured: Whether the answer is returned via a tool call.

    Returns:
        The formatted prompt string.
    """
    if structured:
        return f"Extract skills, domain, technologies, and projects from:\n{resume_text}"
    return (
        "Analyze the resume below. Extract relevant technologies, strengths, "
        "domain experience (e.g., frontend/backend), and summarize.\n\n"
        "Return ONLY a JSON object with this structure:\n"
        "{\"technologies\": \"...\", \"strengths\": \"...\", \"domain\": \"...\", \"summary\": \"...\"}\n\n"
        f"Resume Text:\n{resume_text}"
    )


def mismatch_prompt(resume_summary: str, job_description: str) -> str:
    """
    Generate the prompt comparing the resume summary with the job description.

    Both inputs are embedded verbatim. The answer is prose in either mode.
    """
    instructions = (
        "Is there any role mismatch (e.g. resume is backend but applying for frontend)? "
        "Respond with a short summary of the mismatch. "
        f"If the resume fits the job, answer exactly \"{NO_MISMATCH_ANSWER}\""
    )
    return (
        f"Resume Info:\n{resume_summary}\n\n"
        f"Job Description:\n{job_description}\n\n"
        f"{instructions}"
    )


def general_questions_prompt(count: int = 10, structured: bool = True) -> str:
    """Generate the fixed prompt for general interview questions."""
    prompt = (
        f"Generate {count} general interview questions and for each, assign an importance "
        "level (High/Medium/Low) and a weightage from 1 to 10."
    )
    if structured:
        return prompt
    return f"{prompt}\n\n{_QUESTION_JSON_SHAPE}"


def role_questions_prompt(job_description: str, count: int = 20, structured: bool = True) -> str:
    """Generate the prompt for questions tailored to the job description."""
    prompt = (
        f"Create {count} interview questions from this job description, each with an importance "
        f"level (High/Medium/Low) and a weightage from 1 to 10:\n{job_description}"
    )
    if structured:
        return prompt
    return f"{prompt}\n\n{_QUESTION_JSON_SHAPE}"


def resume_questions_prompt(
    resume_summary: str,
    min_count: int = 5,
    max_count: int = 10,
    structured: bool = True,
) -> str:
    """Generate the prompt for questions about the candidate's own projects and stack."""
    prompt = (
        f"Based on this resume:\n{resume_summary}\n\n"
        f"Generate {min_count} to {max_count} interview questions based on the candidate's projects "
        "or technologies. Include importance (High/Medium/Low) and weightage (1 to 10)."
    )
    if structured:
        return prompt
    return f"{prompt}\n\n{_QUESTION_JSON_SHAPE}"
