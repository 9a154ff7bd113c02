import os
from typing import List, Optional, Union
from pydantic_ai import Agent
from pydantic_ai.models import Model
from gitscope.models.analysis import ImprovementSuggestions, MentorAnswer, ProjectSuggestions
from gitscope.models.github import Profile, Repository
from gitscope.probes.normalizer import normalize_profile_context
from gitscope.refinery.validator import refine_project_suggestions
from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL = "google-gla:gemini-flash-latest"

NO_REPOSITORIES_MESSAGE = (
    "This user has no public repositories or they could not be analyzed. "
    "Suggestions for code/projects cannot be generated without repository data."
)

# --- Prompts ---

BASE_PROMPT = """
You are an AI mentor reviewing a developer's public GitHub footprint.
Voice: Encouraging, specific, and practical.

**CRITICAL INSTRUCTION:**
You MUST output your response by calling the tool/function that matches the requested output schema.
Do NOT reply with plain markdown text outside the function call.
"""

IMPROVEMENTS_INSTRUCTIONS = """
**Task: Profile Improvements**
1. Analyze the profile and repositories provided.
2. Suggest specific improvements to code quality, contributions, documentation, and projects.
3. Reference repositories by name when a suggestion applies to them.
4. Output actionable suggestions the user can use to become a better developer.
"""

PROJECTS_INSTRUCTIONS = """
**Task: Project Ideas**
1. Consider the recent repositories, their languages, and the bio.
2. Suggest exactly 3 project ideas that align with the user's skills and interests.
3. Be creative and inspiring. Each idea is one self-contained item (title and a short pitch).
"""

QUESTION_INSTRUCTIONS = """
**Task: Mentor Chat**
Answer the user's question about their profile, coding practices, or career path.
Ground the answer in the provided GitHub data; say so when the data cannot answer it.
"""

ModelLike = Union[str, Model]


def _build_agent(output_type, instructions: str, model: Optional[ModelLike]) -> Agent:
    return Agent(
        model or os.getenv("GITSCOPE_MODEL") or DEFAULT_MODEL,
        output_type=output_type,
        system_prompt=f"{BASE_PROMPT}\n\n{instructions}"
    )


def suggest_improvements(
    username: str,
    profile: Profile,
    repositories: List[Repository],
    model: Optional[ModelLike] = None
) -> ImprovementSuggestions:
    """
    Asks the model for improvement suggestions. Without repositories there is
    nothing to review, so the canned explanation is returned instead.
    """
    if not repositories:
        return ImprovementSuggestions(suggestions=NO_REPOSITORIES_MESSAGE)

    agent = _build_agent(ImprovementSuggestions, IMPROVEMENTS_INSTRUCTIONS, model)
    context = normalize_profile_context(profile, repositories)
    result = agent.run_sync(f"Suggest improvements for GitHub user {username}:\n\n{context}")
    return result.output


def suggest_projects(
    username: str,
    profile: Profile,
    repositories: List[Repository],
    model: Optional[ModelLike] = None
) -> ProjectSuggestions:
    agent = _build_agent(ProjectSuggestions, PROJECTS_INSTRUCTIONS, model)
    context = normalize_profile_context(profile, repositories)
    result = agent.run_sync(f"Suggest project ideas for GitHub user {username}:\n\n{context}")

    # --- Integration: Validate and Refine ---
    return refine_project_suggestions(result.output)


def answer_question(
    username: str,
    question: str,
    profile: Optional[Profile] = None,
    repositories: Optional[List[Repository]] = None,
    model: Optional[ModelLike] = None
) -> MentorAnswer:
    if not question or not question.strip():
        raise ValueError("Question must not be empty.")

    agent = _build_agent(MentorAnswer, QUESTION_INSTRUCTIONS, model)
    context = normalize_profile_context(profile, repositories)
    result = agent.run_sync(
        f"GitHub user: {username}\n\n{context}\n\nQuestion: {question.strip()}"
    )
    return result.output
