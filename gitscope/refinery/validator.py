import logging
from typing import List
from gitscope.models.analysis import ProjectSuggestions

logger = logging.getLogger(__name__)

PROJECT_IDEA_COUNT = 3

def clean_ideas(ideas: List[str], limit: int = PROJECT_IDEA_COUNT) -> List[str]:
    """
    Strips whitespace, drops blanks and case-insensitive duplicates, keeps the first `limit`.
    """
    seen = set()
    cleaned = []
    for idea in ideas:
        text = (idea or "").strip()
        key = text.casefold()
        if not text or key in seen:
            continue
        seen.add(key)
        cleaned.append(text)
    return cleaned[:limit]

def refine_project_suggestions(suggestions: ProjectSuggestions) -> ProjectSuggestions:
    """
    Normalizes the model's project list to at most three distinct ideas.
    """
    cleaned = clean_ideas(suggestions.project_suggestions)
    if len(cleaned) != len(suggestions.project_suggestions):
        logger.info("Refined project ideas from %d to %d", len(suggestions.project_suggestions), len(cleaned))
    if len(cleaned) < PROJECT_IDEA_COUNT:
        logger.warning("Model returned only %d usable project ideas", len(cleaned))
    return ProjectSuggestions(project_suggestions=cleaned)
