"""
Prompt construction for bibliographic analysis.

The instruction header is written in French, the language of the
deployment, and spells out the exact JSON shape the model must return.
"""

DEFAULT_MAX_TEXT_LENGTH = 30_000


# =============================================================================
# Analysis Prompt
# =============================================================================

ANALYSIS_PROMPT = """Tu es un expert en analyse de littérature scientifique. Analyse ce document et extrait les informations.

IMPORTANT: Réponds UNIQUEMENT en JSON valide:

{
  "title": "Titre de l'article",
  "authors": ["Auteur 1", "Auteur 2"],
  "abstract": "Résumé en 3-5 phrases",
  "doi": "DOI ou Non spécifié",
  "year": "Année ou Non spécifié",
  "keywords": ["mot1", "mot2", "mot3", "mot4", "mot5"],
  "theme": "Thème principal",
  "themeScore": 0,
  "objectives": ["Objectif 1", "Objectif 2", "Objectif 3"],
  "summary": {
    "problem": "Problème de recherche",
    "method": "Méthodologie",
    "data": "Données utilisées",
    "results": "Résultats principaux"
  },
  "conclusions": ["Conclusion 1", "Conclusion 2"],
  "gaps": ["Limite 1", "Limite 2", "Limite 3"],
  "futurework": ["Travail futur 1", "Travail futur 2"],
  "researchDomain": "Domaine de recherche"
}

DOCUMENT:
"""


def truncate_text(text: str, limit: int = DEFAULT_MAX_TEXT_LENGTH) -> str:
    """Keep only the first ``limit`` characters of ``text``."""
    if len(text) > limit:
        return text[:limit]
    return text


def build_analysis_prompt(text: str, limit: int = DEFAULT_MAX_TEXT_LENGTH) -> str:
    """
    Build the full instruction sent to the model.

    Args:
        text: Raw document text.
        limit: Maximum number of document characters to include.

    Returns:
        The instruction header followed by the (possibly truncated) text.
    """
    return ANALYSIS_PROMPT + truncate_text(text, limit)
