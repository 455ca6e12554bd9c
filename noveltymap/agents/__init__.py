"""Assessment providers: rule table fallback and optional Ollama enrichment."""

from .assessor import IAssessor, RuleBasedAssessor, TieredAssessor

__all__ = ['IAssessor', 'RuleBasedAssessor', 'TieredAssessor']
