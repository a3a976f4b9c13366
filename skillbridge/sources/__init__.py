"""Candidate sources: where businesses to score come from."""
from skillbridge.sources.base import CandidateSource, parse_candidate, parse_candidates
from skillbridge.sources.catalog_source import CatalogCandidateSource
from skillbridge.sources.llm_source import LLMCandidateSource

__all__ = [
    "CandidateSource",
    "CatalogCandidateSource",
    "LLMCandidateSource",
    "parse_candidate",
    "parse_candidates",
]
