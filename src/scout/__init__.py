"""First-contribution issue scout for GitHub repositories.

This package analyzes a public GitHub repository and returns its open issues
ranked for first-time contributors, providing:
- Concurrent retrieval of repository metadata, open issues, and README
- Deterministic keyword-based difficulty classification and time estimates
- Optional LLM summaries reconciled with the deterministic classification
- A FastAPI service exposing the analysis as a JSON endpoint
"""
