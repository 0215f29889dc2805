"""USMLE Quiz application package.

Serves randomized pages of a static clinical-vignette question bank over a
small FastAPI endpoint and runs the interactive quiz as a Streamlit app
(answer feedback, scoring, PDF export, freehand annotation).
"""

__all__ = ["__version__"]

# Keep version simple; bump when you add features.
__version__ = "0.1.0"
