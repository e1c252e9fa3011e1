"""
SiteAnalyst - Location analysis extraction for commercial real-estate offering memoranda.

Example:
    >>> from siteanalyst.domains.extraction import SectionOrchestrator
    >>> orchestrator = SectionOrchestrator(backend)
    >>> record = await orchestrator.extract_all(pdf_bytes)
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
