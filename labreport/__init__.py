"""
labreport - laboratory analysis report generation.

Groups a report's samples, plans its pages and renders a multi-page
PDF (cover letter, result tables, invoice).
"""

__version__ = "0.1.0"
