"""
Tiered investment proposal engine.

Scores a client questionnaire, maps (risk category, portfolio size) onto an
itemised allocation, recommends products per vehicle and renders a Markdown
proposal.
"""

__version__ = "0.3.0"
