"""
Content Blocks - Derived Read-only Displays

Projects content blocks (weather readout, selection counts, notes) from the
current form data. Text is produced by Jinja2 templates.
"""

from symptom_flows.rendering.content.blocks import project_block

__all__ = ["project_block"]
