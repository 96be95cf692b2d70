"""
Names of the content block templates, one per block kind.
"""


class Template:
    """Each value is a file stem under templates/ (loaded as '<value>.jinja2')."""

    WEATHER_SUMMARY = "weather_summary"
    SELECTION_COUNT = "selection_count"
    WEATHER_CONFIRMATION = "weather_confirmation"
    NOTE_TEXT = "note_text"
