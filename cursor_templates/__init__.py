"""cursor-templates — manage, score and apply Cursor IDE project templates."""

__version__ = "1.0.0"
