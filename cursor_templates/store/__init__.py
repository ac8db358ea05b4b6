"""Template Store — discovery and persistence of template descriptors."""

from cursor_templates.store.template_store import StoreEntry, TemplateStore

__all__ = ["StoreEntry", "TemplateStore"]
