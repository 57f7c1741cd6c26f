"""Terminal preview for piboard board files."""
