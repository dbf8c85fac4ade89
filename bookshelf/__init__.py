"""Bookshelf: an in-memory book catalogue with confirmed writes."""
