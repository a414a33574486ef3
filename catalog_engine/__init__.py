"""Catalog normalization engine.

Turns spreadsheet rows (or admin form axes) into product drafts with a
deduplicated variant matrix, and imports them in sequential batches.
"""
