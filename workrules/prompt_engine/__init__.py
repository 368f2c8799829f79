"""Prompt construction for workplace-rules review.

Turns extracted document text (plus an optional file name) into the single
evaluation prompt sent to the analysis provider.
"""
