"""Text measurement for text elements.

:author: Shay Hill
:created: 2025-11-08
"""
