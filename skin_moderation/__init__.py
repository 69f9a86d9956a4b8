"""
Skin moderation service.

Tracks the review lifecycle of uploaded skins (unreviewed, approved/rejected,
tweeted) and keeps the metadata database consistent with the moderation
markers kept in the object-storage mirror.
"""

__version__ = "0.1.0"
