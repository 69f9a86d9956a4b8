"""md5s of the seeded skins, one per derived moderation state."""

UNREVIEWED_MD5 = "a" * 32
APPROVED_MD5 = "b" * 32
REJECTED_MD5 = "c" * 32
TWEETED_MD5 = "d" * 32
MODERN_MD5 = "e" * 32
