"""Bible reader core: local/remote engine fallback and v11n rule import."""
