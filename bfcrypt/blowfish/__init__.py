from bfcrypt.blowfish.engine import BlowfishEngine, key_stream

__all__ = ["BlowfishEngine", "key_stream"]
