import logging

logger = logging.getLogger("bfcrypt")
