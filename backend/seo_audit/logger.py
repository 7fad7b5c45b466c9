"""
Logging configuration.
"""
import logging
import os
import sys

# Create logger
logger = logging.getLogger("seo_audit")
logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

# Console handler
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)

# Formatter
formatter = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
console_handler.setFormatter(formatter)

# Add handler
if not logger.handlers:
    logger.addHandler(console_handler)
