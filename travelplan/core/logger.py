# core/logger.py
import logging

from travelplan.core.config import settings

# Create logger
logger = logging.getLogger("travelplan")
logger.setLevel(settings.LOG_LEVEL.upper())

# Console Handler
console_handler = logging.StreamHandler()
formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s")
console_handler.setFormatter(formatter)

# Add handler to logger
logger.addHandler(console_handler)
