import logging
import os
import sys

# Global logger
step_logger = logging.getLogger('step_logger')

LOG_DIR = os.getenv("CITEMARK_LOG_DIR", "output")


def setup_loggers():
    """
    Configure the logging system for the citation rendering service.

    Sets up:
    1. Root logger: Captures all standard logging (INFO+) to console and events.log
    2. Error logging: Captures all ERROR+ logs to errors.log
    3. Step logger: shared component logger, propagates to root.
    """
    # Ensure output directory exists
    os.makedirs(LOG_DIR, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # Clear existing handlers to avoid duplicates on reload
    if root_logger.handlers:
        root_logger.handlers.clear()

    standard_formatter = logging.Formatter('%(asctime)s - [%(levelname)s] - %(name)s - %(message)s')

    # A. Console Handler (INFO+)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(standard_formatter)
    root_logger.addHandler(console_handler)

    # B. Events File Handler (INFO+)
    events_handler = logging.FileHandler(os.path.join(LOG_DIR, 'events.log'), mode='a', encoding='utf-8')
    events_handler.setLevel(logging.INFO)
    events_handler.setFormatter(standard_formatter)
    root_logger.addHandler(events_handler)

    # C. Errors File Handler (ERROR+)
    errors_handler = logging.FileHandler(os.path.join(LOG_DIR, 'errors.log'), mode='a', encoding='utf-8')
    errors_handler.setLevel(logging.ERROR)
    errors_handler.setFormatter(standard_formatter)
    root_logger.addHandler(errors_handler)

    step_logger.setLevel(logging.INFO)

    return step_logger


# Initialize on import
step_logger = setup_loggers()
