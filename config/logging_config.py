# config/logging_config.py
from utils.logger import DEFAULT_LOG_DIR, DEFAULT_LOG_FORMAT, DEFAULT_LOG_LEVEL

class LoggingConfig:
    """Logging configuration settings (env: BASTION_LOG_LEVEL, BASTION_LOG_DIR, BASTION_LOG_FORMAT)"""
    LOG_LEVEL = DEFAULT_LOG_LEVEL
    LOG_DIR = DEFAULT_LOG_DIR
    LOG_FORMAT = DEFAULT_LOG_FORMAT
