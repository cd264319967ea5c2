# config.py
"""
Configuration settings for the MRP Log Analyzer
Reads settings from environment variables (a .env file is honoured)
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Config:
    """Application configuration"""

    # Flask settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-key-change-in-production')

    TEST_MODE = os.getenv('TEST_MODE', 'False').lower() == 'true'

    # --- Logging ---
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_MAX_BYTES = int(os.getenv('LOG_MAX_BYTES', '5242880'))
    LOG_BACKUP_COUNT = int(os.getenv('LOG_BACKUP_COUNT', '10'))

    # --- MRP log uploads ---
    MRP_LOG_MAX_UPLOAD_MB = int(os.getenv('MRP_LOG_MAX_UPLOAD_MB', '20'))
    _extensions_str = os.getenv('MRP_LOG_ALLOWED_EXTENSIONS', 'txt,log')
    MRP_LOG_ALLOWED_EXTENSIONS = tuple(e.strip().lower() for e in _extensions_str.split(',') if e.strip())
    MRP_LOG_ENCODING = os.getenv('MRP_LOG_ENCODING', 'utf-8')

    # --- Server (waitress) ---
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', '5000'))

    @classmethod
    def max_upload_bytes(cls):
        return cls.MRP_LOG_MAX_UPLOAD_MB * 1024 * 1024

    @classmethod
    def validate(cls):
        """Validate required configuration"""
        errors = []

        if not cls.TEST_MODE and cls.SECRET_KEY == 'dev-key-change-in-production':
            errors.append("SECRET_KEY must be set outside of test mode")
        if cls.LOG_LEVEL not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"LOG_LEVEL '{cls.LOG_LEVEL}' is not a valid logging level")
        if cls.MRP_LOG_MAX_UPLOAD_MB <= 0:
            errors.append("MRP_LOG_MAX_UPLOAD_MB must be greater than zero")
        if not cls.MRP_LOG_ALLOWED_EXTENSIONS:
            errors.append("MRP_LOG_ALLOWED_EXTENSIONS must list at least one extension")
        if not 0 < cls.PORT < 65536:
            errors.append(f"PORT {cls.PORT} is out of range")

        if errors:
            print("Configuration errors:")
            for error in errors:
                print(f"  - {error}")
            return False
        return True
