import os
from dotenv import load_dotenv
from typing import Optional

# Find the absolute path of the root directory
basedir = os.path.abspath(os.path.dirname(__file__))

# Load the .env file from the root directory
load_dotenv(os.path.join(basedir, '.env'))


def _env_int(key: str, default: int) -> int:
    """Read an integer environment variable, falling back on empty values"""
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {key} must be an integer, got {value!r}")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid"""
    pass


class Config:
    """
    Base configuration class. Contains default configuration settings
    and settings applicable to all environments.
    """
    APP_NAME = os.environ.get('APP_NAME', 'cre-import-mapping')
    IMPORT_ENV = os.environ.get('IMPORT_ENV')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Batch processing
    IMPORT_BATCH_SIZE = _env_int('IMPORT_BATCH_SIZE', 100)
    IMPORT_MAX_ERROR_SAMPLES = _env_int('IMPORT_MAX_ERROR_SAMPLES', 10)  # Row errors kept in summaries

    # Validation bounds
    YEAR_BUILT_MIN = _env_int('YEAR_BUILT_MIN', 1800)
    YEAR_BUILT_MAX = _env_int('YEAR_BUILT_MAX', 2030)

    @classmethod
    def validate_required_config(cls) -> None:
        """Validate that configured values are usable"""
        problems = []
        if cls.IMPORT_BATCH_SIZE <= 0:
            problems.append(f"IMPORT_BATCH_SIZE must be positive (got {cls.IMPORT_BATCH_SIZE})")
        if cls.IMPORT_MAX_ERROR_SAMPLES < 0:
            problems.append(f"IMPORT_MAX_ERROR_SAMPLES cannot be negative (got {cls.IMPORT_MAX_ERROR_SAMPLES})")
        if cls.YEAR_BUILT_MIN > cls.YEAR_BUILT_MAX:
            problems.append(
                f"YEAR_BUILT_MIN ({cls.YEAR_BUILT_MIN}) is after YEAR_BUILT_MAX ({cls.YEAR_BUILT_MAX})"
            )
        if problems:
            raise ConfigurationError("Invalid import configuration: " + '; '.join(problems))

    @staticmethod
    def get_required_env(key: str) -> str:
        """Get required environment variable or raise error"""
        value = os.environ.get(key)
        if not value:
            raise ConfigurationError(f"Required environment variable {key} is not set")
        return value


class DevelopmentConfig(Config):
    """Development environment configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    """Testing environment configuration"""
    TESTING = True
    DEBUG = True

    # Small batches so batching paths are exercised by short fixtures
    IMPORT_BATCH_SIZE = 2
    IMPORT_MAX_ERROR_SAMPLES = 5


class ProductionConfig(Config):
    """Production environment configuration"""
    DEBUG = False
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'WARNING')


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config(config_name: Optional[str] = None) -> type[Config]:
    """Get configuration class based on environment

    Raises:
        ConfigurationError: If the selected configuration is unusable
    """
    if config_name is None:
        config_name = os.environ.get('IMPORT_ENV', 'development')

    config_class = config.get(config_name, DevelopmentConfig)
    config_class.validate_required_config()
    return config_class
