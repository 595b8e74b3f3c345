# blog_api/core/config.py

import os


class Config:
    """Settings shared by every environment. Values come from the environment (.env is loaded first)."""
    # Web API key of the Firebase project, used for the Identity Toolkit REST calls (login / signup).
    FIREBASE_API_KEY = os.getenv('FIREBASE_API_KEY')

    # Service-account credential: either a JSON file path...
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    # ...or the three inline fields of the same file.
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')
    FIREBASE_CLIENT_EMAIL = os.getenv('FIREBASE_CLIENT_EMAIL')
    FIREBASE_PRIVATE_KEY = os.getenv('FIREBASE_PRIVATE_KEY')

    IDENTITY_TOOLKIT_URL = os.getenv('IDENTITY_TOOLKIT_URL', 'https://identitytoolkit.googleapis.com/v1')
    IDENTITY_TOOLKIT_TIMEOUT = float(os.getenv('IDENTITY_TOOLKIT_TIMEOUT', '10'))

    # Pagination
    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100


class DevelopmentConfig(Config):
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH') or Config.FIREBASE_CREDENTIALS_PATH


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH') or Config.FIREBASE_CREDENTIALS_PATH


class ProductionConfig(Config):
    DEBUG = False


# Selected in create_app() from FLASK_ENV.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
