"""
USER_API - User CRUD service

A FastAPI service exposing the User resource backed by MongoDB, with
named sequence counters and centralized exception translation.
"""

# Configuration
from .config import UsersDatabaseSettings
# Database layer
from .database import DatabaseContext, InMemoryDbContext, MongoDbContext
# Errors
from .exceptions import (ConfigurationError, DuplicateUserError, UserApiError,
                         UserValidationError)
# Models and validation
from .models import Address, Company, Counter, Geo, User
# Services
from .services import UserService
from .validation import validate_user

__version__ = "0.1.0"

__all__ = [
    # Models
    "User",
    "Address",
    "Geo",
    "Company",
    "Counter",
    "validate_user",
    # Services
    "UserService",
    # Database
    "DatabaseContext",
    "MongoDbContext",
    "InMemoryDbContext",
    # Config
    "UsersDatabaseSettings",
    # Errors
    "UserApiError",
    "ConfigurationError",
    "UserValidationError",
    "DuplicateUserError",
]
