"""
Lambda handlers for Library API

This module serves as the entry point for all Lambda functions.
It re-exports handlers from their respective modules for Lambda function configuration.

Architecture:
- API Gateway -> Lambda -> DynamoDB (books and user tables)
- API Gateway -> Lambda -> SNS (BookCreated notification on book creation)
- API Gateway -> Lambda -> Cognito (login)
- Cognito post-confirmation trigger -> Lambda -> DynamoDB (user mirror)

Handlers:
1. book_handler: GET (list by owner), POST, PATCH, DELETE on books; Authors may only modify their own books
2. user_handler: GET (list, by id, by id and role), POST, PATCH, DELETE on users
3. login_handler: Exchanges username/password for Cognito access and id tokens
4. registration_hook_handler: Mirrors a confirmed Cognito user into the user table
"""

# Re-export handlers for Lambda function configuration
# Support both local development (library_backend.X) and Lambda deployment (X)
try:
    # Lambda deployment (files are in root, not in library_backend/)
    from handlers.auth_handlers import login_handler, registration_hook_handler
    from handlers.book_handlers import book_handler
    from handlers.user_handlers import user_handler
except ImportError:
    # Local development / testing (with library_backend package structure)
    from library_backend.handlers.auth_handlers import login_handler, registration_hook_handler
    from library_backend.handlers.book_handlers import book_handler
    from library_backend.handlers.user_handlers import user_handler

# Make handlers available at module level for Lambda
__all__ = [
    "book_handler",
    "user_handler",
    "login_handler",
    "registration_hook_handler",
]
