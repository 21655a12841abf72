"""
Lambda handler for book operations (list by owner, create, update, delete)

Authors may only update or delete their own books; any other role may act on
any book. Creating a book publishes a BookCreated notification.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable

from botocore.exceptions import ClientError

# Support both Lambda deployment and local development
try:
    # Lambda deployment
    import config
    from utils.auth import get_caller_id
    from utils.dynamodb import RecordStore
    from utils.notifications import Notifier
    from utils.outcome import BadRequest, Forbidden, NotFound, Ok, Outcome, Unauthorized, UnsupportedMethodError
    from utils.response import failure_response, outcome_response
    from utils.validation import get_path_param, get_query_param, parse_json_body, update_fields
except ImportError:
    # Local development
    import library_backend.config as config
    from library_backend.utils.auth import get_caller_id
    from library_backend.utils.dynamodb import RecordStore
    from library_backend.utils.notifications import Notifier
    from library_backend.utils.outcome import (
        BadRequest,
        Forbidden,
        NotFound,
        Ok,
        Outcome,
        Unauthorized,
        UnsupportedMethodError,
    )
    from library_backend.utils.response import failure_response, outcome_response
    from library_backend.utils.validation import (
        get_path_param,
        get_query_param,
        parse_json_body,
        update_fields,
    )

logger = logging.getLogger()
logger.setLevel(config.LOG_LEVEL)

BOOK_CREATED_MESSAGE = "New Book Created"


class BookHandler:
    """
    Routes API Gateway book requests by HTTP method.

    Collaborators are injected so tests (and other wiring) can substitute
    their own stores and notifier.
    """

    def __init__(
        self,
        books: RecordStore,
        users: RecordStore,
        notifier: Notifier,
        owner_index: str = config.BOOKS_OWNER_INDEX,
        topic_arn: Callable[[], str] = config.book_created_topic_arn,
        verify_tokens: bool = False,
        issuer: str | None = None,
    ):
        self.books = books
        self.users = users
        self.notifier = notifier
        self.owner_index = owner_index
        self.topic_arn = topic_arn
        self.verify_tokens = verify_tokens
        self.issuer = issuer

    def __call__(self, event: dict, context: Any) -> dict:
        method = event.get("httpMethod")
        logger.info(f"book_handler invoked: {method}")

        try:
            if method == "GET":
                outcome = self._handle_list(event)
            elif method == "POST":
                outcome = self._handle_create(event)
            elif method == "DELETE":
                outcome = self._handle_delete(event)
            elif method == "PATCH":
                outcome = self._handle_update(event)
            else:
                raise UnsupportedMethodError(f"Http method not supported: {method}")

            if not isinstance(outcome, Ok):
                logger.warning(f"{method} book rejected ({outcome.status_code}): {outcome.message}")
            return outcome_response(method, outcome)

        except Exception as e:
            logger.error(f"Error performing {method} on books: {str(e)}", exc_info=True)
            return failure_response(e)

    # Request parsing

    def _handle_list(self, event: dict) -> Outcome:
        owner_id = (event.get("pathParameters") or {}).get("id") or get_query_param(event, "ownerId")
        if not owner_id:
            return BadRequest("Owner id is required")
        return self.list_by_owner(owner_id)

    def _handle_create(self, event: dict) -> Outcome:
        body, error = parse_json_body(event)
        if error:
            return error
        return self.create(body)

    def _authenticated_target(self, event: dict) -> tuple[str | None, str | None, Outcome | None]:
        caller_id = get_caller_id(event, verify=self.verify_tokens, issuer=self.issuer)
        if not caller_id:
            return None, None, Unauthorized("Missing or invalid bearer token")

        book_uuid, error = get_path_param(event, "id")
        if error:
            return None, None, error
        return caller_id, book_uuid, None

    def _handle_delete(self, event: dict) -> Outcome:
        caller_id, book_uuid, error = self._authenticated_target(event)
        if error:
            return error
        return self.delete(book_uuid, caller_id)

    def _handle_update(self, event: dict) -> Outcome:
        caller_id, book_uuid, error = self._authenticated_target(event)
        if error:
            return error

        body, error = parse_json_body(event)
        if error:
            return error
        fields, error = update_fields(body, config.BOOK_KEY)
        if error:
            return error
        return self.update(book_uuid, caller_id, fields)

    # Operations

    def create(self, book: dict[str, Any]) -> Outcome:
        """Store a new book under a freshly generated bookUuid, then announce it."""
        book[config.BOOK_KEY] = str(uuid.uuid4())
        created = self.books.put(book)

        self._notify_book_created(book[config.BOOK_KEY])
        return Ok(created)

    def list_by_owner(self, owner_id: str) -> Outcome:
        """All books owned by a user, via the owner secondary index."""
        books = self.books.query(
            key_condition=f"{config.OWNER_ATTRIBUTE} = :userUuid",
            values={":userUuid": owner_id},
            index_name=self.owner_index,
        )
        logger.info(f"Retrieved {len(books)} books for owner {owner_id}")
        return Ok(books)

    def delete(self, book_uuid: str, caller_id: str) -> Outcome:
        authorization = self.author_action_on_own_book(book_uuid, caller_id)
        if not isinstance(authorization, Ok):
            return authorization

        self.books.delete(book_uuid)
        return Ok({config.BOOK_KEY: book_uuid})

    def update(self, book_uuid: str, caller_id: str, fields: dict[str, Any]) -> Outcome:
        authorization = self.author_action_on_own_book(book_uuid, caller_id)
        if not isinstance(authorization, Ok):
            return authorization

        try:
            updated = self.books.update(book_uuid, fields, require_existing=True)
        except ClientError as e:
            # Deleted between the authorization read and the write
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":  # type: ignore[typeddict-item]
                return NotFound("Book not found")
            raise
        return Ok(updated)

    def author_action_on_own_book(self, book_uuid: str, caller_id: str) -> Outcome:
        """
        Check whether the caller may modify a book.

        Returns:
            Ok(book) when allowed, NotFound when the book does not exist,
            Forbidden when the caller is an Author acting on another
            author's book (or has no user record at all)
        """
        book = self.books.get(book_uuid)
        if book is None:
            return NotFound("Book not found")

        caller = self.users.get(caller_id)
        if caller is None:
            return Forbidden("Unknown user")

        if caller.get("role") == config.AUTHOR_ROLE and caller.get(config.USER_KEY) != book.get(config.OWNER_ATTRIBUTE):
            return Forbidden("You are not allowed to modify book of other author")

        return Ok(book)

    def _notify_book_created(self, book_uuid: str) -> None:
        # Best effort: Notifier logs and swallows publish failures
        self.notifier.publish(
            self.topic_arn(),
            {"message": BOOK_CREATED_MESSAGE, config.BOOK_KEY: book_uuid},
        )


_handler: BookHandler | None = None


def _get_handler() -> BookHandler:
    """Build the process-wide handler from config on first use."""
    global _handler
    if _handler is None:
        _handler = BookHandler(
            books=RecordStore(config.get_books_table(), config.BOOK_KEY),
            users=RecordStore(config.get_users_table(), config.USER_KEY),
            notifier=Notifier(config.get_sns_client()),
            verify_tokens=config.VERIFY_TOKEN_SIGNATURE,
            issuer=config.cognito_issuer(),
        )
    return _handler


def book_handler(event, context):
    """Lambda entry point for the books API."""
    return _get_handler()(event, context)
