"""
Shared fixtures for unit tests.

The in-memory record store mirrors RecordStore's interface so handler tests
can run full request sequences (create, then list, then update...) without AWS.
"""

import copy
import re
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from library_backend import config


class InMemoryRecordStore:
    """Dict-backed stand-in for utils.dynamodb.RecordStore."""

    def __init__(self, key_name, name="memory"):
        self.key_name = key_name
        self.name = name
        self.items = {}

    def put(self, item):
        self.items[item[self.key_name]] = copy.deepcopy(item)
        return item

    def get(self, key_value):
        item = self.items.get(key_value)
        return copy.deepcopy(item) if item is not None else None

    def delete(self, key_value):
        return self.items.pop(key_value, {})

    def update(self, key_value, fields, require_existing=False):
        if key_value not in self.items:
            if require_existing:
                raise ClientError(
                    {"Error": {"Code": "ConditionalCheckFailedException", "Message": "The conditional request failed"}},
                    "UpdateItem",
                )
            self.items[key_value] = {self.key_name: key_value}
        self.items[key_value].update(copy.deepcopy(fields))
        return copy.deepcopy(self.items[key_value])

    def query(self, key_condition, values, names=None, index_name=None, filter_expression=None):
        names = names or {}
        attribute, placeholder = [part.strip() for part in key_condition.split("=")]
        attribute = names.get(attribute, attribute)
        matches = [item for item in self.items.values() if item.get(attribute) == values[placeholder]]

        if filter_expression:
            match = re.fullmatch(r"contains\((#?\w+), (:\w+)\)", filter_expression)
            field = names.get(match.group(1), match.group(1))
            needle = values[match.group(2)]
            matches = [item for item in matches if needle in (item.get(field) or "")]

        return copy.deepcopy(matches)

    def scan(self):
        return copy.deepcopy(list(self.items.values()))


@pytest.fixture
def books_store():
    return InMemoryRecordStore(config.BOOK_KEY, name="books")


@pytest.fixture
def users_store():
    return InMemoryRecordStore(config.USER_KEY, name="user")


@pytest.fixture
def notifier():
    mock_notifier = Mock()
    mock_notifier.publish.return_value = "message-123"
    return mock_notifier
