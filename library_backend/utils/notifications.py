"""
SNS notification utilities for Library API

Publishing is fire-and-forget: failures are logged and never raised to the
caller, so a failed notification cannot fail the operation that triggered it.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

if TYPE_CHECKING:
    from mypy_boto3_sns.client import SNSClient

logger = logging.getLogger()


class Notifier:
    """Publishes JSON messages to SNS topics."""

    def __init__(self, sns_client: "SNSClient"):
        self.sns_client = sns_client

    def publish(self, topic_arn: str, message: dict[str, Any]) -> str | None:
        """
        Publish a message to a topic.

        Args:
            topic_arn: Target topic ARN
            message: JSON-serializable message payload

        Returns:
            str: The SNS MessageId, or None if publishing failed
        """
        try:
            response = self.sns_client.publish(
                TopicArn=topic_arn, Message=json.dumps(message, default=str)
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to publish to {topic_arn}: {str(e)}", exc_info=True)
            return None

        message_id = response.get("MessageId")
        logger.info(f"Published message {message_id} to {topic_arn}")
        return message_id
