from __future__ import annotations

import json
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError, NoCredentialsError

from catalog_api.core.config import settings
from catalog_api.models.user import User

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "New User Verification Required"
VERIFICATION_EVENT_TYPE = "user_verification"


class NotificationError(RuntimeError):
    """
    Raised when the topic is configured but publishing fails.
    Message is safe to log; it never includes the token.
    """


def _client():
    return boto3.client("sns", region_name=settings.AWS_REGION)


def build_verification_message(user: User, token: str) -> dict:
    created_at = user.token_created_at.isoformat() if user.token_created_at else None
    return {
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "verification_token": token,
        "token_created_at": created_at,
        "user_id": str(user.id),
    }


def publish_user_verification(user: User, token: str) -> str | None:
    """
    Publish the "verify your email" event for a new account.

    Delivery of the actual email is done by the topic's subscriber. With no
    SNS_TOPIC_ARN configured (local dev, tests) publishing is skipped.
    """
    topic_arn = settings.SNS_TOPIC_ARN
    if not topic_arn:
        logger.info("SNS_TOPIC_ARN not set; skipping verification notification for user_id=%s", user.id)
        return None

    sns = _client()
    try:
        res = sns.publish(
            TopicArn=topic_arn,
            Message=json.dumps(build_verification_message(user, token)),
            Subject=VERIFICATION_SUBJECT,
            MessageAttributes={
                "email": {"DataType": "String", "StringValue": user.email},
                "user_id": {"DataType": "String", "StringValue": str(user.id)},
                "event_type": {"DataType": "String", "StringValue": VERIFICATION_EVENT_TYPE},
            },
        )
    except NoCredentialsError as e:
        logger.exception("SNS publish failed (no AWS credentials)")
        raise NotificationError("SNS publish failed: AWS credentials not available") from e
    except EndpointConnectionError as e:
        logger.exception("SNS publish failed (endpoint connection)")
        raise NotificationError("SNS publish failed: could not connect to SNS endpoint") from e
    except ClientError as e:
        logger.exception("SNS publish failed (client error)")
        code = (e.response or {}).get("Error", {}).get("Code", "ClientError")
        raise NotificationError(f"SNS publish failed: {code}") from e
    except BotoCoreError as e:
        logger.exception("SNS publish failed (botocore)")
        raise NotificationError("SNS publish failed") from e

    msg_id = res.get("MessageId")
    logger.info("Verification notification published: user_id=%s msg_id=%s", user.id, msg_id)
    return msg_id
