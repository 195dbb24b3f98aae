"""
Table management operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Any, Literal

import boto3
from botocore.exceptions import ClientError

from ..constants import ATTR_CREATED_AT, ATTR_MATCH_KEY, ATTR_PK, ATTR_SK, GSI_MATCH
from ..exceptions import StoreError, TableAlreadyExistsError, TableNotFoundError


def create_table(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = "PAY_PER_REQUEST",
) -> dict[str, Any]:
    """
    Create the DynamoDB table for items, users, matches and resolutions.

    Args:
        table_name: Table name
        region: AWS region (optional)
        profile: AWS profile (optional)
        billing_mode: Billing mode (PAY_PER_REQUEST or PROVISIONED)

    Returns:
        Table description

    Raises:
        TableAlreadyExistsError: If table already exists
        StoreError: For other DynamoDB errors
    """
    session = boto3.Session(profile_name=profile, region_name=region)
    dynamodb = session.client("dynamodb")

    kwargs: dict[str, Any] = {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": ATTR_PK, "KeyType": "HASH"},  # Partition key
            {"AttributeName": ATTR_SK, "KeyType": "RANGE"},  # Sort key
        ],
        "AttributeDefinitions": [
            {"AttributeName": ATTR_PK, "AttributeType": "S"},
            {"AttributeName": ATTR_SK, "AttributeType": "S"},
            {"AttributeName": ATTR_MATCH_KEY, "AttributeType": "S"},
            {"AttributeName": ATTR_CREATED_AT, "AttributeType": "N"},
        ],
        "BillingMode": billing_mode,
        "GlobalSecondaryIndexes": [
            {
                "IndexName": GSI_MATCH,
                "KeySchema": [
                    {"AttributeName": ATTR_MATCH_KEY, "KeyType": "HASH"},
                    {"AttributeName": ATTR_CREATED_AT, "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        # Stream feeds the item-created handler
        "StreamSpecification": {"StreamEnabled": True, "StreamViewType": "NEW_IMAGE"},
        "Tags": [
            {"Key": "ManagedBy", "Value": "lostfound-tool"},
            {"Key": "Purpose", "Value": "lost-and-found-matching"},
        ],
    }
    if billing_mode == "PROVISIONED":
        throughput = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}
        kwargs["ProvisionedThroughput"] = throughput
        kwargs["GlobalSecondaryIndexes"][0]["ProvisionedThroughput"] = throughput

    try:
        response = dynamodb.create_table(**kwargs)
        return response["TableDescription"]  # type: ignore[no-any-return]
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            raise TableAlreadyExistsError(f"Table '{table_name}' already exists")
        raise StoreError(f"DynamoDB error: {e}")


def drop_table(
    table_name: str, region: str | None = None, profile: str | None = None
) -> dict[str, Any]:
    """
    Drop DynamoDB table.

    Args:
        table_name: Table name
        region: AWS region (optional)
        profile: AWS profile (optional)

    Returns:
        Table description

    Raises:
        TableNotFoundError: If table does not exist
        StoreError: For other DynamoDB errors
    """
    session = boto3.Session(profile_name=profile, region_name=region)
    dynamodb = session.client("dynamodb")

    try:
        response = dynamodb.delete_table(TableName=table_name)
        return response["TableDescription"]  # type: ignore[no-any-return]
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{table_name}' not found")
        raise StoreError(f"DynamoDB error: {e}")
