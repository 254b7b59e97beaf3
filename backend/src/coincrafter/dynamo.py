"""
DynamoDB repository.

Reads use the boto3 table resource; every write goes through a single
TransactWriteItems call so a multi-item transition commits or fails as one.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import boto3
from boto3.dynamodb.conditions import Attr, Key
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from .config import config
from .errors import Internal, Unavailable
from .logging import logger
from .models import Collection, KEYS
from .operations import Delete, Increment, Operation, Put, Update
from .repository import Repository

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def normalize(value: Any) -> Any:
    """Turn whole-number Decimals from DynamoDB back into ints."""
    if isinstance(value, Decimal):
        return int(value) if value % 1 == 0 else value
    if isinstance(value, dict):
        return {k: normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [normalize(v) for v in value]
    return value


def serialize(value: Any) -> Dict[str, Any]:
    """Serialize a python value into the low-level attribute format."""
    if isinstance(value, float):
        value = Decimal(str(value))
    return _serializer.serialize(value)


def deserialize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return normalize({k: _deserializer.deserialize(v) for k, v in item.items()})


class DynamoRepository(Repository):
    """Repository backed by one DynamoDB table per collection."""

    def __init__(
        self,
        resource=None,
        table_names: Optional[Dict[str, str]] = None,
        indexes: Optional[Dict[str, Dict[str, str]]] = None
    ):
        self.resource = resource or boto3.resource('dynamodb', region_name=config.AWS_REGION)
        self.client = self.resource.meta.client
        self.table_names = table_names or {
            Collection.USERS: config.USERS_TABLE,
            Collection.TASKS: config.TASKS_TABLE,
            Collection.SUBMISSIONS: config.SUBMISSIONS_TABLE,
            Collection.PAYMENTS: config.PAYMENTS_TABLE,
            Collection.WITHDRAWALS: config.WITHDRAWALS_TABLE,
            Collection.NOTIFICATIONS: config.NOTIFICATIONS_TABLE,
        }
        # collection -> {attribute: GSI name}
        self.indexes = indexes if indexes is not None else {
            Collection.USERS: {'role': config.USERS_ROLE_INDEX},
            Collection.TASKS: {'created_by': config.TASKS_CREATOR_INDEX},
            Collection.SUBMISSIONS: {
                'worker_email': config.SUBMISSIONS_WORKER_INDEX,
                'buyer_email': config.SUBMISSIONS_BUYER_INDEX,
            },
            Collection.PAYMENTS: {'email': config.PAYMENTS_EMAIL_INDEX},
            Collection.WITHDRAWALS: {'worker_email': config.WITHDRAWALS_WORKER_INDEX},
            Collection.NOTIFICATIONS: {'toEmail': config.NOTIFICATIONS_RECIPIENT_INDEX},
        }

    def _table(self, collection: str):
        return self.resource.Table(self.table_names[collection])

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, collection: str, key: Any) -> Optional[Dict[str, Any]]:
        try:
            response = self._table(collection).get_item(Key={KEYS[collection]: key})
        except ClientError as e:
            logger.error(f"Error getting item from {collection}: {e}")
            raise Internal(f'Storage error reading {collection}') from e
        item = response.get('Item')
        return normalize(item) if item else None

    def find(self, collection: str, **equals) -> List[Dict[str, Any]]:
        """
        Query a GSI when one covers a filtered attribute, otherwise scan.
        Follows LastEvaluatedKey until every page is read.
        """
        table = self._table(collection)
        params: Dict[str, Any] = {}

        indexed = self.indexes.get(collection, {})
        index_attr = next((name for name in equals if name in indexed), None)
        if index_attr:
            params['IndexName'] = indexed[index_attr]
            params['KeyConditionExpression'] = Key(index_attr).eq(equals[index_attr])

        filter_expression = None
        for name, value in equals.items():
            if name == index_attr:
                continue
            condition = Attr(name).eq(value)
            filter_expression = condition if filter_expression is None else filter_expression & condition
        if filter_expression is not None:
            params['FilterExpression'] = filter_expression

        read = table.query if index_attr else table.scan
        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = read(**params)
                items.extend(response.get('Items', []))
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                params['ExclusiveStartKey'] = last_key
        except ClientError as e:
            logger.error(f"Error reading {collection}: {e}")
            raise Internal(f'Storage error reading {collection}') from e

        return [normalize(item) for item in items]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def apply(self, operations: Sequence[Operation]) -> None:
        transact_items = [self.render(operation) for operation in operations]

        try:
            self.client.transact_write_items(TransactItems=transact_items)
        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code == 'TransactionCanceledException':
                # Cancellation reasons correspond to the TransactItems list order
                reasons = e.response.get('CancellationReasons', [])
                for operation, reason in zip(operations, reasons):
                    code = reason.get('Code')
                    if code == 'ConditionalCheckFailed':
                        item = reason.get('Item')
                        raise operation.error(deserialize_item(item) if item else None) from e
                    if code == 'TransactionConflict':
                        raise Unavailable('Concurrent update in progress, retry the request') from e
            logger.error(f"Transaction error: {e}")
            raise Internal('Storage error writing changes') from e

        logger.debug(f"Committed {len(transact_items)} operations")

    def render(self, operation: Operation) -> Dict[str, Any]:
        """Render one operation as a TransactWriteItems entry."""
        table_name = self.table_names[operation.collection]
        names = {'#k': operation.key_name}
        values: Dict[str, Any] = {}

        if isinstance(operation, Put):
            return {
                'Put': {
                    'TableName': table_name,
                    'Item': {k: serialize(v) for k, v in operation.item.items()},
                    'ConditionExpression': 'attribute_not_exists(#k)',
                    'ExpressionAttributeNames': names,
                    'ReturnValuesOnConditionCheckFailure': 'ALL_OLD'
                }
            }

        conditions = ['attribute_exists(#k)']
        for i, (name, value) in enumerate(getattr(operation, 'expected', {}).items()):
            names[f'#e{i}'] = name
            values[f':e{i}'] = serialize(value)
            conditions.append(f'#e{i} = :e{i}')

        entry: Dict[str, Any] = {
            'TableName': table_name,
            'Key': {operation.key_name: serialize(operation.key)},
            'ReturnValuesOnConditionCheckFailure': 'ALL_OLD'
        }

        if isinstance(operation, Delete):
            action = 'Delete'
        elif isinstance(operation, Update):
            action = 'Update'
            assignments = []
            for i, (name, value) in enumerate(operation.values.items()):
                names[f'#v{i}'] = name
                values[f':v{i}'] = serialize(value)
                assignments.append(f'#v{i} = :v{i}')
            entry['UpdateExpression'] = 'SET ' + ', '.join(assignments)
        elif isinstance(operation, Increment):
            action = 'Update'
            names['#a'] = operation.attribute
            values[':d'] = serialize(operation.delta)
            entry['UpdateExpression'] = 'ADD #a :d'
            if operation.at_least is not None:
                values[':min'] = serialize(operation.at_least)
                conditions.append('#a >= :min')
        else:
            raise TypeError(f'Unsupported operation {type(operation).__name__}')

        entry['ConditionExpression'] = ' AND '.join(conditions)
        entry['ExpressionAttributeNames'] = names
        if values:
            entry['ExpressionAttributeValues'] = values
        return {action: entry}
