"""
Tests for the DynamoDB repository against a mocked boto3 resource.
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from coincrafter.app import Services
from coincrafter.dynamo import DynamoRepository, normalize
from coincrafter.errors import (
    AlreadyExists, Conflict, Internal, InsufficientBalance, InvalidTransition, NotFound, Unavailable,
    UserNotFound
)
from coincrafter.models import Collection
from coincrafter.operations import AdjustCoins, Delete, Increment, Put, Transition, Update
from coincrafter.schemas import RecordPaymentRequest


@pytest.fixture
def resource():
    return MagicMock()


@pytest.fixture
def repo(resource):
    return DynamoRepository(resource=resource)


def cancelled(*reasons):
    """A TransactionCanceledException as botocore raises it."""
    return ClientError(
        {
            'Error': {'Code': 'TransactionCanceledException', 'Message': 'Transaction cancelled'},
            'CancellationReasons': list(reasons),
        },
        'TransactWriteItems'
    )


class TestRender:
    """Operations become TransactWriteItems entries with their conditions."""

    def test_put_requires_new_key(self, repo):
        entry = repo.render(Put(Collection.PAYMENTS, item={'transactionId': 'pi_1', 'coins': 10}))

        put = entry['Put']
        assert put['ConditionExpression'] == 'attribute_not_exists(#k)'
        assert put['ExpressionAttributeNames'] == {'#k': 'transactionId'}
        assert put['Item'] == {'transactionId': {'S': 'pi_1'}, 'coins': {'N': '10'}}

    def test_debit_is_guarded_add(self, repo):
        entry = repo.render(AdjustCoins(key='w@example.com', delta=-30))

        update = entry['Update']
        assert update['Key'] == {'email': {'S': 'w@example.com'}}
        assert update['UpdateExpression'] == 'ADD #a :d'
        assert update['ConditionExpression'] == 'attribute_exists(#k) AND #a >= :min'
        assert update['ExpressionAttributeNames'] == {'#k': 'email', '#a': 'coins'}
        assert update['ExpressionAttributeValues'] == {':d': {'N': '-30'}, ':min': {'N': '30'}}

    def test_credit_has_no_floor(self, repo):
        update = repo.render(AdjustCoins(key='w@example.com', delta=50))['Update']

        assert update['ConditionExpression'] == 'attribute_exists(#k)'
        assert update['ExpressionAttributeValues'] == {':d': {'N': '50'}}

    def test_transition_is_compare_and_swap(self, repo):
        entry = repo.render(Transition(
            Collection.SUBMISSIONS, 'sub-1', current='pending', target='approved'
        ))

        update = entry['Update']
        assert update['TableName'] == repo.table_names[Collection.SUBMISSIONS]
        assert update['UpdateExpression'] == 'SET #v0 = :v0'
        assert update['ConditionExpression'] == 'attribute_exists(#k) AND #e0 = :e0'
        assert update['ExpressionAttributeNames'] == {'#k': 'submissionId', '#e0': 'status', '#v0': 'status'}
        assert update['ExpressionAttributeValues'] == {':e0': {'S': 'pending'}, ':v0': {'S': 'approved'}}
        assert update['ReturnValuesOnConditionCheckFailure'] == 'ALL_OLD'

    def test_delete_with_expected_values(self, repo):
        entry = repo.render(Delete(Collection.TASKS, 't-1', expected={'required_workers': 3, 'status': 'pending'}))

        delete = entry['Delete']
        assert delete['Key'] == {'taskId': {'S': 't-1'}}
        assert delete['ConditionExpression'] == 'attribute_exists(#k) AND #e0 = :e0 AND #e1 = :e1'
        assert delete['ExpressionAttributeValues'] == {':e0': {'N': '3'}, ':e1': {'S': 'pending'}}

    def test_update_without_expectations(self, repo):
        update = repo.render(Update(Collection.USERS, 'u@example.com', values={'role': 'buyer'}))['Update']

        assert update['ConditionExpression'] == 'attribute_exists(#k)'
        assert update['UpdateExpression'] == 'SET #v0 = :v0'

    def test_capacity_claim(self, repo):
        update = repo.render(
            Increment(Collection.TASKS, 't-1', attribute='required_workers', delta=-1, at_least=1)
        )['Update']

        assert update['ExpressionAttributeNames']['#a'] == 'required_workers'
        assert update['ExpressionAttributeValues'] == {':d': {'N': '-1'}, ':min': {'N': '1'}}


class TestApply:

    def test_single_transaction_for_all_operations(self, repo, resource):
        repo.apply([
            Transition(Collection.SUBMISSIONS, 'sub-1', current='pending', target='approved'),
            AdjustCoins(key='w@example.com', delta=50),
        ])

        resource.meta.client.transact_write_items.assert_called_once()
        items = resource.meta.client.transact_write_items.call_args.kwargs['TransactItems']
        assert len(items) == 2

    def test_failed_status_guard_is_invalid_transition(self, repo, resource):
        resource.meta.client.transact_write_items.side_effect = cancelled(
            {'Code': 'ConditionalCheckFailed', 'Item': {'submissionId': {'S': 'sub-1'}, 'status': {'S': 'approved'}}},
            {'Code': 'None'},
        )

        with pytest.raises(InvalidTransition):
            repo.apply([
                Transition(Collection.SUBMISSIONS, 'sub-1', current='pending', target='approved'),
                AdjustCoins(key='w@example.com', delta=50),
            ])

    def test_failed_debit_is_insufficient_balance(self, repo, resource):
        resource.meta.client.transact_write_items.side_effect = cancelled(
            {'Code': 'None'},
            {'Code': 'ConditionalCheckFailed', 'Item': {'email': {'S': 'w@example.com'}, 'coins': {'N': '5'}}},
        )

        with pytest.raises(InsufficientBalance) as excinfo:
            repo.apply([
                Transition(Collection.WITHDRAWALS, 'wd-1', current='pending', target='approved'),
                AdjustCoins(key='w@example.com', delta=-10),
            ])

        assert excinfo.value.balance == 5
        assert excinfo.value.required == 10

    def test_missing_user_is_user_not_found(self, repo, resource):
        resource.meta.client.transact_write_items.side_effect = cancelled(
            {'Code': 'ConditionalCheckFailed'},
        )

        with pytest.raises(UserNotFound):
            repo.apply([AdjustCoins(key='ghost@example.com', delta=10)])

    def test_missing_item_is_not_found(self, repo, resource):
        resource.meta.client.transact_write_items.side_effect = cancelled(
            {'Code': 'ConditionalCheckFailed'},
        )

        with pytest.raises(NotFound):
            repo.apply([Delete(Collection.TASKS, 't-1')])

    def test_duplicate_put_is_conflict(self, repo, resource):
        resource.meta.client.transact_write_items.side_effect = cancelled(
            {'Code': 'ConditionalCheckFailed', 'Item': {'transactionId': {'S': 'pi_1'}}},
            {'Code': 'None'},
        )

        with pytest.raises(AlreadyExists):
            repo.apply([
                Put(Collection.PAYMENTS, item={'transactionId': 'pi_1'}),
                AdjustCoins(key='b@example.com', delta=100),
            ])

    def test_transaction_conflict_is_retryable(self, repo, resource):
        resource.meta.client.transact_write_items.side_effect = cancelled(
            {'Code': 'TransactionConflict'},
        )

        with pytest.raises(Unavailable) as excinfo:
            repo.apply([AdjustCoins(key='b@example.com', delta=100)])

        assert excinfo.value.status_code == 503
        assert not isinstance(excinfo.value, Conflict)

    def test_other_errors_are_internal(self, repo, resource):
        resource.meta.client.transact_write_items.side_effect = ClientError(
            {'Error': {'Code': 'ProvisionedThroughputExceededException', 'Message': 'slow down'}},
            'TransactWriteItems'
        )

        with pytest.raises(Internal):
            repo.apply([AdjustCoins(key='b@example.com', delta=100)])


class TestRecordPaymentOnDynamo:
    """Payment recording through the DynamoDB transaction error mapping."""

    @pytest.fixture
    def payments(self, repo):
        return Services(repo).payments

    def request(self, transaction_id):
        return RecordPaymentRequest.model_validate(
            {'transactionId': transaction_id, 'amount': '10.00', 'coins': 200}
        )

    def test_transient_conflict_on_new_transaction_is_retryable(self, payments, resource):
        # Put payment first, then the coin credit that hit a concurrent write
        resource.meta.client.transact_write_items.side_effect = cancelled(
            {'Code': 'None'},
            {'Code': 'TransactionConflict'},
        )

        with pytest.raises(Unavailable):
            payments.record('buyer@example.com', self.request('pi_new'))

    def test_seen_transaction_is_a_duplicate(self, payments, resource):
        resource.meta.client.transact_write_items.side_effect = cancelled(
            {'Code': 'ConditionalCheckFailed', 'Item': {'transactionId': {'S': 'pi_seen'}}},
            {'Code': 'None'},
        )

        with pytest.raises(Conflict) as excinfo:
            payments.record('buyer@example.com', self.request('pi_seen'))

        assert excinfo.value.message == 'Transaction pi_seen was already recorded'

    def test_payment_put_goes_before_credit(self, payments, resource):
        payments.record('buyer@example.com', self.request('pi_ok'))

        first_call = resource.meta.client.transact_write_items.call_args_list[0]
        put, credit = first_call.kwargs['TransactItems']
        assert put['Put']['Item']['transactionId'] == {'S': 'pi_ok'}
        assert credit['Update']['ExpressionAttributeValues'] == {':d': {'N': '200'}}


class TestReads:

    def test_get_normalizes_numbers(self, repo, resource):
        table = resource.Table.return_value
        table.get_item.return_value = {'Item': {'email': 'w@example.com', 'coins': Decimal('150')}}

        item = repo.get(Collection.USERS, 'w@example.com')

        table.get_item.assert_called_once_with(Key={'email': 'w@example.com'})
        assert item == {'email': 'w@example.com', 'coins': 150}
        assert isinstance(item['coins'], int)

    def test_get_missing(self, repo, resource):
        resource.Table.return_value.get_item.return_value = {}

        assert repo.get(Collection.TASKS, 'nope') is None

    def test_find_uses_index_and_follows_pages(self, repo, resource):
        table = resource.Table.return_value
        table.query.side_effect = [
            {'Items': [{'submissionId': 's1'}], 'LastEvaluatedKey': {'submissionId': 's1'}},
            {'Items': [{'submissionId': 's2'}]},
        ]

        items = repo.find(Collection.SUBMISSIONS, worker_email='w@example.com', status='approved')

        assert [i['submissionId'] for i in items] == ['s1', 's2']
        first_call, second_call = table.query.call_args_list
        assert first_call.kwargs['IndexName'] == 'WorkerEmailIndex'
        assert 'FilterExpression' in first_call.kwargs
        assert second_call.kwargs['ExclusiveStartKey'] == {'submissionId': 's1'}
        table.scan.assert_not_called()

    def test_find_without_index_scans(self, repo, resource):
        table = resource.Table.return_value
        table.scan.return_value = {'Items': [{'taskId': 't1', 'required_workers': Decimal('2')}]}

        items = repo.find(Collection.TASKS)

        assert items == [{'taskId': 't1', 'required_workers': 2}]
        assert table.scan.call_args.kwargs == {}
        table.query.assert_not_called()

    def test_read_errors_are_internal(self, repo, resource):
        resource.Table.return_value.scan.side_effect = ClientError(
            {'Error': {'Code': 'ResourceNotFoundException', 'Message': 'no table'}}, 'Scan'
        )

        with pytest.raises(Internal):
            repo.find(Collection.TASKS)


class TestNormalize:

    def test_keeps_fractional_decimals(self):
        assert normalize({'amount': Decimal('9.99'), 'coins': Decimal('100')}) == {
            'amount': Decimal('9.99'), 'coins': 100
        }
