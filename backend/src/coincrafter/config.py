"""
Configuration module for Lambda handlers.
Loads all environment variables needed by the platform.
"""
import os


class Config:
    """Centralized configuration from environment variables."""

    # AWS Region
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')

    # Storage backend: 'dynamodb' in deployed stacks, 'memory' for local runs
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'dynamodb')

    # DynamoDB Tables
    USERS_TABLE = os.environ.get('USERS_TABLE', 'coincrafter-users')
    TASKS_TABLE = os.environ.get('TASKS_TABLE', 'coincrafter-tasks')
    SUBMISSIONS_TABLE = os.environ.get('SUBMISSIONS_TABLE', 'coincrafter-submissions')
    PAYMENTS_TABLE = os.environ.get('PAYMENTS_TABLE', 'coincrafter-payments')
    WITHDRAWALS_TABLE = os.environ.get('WITHDRAWALS_TABLE', 'coincrafter-withdrawals')
    NOTIFICATIONS_TABLE = os.environ.get('NOTIFICATIONS_TABLE', 'coincrafter-notifications')

    # Global Secondary Indexes
    USERS_ROLE_INDEX = os.environ.get('USERS_ROLE_INDEX', 'RoleIndex')
    TASKS_CREATOR_INDEX = os.environ.get('TASKS_CREATOR_INDEX', 'CreatedByIndex')
    SUBMISSIONS_WORKER_INDEX = os.environ.get('SUBMISSIONS_WORKER_INDEX', 'WorkerEmailIndex')
    SUBMISSIONS_BUYER_INDEX = os.environ.get('SUBMISSIONS_BUYER_INDEX', 'BuyerEmailIndex')
    PAYMENTS_EMAIL_INDEX = os.environ.get('PAYMENTS_EMAIL_INDEX', 'EmailIndex')
    WITHDRAWALS_WORKER_INDEX = os.environ.get('WITHDRAWALS_WORKER_INDEX', 'WorkerEmailIndex')
    NOTIFICATIONS_RECIPIENT_INDEX = os.environ.get('NOTIFICATIONS_RECIPIENT_INDEX', 'RecipientIndex')

    # Coin economy
    WORKER_SIGNUP_COINS = int(os.environ.get('WORKER_SIGNUP_COINS', '10'))
    BUYER_SIGNUP_COINS = int(os.environ.get('BUYER_SIGNUP_COINS', '50'))
    WITHDRAWAL_COINS_PER_DOLLAR = int(os.environ.get('WITHDRAWAL_COINS_PER_DOLLAR', '20'))
    TOP_WORKERS_LIMIT = int(os.environ.get('TOP_WORKERS_LIMIT', '6'))

    # API responses
    CORS_ALLOW_ORIGIN = os.environ.get('CORS_ALLOW_ORIGIN', '*')

    # Payments
    PAYMENT_CURRENCY = os.environ.get('PAYMENT_CURRENCY', 'usd')


config = Config()
