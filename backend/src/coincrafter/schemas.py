"""
Request schemas, one per operation that takes a body.

Validated at the handler boundary so domain code never sees a malformed
request. Fields accept snake_case and camelCase names.
"""
from datetime import date
from decimal import Decimal
from typing import Literal, Optional

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from .errors import ValidationError


class RegisterUserRequest(BaseModel):
    name: str = Field(..., min_length=1)
    photo: Optional[str] = Field(None, validation_alias=AliasChoices('photo', 'photoURL', 'photo_url'))
    role: Literal['buyer', 'worker'] = 'worker'


class UpdateRoleRequest(BaseModel):
    role: Literal['buyer', 'worker', 'admin']


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, validation_alias=AliasChoices('title', 'task_title'))
    detail: str = Field(..., min_length=1, validation_alias=AliasChoices('detail', 'task_detail'))
    required_workers: int = Field(..., gt=0, validation_alias=AliasChoices('required_workers', 'requiredWorkers'))
    payable_amount: int = Field(..., gt=0, validation_alias=AliasChoices('payable_amount', 'payableAmount'))
    completion_date: date = Field(..., validation_alias=AliasChoices('completion_date', 'completionDate'))
    submission_info: str = Field('', validation_alias=AliasChoices('submission_info', 'submissionInfo'))
    image_url: Optional[str] = Field(
        None, validation_alias=AliasChoices('image_url', 'imageUrl', 'task_image_url')
    )


class UpdateTaskRequest(BaseModel):
    """Only the descriptive fields of a task can change."""

    model_config = ConfigDict(extra='forbid')

    title: Optional[str] = Field(None, min_length=1, validation_alias=AliasChoices('title', 'task_title'))
    detail: Optional[str] = Field(None, min_length=1, validation_alias=AliasChoices('detail', 'task_detail'))
    submission_info: Optional[str] = Field(
        None, validation_alias=AliasChoices('submission_info', 'submissionInfo')
    )

    @model_validator(mode='after')
    def _has_changes(self):
        if not self.changes():
            raise ValueError('At least one of title, detail, submission_info is required')
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class SubmitWorkRequest(BaseModel):
    task_id: str = Field(..., min_length=1, validation_alias=AliasChoices('task_id', 'taskId'))
    submission_details: str = Field(
        ..., min_length=1, validation_alias=AliasChoices('submission_details', 'submissionDetails', 'details')
    )


class ReviewSubmissionRequest(BaseModel):
    status: Literal['approved', 'rejected']


class WithdrawalRequest(BaseModel):
    withdrawal_coin: int = Field(..., gt=0, validation_alias=AliasChoices('withdrawal_coin', 'withdrawalCoin', 'coins'))
    payment_system: Optional[str] = Field(None, validation_alias=AliasChoices('payment_system', 'paymentSystem'))
    account_number: Optional[str] = Field(None, validation_alias=AliasChoices('account_number', 'accountNumber'))


class PaymentIntentRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, le=Decimal('10000'))


class RecordPaymentRequest(BaseModel):
    transaction_id: str = Field(..., min_length=1, validation_alias=AliasChoices('transaction_id', 'transactionId'))
    amount: Decimal = Field(..., gt=0)
    coins: int = Field(..., gt=0)


def parse_request(schema, body: Optional[dict]):
    """Validate a request body against `schema`, raising the domain ValidationError."""
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return schema.model_validate(body)
    except pydantic.ValidationError as e:
        details = '; '.join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f'Invalid request: {details}') from e
