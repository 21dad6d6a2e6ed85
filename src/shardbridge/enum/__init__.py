from .shard_preference import ShardPreference as ShardPreference
from .health_status import HealthStatus as HealthStatus
from .authentication_method import AuthenticationMethod as AuthenticationMethod
from .write_operation import WriteOperation as WriteOperation
from .bulk_retry_policy import BulkRetryPolicy as BulkRetryPolicy
from .field_presence_validation import (
    FieldPresenceValidation as FieldPresenceValidation,
)
from .reader_state import ReaderState as ReaderState
from .outcome_kind import OutcomeKind as OutcomeKind
