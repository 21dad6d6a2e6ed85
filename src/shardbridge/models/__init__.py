from .partition import PartitionDescriptor as PartitionDescriptor
from .stats import Stats as Stats
from .bulk import (
    BulkEntry as BulkEntry,
    BulkItemOutcome as BulkItemOutcome,
)
