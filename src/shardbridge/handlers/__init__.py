from .progress import (
    ProgressSink as ProgressSink,
    CallbackProgressSink as CallbackProgressSink,
)
from .heartbeat import Heartbeat as Heartbeat
from .split import Split as Split, FileSplit as FileSplit, wrap as wrap
from .decoders import (
    ValueDecoder as ValueDecoder,
    RawJsonDecoder as RawJsonDecoder,
    MapDecoder as MapDecoder,
    resolve_decoder as resolve_decoder,
)
from .scroll_reader import ScrollReader as ScrollReader
from .config import WriterConfig as WriterConfig
from .bulk_writer import BulkWriter as BulkWriter
