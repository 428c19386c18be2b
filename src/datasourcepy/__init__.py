"""Building blocks for SimpleJSON dashboard datasources.

Collect (timestamp, column, value) triples in a Dataset, or wrap columnar
data in a Table, and turn either into a TableResponse for the dashboard.
"""

from datasourcepy.core.dataset import Dataset
from datasourcepy.core.encoding import (
    ColumnLengthError,
    encode_response,
    encode_responses,
)
from datasourcepy.core.indexer import Indexer
from datasourcepy.core.models import (
    Annotation,
    AnnotationRequest,
    Column,
    DataPoint,
    NumberColumn,
    QueryArgs,
    QueryRequest,
    Range,
    StringColumn,
    TableResponse,
    Target,
    TimeColumn,
    TimeSeriesResponse,
)
from datasourcepy.core.table import Table, TableColumn

__all__ = [
    "Annotation",
    "AnnotationRequest",
    "Column",
    "ColumnLengthError",
    "DataPoint",
    "Dataset",
    "Indexer",
    "NumberColumn",
    "QueryArgs",
    "QueryRequest",
    "Range",
    "StringColumn",
    "Table",
    "TableColumn",
    "TableResponse",
    "Target",
    "TimeColumn",
    "TimeSeriesResponse",
    "encode_response",
    "encode_responses",
]
