from .builder import (
    CASH_SALE_PATH,
    DATASET_PATH,
    EXPAND_SUB_RESOURCES_PARAM,
    PURCHASE_ORDER_PATH,
    REST_PATH,
    SALES_ORDER_PATH,
    SUITEQL_PATH,
    WORKBOOK_PATH,
    DatasetQuery,
    RecordOp,
    SqlQuery,
    WorkbookQuery,
)
from .client import NetSuiteRestClient
from .config import Credentials, resolve_credentials
from .errors import ConfigurationError, NetSuiteError, ProtocolError, TransportError
from .records import get_record, make_request, update
from .search import Page, SearchState, SearchStream, suiteql_search
from .transport import HttpTransport, Transport, TransportResponse

__version__ = "1.0.0"
