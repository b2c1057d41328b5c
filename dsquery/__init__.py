"""Query dispatch and response normalization for backend data sources."""

from .annotations import annotations_from_frame, translate_and_run
from .client import DataSourceWithBackend
from .config import DataSourceSettings, RuntimeConfig, load_config
from .hooks import AnnotationQuery, QueryHooks, template_variable_hooks
from .resolver import EXPRESSION_DATASOURCE, UnknownBackendError
from .response import to_data_query_response
from .transport import TransportError, create_transport

__all__ = [
    "EXPRESSION_DATASOURCE",
    "AnnotationQuery",
    "DataSourceSettings",
    "DataSourceWithBackend",
    "QueryHooks",
    "RuntimeConfig",
    "TransportError",
    "UnknownBackendError",
    "annotations_from_frame",
    "create_transport",
    "load_config",
    "template_variable_hooks",
    "to_data_query_response",
    "translate_and_run",
]
