"""Map per-query backend references to numeric data source ids."""

from __future__ import annotations

from .config import RuntimeConfig

EXPRESSION_DATASOURCE = "__expr__"
DEFAULT_DATASOURCE = "default"


class UnknownBackendError(LookupError):
    """Raised when a backend reference is not present in the configuration."""

    def __init__(self, reference: str) -> None:
        super().__init__(f"Unknown Datasource: {reference}")
        self.reference = reference


def is_expression(reference: str | None) -> bool:
    return reference == EXPRESSION_DATASOURCE


def resolve_datasource_id(
    reference: str | None, self_id: int, config: RuntimeConfig
) -> int:
    """Return the data source id that should execute a query.

    Queries without a reference, and expressions, run on ``self_id``. The
    ``"default"`` reference goes through the configured default name first.
    """

    if not reference or is_expression(reference):
        return self_id
    name = config.default_datasource if reference == DEFAULT_DATASOURCE else reference
    entry = config.datasources.get(name) if name else None
    if entry is None:
        raise UnknownBackendError(reference)
    return entry.id


__all__ = [
    "DEFAULT_DATASOURCE",
    "EXPRESSION_DATASOURCE",
    "UnknownBackendError",
    "is_expression",
    "resolve_datasource_id",
]
