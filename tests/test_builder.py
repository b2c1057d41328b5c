from datetime import UTC, datetime
from typing import Any

import pytest

from dsquery.builder import build_query_payload
from dsquery.config import DataSourceRef, RuntimeConfig
from dsquery.contracts import DataQueryRequest, QueryTarget, TimeRange
from dsquery.hooks import QueryHooks, template_variable_hooks
from dsquery.resolver import UnknownBackendError

CONFIG = RuntimeConfig(
    org_id=2,
    default_datasource="prom",
    datasources={"prom": DataSourceRef(id=7)},
)

T0 = datetime(2024, 1, 1, tzinfo=UTC)
T1 = datetime(2024, 1, 1, 1, tzinfo=UTC)


def _request(*targets: QueryTarget, **kwargs: Any) -> DataQueryRequest:
    return DataQueryRequest(
        targets=list(targets), intervalMs=1000, maxDataPoints=500, **kwargs
    )


def test_single_target_with_range() -> None:
    rng = TimeRange.model_validate({"from": T0, "to": T1, "raw": {"from": "now-1h"}})
    payload = build_query_payload(
        _request(QueryTarget(refId="A", expr="up"), range=rng), 5, CONFIG
    )
    assert payload is not None
    body = payload.to_wire()
    assert body["queries"] == [
        {
            "refId": "A",
            "expr": "up",
            "datasourceId": 5,
            "intervalMs": 1000,
            "maxDataPoints": 500,
            "orgId": 2,
        }
    ]
    assert body["from"] == str(int(T0.timestamp() * 1000))
    assert body["to"] == str(int(T1.timestamp() * 1000))
    assert body["range"]["from"].startswith("2024-01-01T00:00:00")
    assert body["range"]["raw"] == {"from": "now-1h"}


def test_no_range_block_without_range() -> None:
    payload = build_query_payload(_request(QueryTarget(refId="A")), 5, CONFIG)
    assert payload is not None
    assert set(payload.to_wire()) == {"queries"}


def test_empty_targets_signal_empty() -> None:
    assert build_query_payload(_request(), 5, CONFIG) is None


def test_filter_removing_everything_signals_empty() -> None:
    hooks = QueryHooks(filter_query=lambda q: False)
    request = _request(QueryTarget(refId="A"), QueryTarget(refId="B"))
    assert build_query_payload(request, 5, CONFIG, hooks) is None


def test_filter_drops_hidden_targets_and_keeps_order() -> None:
    hooks = QueryHooks(filter_query=lambda q: not q.hide)
    request = _request(
        QueryTarget(refId="A"),
        QueryTarget(refId="B", hide=True),
        QueryTarget(refId="C", datasource="default"),
    )
    payload = build_query_payload(request, 5, CONFIG, hooks)
    assert payload is not None
    assert [(q["refId"], q["datasourceId"]) for q in payload.queries] == [
        ("A", 5),
        ("C", 7),
    ]


def test_expression_target_skips_substitution() -> None:
    calls: list[str] = []

    def apply(query: QueryTarget, scoped_vars: dict[str, Any]) -> dict[str, Any]:
        calls.append(query.ref_id or "")
        return query.to_wire()

    hooks = QueryHooks(apply_template_variables=apply)
    request = _request(
        QueryTarget(refId="A"),
        QueryTarget(refId="B", datasource="__expr__", expression="$A * 2"),
    )
    payload = build_query_payload(request, 5, CONFIG, hooks)
    assert payload is not None
    assert calls == ["A"]
    assert payload.queries[1] == {
        "refId": "B",
        "datasource": "__expr__",
        "expression": "$A * 2",
        "datasourceId": 5,
        "orgId": 2,
    }


def test_unknown_datasource_aborts_batch() -> None:
    request = _request(QueryTarget(refId="A"), QueryTarget(refId="B", datasource="x"))
    with pytest.raises(UnknownBackendError):
        build_query_payload(request, 5, CONFIG)


def test_input_targets_not_mutated() -> None:
    target = QueryTarget(refId="A", expr="up")
    before = target.model_dump(by_alias=True)
    build_query_payload(_request(target), 5, CONFIG, template_variable_hooks())
    assert target.model_dump(by_alias=True) == before


def test_template_variables_are_interpolated() -> None:
    request = _request(
        QueryTarget(refId="A", expr='up{job="$job", env="${env}"}', legend="[[job]]"),
        scopedVars={"job": {"text": "api", "value": "api"}, "env": "prod"},
    )
    payload = build_query_payload(request, 5, CONFIG, template_variable_hooks())
    assert payload is not None
    query = payload.queries[0]
    assert query["expr"] == 'up{job="api", env="prod"}'
    assert query["legend"] == "api"
