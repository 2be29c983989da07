# ofcatalog

A library for keeping a service catalogue in shape. It runs graphs of fact
tasks (extract data from GitHub, JSON APIs or Prometheus, validate it,
aggregate it) down to a single number, reads and writes YAML definition and
state files, detects drift between state and configuration, resolves squad
ownership, collects documentation links, and talks to Compass over GraphQL
and REST.

## Modules

| Module | Contents |
| --- | --- |
| `ofcatalog.expression` | `evaluate(expr)` for comparisons such as `"5 >= 3"`; `ExpressionError` |
| `ofcatalog.listutils` | `contains(items, element)` |
| `ofcatalog.transformers` | `bool_to_float`, `string_to_float`, `interface_to_float`, `toml_to_json` |
| `ofcatalog.drift` | `detect(...)` returning a `DriftResult` |
| `ofcatalog.commandcontext` | `CommandContext`, `init()`, `handle_signal(cancel)` |
| `ofcatalog.compass_errors` | `CompassError`, `has_already_exists_error`, `has_not_found_error` |
| `ofcatalog.config` | `ConfigService`: settings from the environment and an optional `.env` |
| `ofcatalog.yamlstate` | `ParseInput`, `parse`, `parse_filtered`, `sort_results`, `write_state`, `write_metric_states`, `write_scorecard_states`, `write_component_states` |
| `ofcatalog.owners` | `OwnerService`, `Group`, `Owner`, `SquadNotFoundError`, `load_squads_from_yaml`, `find_vendored_org_file` |
| `ofcatalog.compass` | `CompassService`, `GraphQLClient`, `CompassHTTPClient`, `APISpecificationsInput`, `InputDTO`, `CompassServiceError` |
| `ofcatalog.jsonservice` | `JSONService.get(url, headers)` |
| `ofcatalog.prometheus` | `PrometheusService`, `QueryRange` |
| `ofcatalog.github` | `GitHubService`, `GitHubError`, `GitHubNotFoundError` |
| `ofcatalog.documents` | `DocumentService`, `Document`, `NavItem` |
| `ofcatalog.factsystem.task` | `Task`, `TaskAuth`, `TaskType`, `TaskRule`, `TaskSource`, `TaskMethod` |
| `ofcatalog.factsystem.utils` | jq-style `inspect_extracted_data`, `inspect_extracted_data_with_regex`, `replace_placeholder`, `to_list` |
| `ofcatalog.factsystem.extractor` | `Extractor`, `ExtractionError` |
| `ofcatalog.factsystem.validator` | `Validator`, `ValidationError` |
| `ofcatalog.factsystem.aggregator` | `Aggregator`, `AggregationError` |
| `ofcatalog.factsystem.processor` | `Processor` |

## Examples

Comparisons:

```python
from ofcatalog.expression import evaluate, ExpressionError

evaluate("7 >= 7")   # True
evaluate("3<2")      # False

try:
    evaluate("5 >> 3")
except ExpressionError as exc:
    print(exc)
```

Conversions:

```python
from ofcatalog.transformers import interface_to_float, toml_to_json

interface_to_float(True)       # 1.0
interface_to_float("123.45")   # 123.45
interface_to_float(None)       # 0.0
toml_to_json('key = "value"')  # b'{"key":"value"}'
```

`interface_to_float` raises `TypeError` for unsupported types and
`ValueError` for strings that are not numbers.

Drift between stored state and configuration:

```python
from ofcatalog.drift import detect

result = detect(
    state_map,
    config_map,
    from_state_to_config=lambda state, conf: None,
    is_equal=lambda a, b: a == b,
)
print(result.created, result.updated, result.deleted, result.unchanged)
```

`from_state_to_config` is called on every pair present in both maps before
they are compared.

Fact tasks:

```python
from ofcatalog.factsystem.aggregator import Aggregator
from ofcatalog.factsystem.extractor import Extractor
from ofcatalog.factsystem.processor import Processor
from ofcatalog.factsystem.task import Task
from ofcatalog.factsystem.validator import Validator

tasks = [
    Task(id="read", type="extract", source="github", repo="my-repo",
         file_path="package.json", rule="jsonpath", json_path=".version"),
    Task(id="check", type="validate", depends_on=["read"],
         rule="regex_match", pattern=r"^\d+\.\d+\.\d+$"),
    Task(id="all", type="aggregate", depends_on=["check"], method="and"),
]
processor = Processor(Aggregator(), Validator(), Extractor(config, json_service, github, prometheus))
score = processor.process(tasks)
```

Each task runs in its own thread once its dependencies are done. A task
that fails is reported on standard output and the others carry on. The
result of the task that finished last is returned as a float.

Squad owners:

```python
from ofcatalog.owners import OwnerService, SquadNotFoundError

service = OwnerService.from_default_location()
try:
    owner = service.get_owner_by_tribe_and_squad("Some Tribe", "some-squad")
    print(owner.owner_id, owner.slack_channels, owner.projects)
except SquadNotFoundError as exc:
    print(exc)
```

`from_default_location` looks for
`vendor/github.com/motain/of-org/main.yaml` in the working directory, its
parent and its grandparent, then next to the nearest `go.mod`. If it finds
no file it starts with no squads. `OwnerService(squads)` takes the squads
directly.

State files:

```python
from dataclasses import dataclass
from ofcatalog import yamlstate

@dataclass
class MetricDTO:
    kind: str
    name: str

yamlstate.write_state([MetricDTO("metric", "coverage")], MetricDTO)   # .state/metric.yaml
items = yamlstate.parse(yamlstate.ParseInput(".state"), MetricDTO, lambda m: m.name)
```

The kind comes from the type name before `DTO`, in lower case. Only
documents whose `kind` matches it are kept. A type may provide `from_dict`
and `to_dict`. Otherwise it is built from keyword arguments, and dataclasses
are written with `dataclasses.asdict`.

Compass:

```python
from ofcatalog.compass import (
    APISpecificationsInput, CompassHTTPClient, CompassService, GraphQLClient,
)
from ofcatalog.config import ConfigService

config = ConfigService()
compass = CompassService(config, GraphQLClient(config), CompassHTTPClient(config))
compass.send_metric({"metricSourceId": "id", "value": "1"})
compass.send_api_specifications(
    APISpecificationsInput(component_id="abc", api_specs="openapi: 3.0.0", file_name="api.yaml")
)
```

A non-200 response or a failed request raises `CompassServiceError`.

## Configuration

`ConfigService` reads environment variables. A `.env` file is loaded when
present.

| Variable | Method | Default |
| --- | --- | --- |
| `GITHUB_ORG` | `github_org()` | `motain` |
| `GITHUB_TOKEN` | `github_token()` | |
| `GITHUB_USER` | `github_user()` | |
| `COMPASS_TOKEN` | `compass_token()` | |
| `COMPASS_HOST` | `compass_host()` | |
| `COMPASS_CLOUD_ID` | `compass_cloud_id()` | |
| `PROMETHEUS_URL` | `prometheus_url()` | |
| `AWS_REGION` | `aws_region()` | `eu-west-1` |
| `AWS_ROLE` | `aws_role()` | |

`get(name)` returns any variable, or `""` when it is unset.

## What it does not do

- It is a library only. It has no command-line tool for applying metrics, scorecards or components.
- `GitHubService` does not talk to GitHub itself. You pass it a client object with these methods:
  - `get_repository(owner, repo)`
  - `get_contents(owner, repo, path)`
  - `search_code(repo, query)`

  The client raises `GitHubNotFoundError` on 404 and `GitHubError` on other failures.
- `PrometheusService` likewise needs a client object with `query(query, timestamp)` and `query_range(query, query_range)`. No client with AWS request signing is included.
- There is no reading of tokens from a system keyring.

## Requirements

Python 3.11 or later, with `requests`, `pyyaml` and `python-dotenv`.
Install `.[test]` to run the tests with pytest.