# daxclient

Client-side building blocks for working with a DynamoDB accelerator
cluster. The package is pure Python and has no runtime dependencies.
Requests and attribute values are plain dictionaries that use the service's
field names, for example `{"S": "abc"}` or `{"N": "5"}`.

## Modules

### `daxclient.errors`

- `ServiceError` is the base exception. It carries `code`, `message`,
  `status_code`, `request_id` and an optional `cause`.
- `DaxRequestFailure` adds the server's error-code sequence (`codes`, also
  available as `code_sequence`). `recoverable()` reports whether the first
  code is 2. `auth_error()` reports whether the sequence denotes an
  authentication failure (`x.23.31.32`, `.33` or `.34`).
- `TransactionCanceledFailure` adds per-item reason codes, reason messages,
  raw reason item bytes and an optional list of `CancellationReason`
  objects.
- Each DynamoDB exception has its own class, for example
  `ResourceNotFoundException`, `ConditionalCheckFailedException`,
  `ProvisionedThroughputExceededException` and
  `TransactionCanceledException`.
- `translate_error(err)` returns a service error unchanged. Connection and
  timeout errors become `InternalServerError` or `ResponseTimeout`. Any
  other exception becomes `UnknownError`.
- `convert_dax_error(err)` maps a `DaxRequestFailure` to the specific
  exception that its code sequence names. Sequences it does not recognise
  give a `ServiceError` with code `Unknown`.
- `infer_status_code(codes)` returns 400 when the first code is 4, 500 for
  any other code, and 0 for an empty sequence.

### `daxclient.retryer`

`DaxRetryer` applies equal-jitter exponential backoff to throttled requests.
Delays are in seconds. The base delay defaults to 0.070 and the cap to 20.0.

- `retry_delay(error, retry_count)` returns 0 unless the error is a
  throttle. For a throttle it returns a value between half of
  `min(2**retry_count * base, cap)` and that value itself.
- `should_retry(error)` is true in three cases: the code sequence starts
  with 1 or 2, the error is a throttle, or the sequence is `4.23.31.33`
  (authentication required).
- `max_retries()` returns 0.

The module also offers the helpers `is_throttle_error(error)` and
`is_auth_required(codes)`.

### `daxclient.projection`

- `build_projection_ordinals(expression, names)` splits a projection
  expression on commas. It returns one `DocumentPath` per term.
- `build_document_path(path, names)` parses one term such as
  `#a[1].#b`. Each step becomes a `DocumentPathElement`, which is either a
  map key or a list index. Placeholders are resolved through `names`.
- `ItemBuilder` collects values with `insert(path, value)` and returns the
  assembled item with `to_item()`. List elements come out in index order.

### `daxclient.request_options`

- `RequestOptions` holds the log level, logger, retry delay, a
  `DaxRetryer`, the maximum number of retries, a sleep function and a
  context.
  - `apply_to(settings)` copies these options onto a `RequestSettings`.
  - `merge_from_request(settings, validate)` copies back whatever the
    settings define.
  - `merge_from_options(context, *options)` first applies each option
    callable to fresh settings, then merges the result.
- `validate_request`, `validate_handlers` and `validate_config` raise a
  `ServiceError` with code `InvalidParameter` for options the client does
  not support. Such options include custom handlers, a custom retryer or
  HTTP client, and per-request credentials, endpoint or region.

### `daxclient.conditions` and `daxclient.legacy`

Legacy request parameters can be rewritten in expression form. The
parameters covered are `AttributesToGet`, `Expected`, `AttributeUpdates`,
`ScanFilter`, `QueryFilter` and `KeyConditions`.

`daxclient.legacy` has one function for each request kind:

- `translate_legacy_get_item_input`
- `translate_legacy_put_item_input`
- `translate_legacy_delete_item_input`
- `translate_legacy_update_item_input`
- `translate_legacy_scan_input`
- `translate_legacy_query_input`
- `translate_legacy_batch_get_item_input`

Each function returns a new dictionary and leaves its argument unchanged.
Placeholders are named `#keyN` and `:valN`. They are recorded in
`ExpressionAttributeNames` and `ExpressionAttributeValues`.

`daxclient.conditions` contains the lower-level pieces:

- `ExpressionContext`, with `add_name` and `add_value`
- `expected_condition`
- `filter_condition`
- `comparison_condition`
- `attribute_type_name`

## Examples

```python
from daxclient.legacy import translate_legacy_get_item_input

request = {"TableName": "people", "AttributesToGet": ["a1", "a2"]}
translated = translate_legacy_get_item_input(request)
# translated["ProjectionExpression"] == "#key0,#key1"
# translated["ExpressionAttributeNames"] == {"#key0": "a1", "#key1": "a2"}
```

```python
from daxclient.projection import build_projection_ordinals, ItemBuilder

paths = build_projection_ordinals("a[3],a[2]", None)
builder = ItemBuilder()
builder.insert(paths[0], {"S": "av3"})
builder.insert(paths[1], {"S": "av2"})
builder.to_item()  # {"a": {"L": [{"S": "av2"}, {"S": "av3"}]}}
```

Invalid input raises an error from `daxclient.errors`. For example,
supplying both `AttributesToGet` and `ProjectionExpression` raises a
`ServiceError` with code `ValidationException`.

## What this package does not do

This package is not a complete client. It includes:

- no network connection or cluster discovery;
- no wire encoding or decoding of requests, responses or error payloads;
- no expression parser;
- no paginating read operations.

Callers supply the transport and use these helpers around it.

## Running the tests

```
pip install -e .[test]
pytest
```