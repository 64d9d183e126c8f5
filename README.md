# yozefu

A library for working with Kafka records. It provides:

- **Record decoding** (`yozefu.kafka_record`): raw message bytes become
  readable keys and values. Payloads can be JSON, plain strings, or data in
  the schema registry wire format (a zero magic byte, a 4-byte big-endian
  schema id, then the data). Avro data is decoded using the schema fetched
  from the registry.
- **Schema registry access** (`yozefu.schema_registry`): a small HTTP client
  that fetches schemas by id and caches the ones it finds.
- **A search query language** (`yozefu.query` and the modules it builds on)
  that parses queries for filtering and sorting records, with `from`, `limit`
  and `order by` clauses.
- **Topic metadata types** (`yozefu.topic`): topics, consumer groups, their
  members and their lag.

## Installation

```
pip install yozefu
```

With the test dependencies:

```
pip install "yozefu[test]"
```

## Search queries

```python
from yozefu.query import parse_search_query

query = parse_search_query(
    'from end - 10 key starts with "order-" && offset > 100 order by offset desc limit 50'
)
print(query.limit)                     # 50
print(query.from_)                     # end - 10
print(query.order_by.is_descending())  # True
print(query)                           # the query written back out as text
```

`parse_search_query` returns a `SearchQuery`. Clauses can come in any order;
if a clause appears twice, the later one wins. When a query cannot be parsed,
`yozefu.errors.SearchParseError` is raised; its `remaining` attribute holds the
part of the input where parsing stopped.

The grammar:

```
search-query      ::= clause+
clause            ::= ['where'] or-expression | limit-clause | from-clause | order-clause
or-expression     ::= and-expression (('||' | 'or') and-expression)*
and-expression    ::= term (('&&' | 'and') term)*
term              ::= atom | '!' atom
atom              ::= filter | comparison | '(' or-expression ')'
comparison        ::= ('offset' | 'o' | 'size' | 'si' | 'partition' | 'p') number-operator number
                    | 'offsetTail' ('==' | '=') number
                    | ('topic' | 't' | 'key' | 'k') string-operator string
                    | ('value' | 'v')[path] string-operator string
                    | ('headers' | 'h').name string-operator string
                    | ('timestamp' | 'ts') number-operator time
                    | ('timestamp' | 'ts') 'between' time 'and' time
number-operator   ::= '>=' | '<=' | '>' | '<' | '==' | '=' | '!='
string-operator   ::= '=~' | '~=' | 'contains' | 'include' | 'includes'
                    | 'starts with' | 'start with' | '==' | '=' | '!='
filter            ::= name '(' [parameter (',' parameter)*] ')'
parameter         ::= number | string
limit-clause      ::= 'limit' number
order-clause      ::= ('order' | 'sort') 'by' symbol ['asc' | 'desc']
from-clause       ::= 'from' ('beginning' | 'begin' | 'end' | 'now'
                             | 'end' '-' number | 'offset' '=' number | number | time)
time              ::= quoted RFC 3339 date | quoted fuzzy date | 'now'
string            ::= "..." | '...'
```

Numbers may contain `_` to make them easier to read, for example
`1_000_000`. Fuzzy dates understand phrases such as `"3 hours ago"`,
`"in 2 days"`, `"yesterday"` or `"2024-01-05 10:30"`
(see `yozefu.grammar.parse_fuzzy_date`).

The pieces of a query are also available on their own:
`yozefu.expression.parse_or_expression`, `yozefu.compare.parse_compare`,
`yozefu.filter.parse_filter`, `yozefu.offset.parse_from_offset` and
`yozefu.order.parse_order`. Each takes the text and returns a pair made of the
text left over and the value read, and raises `yozefu.grammar.ParseFailure`
when the text does not match.

## Decoding records

```python
from yozefu.kafka_record import KafkaMessage, KafkaRecord
from yozefu.schema_registry import SchemaRegistryClient

registry = SchemaRegistryClient("http://localhost:8081", {})
message = KafkaMessage(
    topic="orders",
    partition=0,
    offset=42,
    timestamp=1_700_000_000_000,
    key=b"order-1",
    payload=b'{"amount": 12}',
    headers=[("source", b"shop")],
)
record = KafkaRecord.parse(message, registry)
print(record.value.raw())
```

Pass `None` as the registry to decode records without a schema registry. A
payload that cannot be decoded does not raise: the value becomes a string
explaining what went wrong.

Keys and values are `yozefu.data_type.DataType` instances. They can be
compared with a `yozefu.operators.StringOperator`, and a path such as
`.user.name` or `.items[0]` picks out part of a JSON value:

```python
from yozefu.operators import StringOperator

record.value.compare(".amount", StringOperator.EQUAL, "12")  # True
```

`KafkaRecord.to_dict()` and `KafkaRecord.from_dict()` convert records to and
from JSON-compatible dictionaries.

## Exporting records

`yozefu.exported_record.ExportedKafkaRecord.from_record(record)` wraps a copy
of a record with its local date time, the milliseconds since the first and
the previous record (`compute_deltas_ms`) and the text of the search query
that selected it (`set_search_query`). Its `to_dict()` output can be passed
straight to `json.dumps`.

## What this package does not do

- It does not connect to Kafka. Build `KafkaMessage` values from whatever
  consumer you use.
- It parses search queries but does not evaluate them against records, and it
  does not run filters: `parse_filter` only reads their names and parameters.
- It has no command-line tool and no user interface.
- Protobuf payloads are not decoded; the value holds a message saying so,
  together with the raw payload.