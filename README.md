# lunareact

Building blocks for a code-aware ReAct (Reason + Act) agent. The package has no
third-party dependencies.

- **Scope graphs**
  - `lunareact.nodes` holds the node types and text ranges: `Point`, `TextRange`,
    `LocalScope`, `LocalDef`, `LocalImport`, `Reference` and `Symbol`.
  - `lunareact.namespace` holds `SymbolId`, `all_symbols` and `symbol_id_of`.
  - `lunareact.scope_graph.ScopeGraph` is a lexical graph of scopes,
    definitions, imports and references. It resolves references by namespace.
    A definition can be placed as local, hoisted or global.
  - `lunareact.builder.build_scope_graph` builds a graph from
    `(capture_name, TextRange)` pairs. It accepts these capture names:
    `local.scope`, `local.import`, `<local|hoist|global>.definition[.<symbol>]`
    and `local.reference[.<symbol>]`.
  - `lunareact.debug.debug_scopes` returns a `ScopeDebug` view of a graph, and
    `.render()` prints that view as a nested tree. `context_line` marks a range
    within its source line using `§`.
- **Planning** (`lunareact.planner`)
  - `plan_prompt` returns the system and user messages.
  - `extract_first_json_object` pulls the first valid JSON object out of an
    LLM reply, including one wrapped in code fences.
  - `parse_action` turns that object into one of `SearchAction`,
    `EditFileAction`, `AnswerAction` or `StopAction`. Each action has
    `to_dict()`.
  - `expand_seed_terms` expands search terms, with help from
    `extract_identifiers` and `snake_to_pascal`.
  - `ReActStepTrace` records a single step.
- **Loop safety** (`lunareact.safety`): `ReActSafetyState` counts searches
  in a row that found nothing new. It reports a search that repeats the last
  one (compared ignoring case) and an edit that repeats the last one.
  `should_auto_answer(has_context)` is true after two or more such empty
  searches, when context exists.
- **Hits and context**
  - `lunareact.chunks` holds `IndexChunk` and `ContextChunk`.
  - `lunareact.patterns` recognises definition snippets:
    `extract_definition_name` and `is_definition_chunk`.
  - `lunareact.state` provides `summarize_state`, a text summary for the
    planner. It also provides `merge_hits`, which removes duplicates by path
    and byte span and sorts the result.
  - `lunareact.context` provides `select_context_chunks`, which merges nearby
    chunks, ranks them by hit count, trims them to `ContextEngineOptions` and
    orders them by location. `render_prompt_context` renders a `ContextPack`
    as a `# Retrieved Context` block with line numbers.
- **LLM client** (`lunareact.llm`)
  - `LLMClient.chat` and `chat_system_user` talk to an OpenAI-compatible
    `/chat/completions` endpoint using the standard library. They retry up to
    `max_retries` times and raise `LLMError` on failure.
  - `llm_chat` is a one-shot helper.

## Install

```
pip install lunareact
```

For the tests:

```
pip install "lunareact[test]"
pytest
```

## Examples

Turn a question into search terms:

```python
from lunareact.planner import expand_seed_terms

expand_seed_terms("context_chunks")
# ['context_chunks', 'context_chunk', 'ContextChunk']
```

Parse the plan that an LLM sent back:

```python
from lunareact.planner import extract_first_json_object, parse_action

raw = '```json\n{"action":"search","query":"index_chunks"}\n```'
action = parse_action(extract_first_json_object(raw))
# SearchAction(query='index_chunks')
```

Build a scope graph by hand and resolve a reference:

```python
from lunareact.nodes import Point, TextRange, LocalDef, Reference
from lunareact.scope_graph import ScopeGraph
from lunareact.debug import debug_scopes

def r(start, end):
    return TextRange(Point(start, start, 0), Point(end, end, 0))

src = b"foo\nfoo"
graph = ScopeGraph(r(0, 20), ())
graph.insert_local_def(LocalDef(r(0, 3), None))
graph.insert_ref(Reference(r(4, 7), None), src)
print(debug_scopes(graph, src).render())
```

Summarise the state for the planner:

```python
from lunareact.chunks import ContextChunk
from lunareact.state import summarize_state

chunk = ContextChunk("test.rs", 0, "pub fn test() {}", 0, 0, "search")
print(summarize_state([], [chunk]))
# hits=0 context_chunks=1 has_definition=true definitions=[test]
# - test.rs:1..=1 [def] (test) reason=search
```

`select_context_chunks` and `render_prompt_context` need two callables from
the caller:

- `read_snippet(path, start_line, end_line)` returns the text of an inclusive,
  0-based range of lines.
- `count_tokens(text)` returns a token count.

## Configuration

`LLMConfig.from_env()` reads these environment variables:

- `LLM_API_KEY` (required)
- `LLM_API_BASE`
- `LLM_MODEL`
- `LLM_TEMPERATURE`

If `LLM_API_KEY` is missing or blank, it raises `LLMError`. The other settings
(`max_tokens`, `timeout_secs`, `max_retries`, `retry_delay_ms`) are fields of
`LLMConfig`.

## What it does not do

- There is no command-line program and no server.
- The package parses no source code itself. `build_scope_graph` expects
  captures that are already named and ranged.
- It has no repository search, file reading or file editing tools, and no
  tokenizer. Context selection takes these from the caller as callables.
- It has no agent loop that runs the steps. It supplies the prompt, the action
  parsing, the safety state and the context rendering that such a loop would
  use.