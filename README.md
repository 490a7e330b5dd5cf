# assistclient

A small client for assistant-style HTTP APIs. It uses only the standard library. It covers the following:

- `assistclient.thread`: create, retrieve, modify and delete threads.
- `assistclient.run`: start runs on a thread, or create a thread and run it in one call. It can also retrieve, modify, list and cancel runs, submit tool outputs, and retrieve and list run steps.
- `assistclient.vector_store`: manage vector stores, their files and their file batches.
- `assistclient.moderation`: check text with a moderation model.
- `assistclient.speech`: request synthesized speech.
- `assistclient.stream_reader`: read `data:` lines from a server-sent event stream.
- `assistclient.transport`: the HTTP layer, with pagination, rate-limit headers and API errors.

## Installation

```
pip install assistclient
```

To run the tests:

```
pip install "assistclient[test]"
pytest
```

## The transport

Each API call is a module-level function. Its first argument is a `Transport`.

```python
from assistclient.transport import Transport

transport = Transport(auth_token="placeholder", base_url="https://api.example.com/v1")
```

What the `Transport` sends with each request:

- It sends `Authorization: Bearer <auth_token>`.
- If `org_id` is set, it sends `OpenAI-Organization`.
- For assistants endpoints, it sends `OpenAI-Beta: assistants=<assistant_version>`. The default version is `v2`.

Other options:

- `timeout` is passed to `urllib`.
- `sender` replaces the HTTP layer. It is a callable that takes a `PreparedRequest` and returns an `ApiResponse`, which is useful in tests.

A response status outside 200–399 raises `APIError`. The error has these attributes:

- `message`
- `type`
- `param`
- `code`
- `http_status_code`

`Pagination(limit=..., order=..., after=..., before=...)` builds the query string for list calls. Any field left as `None` is left out of the query.

## Threads and runs

```python
from assistclient.transport import Pagination
from assistclient.thread import ThreadRequest, ThreadMessage, ThreadMessageRole, create_thread
from assistclient.run import RunRequest, create_run, list_runs

thread = create_thread(
    transport,
    ThreadRequest(messages=[ThreadMessage(role=ThreadMessageRole.USER, content="Hello, World!")]),
)
run = create_run(transport, thread.id, RunRequest(assistant_id="asst_abc123"))

runs = list_runs(transport, thread.id, Pagination(limit=20, order="desc"))
for item in runs.runs:
    print(item.id, item.status)
```

Status fields such as `Run.status` come back as enum members, for example `RunStatus.QUEUED`. If the server sends a value the client does not know, the field holds that value as a plain string.

## Moderation

```python
from assistclient.moderation import ModerationRequest, moderations

response = moderations(transport, ModerationRequest(input="some text", model="omni-moderation-latest"))
print(response.results[0].flagged, response.results[0].categories.violence)
```

Only the models in `VALID_MODERATION_MODELS` are accepted. Any other model raises `InvalidModerationModelError` before a request is sent. If you leave the model empty, the server chooses one.

## Vector stores

```python
from assistclient.vector_store import (
    VectorStoreRequest, create_vector_store, create_vector_store_file_batch,
)

store = create_vector_store(transport, VectorStoreRequest(name="TestStore"))
batch = create_vector_store_file_batch(transport, store.id, ["file-abc123"])
print(batch.status, batch.file_counts.completed)
```

`delete_vector_store_file` returns `None`. It ignores the response body.

## Speech

```python
from assistclient.speech import CreateSpeechRequest, SpeechModel, SpeechVoice, create_speech

with create_speech(transport, CreateSpeechRequest(SpeechModel.TTS_1, "Hello!", SpeechVoice.ALLOY)) as audio:
    data = audio.read()
```

The response is returned unread. Read it, then close it.

## Streams

`StreamReader` takes an iterable of byte lines. Each line must end in a newline. The reader returns the payload of each `data:` line, decoded with `decode`, which is `json.loads` by default.

- `recv()` returns the next message.
- `recv_raw()` returns the next payload undecoded.
- Once the stream has reached `data: [DONE]`, or has run out of lines, both raise `EOFError`.
- Iterating over the reader stops at that point instead of raising.
- If the stream carries an error document, the reader raises `StreamAPIError`.
- More than `empty_messages_limit` non-data lines in a row raise `TooManyEmptyStreamMessagesError`. The default limit is 300.

```python
import json
from assistclient.stream_reader import StreamReader

with StreamReader(lines, decode=json.loads) as stream:
    for message in stream:
        print(message)
```

## Rate limits

An `ApiResponse` reads its rate-limit headers with `rate_limits()`. Every parsed response object also keeps its headers in `headers`, and `RateLimitHeaders.from_headers` reads the limits from those.

```python
from assistclient.transport import RateLimitHeaders

limits = RateLimitHeaders.from_headers(thread.headers)
print(limits.remaining_requests, limits.reset_requests.duration(), limits.reset_requests.time())
```

If a number cannot be read, it becomes 0. If a reset interval cannot be read, it becomes a zero duration.

## What it does not cover

The package covers only the endpoints listed above. It has none of the following:

- chat or text completions
- files
- images
- audio transcription
- assistant or message management
- a command-line tool

`StreamReader` reads any line stream. No API call in the package opens a stream for you.