import pytest
from pathlib import Path

CORPUS_DIR = Path(__file__).resolve().parent.parent / "skills"


VALID_SKILL = """---
name: demo
description: demo library for tests
version: 1.2.0
ecosystem: python
license: MIT
---

## Imports

```python
import demo
from demo import Client
```

## Core Patterns

Create one client per process and reuse it for every call; the client keeps
a pool of connections and a cache of resolved endpoints.

```python
import demo

client = demo.Client(timeout=10)
result = client.fetch("items", page=1)
print(result)
```

Streaming responses are consumed with a context manager so the connection is
returned to the pool even when iteration stops early.

```python
async def stream(client):
    async with client.stream("items") as rows:
        async for row in rows:
            print(row)
```

## Configuration

Settings are read from keyword arguments; nothing is read from the environment.

## Pitfalls

### Wrong: a client per call

```python
def get(name):
    return demo.Client().fetch(name)
```

### Right: share the client

```python
def get(client, name):
    return client.fetch(name)
```

## References

- [Documentation](https://demo.example.org/docs/)
"""


@pytest.fixture
def valid_skill():
    return VALID_SKILL


@pytest.fixture
def corpus_dir():
    return CORPUS_DIR


@pytest.fixture
def skill_dir(tmp_path):
    """A corpus directory holding one valid and one broken skill file."""
    d = tmp_path / "skills"
    d.mkdir()
    (d / "demo-SKILL.md").write_text(VALID_SKILL, encoding="utf-8")
    (d / "broken-SKILL.md").write_text(
        "# broken\n\n## Imports\n\n```python\nimport broken\n",
        encoding="utf-8",
    )
    (d / "notes.md").write_text("# not a skill file\n", encoding="utf-8")
    return d
