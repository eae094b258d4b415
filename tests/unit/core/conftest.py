"""Shared fixtures for core unit tests"""

import pytest

from mddata.core.document import Document


SAMPLE_MD = """\
! Handbook

# Introduction {#intro}

Some **bold** text and a [link](http://example.org).

## Scope

- first
  - nested
- second

# Setup {!howto}

| a | b |
|---|---|
| 1 | 2 |

```python
print("hi")
```
"""

SECTIONS_MD = "# A\ntext1\n## B\ntext2\n# C\ntext3"


@pytest.fixture(name="sample_doc")
def sample_doc_fixture():
    return Document.from_text(SAMPLE_MD)


@pytest.fixture(name="sections_doc")
def sections_doc_fixture():
    return Document.from_text(SECTIONS_MD)
