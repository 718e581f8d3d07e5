import pytest
from foldnotes.fs import Path, ensure_file
from foldnotes.store import init

WIKIPEDIA_REDUCE = u"https://en.wikipedia.org/wiki/Fold_(higher-order_function)"

REDUCE_MD = u"""# Reduce, Inject, Fold

Everyone has met [Wikipedia Reduce] at some point.

![uneasy](./uneasy.jpg)

```ruby
def adder(xs)
  xs.inject(0) { |acc, x| acc + x }
end
```

The `[not a label]` in code is ignored.

[Wikipedia Reduce]: https://en.wikipedia.org/wiki/Fold_(higher-order_function)
"""

INJECT_MD = u"""Inject
======

A `for` loop is all `forEach` ever was.

    for (var i = 0; i < xs.length; i++) { fn(xs[i]) }
"""


@pytest.fixture
def tmp(tmp_path):
    return Path(str(tmp_path))


@pytest.fixture
def store(tmp):
    init(tmp)
    return tmp


@pytest.fixture
def corpus(store):
    build_file(store, 'reduce.md', REDUCE_MD)
    build_file(store, 'drafts/inject.md', INJECT_MD)
    return store


def build_file(root, sub_path, content, mode="w"):
    """
    Helper function to build a file under a root.
    Returns the full path of the created file.
    """
    p = Path(sub_path, root)
    with ensure_file(p, mode) as fd:
        fd.write(content)
    return p


def build_dir(root, sub_path):
    """
    Helper function to build a dir under a root.
    Returns the full path to the created dir.
    """
    p = Path(sub_path, root)
    p.mkdir()
    return p
