from delnone import delnone
from foldnotes.util import safetype
import re

HEADING = u'heading'
PARAGRAPH = u'paragraph'
CODE = u'code'
DEFINITION = u'definition'
HTML = u'html'

_kinds = [HEADING, PARAGRAPH, CODE, DEFINITION, HTML]

_whitespace = re.compile(r'\s+')

def normalize_label(label):
    """
    Link labels match case-insensitively, ignoring surrounding whitespace
    and treating any run of inner whitespace as one space.
    """
    assert isinstance(label, safetype), label
    return _whitespace.sub(' ', label.strip()).casefold()

class Block:
    """One block of markup from a document body."""
    def __init__(self, kind, text, line=None, level=None, label=None, url=None):
        assert kind in _kinds, kind
        assert isinstance(text, safetype), text
        if kind == HEADING:
            assert level is not None and 1 <= level <= 6, level
        if kind == DEFINITION:
            if label is None or url is None:
                raise ValueError("definitions need a label and a url")
        self.kind = kind
        self.text = text
        self.line = line
        self.level = level
        self.label = label
        self.url = url

    def is_definition(self):
        return self.kind == DEFINITION

    def is_heading(self):
        return self.kind == HEADING

    def get_dict(self):
        return delnone(dict(kind=self.kind,
                            text=self.text,
                            line=self.line,
                            level=self.level,
                            label=self.label,
                            url=self.url))

    def __eq__(self, other):
        return isinstance(other, Block) and self.get_dict() == other.get_dict()

    def __str__(self):
        return "<%s:%s %r>" % (self.kind, self.line, self.text)

    __repr__ = __str__

def title_of(body, default):
    headings = [b for b in body if b.is_heading()]
    top = [b for b in headings if b.level == 1]
    if top:
        return _whitespace.sub(' ', top[0].text)
    elif headings:
        return _whitespace.sub(' ', headings[0].text)
    return default

class Document:
    def __init__(self, id, title, body, links=None, assets=None):
        assert isinstance(id, safetype), id
        assert isinstance(title, safetype), title
        self.id = id
        self.title = title
        self.body = list(body)
        for block in self.body:
            assert isinstance(block, Block), block
        self.links = dict(links or {})
        self.assets = set(assets or [])
        self._labels = {}
        for label in self.links:
            key = normalize_label(label)
            if key in self._labels:
                raise ValueError("Label %s is defined twice in %s" % (label, id))
            self._labels[key] = label

    def resolve(self, label):
        """Returns the URL for label, or None when the document doesn't define it."""
        key = self._labels.get(normalize_label(label))
        if key is None:
            return None
        return self.links[key]

    def defines(self, label):
        return normalize_label(label) in self._labels

    def definitions(self):
        return [b for b in self.body if b.is_definition()]

    def get_dict(self):
        return delnone(dict(id=self.id,
                            title=self.title,
                            links=self.links or None,
                            assets=sorted(self.assets) or None,
                            body=[b.get_dict() for b in self.body]))

    def __str__(self):
        return "<Document %s %r>" % (self.id, self.title)
