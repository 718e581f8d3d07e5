"""
Reads markdown articles into Documents.

Block structure comes from markdown-it's CommonMark parser. The inline
content of each block is parsed again with no definitions in scope, so every
reference style link stays bracketed text and the label it names can be read
back exactly as it was written.
"""
from foldnotes.document import Block, Document, HEADING, PARAGRAPH, CODE, DEFINITION, HTML, normalize_label, title_of
from foldnotes.util import pipeline, ffilter, fmap, concatMap, first, uniq, partial
from markdown_it import MarkdownIt
from urllib.parse import unquote
import re

LABEL = u'label'
IMAGE = u'image'

_md = MarkdownIt('commonmark', {'inline_definitions': True})
# Escapes stay separate tokens, so an escaped bracket never pairs up.
_md.disable('text_join')

_bracket = re.compile(r'\[([^\[\]]*)\](?:\[([^\[\]]*)\])?')
_label = re.compile(r'\[((?:\\.|[^\[\]\\])+)\]:')
_html_img = re.compile(r'<img\b[^>]*?\bsrc\s*=\s*(?:"(?P<dq>[^"]*)"|\'(?P<sq>[^\']*)\'|(?P<uq>[^\s>]+))', re.IGNORECASE)
_html_comment = re.compile(r'<!--.*?-->', re.DOTALL)
_scheme = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*:')

# Inline tokens a label can be written across.
_label_markup = ['em_open', 'em_close', 'strong_open', 'strong_close']

class Reference:
    """A place in a body which points at a link label or an image path."""
    def __init__(self, kind, target, line, image=False):
        assert kind in [LABEL, IMAGE], kind
        self.kind = kind
        self.target = target
        self.line = line
        # Set on label references written as images, ![alt][label].
        self.image = image

    def __eq__(self, other):
        return isinstance(other, Reference) and \
            (self.kind, self.target, self.line) == (other.kind, other.target, other.line)

    def __hash__(self):
        return hash((self.kind, self.target, self.line))

    def __repr__(self):
        return "<%s %r line %s>" % (self.kind, self.target, self.line)

def is_local(path):
    """True for paths which name a file next to the document rather than a URL."""
    return bool(path) and \
        not _scheme.match(path) and \
        not path.startswith('//') and \
        not path.startswith('#')

def strip_target(path):
    """Drops any query or fragment and decodes percent escapes."""
    path = re.split(r'[?#]', path, 1)[0]
    return unquote(path)

def _source_lines(text):
    return text.replace('\r\n', '\n').replace('\r', '\n').split('\n')

def blocks(text):
    """Splits markdown text into Blocks. Containers (lists, quotes) are flattened."""
    lines = _source_lines(text)
    out = []
    tokens = _md.parse(text)
    for (i, token) in enumerate(tokens):
        if token.map is None:
            continue
        line = token.map[0] + 1
        if token.type == 'heading_open':
            out.append(Block(HEADING, tokens[i + 1].content, line, level=int(token.tag[1:])))
        elif token.type == 'paragraph_open':
            out.append(Block(PARAGRAPH, tokens[i + 1].content, line))
        elif token.type in ('fence', 'code_block'):
            out.append(Block(CODE, token.content.rstrip('\n'), line))
        elif token.type == 'html_block':
            out.append(Block(HTML, token.content.rstrip('\n'), line))
        elif token.type == 'definition':
            source = "\n".join(lines[token.map[0]:token.map[1]]).strip()
            m = _label.search(source)
            label = m.group(1) if m else token.meta['id']
            url = _md.normalizeLinkText(token.meta['url'])
            out.append(Block(DEFINITION, source, line, label=label, url=url))
    return out

def _blank(m):
    return re.sub(r'[^\n]', ' ', m.group(0))

def _html_images(html, line):
    html = _html_comment.sub(_blank, html)
    for m in _html_img.finditer(html):
        path = m.group('dq') or m.group('sq') or m.group('uq')
        if is_local(path):
            yield Reference(IMAGE, path, line + html.count('\n', 0, m.start()))

def _labels(text, line, leading):
    """
    Label references in a run of plain text. A shortcut [label] followed by
    '(' or ':' is not a reference, and neither is a task marker opening a block.
    """
    for m in _bracket.finditer(text):
        (inner, label) = m.group(1, 2)
        if not label:
            if label is None and text[m.end():m.end() + 1] in ('(', ':'):
                continue
            label = inner
        if not label.strip() or label.startswith('^'):
            continue
        if leading and m.start() == 0 and label.strip().lower() == 'x':
            continue
        image = text[m.start() - 1:m.start()] == '!'
        yield Reference(LABEL, label, line + text.count('\n', 0, m.start()), image=image)

def _scan(tokens, line):
    segment = []
    start = line
    leading = True
    for token in tokens:
        if token.type == 'text':
            segment.append(token.content)
            continue
        if token.type in _label_markup or (token.type == 'text_special' and token.info != 'escape'):
            segment.append(token.markup or token.content)
            continue
        if token.type in ('softbreak', 'hardbreak'):
            segment.append('\n')
            line += 1
            continue
        for r in _labels(''.join(segment), start, leading):
            yield r
        segment = []
        leading = False
        if token.type == 'image':
            path = _md.normalizeLinkText(token.attrGet('src') or '')
            if is_local(path):
                yield Reference(IMAGE, path, line)
        elif token.type == 'html_inline':
            for r in _html_images(token.content, line):
                yield r
            line += token.content.count('\n')
        start = line
    for r in _labels(''.join(segment), start, leading):
        yield r

def references(block):
    """Yields the References found in one block. Code and definitions have none."""
    line = block.line or 1
    if block.kind == HTML:
        return _html_images(block.text, line)
    elif block.kind in (HEADING, PARAGRAPH):
        inline = _md.parseInline(block.text)[0]
        return _scan(inline.children or [], line)
    return iter([])

def body_references(body):
    return concatMap(references)(body)

def label_references(body):
    """Yields (label, line) for each label reference in body, in order."""
    return pipeline(
        body_references,
        ffilter(lambda r: r.kind == LABEL),
        fmap(lambda r: (r.target, r.line)))(body)

def image_references(body, resolve=None):
    """
    Yields (path, line) for each local image in body.
    Reference style images are included when resolve turns their label into a local path.
    """
    def imaged(r):
        if r.kind == IMAGE:
            return r.target
        elif resolve is not None and r.kind == LABEL and r.image:
            url = resolve(r.target)
            if url is not None and is_local(url):
                return url
        return None
    return pipeline(
        body_references,
        fmap(lambda r: (imaged(r), r.line)),
        ffilter(first))(body)

def parse(doc_id, text):
    """Builds a Document from markdown text. The first definition of a label wins."""
    body = blocks(text)
    links = {}
    seen = set()
    for d in (b for b in body if b.is_definition()):
        key = normalize_label(d.label)
        if key not in seen:
            seen.add(key)
            links[d.label] = d.url
    resolve = partial(_lookup, links)
    assets = set(pipeline(image_references, fmap(first), uniq)(body, resolve))
    return Document(doc_id, title_of(body, doc_id), body, links, assets)

def _lookup(links, label):
    key = normalize_label(label)
    for (k, v) in links.items():
        if normalize_label(k) == key:
            return v
    return None
